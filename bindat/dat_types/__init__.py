# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import collections.abc
from functools import lru_cache
from types import UnionType
from typing import Any, Protocol, TypeVar, Union

from bindat.dat_types.any_dat_type import AnyDatType, InterfaceDatType, ValueDatType
from bindat.dat_types.bool_dat_type import BoolDatType
from bindat.dat_types.bytes_dat_type import BytearrayDatType, BytesDatType
from bindat.dat_types.collection_dat_type import FrozenSetDatType, ListDatType, SetDatType
from bindat.dat_types.dat_type import DatType, Scalar
from bindat.dat_types.dataclass_dat_type import DataclassDatType
from bindat.dat_types.float_dat_type import Float32DatType, Float64DatType
from bindat.dat_types.hook_dat_type import BytesHookDatType
from bindat.dat_types.int_dat_type import (
    Int8DatType,
    Int16DatType,
    Int32DatType,
    Int64DatType,
    IntDatType,
    Uint8DatType,
    Uint16DatType,
    Uint32DatType,
    Uint64DatType,
)
from bindat.dat_types.map_dat_type import DictDatType
from bindat.dat_types.opaque_dat_type import OpaqueDatType
from bindat.dat_types.optional_dat_type import OptionalDatType
from bindat.dat_types.str_dat_type import StrDatType
from bindat.dat_types.tuple_dat_type import TupleDatType
from bindat.dat_types.utils import TypeAliasMap, TypeToDatTypeMap, _is_hashable
from bindat.exception import UnsupportedTypeError
from bindat.types import (
    BytesUnmarshaler,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Record,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)
from bindat.value import Value

__all__ = [
    'DEFAULT_TYPE_ALIAS_MAP',
    'DEFAULT_TYPE_MAP',
    'DEFAULT_TYPE_TO_DAT_TYPE_MAP',
    'ESSENTIAL_TYPE_ALIAS_MAP',
    'AnyDatType',
    'BoolDatType',
    'BytearrayDatType',
    'BytesDatType',
    'BytesHookDatType',
    'DataclassDatType',
    'DatType',
    'DictDatType',
    'Float32DatType',
    'Float64DatType',
    'FrozenSetDatType',
    'Int8DatType',
    'Int16DatType',
    'Int32DatType',
    'Int64DatType',
    'IntDatType',
    'InterfaceDatType',
    'ListDatType',
    'OpaqueDatType',
    'OptionalDatType',
    'Scalar',
    'SetDatType',
    'StrDatType',
    'TupleDatType',
    'TypeAliasMap',
    'TypeToDatTypeMap',
    'Uint8DatType',
    'Uint16DatType',
    'Uint32DatType',
    'Uint64DatType',
    'ValueDatType',
    'make_dat_type',
]

T = TypeVar('T')

# this is the minimum type-alias-map needed for everything to work as intended
ESSENTIAL_TYPE_ALIAS_MAP: TypeAliasMap = {
    # XXX: technically types.UnionType is not a type, so mypy complains, but for our purposes it is a type
    Union: UnionType,  # type: ignore[dict-item]
}

# abstract collections decode into the builtin that implements them
DEFAULT_TYPE_ALIAS_MAP: TypeAliasMap = {
    **ESSENTIAL_TYPE_ALIAS_MAP,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
}

# Mapping between types and DatType classes.
DEFAULT_TYPE_TO_DAT_TYPE_MAP: TypeToDatTypeMap = {
    # builtin types:
    bool: BoolDatType,
    bytearray: BytearrayDatType,
    bytes: BytesDatType,
    dict: DictDatType,
    float: Float64DatType,
    frozenset: FrozenSetDatType,
    int: IntDatType,
    list: ListDatType,
    set: SetDatType,
    str: StrDatType,
    tuple: TupleDatType,
    # sized markers:
    Int8: Int8DatType,
    Int16: Int16DatType,
    Int32: Int32DatType,
    Int64: Int64DatType,
    Uint8: Uint8DatType,
    Uint16: Uint16DatType,
    Uint32: Uint32DatType,
    Uint64: Uint64DatType,
    Float32: Float32DatType,
    Float64: Float64DatType,
    # other Python types:
    # XXX: ignored dict-item because Union is not considered a type, so mypy fails it, but it works for our case
    UnionType: OptionalDatType,  # type: ignore[dict-item]
    Any: AnyDatType,  # type: ignore[dict-item]
    object: AnyDatType,
    # protocols that classes are found through, see get_usable_origin_type:
    BytesUnmarshaler: BytesHookDatType,
    Record: DataclassDatType,
    Protocol: InterfaceDatType,  # type: ignore[dict-item]
    # the Value union, found by exact match:
    Value: ValueDatType,  # type: ignore[dict-item]
}

DEFAULT_TYPE_MAP = DatType.TypeMap(DEFAULT_TYPE_ALIAS_MAP, DEFAULT_TYPE_TO_DAT_TYPE_MAP)


def make_dat_type(type_: type[T], /) -> DatType[T]:
    """ Like DatType.from_type, but with the default maps and a cache.

    If you need to customize the mapping use `DatType.from_type` instead.

    >>> make_dat_type(list[Uint8])
    ListDatType(list[bindat.types.Uint8], item=Uint8DatType(bindat.types.Uint8))
    >>> make_dat_type(list[Uint8]) is make_dat_type(list[Uint8])
    True
    """
    if not _is_hashable(type_):
        raise UnsupportedTypeError(f'{type_!r} is not a type')
    return _make_dat_type(type_)


@lru_cache(maxsize=None)
def _make_dat_type(type_: Any, /) -> DatType:
    return DatType.from_type(type_, type_map=DEFAULT_TYPE_MAP)
