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

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import is_dataclass
from functools import reduce
from operator import or_
from types import NoneType, UnionType
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, Union, get_args, get_origin

from structlog import get_logger

from bindat.exception import UnsupportedTypeError
from bindat.types import BytesUnmarshaler, Record
from bindat.utils.typing import is_interface, is_subclass

if TYPE_CHECKING:
    from bindat.dat_types.dat_type import DatType

logger = get_logger()

TypeAliasMap: TypeAlias = Mapping[Any, type]
TypeToDatTypeMap: TypeAlias = Mapping[Any, type['DatType']]


def pretty_type(type_: Any) -> str:
    """ Shows a cleaner string representation for a type.

    >>> pretty_type(int), pretty_type(None), pretty_type(list[int])
    ('int', 'None', 'list[int]')
    """
    if type_ is NoneType or type_ is None:
        return 'None'
    elif hasattr(type_, '__args__') or not hasattr(type_, '__name__'):
        return str(type_)
    else:
        return type_.__name__


def get_aliased_type(type_: Any, alias_map: TypeAliasMap, *, _verbose: bool = True) -> Any:
    """ Map a type to its usable alias including the type's arguments.

    For example, abstract collections are mapped to the builtin collection that is built when decoding:

    >>> from collections.abc import Mapping, Sequence
    >>> from typing import Optional
    >>> from bindat.dat_types import DEFAULT_TYPE_ALIAS_MAP as alias_map
    >>> get_aliased_type(Mapping[str, Sequence[int]], alias_map, _verbose=False)
    dict[str, list[int]]
    >>> get_aliased_type(Optional[int], alias_map, _verbose=False)
    int | None
    """
    new_type, replaced = _get_aliased_type(type_, alias_map)
    if replaced and _verbose:
        logger.debug('type replaced', old=pretty_type(type_), new=pretty_type(new_type))
    return new_type


def _get_aliased_type(type_: Any, alias_map: TypeAliasMap) -> tuple[Any, bool]:
    """ Implementation of get_aliased_type with indication of whether there was a replacement.
    """
    origin_type = get_origin(type_) or type_
    replaced = False

    # XXX: special case, typing.Union is always replaced with types.UnionType
    if origin_type is Union:
        aliased_origin: Any = UnionType
    elif _is_hashable(origin_type) and origin_type in alias_map:
        aliased_origin = alias_map[origin_type]
        replaced = True
    else:
        aliased_origin = origin_type

    type_args = get_args(type_)
    if not type_args:
        return aliased_origin, replaced

    aliased_args_replaced = [
        (arg, False) if arg is Ellipsis else _get_aliased_type(arg, alias_map) for arg in type_args
    ]
    aliased_args, args_replaced = zip(*aliased_args_replaced)
    replaced |= any(args_replaced)

    # XXX: special case, UnionType can't be instantiated directly, this is the simplest way to do it
    if aliased_origin is UnionType:
        return reduce(or_, aliased_args), replaced

    if not replaced:
        return type_, False

    return aliased_origin[aliased_args], replaced


def get_usable_origin_type(type_: Any, /, *, type_map: 'DatType.TypeMap') -> Any:
    """ Map a given type into a key that exists in `type_map.dat_types_map`, raise UnsupportedTypeError otherwise.

    Exact matches come first, this is how `Value` and the sized int markers are found. After aliasing, the origin
    of generic types is used (`list[int]` is found as `list`), any union is found as `types.UnionType`. Classes that
    aren't in the map are found through the protocol they satisfy: `BytesUnmarshaler` for classes with a `from_bytes`
    hook, `Record` for dataclasses and `Protocol` for protocols and abstract classes.

    >>> from bindat.dat_types import DEFAULT_TYPE_MAP as type_map
    >>> get_usable_origin_type(list[int], type_map=type_map)
    <class 'list'>
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Point:
    ...     x: int
    >>> get_usable_origin_type(Point, type_map=type_map)
    <class 'bindat.types.Record'>
    >>> get_usable_origin_type(complex, type_map=type_map)
    Traceback (most recent call last):
    ...
    bindat.exception.UnsupportedTypeError: type complex is not supported
    """
    if isinstance(type_, str):
        raise UnsupportedTypeError('string annotations are not supported, use typing.get_type_hints first')

    if not _is_hashable(type_):
        raise UnsupportedTypeError(f'{type_!r} is not a type')

    type_ = resolve_unknown_newtype(type_, type_map)
    if type_ in type_map.dat_types_map:
        return type_

    aliased_type = get_aliased_type(type_, type_map.alias_map, _verbose=False)
    origin = get_origin(aliased_type) or aliased_type

    if origin is UnionType or origin is Union:
        return UnionType

    if _is_hashable(origin) and origin in type_map.dat_types_map:
        return origin

    if isinstance(origin, type):
        # XXX: int has a from_bytes classmethod, int subclasses (IntEnum, IntFlag, ...) must not be taken as hooks
        if callable(getattr(origin, 'from_bytes', None)) and not is_subclass(origin, int):
            return BytesUnmarshaler
        if is_dataclass(origin):
            return Record
        if is_interface(origin):
            return Protocol

    raise UnsupportedTypeError(f'type {pretty_type(type_)} is not supported')


def resolve_unknown_newtype(type_: Any, type_map: 'DatType.TypeMap') -> Any:
    """ Follow NewType declarations that the map doesn't know, so `UserId = NewType('UserId', int)` works like `int`.

    >>> from typing import NewType
    >>> from bindat.dat_types import DEFAULT_TYPE_MAP as type_map
    >>> from bindat.types import Uint8
    >>> UserId = NewType('UserId', int)
    >>> resolve_unknown_newtype(UserId, type_map), resolve_unknown_newtype(Uint8, type_map) is Uint8
    (<class 'int'>, True)
    """
    while getattr(type_, '__supertype__', None) is not None and type_ not in type_map.dat_types_map:
        type_ = type_.__supertype__
    return type_


def is_optional_union(type_: Any) -> bool:
    """ Whether a union is exactly `T | None`.

    >>> is_optional_union(int | None), is_optional_union(int | str), is_optional_union(int | str | None)
    (True, False, False)
    """
    args = get_args(type_)
    return len(args) == 2 and NoneType in args


def _is_hashable(obj: Any) -> bool:
    try:
        hash(obj)
    except TypeError:
        return False
    return True
