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
from typing import TYPE_CHECKING, Any, Optional, get_args, get_origin

from typing_extensions import Self, override

from bindat.dat_types.any_dat_type import hashable_key
from bindat.dat_types.dat_type import DatType
from bindat.exception import UnsupportedTypeError
from bindat.serialization.encoding.tags import Kind

if TYPE_CHECKING:
    from bindat.decoder import Decoder
    from bindat.encoder import Encoder


class DictDatType(DatType[dict]):
    """ Represents builtin `dict` values, and abstract mappings through the alias map.

    Decoding never merges: the result holds exactly the pairs of the mapping record, whatever the prior dict had.
    """

    __slots__ = ('_key', '_value')
    _default_shape = dict
    _key: DatType
    _value: DatType

    def __init__(self, key: DatType, value: DatType) -> None:
        self._key = key
        self._value = value

    @override
    @classmethod
    def _from_type(cls, type_: type[dict], /, *, type_map: DatType.TypeMap) -> Self:
        origin_type = get_origin(type_) or type_
        if origin_type is not dict:
            raise TypeError('expected dict type')
        args = get_args(type_) or (Any, Any)
        if len(args) != 2:
            raise UnsupportedTypeError(f'expected two type arguments, got {len(args)}')
        key_type, value_type = args
        return cls(DatType.from_type(key_type, type_map=type_map), DatType.from_type(value_type, type_map=type_map))

    @override
    def _accepts(self, value: Any, /) -> bool:
        return isinstance(value, Mapping)

    @override
    def _encode(self, encoder: Encoder, value: Mapping, /) -> None:
        encoder.write_header(Kind.MAPPING, len(value))
        with encoder.nested(value):
            for k, v in value.items():
                self._key.encode(encoder, k)
                self._value.encode(encoder, v)

    @override
    def _is_empty(self, value: Mapping, /) -> bool:
        return len(value) == 0

    @override
    def zero(self) -> dict:
        return {}

    @override
    def from_nil(self, decoder: Decoder, prior: Optional[dict], /) -> dict:
        return {}

    @override
    def from_mapping(self, decoder: Decoder, count: int, prior: Optional[dict], /) -> dict:
        result: dict = {}
        for _ in range(count):
            key = hashable_key(decoder.read(self._key))
            value = decoder.read(self._value)
            try:
                result[key] = value
            except TypeError:
                raise self.mismatch(f'mapping[{count}]', f'unhashable key {type(key).__name__}')
        return result

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.shape!r}, key={self._key!r}, value={self._value!r})'
