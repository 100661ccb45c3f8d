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

from types import NoneType, UnionType
from typing import TYPE_CHECKING, Any, Optional, TypeVar, get_args, get_origin

from typing_extensions import Self, override

from bindat.dat_types.dat_type import DatType, Scalar
from bindat.dat_types.utils import is_optional_union, pretty_type
from bindat.exception import UnsupportedTypeError

if TYPE_CHECKING:
    from bindat.decoder import Decoder
    from bindat.encoder import Encoder

V = TypeVar('V')


class OptionalDatType(DatType[Optional[V]]):
    """ Represents `T | None` values.

    None is written as Nil and Nil decodes to None, every other record goes into `T`. Only None is empty, a present
    zero value is still written.
    """

    __slots__ = ('_inner',)
    _default_shape = UnionType
    _inner: DatType[V]

    def __init__(self, inner: DatType[V]) -> None:
        self._inner = inner

    @override
    @classmethod
    def _from_type(cls, type_: type[Optional[V]], /, *, type_map: DatType.TypeMap) -> Self:
        if get_origin(type_) is not UnionType:
            raise TypeError('expected a union type')
        if not is_optional_union(type_):
            raise UnsupportedTypeError(f'only `T | None` unions are supported, got {pretty_type(type_)}')
        inner_type, = (arg for arg in get_args(type_) if arg is not NoneType)
        return cls(DatType.from_type(inner_type, type_map=type_map))

    @override
    def _accepts(self, value: Any, /) -> bool:
        return True

    @override
    def _encode(self, encoder: Encoder, value: Optional[V], /) -> None:
        if value is None:
            encoder.write_nil()
        else:
            self._inner.encode(encoder, value)

    @override
    def _is_empty(self, value: Optional[V], /) -> bool:
        return value is None

    @override
    def zero(self) -> Optional[V]:
        return None

    @override
    def from_nil(self, decoder: Decoder, prior: Optional[V], /) -> Optional[V]:
        return None

    @override
    def from_bool(self, source: Scalar, /) -> V:
        return self._inner.from_bool(source)

    @override
    def from_number(self, source: Scalar, /) -> V:
        return self._inner.from_number(source)

    @override
    def from_text(self, source: Scalar, /) -> V:
        return self._inner.from_text(source)

    @override
    def from_bytes(self, source: Scalar, /) -> V:
        return self._inner.from_bytes(source)

    @override
    def from_sequence(self, decoder: Decoder, count: int, prior: Optional[V], /) -> V:
        return self._inner.from_sequence(decoder, count, prior)

    @override
    def from_mapping(self, decoder: Decoder, count: int, prior: Optional[V], /) -> V:
        return self._inner.from_mapping(decoder, count, prior)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.shape!r}, inner={self._inner!r})'
