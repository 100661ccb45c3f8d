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

from typing import TYPE_CHECKING, Any, Optional, get_args, get_origin

from typing_extensions import Self, override

from bindat.dat_types.dat_type import DatType
from bindat.exception import UnsupportedTypeError
from bindat.serialization.encoding.tags import Kind

if TYPE_CHECKING:
    from bindat.decoder import Decoder
    from bindat.encoder import Encoder


class TupleDatType(DatType[tuple]):
    """ Represents builtin `tuple` values, in two flavors.

    - `tuple[T, ...]` (and a bare `tuple`) is growable: it takes as many elements as the sequence record has, and Nil
      clears it to `()`;
    - `tuple[A, B, C]` has a fixed capacity: a longer sequence record is rejected, a shorter one leaves the remaining
      slots at their zero value, and Nil cannot clear it. It's empty only if every element is empty.
    """

    __slots__ = ('_items', '_variadic')
    _default_shape = tuple
    _items: tuple[DatType, ...]
    _variadic: bool

    def __init__(self, items: tuple[DatType, ...], *, variadic: bool) -> None:
        assert not variadic or len(items) == 1
        self._items = items
        self._variadic = variadic

    @override
    @classmethod
    def _from_type(cls, type_: type[tuple], /, *, type_map: DatType.TypeMap) -> Self:
        origin_type = get_origin(type_) or type_
        if origin_type is not tuple:
            raise TypeError('expected tuple type')
        args = get_args(type_)
        if not args:
            return cls((DatType.from_type(Any, type_map=type_map),), variadic=True)
        if len(args) == 2 and args[1] is Ellipsis:
            return cls((DatType.from_type(args[0], type_map=type_map),), variadic=True)
        if Ellipsis in args:
            raise UnsupportedTypeError('ellipsis is only allowed as the last of two type arguments')
        return cls(tuple(DatType.from_type(arg, type_map=type_map) for arg in args), variadic=False)

    @property
    def capacity(self) -> Optional[int]:
        """ Number of slots of a fixed tuple, None when growable."""
        return None if self._variadic else len(self._items)

    def _item_at(self, index: int) -> DatType:
        return self._items[0] if self._variadic else self._items[index]

    @override
    def _accepts(self, value: Any, /) -> bool:
        return isinstance(value, tuple) and (self._variadic or len(value) == len(self._items))

    @override
    def _encode(self, encoder: Encoder, value: tuple, /) -> None:
        encoder.write_header(Kind.SEQUENCE, len(value))
        with encoder.nested(value):
            for index, item in enumerate(value):
                self._item_at(index).encode(encoder, item)

    @override
    def _is_empty(self, value: tuple, /) -> bool:
        if self._variadic:
            return len(value) == 0
        return all(item_type.is_empty(item) for item_type, item in zip(self._items, value))

    @override
    def zero(self) -> tuple:
        if self._variadic:
            return ()
        return tuple(item_type.zero() for item_type in self._items)

    @override
    def from_nil(self, decoder: Decoder, prior: Optional[tuple], /) -> tuple:
        if self._variadic:
            return ()
        return decoder.ignore_nil(self, prior)

    @override
    def from_sequence(self, decoder: Decoder, count: int, prior: Optional[tuple], /) -> tuple:
        if not self._variadic and count > len(self._items):
            raise self.mismatch(f'sequence[{count}]', f'capacity is {len(self._items)}')
        priors = prior if prior is not None else ()
        items = [decoder.read(self._item_at(i), priors[i] if i < len(priors) else None) for i in range(count)]
        if not self._variadic:
            items.extend(item_type.zero() for item_type in self._items[count:])
        return tuple(items)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.shape!r}, items={self._items!r})'
