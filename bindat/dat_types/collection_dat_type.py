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

from abc import abstractmethod
from collections.abc import Collection, Hashable, Iterable, Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypeVar, get_args, get_origin

from typing_extensions import Self, override

from bindat.dat_types.dat_type import DatType
from bindat.exception import UnsupportedTypeError
from bindat.serialization.encoding.tags import Kind

if TYPE_CHECKING:
    from bindat.decoder import Decoder
    from bindat.encoder import Encoder

T = TypeVar('T')
C = TypeVar('C', bound=Collection)


class _CollectionDatType(DatType[C]):
    """ Base class for growable collections decoded from sequence records, each subclass builds one builtin type.

    Nil clears the destination to an empty collection, a sequence record replaces it with exactly the decoded
    elements.
    """

    __slots__ = ('_item',)
    _item: DatType
    # XXX: the builtin type produced when decoding
    _collection: ClassVar[type]

    def __init__(self, item: DatType) -> None:
        self._item = item

    @override
    @classmethod
    def _from_type(cls, type_: type[C], /, *, type_map: DatType.TypeMap) -> Self:
        origin_type = get_origin(type_) or type_
        if origin_type is not cls._collection:
            raise TypeError(f'expected {cls._collection.__name__} type')
        args = get_args(type_)
        if not args:
            return cls(DatType.from_type(Any, type_map=type_map))
        if len(args) != 1:
            raise UnsupportedTypeError(f'expected one type argument, got {len(args)}')
        item_type, = args
        return cls(DatType.from_type(item_type, type_map=type_map))

    @abstractmethod
    def _build(self, items: Iterable[T]) -> C:
        raise NotImplementedError

    def _priors(self, prior: Optional[C]) -> Sequence[Any]:
        """ Prior elements by index, only ordered collections have them."""
        return ()

    @override
    def _accepts(self, value: Any, /) -> bool:
        return isinstance(value, self._collection)

    @override
    def _encode(self, encoder: Encoder, value: C, /) -> None:
        encoder.write_header(Kind.SEQUENCE, len(value))
        with encoder.nested(value):
            for item in value:
                self._item.encode(encoder, item)

    @override
    def _is_empty(self, value: C, /) -> bool:
        return len(value) == 0

    @override
    def zero(self) -> C:
        return self._build(())

    @override
    def from_nil(self, decoder: Decoder, prior: Optional[C], /) -> C:
        return self.zero()

    @override
    def from_sequence(self, decoder: Decoder, count: int, prior: Optional[C], /) -> C:
        priors = self._priors(prior)
        items = [decoder.read(self._item, priors[i] if i < len(priors) else None) for i in range(count)]
        try:
            return self._build(items)
        except TypeError:
            raise self.mismatch(f'sequence[{count}]', 'unhashable element')

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.shape!r}, item={self._item!r})'


class ListDatType(_CollectionDatType[list]):
    """ Represents builtin `list` values, and abstract mutable sequences through the alias map.
    """

    __slots__ = ()
    _default_shape = list
    _collection = list

    @override
    def _build(self, items: Iterable[T]) -> list[T]:
        return list(items)

    @override
    def _priors(self, prior: Optional[list]) -> Sequence[Any]:
        return prior if prior is not None else ()


class SetDatType(_CollectionDatType[set]):
    """ Represents builtin `set` values.
    """

    __slots__ = ()
    _default_shape = set
    _collection = set

    @override
    def _accepts(self, value: Any, /) -> bool:
        return isinstance(value, (set, frozenset))

    @override
    def _build(self, items: Iterable[Hashable]) -> set:  # type: ignore[type-var]
        return set(items)


class FrozenSetDatType(_CollectionDatType[frozenset]):
    """ Represents builtin `frozenset` values, and abstract sets through the alias map.
    """

    __slots__ = ()
    _default_shape = frozenset
    _collection = frozenset

    @override
    def _accepts(self, value: Any, /) -> bool:
        return isinstance(value, (set, frozenset))

    @override
    def _build(self, items: Iterable[Hashable]) -> frozenset:  # type: ignore[type-var]
        return frozenset(items)
