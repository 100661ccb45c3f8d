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

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Generic, NamedTuple, Optional, TypeVar, final

from typing_extensions import Self

from bindat.dat_types.utils import (
    TypeAliasMap,
    TypeToDatTypeMap,
    get_aliased_type,
    get_usable_origin_type,
    resolve_unknown_newtype,
)
from bindat.exception import DecodeTypeError
from bindat.serialization.encoding.tags import Kind

if TYPE_CHECKING:
    from bindat.decoder import Decoder
    from bindat.encoder import Encoder

T = TypeVar('T')

_TEXT_PREVIEW = 32


class Scalar(NamedTuple):
    """ A record without nested records, as read from the wire.

    `value` is a bool, an int, a float, or the raw payload bytes for text and bytes records.
    """
    kind: Kind
    width: int
    value: Any

    def describe(self) -> str:
        """ Short description used in error messages.

        >>> Scalar(Kind.UINT, 2, 300).describe()
        'uint16(300)'
        >>> Scalar(Kind.FLOAT, 4, 1.5).describe()
        'float32(1.5)'
        >>> Scalar(Kind.TEXT, 1, b'abc').describe()
        "text('abc')"
        >>> Scalar(Kind.BYTES, 1, b'abc').describe()
        'bytes[3]'
        """
        match self.kind:
            case Kind.INT | Kind.UINT | Kind.FLOAT:
                return f'{self.kind.value}{self.width * 8}({self.value!r})'
            case Kind.TEXT:
                preview = self.value[:_TEXT_PREVIEW].decode('utf-8', errors='replace')
                suffix = '...' if len(self.value) > _TEXT_PREVIEW else ''
                return f'text({preview!r}{suffix})'
            case Kind.BYTES:
                return f'bytes[{len(self.value)}]'
            case _:
                return f'{self.kind.value}({self.value!r})'


class DatType(ABC, Generic[T]):
    """ A converter between one destination shape and the wire format.

    Instances are built from type annotations with `DatType.from_type` and a `TypeMap`, and are used both ways:

    - encoding: `encode` writes a value of this shape, keeping what the annotation says (for example the signedness
      of a `Uint8` field), and `is_empty` answers whether a record field holding the value is omitted;
    - decoding: one `from_*` method per wire kind builds a new value of this shape. Methods that receive a `prior`
      get the value previously held by the destination (or None), which no-op paths keep and compound values use as
      the starting point of their elements or fields.

    A `from_*` method that isn't overridden means the wire kind cannot go into this shape, and raises
    `DecodeTypeError`.
    """

    class TypeMap(NamedTuple):
        alias_map: TypeAliasMap
        dat_types_map: TypeToDatTypeMap

    # XXX: subclasses must override this if they need any properties
    __slots__ = ('_shape',)

    # XXX: subclasses must define this, it's the shape reported in errors when not built from an annotation
    _default_shape: ClassVar[Any]

    @final
    @staticmethod
    def from_type(type_: Any, /, *, type_map: DatType.TypeMap) -> DatType:
        """ Instantiate a DatType instance from a type annotation using the given maps.

        A `dat_types_map` associates types to concrete DatType classes, while an `alias_map` associates types with
        substitute types to use instead.
        """
        usable_origin = get_usable_origin_type(type_, type_map=type_map)
        dat_type_class = type_map.dat_types_map[usable_origin]
        aliased_type = get_aliased_type(resolve_unknown_newtype(type_, type_map), type_map.alias_map)
        dat_type = dat_type_class._from_type(aliased_type, type_map=type_map)
        dat_type._shape = type_
        return dat_type

    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DatType.TypeMap) -> Self:
        """ Instantiate a DatType instance from a type annotation.

        The implementation is expected to inspect the given type's origin and args to check for compatibility, and to
        use `DatType.from_type` with the same `type_map` for the types of elements, values or fields.
        """
        raise TypeError(f'{cls} is not compatible with use in a DatType.TypeMap')

    @property
    def shape(self) -> Any:
        """ The annotation this instance was built from."""
        return getattr(self, '_shape', None) or self._default_shape

    def mismatch(self, source: str, reason: Optional[str] = None) -> DecodeTypeError:
        """ Build the error for a record that cannot go into this shape."""
        return DecodeTypeError(source, self.shape, reason)

    # encoding:

    @final
    def encode(self, encoder: Encoder, value: T, /) -> None:
        """ Write a value of this shape, values of another type fall back to the encoder's runtime dispatch."""
        if self._accepts(value):
            self._encode(encoder, value)
        else:
            encoder.encode(value)

    @final
    def is_empty(self, value: T, /) -> bool:
        """ The emptiness predicate: whether a record field holding this value is left out of the mapping."""
        if self._accepts(value):
            return self._is_empty(value)
        from bindat.dat_types.empty import is_empty_value
        return is_empty_value(value)

    @abstractmethod
    def _accepts(self, value: Any, /) -> bool:
        """ Whether the value is an instance of this shape, and can go through `_encode` and `_is_empty`."""
        raise NotImplementedError

    @abstractmethod
    def _encode(self, encoder: Encoder, value: T, /) -> None:
        raise NotImplementedError

    @abstractmethod
    def _is_empty(self, value: T, /) -> bool:
        raise NotImplementedError

    # decoding:

    @abstractmethod
    def zero(self) -> T:
        """ The value a destination holds before anything was decoded into it."""
        raise NotImplementedError

    def from_nil(self, decoder: Decoder, prior: Optional[T], /) -> T:
        """ Nil into a destination that cannot be cleared, subclasses that can be cleared override this."""
        return decoder.ignore_nil(self, prior)

    def from_bool(self, source: Scalar, /) -> T:
        raise self.mismatch(source.describe())

    def from_number(self, source: Scalar, /) -> T:
        """ An int, uint or float record, `source.kind` tells which."""
        raise self.mismatch(source.describe())

    def from_text(self, source: Scalar, /) -> T:
        raise self.mismatch(source.describe())

    def from_bytes(self, source: Scalar, /) -> T:
        raise self.mismatch(source.describe())

    def from_sequence(self, decoder: Decoder, count: int, prior: Optional[T], /) -> T:
        """ A sequence of `count` records, which are read from the decoder by the implementation."""
        raise self.mismatch(f'sequence[{count}]')

    def from_mapping(self, decoder: Decoder, count: int, prior: Optional[T], /) -> T:
        """ A mapping of `count` key/value record pairs, which are read from the decoder by the implementation."""
        raise self.mismatch(f'mapping[{count}]')

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.shape!r})'
