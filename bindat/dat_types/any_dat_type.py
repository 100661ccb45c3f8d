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

"""
Destinations that take whatever the record holds.

`AnyDatType` (for `typing.Any` and `object`) builds natural Python values, `ValueDatType` builds `Value` variants and
`InterfaceDatType` lets protocols and abstract classes be written, decoding into them only accepts Nil.

>>> import bindat
>>> from typing import Any
>>> data = bindat.marshal({'a': [1, None, b'x']})
>>> bindat.unmarshal(data, Any)
{'a': [1, None, b'x']}
>>> bindat.unmarshal(data, bindat.Value)
Mapping(items=((Text(value='a'), Sequence(items=(Int(value=1), Nil(), Bytes(value=b'x')))),))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, get_args

from typing_extensions import Self, override

from bindat.dat_types.dat_type import DatType, Scalar
from bindat.exception import DecodeTypeError, UnsupportedTypeError
from bindat.serialization.encoding.tags import Kind
from bindat.utils.typing import is_interface
from bindat.value import VALUE_TYPES, Bool, Bytes, Float, Int, Mapping, Nil, Sequence, Text, Uint, Value

if TYPE_CHECKING:
    from bindat.decoder import Decoder
    from bindat.encoder import Encoder


def hashable_key(key: Any) -> Any:
    """ Make a decoded key usable in a dict, lists become tuples.

    >>> hashable_key([1, [2, 3]])
    (1, (2, 3))
    """
    if isinstance(key, list):
        return tuple(hashable_key(item) for item in key)
    return key


class AnyDatType(DatType[Any]):
    """ Represents `typing.Any` and `object`, decoding gives the natural Python value of the record.
    """

    __slots__ = ()
    _default_shape = Any

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DatType.TypeMap) -> Self:
        if type_ is not Any and type_ is not object:
            raise TypeError('expected Any or object')
        return cls()

    @override
    def _accepts(self, value: Any, /) -> bool:
        return True

    @override
    def _encode(self, encoder: Encoder, value: Any, /) -> None:
        encoder.encode(value)

    @override
    def _is_empty(self, value: Any, /) -> bool:
        return value is None

    @override
    def zero(self) -> Any:
        return None

    @override
    def from_nil(self, decoder: Decoder, prior: Optional[Any], /) -> Any:
        return None

    @override
    def from_bool(self, source: Scalar, /) -> Any:
        return source.value

    @override
    def from_number(self, source: Scalar, /) -> Any:
        return source.value

    @override
    def from_text(self, source: Scalar, /) -> Any:
        try:
            return source.value.decode('utf-8')
        except UnicodeDecodeError:
            raise self.mismatch(source.describe(), 'invalid utf-8')

    @override
    def from_bytes(self, source: Scalar, /) -> Any:
        return bytes(source.value)

    @override
    def from_sequence(self, decoder: Decoder, count: int, prior: Optional[Any], /) -> Any:
        return [decoder.read(_NATURAL) for _ in range(count)]

    @override
    def from_mapping(self, decoder: Decoder, count: int, prior: Optional[Any], /) -> Any:
        result: dict[Any, Any] = {}
        for _ in range(count):
            key = hashable_key(decoder.read(_NATURAL))
            value = decoder.read(_NATURAL)
            try:
                result[key] = value
            except TypeError:
                raise self.mismatch(f'mapping[{count}]', f'unhashable key {type(key).__name__}')
        return result


# XXX: shared by the elements of sequences and mappings decoded into Any
_NATURAL = AnyDatType()


class ValueDatType(DatType[Value]):
    """ Represents the `Value` union, decoding keeps the exact wire kind of every record.
    """

    __slots__ = ()
    _default_shape = Value

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DatType.TypeMap) -> Self:
        if set(get_args(type_)) != set(VALUE_TYPES):
            raise TypeError('expected Value')
        return cls()

    @override
    def _accepts(self, value: Any, /) -> bool:
        return isinstance(value, VALUE_TYPES)

    @override
    def _encode(self, encoder: Encoder, value: Value, /) -> None:
        encoder.encode(value)

    @override
    def _is_empty(self, value: Value, /) -> bool:
        return isinstance(value, Nil)

    @override
    def zero(self) -> Value:
        return Nil()

    @override
    def from_nil(self, decoder: Decoder, prior: Optional[Value], /) -> Value:
        return Nil()

    @override
    def from_bool(self, source: Scalar, /) -> Value:
        return Bool(source.value)

    @override
    def from_number(self, source: Scalar, /) -> Value:
        match source.kind:
            case Kind.INT:
                return Int(source.value)
            case Kind.UINT:
                return Uint(source.value)
            case _:
                return Float(source.value)

    @override
    def from_text(self, source: Scalar, /) -> Value:
        try:
            return Text(source.value.decode('utf-8'))
        except UnicodeDecodeError:
            raise self.mismatch(source.describe(), 'invalid utf-8')

    @override
    def from_bytes(self, source: Scalar, /) -> Value:
        return Bytes(bytes(source.value))

    @override
    def from_sequence(self, decoder: Decoder, count: int, prior: Optional[Value], /) -> Value:
        return Sequence(tuple(decoder.read(self) for _ in range(count)))

    @override
    def from_mapping(self, decoder: Decoder, count: int, prior: Optional[Value], /) -> Value:
        return Mapping(tuple((decoder.read(self), decoder.read(self)) for _ in range(count)))


class InterfaceDatType(AnyDatType):
    """ Represents protocols and abstract classes, which can be written but not decoded into.

    A contract says nothing about the shape to build, so any record other than Nil is a `DecodeTypeError`. Nil clears
    the destination to None. `Value` is the destination to use when the shape isn't known in advance.
    """

    __slots__ = ('_interface',)
    _default_shape = object
    _interface: type

    def __init__(self, interface: type) -> None:
        self._interface = interface

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: DatType.TypeMap) -> Self:
        if not is_interface(type_):
            # XXX: parameterized interfaces like `Callable[[], None]` can't be checked with isinstance
            raise UnsupportedTypeError(f'cannot check values against {type_!r}')
        return cls(type_)

    def _reject(self, source: str) -> DecodeTypeError:
        return self.mismatch(source, 'interface destination, decode into Value instead')

    @override
    def from_bool(self, source: Scalar, /) -> Any:
        raise self._reject(source.describe())

    @override
    def from_number(self, source: Scalar, /) -> Any:
        raise self._reject(source.describe())

    @override
    def from_text(self, source: Scalar, /) -> Any:
        raise self._reject(source.describe())

    @override
    def from_bytes(self, source: Scalar, /) -> Any:
        raise self._reject(source.describe())

    @override
    def from_sequence(self, decoder: Decoder, count: int, prior: Optional[Any], /) -> Any:
        raise self._reject(f'sequence[{count}]')

    @override
    def from_mapping(self, decoder: Decoder, count: int, prior: Optional[Any], /) -> Any:
        raise self._reject(f'mapping[{count}]')
