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

import re
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from typing_extensions import Self, override

from bindat.dat_types.dat_type import DatType, Scalar
from bindat.exception import EncodeValueError
from bindat.serialization.encoding.int import int_bounds
from bindat.serialization.encoding.tags import Kind
from bindat.types import Int8, Int16, Int32, Int64, Uint8, Uint16, Uint32, Uint64
from bindat.utils.typing import is_subclass

if TYPE_CHECKING:
    from bindat.encoder import Encoder

_DECIMAL_INT = re.compile(rb'[+-]?[0-9]+')
# 2**64 has 20 digits, anything longer overflows every sized destination
_MAX_BOUNDED_DIGITS = 20


class IntDatType(DatType[int]):
    """ Represents builtin `int` values, without a declared width.

    Encoding uses the runtime rule (signed when it fits 64 signed bits, unsigned otherwise) and any wire integer can
    be decoded, so this is the only integer destination that never overflows.
    """

    __slots__ = ()
    _default_shape: ClassVar[Any] = int
    # XXX: sized subclasses define these, None means "decided by the value"
    _signed: ClassVar[Optional[bool]] = None
    _byte_size: ClassVar[Optional[int]] = None

    @override
    @classmethod
    def _from_type(cls, type_: type[int], /, *, type_map: DatType.TypeMap) -> Self:
        if not is_subclass(type_, int) or is_subclass(type_, bool):
            raise TypeError('expected int type')
        return cls()

    @classmethod
    def bounds(cls) -> Optional[tuple[int, int]]:
        """ Inclusive (min, max) accepted by this destination, None when unbounded."""
        if cls._byte_size is None:
            return None
        assert cls._signed is not None
        return int_bounds(cls._byte_size, signed=cls._signed)

    def _in_range(self, value: int) -> bool:
        bounds = self.bounds()
        return bounds is None or bounds[0] <= value <= bounds[1]

    @override
    def _accepts(self, value: Any, /) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    @override
    def _encode(self, encoder: Encoder, value: int, /) -> None:
        if not self._in_range(value):
            raise EncodeValueError(value, f'out of range for {self.shape.__name__}')
        encoder.write_int(value, signed=self._signed)

    @override
    def _is_empty(self, value: int, /) -> bool:
        return value == 0

    @override
    def zero(self) -> int:
        return 0

    def _checked(self, value: int, source: Scalar) -> int:
        if not self._in_range(value):
            raise self.mismatch(source.describe(), 'overflow')
        return value

    @override
    def from_number(self, source: Scalar, /) -> int:
        if source.kind is Kind.FLOAT:
            if not source.value.is_integer():
                raise self.mismatch(source.describe(), 'not an integer')
            return self._checked(int(source.value), source)
        return self._checked(source.value, source)

    @override
    def from_text(self, source: Scalar, /) -> int:
        if _DECIMAL_INT.fullmatch(source.value) is None:
            raise self.mismatch(source.describe(), 'invalid decimal integer')
        digits = source.value.lstrip(b'+-').lstrip(b'0')
        if self.bounds() is not None and len(digits) > _MAX_BOUNDED_DIGITS:
            raise self.mismatch(source.describe(), 'overflow')
        try:
            number = int(digits or b'0')
        except ValueError:
            # XXX: longer than the interpreter's int/str conversion limit
            raise self.mismatch(source.describe(), 'overflow')
        return self._checked(-number if source.value.startswith(b'-') else number, source)


class _SizedIntDatType(IntDatType):
    """ Base class for integer markers with a fixed width and signedness, like `Uint8`.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: type[int], /, *, type_map: DatType.TypeMap) -> Self:
        if type_ is not cls._default_shape:
            raise TypeError(f'expected {cls._default_shape.__name__}')
        return cls()


class Int8DatType(_SizedIntDatType):
    _default_shape = Int8
    _signed = True
    _byte_size = 1


class Int16DatType(_SizedIntDatType):
    _default_shape = Int16
    _signed = True
    _byte_size = 2


class Int32DatType(_SizedIntDatType):
    _default_shape = Int32
    _signed = True
    _byte_size = 4


class Int64DatType(_SizedIntDatType):
    _default_shape = Int64
    _signed = True
    _byte_size = 8


class Uint8DatType(_SizedIntDatType):
    _default_shape = Uint8
    _signed = False
    _byte_size = 1


class Uint16DatType(_SizedIntDatType):
    _default_shape = Uint16
    _signed = False
    _byte_size = 2


class Uint32DatType(_SizedIntDatType):
    _default_shape = Uint32
    _signed = False
    _byte_size = 4


class Uint64DatType(_SizedIntDatType):
    _default_shape = Uint64
    _signed = False
    _byte_size = 8
