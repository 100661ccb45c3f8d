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

import math
import re
from typing import TYPE_CHECKING, Any, ClassVar

from typing_extensions import Self, override

from bindat.dat_types.dat_type import DatType, Scalar
from bindat.exception import EncodeValueError
from bindat.serialization.encoding.float import fits_float32, round_float32
from bindat.types import Float32, Float64

if TYPE_CHECKING:
    from bindat.encoder import Encoder

# XXX: no "inf", "nan", hex floats or underscores, only what a decimal number looks like
_DECIMAL_FLOAT = re.compile(rb'[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?')


class Float64DatType(DatType[float]):
    """ Represents builtin `float` values, also used for the `Float64` marker.
    """

    __slots__ = ()
    _default_shape: ClassVar[Any] = float

    @override
    @classmethod
    def _from_type(cls, type_: type[float], /, *, type_map: DatType.TypeMap) -> Self:
        if type_ not in (float, Float64, cls._default_shape):
            raise TypeError('expected float type')
        return cls()

    def _fit(self, value: float, source: Scalar) -> float:
        """ Bring a finite value into this destination, subclasses narrow it."""
        return value

    @override
    def _accepts(self, value: Any, /) -> bool:
        return isinstance(value, float)

    @override
    def _encode(self, encoder: Encoder, value: float, /) -> None:
        encoder.write_float(value)

    @override
    def _is_empty(self, value: float, /) -> bool:
        return value == 0.0

    @override
    def zero(self) -> float:
        return 0.0

    @override
    def from_number(self, source: Scalar, /) -> float:
        try:
            value = float(source.value)
        except OverflowError:
            raise self.mismatch(source.describe(), 'overflow')
        return self._fit(value, source)

    @override
    def from_text(self, source: Scalar, /) -> float:
        if _DECIMAL_FLOAT.fullmatch(source.value) is None:
            raise self.mismatch(source.describe(), 'invalid decimal number')
        value = float(source.value.decode('ascii'))
        if not math.isfinite(value):
            raise self.mismatch(source.describe(), 'overflow')
        return self._fit(value, source)


class Float32DatType(Float64DatType):
    """ Represents the `Float32` marker, values are rounded to float32 precision when decoded.
    """

    __slots__ = ()
    _default_shape = Float32

    @override
    @classmethod
    def _from_type(cls, type_: type[float], /, *, type_map: DatType.TypeMap) -> Self:
        if type_ is not Float32:
            raise TypeError('expected Float32')
        return cls()

    @override
    def _fit(self, value: float, source: Scalar) -> float:
        if not fits_float32(value):
            raise self.mismatch(source.describe(), 'overflow')
        return round_float32(value)

    @override
    def _encode(self, encoder: Encoder, value: float, /) -> None:
        if math.isfinite(value) and not fits_float32(value):
            raise EncodeValueError(value, 'out of range for Float32')
        encoder.write_float(value)
