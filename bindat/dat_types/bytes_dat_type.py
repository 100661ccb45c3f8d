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

from typing import TYPE_CHECKING, Any, ClassVar, Optional

from typing_extensions import Self, override

from bindat.dat_types.dat_type import DatType, Scalar
from bindat.dat_types.int_dat_type import Uint8DatType

if TYPE_CHECKING:
    from bindat.decoder import Decoder
    from bindat.encoder import Encoder

_BYTE = Uint8DatType()


class BytesDatType(DatType[bytes]):
    """ Represents builtin `bytes` values.

    Besides bytes records, text records give their raw payload and sequence records are read one `Uint8` element at a
    time. Nil clears the destination to empty bytes.
    """

    __slots__ = ()
    _default_shape: ClassVar[type] = bytes

    @override
    @classmethod
    def _from_type(cls, type_: type[bytes], /, *, type_map: DatType.TypeMap) -> Self:
        if type_ is not cls._default_shape:
            raise TypeError(f'expected {cls._default_shape.__name__} type')
        return cls()

    def _build(self, data: bytes) -> bytes:
        return bytes(data)

    @override
    def _accepts(self, value: Any, /) -> bool:
        return isinstance(value, (bytes, bytearray, memoryview))

    @override
    def _encode(self, encoder: Encoder, value: bytes, /) -> None:
        encoder.write_bytes(value)

    @override
    def _is_empty(self, value: bytes, /) -> bool:
        return len(value) == 0

    @override
    def zero(self) -> bytes:
        return self._build(b'')

    @override
    def from_nil(self, decoder: Decoder, prior: Optional[bytes], /) -> bytes:
        return self.zero()

    @override
    def from_text(self, source: Scalar, /) -> bytes:
        return self._build(source.value)

    @override
    def from_bytes(self, source: Scalar, /) -> bytes:
        return self._build(source.value)

    @override
    def from_sequence(self, decoder: Decoder, count: int, prior: Optional[bytes], /) -> bytes:
        previous = prior if prior is not None else b''
        data = bytearray()
        for i in range(count):
            element_prior = previous[i] if i < len(previous) else None
            data.append(decoder.read(_BYTE, element_prior))
        return self._build(data)


class BytearrayDatType(BytesDatType):
    """ Represents builtin `bytearray` values, decoding always builds a new bytearray.
    """

    __slots__ = ()
    _default_shape = bytearray

    @override
    def _build(self, data: bytes) -> bytearray:  # type: ignore[override]
        return bytearray(data)
