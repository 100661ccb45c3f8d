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

from typing import BinaryIO

from typing_extensions import override

from .deserializer import Deserializer
from .exceptions import OutOfDataError


class StreamDeserializer(Deserializer):
    """Deserializer that reads from a binary file object.

    Peeking needs look-ahead, so bytes read from the stream are kept in a small buffer until they are consumed. Only
    the bytes that were asked for are requested from the stream, so it never blocks waiting for a following record. The
    stream is borrowed and never closed here.

    >>> from io import BytesIO
    >>> de = StreamDeserializer(BytesIO(bytes.fromhex('6d0003616263')))
    >>> hex(de.read_byte())
    '0x6d'
    >>> de.read_struct('>H')
    (3,)
    >>> bytes(de.read_bytes(3))
    b'abc'
    >>> de.finalize()
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._buffer = bytearray()
        self._eof = False

    def _fill(self, n: int) -> None:
        """Try to have at least n bytes buffered, stops early at the end of the stream."""
        while len(self._buffer) < n and not self._eof:
            chunk = self._stream.read(n - len(self._buffer))
            if not chunk:
                self._eof = True
                break
            self._buffer += chunk

    def _take(self, n: int) -> bytes:
        data = bytes(self._buffer[:n])
        del self._buffer[:n]
        return data

    @override
    def finalize(self) -> None:
        if not self.is_empty():
            raise ValueError('trailing data')

    @override
    def is_empty(self) -> bool:
        self._fill(1)
        return not self._buffer

    @override
    def peek_byte(self) -> int:
        self._fill(1)
        if not self._buffer:
            raise OutOfDataError('not enough bytes to read')
        return self._buffer[0]

    @override
    def peek_bytes(self, n: int, *, exact: bool = True) -> bytes:
        if n < 0:
            raise ValueError('value cannot be negative')
        self._fill(n)
        if exact and len(self._buffer) < n:
            raise OutOfDataError('not enough bytes to read')
        return bytes(self._buffer[:n])

    @override
    def read_byte(self) -> int:
        b = self.peek_byte()
        del self._buffer[0]
        return b

    @override
    def read_bytes(self, n: int, *, exact: bool = True) -> bytes:
        if n < 0:
            raise ValueError('value cannot be negative')
        self._fill(n)
        if exact and len(self._buffer) < n:
            raise OutOfDataError('not enough bytes to read')
        return self._take(n)

    @override
    def read_all(self) -> bytes:
        if not self._eof:
            self._buffer += self._stream.read()
            self._eof = True
        return self._take(len(self._buffer))
