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

from typing_extensions import override

from .deserializer import Deserializer
from .exceptions import OutOfDataError
from .types import Buffer


class BytesDeserializer(Deserializer):
    """Deserializer over an in-memory byte sequence.

    Reading only moves an offset over a memoryview of the data, nothing is copied until the caller asks for it.

    >>> de = BytesDeserializer(b'\\x49\\x2a')
    >>> de.read_byte()
    73
    >>> bytes(de.peek_bytes(1))
    b'*'
    >>> de.read_byte()
    42
    >>> de.is_empty()
    True
    >>> de.finalize()
    """

    def __init__(self, data: Buffer) -> None:
        self._view = memoryview(data).cast('B')
        self._offset = 0

    def _remaining(self) -> int:
        return len(self._view) - self._offset

    @override
    def finalize(self) -> None:
        if not self.is_empty():
            raise ValueError('trailing data')
        del self._view

    @override
    def is_empty(self) -> bool:
        return self._remaining() == 0

    @override
    def peek_byte(self) -> int:
        if self.is_empty():
            raise OutOfDataError('not enough bytes to read')
        return self._view[self._offset]

    @override
    def peek_bytes(self, n: int, *, exact: bool = True) -> memoryview:
        if n < 0:
            raise ValueError('value cannot be negative')
        if exact and self._remaining() < n:
            raise OutOfDataError('not enough bytes to read')
        return self._view[self._offset:self._offset + n]

    @override
    def read_byte(self) -> int:
        b = self.peek_byte()
        self._offset += 1
        return b

    @override
    def read_bytes(self, n: int, *, exact: bool = True) -> memoryview:
        b = self.peek_bytes(n, exact=exact)
        self._offset += len(b)
        return b

    @override
    def read_all(self) -> memoryview:
        b = self._view[self._offset:]
        self._offset = len(self._view)
        return b
