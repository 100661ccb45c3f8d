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

from .serializer import Serializer
from .types import Buffer


class StreamSerializer(Serializer):
    """Serializer that writes through to a binary file object.

    The stream is borrowed: it is neither flushed nor closed here, and any error raised by its `write` (for example
    writing after it was closed) propagates as is.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._pos = 0

    @override
    def cur_pos(self) -> int:
        return self._pos

    @override
    def write_byte(self, data: int) -> None:
        self.write_bytes(int.to_bytes(data, length=1, byteorder='big'))

    @override
    def write_bytes(self, data: Buffer) -> None:
        view = memoryview(data)
        while view:
            written = self._stream.write(view)
            # raw (unbuffered) streams may accept only part of the data
            if written is None:
                written = len(view)
            self._pos += written
            view = view[written:]
