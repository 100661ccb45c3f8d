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
Type annotations understood by the decoder (and by the encoder, for record fields).

Python has a single `int` and a single `float`, these markers give a destination (or a record field) a width and a
signedness. They are `NewType`s so values stay plain ints and floats at runtime.
"""

from typing import Any, ClassVar, NewType, Protocol, runtime_checkable

from typing_extensions import Self

Int8 = NewType('Int8', int)
Int16 = NewType('Int16', int)
Int32 = NewType('Int32', int)
Int64 = NewType('Int64', int)

Uint8 = NewType('Uint8', int)
Uint16 = NewType('Uint16', int)
Uint32 = NewType('Uint32', int)
Uint64 = NewType('Uint64', int)

Float32 = NewType('Float32', float)
Float64 = NewType('Float64', float)


@runtime_checkable
class BytesMarshaler(Protocol):
    """A value that encodes itself as an opaque Bytes record."""

    def __bytes__(self) -> bytes:
        ...


class BytesUnmarshaler(Protocol):
    """A type that rebuilds itself from the payload of a Bytes record."""

    @classmethod
    def from_bytes(cls, data: bytes, /) -> Self:
        ...


class Record(Protocol):
    """Any dataclass, its fields are written as a Mapping keyed by field name."""
    __dataclass_fields__: ClassVar[dict[str, Any]]
