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
The `Value` sum type, what a record decodes to when the destination accepts anything.

Each variant mirrors one wire kind and keeps what the wire says, including signedness. Mappings keep their pairs in
wire order as a tuple, so keys don't need to be hashable and duplicates are preserved.

>>> Mapping(((Text('a'), Int(1)), (Text('b'), Sequence((Uint(2), Nil()))))).to_python()
{'a': 1, 'b': [2, None]}

Variants can also be encoded, which is how a caller picks the signedness of a number explicitly:

>>> import bindat
>>> bindat.marshal(Uint(7)).hex(), bindat.marshal(Int(7)).hex()
('5507', '4907')
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from bindat.serialization.encoding.int import int_bounds


@dataclass(slots=True, frozen=True)
class Nil:
    def to_python(self) -> None:
        return None


@dataclass(slots=True, frozen=True)
class Bool:
    value: bool

    def to_python(self) -> bool:
        return self.value


@dataclass(slots=True, frozen=True)
class Int:
    """A signed integer, within 64 bits."""
    value: int

    def __post_init__(self) -> None:
        lower, upper = int_bounds(8, signed=True)
        if not lower <= self.value <= upper:
            raise ValueError('value out of the 64-bit signed range')

    def to_python(self) -> int:
        return self.value


@dataclass(slots=True, frozen=True)
class Uint:
    """An unsigned integer, within 64 bits."""
    value: int

    def __post_init__(self) -> None:
        lower, upper = int_bounds(8, signed=False)
        if not lower <= self.value <= upper:
            raise ValueError('value out of the 64-bit unsigned range')

    def to_python(self) -> int:
        return self.value


@dataclass(slots=True, frozen=True)
class Float:
    value: float

    def to_python(self) -> float:
        return self.value


@dataclass(slots=True, frozen=True)
class Text:
    value: str

    def to_python(self) -> str:
        return self.value


@dataclass(slots=True, frozen=True)
class Bytes:
    value: bytes

    def to_python(self) -> bytes:
        return self.value


@dataclass(slots=True, frozen=True)
class Sequence:
    items: tuple[Value, ...] = ()

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]


@dataclass(slots=True, frozen=True)
class Mapping:
    items: tuple[tuple[Value, Value], ...] = ()

    def to_python(self) -> dict[Any, Any]:
        """ Convert to a dict, later pairs win over earlier ones with the same key.

        Sequence keys become tuples, a Mapping key has no hashable equivalent and raises TypeError.
        """
        return {_to_python_key(key): value.to_python() for key, value in self.items}


def _to_python_key(key: Value) -> Any:
    match key:
        case Sequence(items):
            return tuple(_to_python_key(item) for item in items)
        case Mapping():
            raise TypeError('a mapping cannot be used as a dict key')
        case _:
            return key.to_python()


Value = Union[Nil, Bool, Int, Uint, Float, Text, Bytes, Sequence, Mapping]

VALUE_TYPES: tuple[type, ...] = (Nil, Bool, Int, Uint, Float, Text, Bytes, Sequence, Mapping)
