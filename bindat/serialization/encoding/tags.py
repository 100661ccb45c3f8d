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
Every record starts with a single tag byte: an ASCII letter naming the kind, plus an offset naming the width tier.

The offsets are 0x00, 0x1A, 0x34 and 0x4E for the 1, 2, 4 and 8-byte tiers. For numbers the tier is the payload
width, for text, bytes, sequences and mappings it is the width of the length prefix.

>>> hex(make_tag(Kind.INT, 2))
'0x63'
>>> hex(make_tag(Kind.MAPPING, 4))
'0x83'
>>> parse_tag(0x87)
TagInfo(kind=<Kind.TEXT: 'text'>, width=4, tag=135)
>>> parse_tag(TRUE)
TagInfo(kind=<Kind.BOOL: 'bool'>, width=0, tag=84)
>>> parse_tag(0xff) is None
True
>>> make_tag(Kind.TEXT, 8)
Traceback (most recent call last):
...
ValueError: text has no 8-byte tier
"""

from enum import Enum
from typing import NamedTuple, Optional


class Kind(Enum):
    """The wire categories, a record always belongs to exactly one of them."""
    NIL = 'nil'
    BOOL = 'bool'
    INT = 'int'
    UINT = 'uint'
    FLOAT = 'float'
    TEXT = 'text'
    BYTES = 'bytes'
    SEQUENCE = 'sequence'
    MAPPING = 'mapping'


class TagInfo(NamedTuple):
    kind: Kind
    # payload width for numbers, length prefix width for the others, 0 when there is no payload
    width: int
    tag: int


WIDTH_OFFSETS: dict[int, int] = {1: 0x00, 2: 0x1A, 4: 0x34, 8: 0x4E}

_LETTERS: dict[Kind, str] = {
    Kind.INT: 'I',
    Kind.UINT: 'U',
    Kind.FLOAT: 'D',
    Kind.TEXT: 'S',
    Kind.BYTES: 'B',
    Kind.SEQUENCE: 'A',
    Kind.MAPPING: 'O',
}

WIDTHS: dict[Kind, tuple[int, ...]] = {
    Kind.INT: (1, 2, 4, 8),
    Kind.UINT: (1, 2, 4, 8),
    Kind.FLOAT: (4, 8),
    Kind.TEXT: (1, 2, 4),
    Kind.BYTES: (1, 2, 4),
    Kind.SEQUENCE: (1, 2, 4),
    Kind.MAPPING: (1, 2, 4),
}


def make_tag(kind: Kind, width: int) -> int:
    """ Compute the tag byte of a sized kind for the given width tier."""
    if kind not in WIDTHS:
        raise ValueError(f'{kind.value} has no width tiers')
    if width not in WIDTHS[kind]:
        raise ValueError(f'{kind.value} has no {width}-byte tier')
    return ord(_LETTERS[kind]) + WIDTH_OFFSETS[width]


NIL = ord('Z')
TRUE = ord('T')
FALSE = ord('F')

INT8 = make_tag(Kind.INT, 1)
INT16 = make_tag(Kind.INT, 2)
INT32 = make_tag(Kind.INT, 4)
INT64 = make_tag(Kind.INT, 8)

UINT8 = make_tag(Kind.UINT, 1)
UINT16 = make_tag(Kind.UINT, 2)
UINT32 = make_tag(Kind.UINT, 4)
UINT64 = make_tag(Kind.UINT, 8)

FLOAT32 = make_tag(Kind.FLOAT, 4)
FLOAT64 = make_tag(Kind.FLOAT, 8)

TEXT8 = make_tag(Kind.TEXT, 1)
TEXT16 = make_tag(Kind.TEXT, 2)
TEXT32 = make_tag(Kind.TEXT, 4)

BYTES8 = make_tag(Kind.BYTES, 1)
BYTES16 = make_tag(Kind.BYTES, 2)
BYTES32 = make_tag(Kind.BYTES, 4)

SEQUENCE8 = make_tag(Kind.SEQUENCE, 1)
SEQUENCE16 = make_tag(Kind.SEQUENCE, 2)
SEQUENCE32 = make_tag(Kind.SEQUENCE, 4)

MAPPING8 = make_tag(Kind.MAPPING, 1)
MAPPING16 = make_tag(Kind.MAPPING, 2)
MAPPING32 = make_tag(Kind.MAPPING, 4)


def _build_tag_table() -> dict[int, TagInfo]:
    table = {
        NIL: TagInfo(Kind.NIL, 0, NIL),
        TRUE: TagInfo(Kind.BOOL, 0, TRUE),
        FALSE: TagInfo(Kind.BOOL, 0, FALSE),
    }
    for kind, widths in WIDTHS.items():
        for width in widths:
            tag = make_tag(kind, width)
            assert tag not in table, 'tags must not collide'
            table[tag] = TagInfo(kind, width, tag)
    return table


_TAG_TABLE = _build_tag_table()


def parse_tag(tag: int) -> Optional[TagInfo]:
    """ Look up a tag byte, `None` means the byte is not a known tag."""
    return _TAG_TABLE.get(tag)
