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

r"""
This module implements the header of length-prefixed records: text, bytes, sequences and mappings.

The header is the tag byte of the kind at the chosen tier followed by the length as an unsigned big-endian integer
of the tier's width. The length is a byte count for text and bytes, an element count for sequences and a pair count
for mappings.

>>> se = Serializer.build_bytes_serializer()
>>> encode_header(se, Kind.TEXT, 3)  # writes 53 03
>>> encode_header(se, Kind.SEQUENCE, 300)  # writes 5b 012c
>>> encode_header(se, Kind.MAPPING, 70000)  # writes 83 00011170
>>> bytes(se.finalize()).hex()
'53035b012c8300011170'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('012c'))
>>> decode_length(de, width=2)
300

>>> encode_header(Serializer.build_bytes_serializer(), Kind.BYTES, 2**32)
Traceback (most recent call last):
...
bindat.serialization.exceptions.TooLongError: length 4294967296 is above the 32-bit limit

>>> decode_length(Deserializer.build_bytes_deserializer(b'\xff'), width=1, max_length=16)
Traceback (most recent call last):
...
bindat.serialization.exceptions.TooLongError: length 255 is above the maximum of 16
"""

from bindat.serialization import Deserializer, Serializer
from bindat.serialization.encoding.int import decode_int, encode_int
from bindat.serialization.encoding.tags import Kind, make_tag
from bindat.serialization.exceptions import TooLongError

LENGTH_WIDTHS = (1, 2, 4)
MAX_LENGTH = 2**32 - 1


def length_width(length: int) -> int:
    """ Smallest prefix width in (1, 2, 4) that holds the given length."""
    if length < 0:
        raise ValueError(f'negative length {length}')
    if length <= 0xff:
        return 1
    if length <= 0xffff:
        return 2
    if length <= MAX_LENGTH:
        return 4
    raise TooLongError(f'length {length} is above the 32-bit limit')


def encode_header(serializer: Serializer, kind: Kind, length: int) -> None:
    """ Write the tag and the length prefix for a length-prefixed record.

    This modules's docstring has more details and examples.
    """
    width = length_width(length)
    serializer.write_byte(make_tag(kind, width))
    encode_int(serializer, length, length=width, signed=False)


def decode_length(deserializer: Deserializer, *, width: int, max_length: int = MAX_LENGTH) -> int:
    """ Read a length prefix of the given width, the tag is expected to have been read already.

    This modules's docstring has more details and examples.
    """
    length = decode_int(deserializer, length=width, signed=False)
    if length > max_length:
        raise TooLongError(f'length {length} is above the maximum of {max_length}')
    return length
