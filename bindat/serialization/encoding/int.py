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
Integers are written as big-endian two's-complement numbers in one of four widths: 1, 2, 4 or 8 bytes. The signed and
unsigned families have different ranges for the same width, so the tier picked for a number depends on both:

>>> int_width(127, signed=True), int_width(128, signed=True), int_width(128, signed=False)
(1, 2, 1)
>>> int_width(-2**31, signed=True), int_width(2**32, signed=False)
(4, 8)
>>> int_width(-1, signed=False)
Traceback (most recent call last):
...
ValueError: -1 doesn't fit any unsigned width

Writing and reading need the width and family to be known, the tag byte carries both:

>>> se = Serializer.build_bytes_serializer()
>>> encode_int(se, 200, length=2, signed=True)  # writes 00c8
>>> encode_int(se, 200, length=1, signed=False)  # writes c8
>>> encode_int(se, -300, length=4, signed=True)  # writes fffffed4
>>> raw = bytes(se.finalize())
>>> raw.hex()
'00c8c8fffffed4'
>>> de = Deserializer.build_bytes_deserializer(raw)
>>> [decode_int(de, length=n, signed=s) for n, s in [(2, True), (1, True), (4, True)]]
[200, -56, -300]
"""

from bindat.serialization import Deserializer, Serializer

INT_WIDTHS = (1, 2, 4, 8)


def int_bounds(length: int, *, signed: bool) -> tuple[int, int]:
    """ Inclusive (min, max) of an integer with the given byte-length and signedness."""
    if signed:
        half = 1 << (length * 8 - 1)
        return -half, half - 1
    return 0, (1 << (length * 8)) - 1


def int_width(number: int, *, signed: bool) -> int:
    """ Smallest width of the given family that can hold the number."""
    for length in INT_WIDTHS:
        lower, upper = int_bounds(length, signed=signed)
        if lower <= number <= upper:
            return length
    family = 'signed' if signed else 'unsigned'
    raise ValueError(f"{number} doesn't fit any {family} width")


def encode_int(serializer: Serializer, number: int, *, length: int, signed: bool) -> None:
    lower, upper = int_bounds(length, signed=signed)
    if not lower <= number <= upper:
        raise ValueError(f'{number} is out of [{lower}, {upper}]')
    serializer.write_bytes(number.to_bytes(length, 'big', signed=signed))


def decode_int(deserializer: Deserializer, *, length: int, signed: bool) -> int:
    return int.from_bytes(deserializer.read_bytes(length), 'big', signed=signed)
