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
This module implements IEEE-754 big-endian floats with 4 or 8 bytes.

A value goes into 4 bytes whenever its magnitude is within the range of float32, from the smallest subnormal up to
the largest finite value. The 4-byte tier rounds to float32 precision. Zero is outside that range and always takes
8 bytes.

>>> float_width(1.5), float_width(0.0), float_width(1e300), float_width(-3.4028234663852886e38)
(4, 8, 8, 4)

>>> se = Serializer.build_bytes_serializer()
>>> encode_float(se, 1.5, length=4)  # writes 3fc00000
>>> encode_float(se, 0.0, length=8)  # writes 0000000000000000
>>> bytes(se.finalize()).hex()
'3fc000000000000000000000'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('3fc000000000000000000000'))
>>> decode_float(de, length=4)
1.5
>>> decode_float(de, length=8)
0.0

>>> float_width(float('nan'))
Traceback (most recent call last):
...
ValueError: float is not finite
"""

import math
import struct

from bindat.serialization import Deserializer, Serializer

FLOAT32_MIN = 1.401298464324817e-45  # smallest positive subnormal float32
FLOAT32_MAX = 3.4028234663852886e38  # largest finite float32

_FORMATS = {4: '>f', 8: '>d'}


def float_width(value: float) -> int:
    """ Smallest byte-length (4 or 8) used to encode the given float, raises ValueError for NaN and infinities."""
    if not math.isfinite(value):
        raise ValueError('float is not finite')
    if FLOAT32_MIN <= abs(value) <= FLOAT32_MAX:
        return 4
    return 8


def fits_float32(value: float) -> bool:
    """ Whether a finite value is within the magnitude that a float32 destination can hold."""
    return abs(value) <= FLOAT32_MAX


def round_float32(value: float) -> float:
    """ Round a value to the nearest float32, the result is still a Python float.

    >>> round_float32(0.1)
    0.10000000149011612
    """
    rounded, = struct.unpack(_FORMATS[4], struct.pack(_FORMATS[4], value))
    return rounded


def encode_float(serializer: Serializer, value: float, *, length: int) -> None:
    """ Encode a float using the given byte-length (4 or 8).

    This modules's docstring has more details and examples.
    """
    serializer.write_struct((value,), _FORMATS[length])


def decode_float(deserializer: Deserializer, *, length: int) -> float:
    """ Decode a float using the given byte-length (4 or 8).

    This modules's docstring has more details and examples.
    """
    value, = deserializer.read_struct(_FORMATS[length])
    return value
