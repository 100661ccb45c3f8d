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
The encoder writes one self-describing record per `encode` call.

Python values are dispatched by their runtime type, the smallest width tier that holds a number or a length is
always used:

>>> from bindat.serialization import Serializer
>>> se = Serializer.build_bytes_serializer()
>>> encoder = Encoder(se)
>>> encoder.encode(200)  # writes 63 00c8
>>> encoder.encode(-1)  # writes 49 ff
>>> encoder.encode(2**63)  # writes a3 8000000000000000
>>> encoder.encode(0.0)  # writes 92 0000000000000000
>>> encoder.encode(['a', None, True])  # writes 41 03 5301 61 5a 54
>>> bytes(se.finalize()).hex()
'6300c849ffa3800000000000000092000000000000000041035301615a54'
"""

import dataclasses
from collections import abc
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Optional

from structlog import get_logger
from typing_extensions import Buffer

from bindat.conf.get_settings import get_global_settings
from bindat.conf.settings import BindatSettings
from bindat.exception import EncodeValueError
from bindat.serialization import Serializer
from bindat.serialization.encoding.float import encode_float, float_width
from bindat.serialization.encoding.int import encode_int, int_bounds, int_width
from bindat.serialization.encoding.length import encode_header
from bindat.serialization.encoding.tags import FALSE, NIL, TRUE, Kind, make_tag
from bindat.serialization.exceptions import TooLongError
from bindat.types import BytesMarshaler
from bindat.value import VALUE_TYPES, Bool, Bytes, Float, Int, Mapping, Nil, Sequence, Text, Uint, Value

logger = get_logger()

_INT64_MIN, _INT64_MAX = int_bounds(8, signed=True)


class Encoder:
    """ Writes values as records to a serializer.

    An encoder is bound to its serializer and isn't meant to be shared between threads. Annotated types are kept by
    going through `DatType`s: dataclass fields are written according to their annotation, so a `Uint8` field holding
    `1` is written as an unsigned integer.
    """

    def __init__(self, serializer: Serializer, *, settings: Optional[BindatSettings] = None) -> None:
        self.log = logger.new()
        self._serializer = serializer
        self._settings = settings or get_global_settings()
        self._depth = 0

    @property
    def settings(self) -> BindatSettings:
        return self._settings

    def encode(self, value: Any) -> None:
        """ Write one record for the given value, dispatching on its runtime type.

        Values that have no representation (functions, locks, iterators, ...) are written as Nil.
        """
        match value:
            case None:
                self.write_nil()
            case bool():
                self.write_bool(value)
            case int():
                self.write_int(value)
            case float():
                self.write_float(value)
            case str():
                self.write_text(value)
            case bytes() | bytearray() | memoryview():
                self.write_bytes(value)
            case _ if isinstance(value, VALUE_TYPES):
                self._encode_value(value)
            case BytesMarshaler():
                self.write_bytes(bytes(value))
            case abc.Mapping():
                self._encode_mapping(value)
            case _ if dataclasses.is_dataclass(value) and not isinstance(value, type):
                from bindat.dat_types import make_dat_type
                make_dat_type(type(value)).encode(self, value)
            case abc.Sequence() | abc.Set():
                self._encode_sequence(value)
            case _:
                self.log.debug('unrepresentable value encoded as nil', type=type(value).__qualname__)
                self.write_nil()

    def _encode_value(self, value: Value) -> None:
        match value:
            case Nil():
                self.write_nil()
            case Bool(flag):
                self.write_bool(flag)
            case Int(number):
                self.write_int(number, signed=True)
            case Uint(number):
                self.write_int(number, signed=False)
            case Float(number):
                self.write_float(number)
            case Text(text):
                self.write_text(text)
            case Bytes(data):
                self.write_bytes(data)
            case Sequence(items):
                self._encode_sequence(items)
            case Mapping(items):
                self.write_header(Kind.MAPPING, len(items))
                with self.nested(value):
                    for key, item in items:
                        self.encode(key)
                        self.encode(item)
            case _:
                raise NotImplementedError('unreachable: not a Value variant')

    def _encode_sequence(self, value: abc.Collection) -> None:
        self.write_header(Kind.SEQUENCE, len(value))
        with self.nested(value):
            for item in value:
                self.encode(item)

    def _encode_mapping(self, value: abc.Mapping) -> None:
        self.write_header(Kind.MAPPING, len(value))
        with self.nested(value):
            for key, item in value.items():
                self.encode(key)
                self.encode(item)

    @contextmanager
    def nested(self, value: Any) -> Iterator[None]:
        """ Wrap the writing of the elements of a sequence or mapping, enforcing MAX_DEPTH."""
        if self._depth >= self._settings.MAX_DEPTH:
            raise EncodeValueError(value, f'nested deeper than {self._settings.MAX_DEPTH} levels')
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def write_nil(self) -> None:
        self._serializer.write_byte(NIL)

    def write_bool(self, value: bool) -> None:
        self._serializer.write_byte(TRUE if value else FALSE)

    def write_int(self, value: int, *, signed: Optional[bool] = None) -> None:
        """ Write an integer in the smallest tier of its family.

        When `signed` is None the family is picked from the value: signed when it fits 64 signed bits, unsigned when
        it only fits 64 unsigned bits.
        """
        family = '' if signed is None else ('signed ' if signed else 'unsigned ')
        if signed is None:
            signed = _INT64_MIN <= value <= _INT64_MAX
        try:
            width = int_width(value, signed=signed)
        except ValueError:
            raise EncodeValueError(value, f'out of the 64-bit {family}range')
        self._serializer.write_byte(make_tag(Kind.INT if signed else Kind.UINT, width))
        encode_int(self._serializer, value, length=width, signed=signed)

    def write_float(self, value: float) -> None:
        try:
            width = float_width(value)
        except ValueError as e:
            raise EncodeValueError(value, str(e))
        self._serializer.write_byte(make_tag(Kind.FLOAT, width))
        encode_float(self._serializer, value, length=width)

    def write_text(self, value: str) -> None:
        try:
            data = value.encode('utf-8')
        except UnicodeEncodeError as e:
            raise EncodeValueError(value, f'not valid as utf-8: {e.reason}')
        self.write_header(Kind.TEXT, len(data))
        self._serializer.write_bytes(data)

    def write_bytes(self, value: Buffer) -> None:
        data = bytes(value)
        self.write_header(Kind.BYTES, len(data))
        self._serializer.write_bytes(data)

    def write_header(self, kind: Kind, length: int) -> None:
        """ Write the tag and length prefix of a text, bytes, sequence or mapping record."""
        try:
            encode_header(self._serializer, kind, length)
        except TooLongError as e:
            raise EncodeValueError(length, str(e))
