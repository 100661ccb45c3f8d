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
The decoder reads one record per `decode` call and builds a value of the requested destination type.

The record doesn't need to be of the same kind as the destination, numbers are converted when they fit and text is
parsed:

>>> from bindat.conf.settings import BindatSettings
>>> from bindat.serialization import Deserializer
>>> from bindat.types import Int8
>>> settings = BindatSettings()
>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('a3000000000000002a' '5304 74727565' '5303 2d3132'))
>>> decoder = Decoder(de, settings=settings)
>>> decoder.decode(Int8), decoder.decode(bool), decoder.decode(int)
(42, True, -12)

A value that doesn't fit is an error that says what was read:

>>> Decoder(Deserializer.build_bytes_deserializer(b'\x6f\x01\x2c'), settings=settings).decode(Int8)
Traceback (most recent call last):
...
bindat.exception.DecodeTypeError: cannot decode uint16(300) into value of type Int8: overflow

The destination is never modified, the decoded value is returned instead. A `prior` value is what Nil records and
unknown tags leave untouched, and what records and sequences update. Skipping a tag is logged:

>>> from structlog.testing import capture_logs
>>> with capture_logs() as log_list:
...     Decoder(Deserializer.build_bytes_deserializer(b'\xff'), settings=settings).decode(int, 7)
7
>>> [log['event'] for log in log_list]
['unknown tag ignored']
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Optional, TypeVar

from structlog import get_logger

from bindat.conf.get_settings import get_global_settings
from bindat.conf.settings import BindatSettings
from bindat.dat_types import DatType, Scalar, make_dat_type
from bindat.exception import DecodeUsageError, UnsupportedTypeError
from bindat.serialization import BadDataError, Deserializer
from bindat.serialization.encoding.float import decode_float
from bindat.serialization.encoding.int import decode_int
from bindat.serialization.encoding.length import decode_length
from bindat.serialization.encoding.tags import TRUE, Kind, parse_tag

logger = get_logger()

T = TypeVar('T')


class Decoder:
    """ Reads records from a deserializer into values of a destination type.

    A decoder is bound to its deserializer and isn't meant to be shared between threads. What happens with an unknown
    tag byte or with Nil for a destination that can't be cleared depends on `LENIENT_UNKNOWN_TAGS` and
    `LENIENT_NIL_TARGETS`.
    """

    def __init__(self, deserializer: Deserializer, *, settings: Optional[BindatSettings] = None) -> None:
        self.log = logger.new()
        self._deserializer = deserializer
        self._settings = settings or get_global_settings()
        self._depth = 0

    @property
    def settings(self) -> BindatSettings:
        return self._settings

    def decode(self, type_: Any, prior: Any = None) -> Any:
        """ Read one record and return it as a value of the given destination type.

        An unusable destination (None, something that isn't a type or an unsupported annotation) raises
        `DecodeUsageError` before anything is read.
        """
        if type_ is None:
            raise DecodeUsageError('the destination type cannot be None')
        try:
            dat_type = make_dat_type(type_)
            return self.read(dat_type, prior)
        except UnsupportedTypeError as e:
            raise DecodeUsageError(f'invalid destination: {e}') from e

    def read(self, dat_type: DatType[T], prior: Optional[T] = None) -> T:
        """ Read one record into the destination described by the given `DatType`.

        This is what `DatType`s use to read the elements of sequences and mappings.
        """
        de = self._deserializer
        tag = de.read_byte()
        info = parse_tag(tag)
        if info is None:
            return self._ignore_unknown_tag(tag, dat_type, prior)
        match info.kind:
            case Kind.NIL:
                return dat_type.from_nil(self, prior)
            case Kind.BOOL:
                return dat_type.from_bool(Scalar(Kind.BOOL, 0, tag == TRUE))
            case Kind.INT | Kind.UINT:
                number = decode_int(de, length=info.width, signed=info.kind is Kind.INT)
                return dat_type.from_number(Scalar(info.kind, info.width, number))
            case Kind.FLOAT:
                return dat_type.from_number(Scalar(Kind.FLOAT, info.width, decode_float(de, length=info.width)))
            case Kind.TEXT:
                return dat_type.from_text(Scalar(Kind.TEXT, info.width, self._read_payload(info.width)))
            case Kind.BYTES:
                return dat_type.from_bytes(Scalar(Kind.BYTES, info.width, self._read_payload(info.width)))
            case Kind.SEQUENCE:
                count = decode_length(de, width=info.width, max_length=self._settings.MAX_LENGTH)
                with self._nested():
                    return dat_type.from_sequence(self, count, prior)
            case Kind.MAPPING:
                count = decode_length(de, width=info.width, max_length=self._settings.MAX_LENGTH)
                with self._nested():
                    return dat_type.from_mapping(self, count, prior)
            case _:
                raise NotImplementedError(f'unreachable: {info.kind}')

    def ignore_nil(self, dat_type: DatType[T], prior: Optional[T]) -> T:
        """ Handle Nil for a destination that can't be cleared, the prior value (or zero) is kept."""
        if not self._settings.LENIENT_NIL_TARGETS:
            raise dat_type.mismatch('nil', 'destination cannot be cleared')
        self.log.debug('nil ignored for destination', shape=repr(dat_type.shape))
        return prior if prior is not None else dat_type.zero()

    def _ignore_unknown_tag(self, tag: int, dat_type: DatType[T], prior: Optional[T]) -> T:
        if not self._settings.LENIENT_UNKNOWN_TAGS:
            raise BadDataError(f'unknown tag 0x{tag:02x}')
        self.log.debug('unknown tag ignored', tag=f'0x{tag:02x}')
        return prior if prior is not None else dat_type.zero()

    def _read_payload(self, width: int) -> bytes:
        length = decode_length(self._deserializer, width=width, max_length=self._settings.MAX_LENGTH)
        return bytes(self._deserializer.read_bytes(length))

    @contextmanager
    def _nested(self) -> Iterator[None]:
        if self._depth >= self._settings.MAX_DEPTH:
            raise BadDataError(f'records nested deeper than {self._settings.MAX_DEPTH} levels')
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
