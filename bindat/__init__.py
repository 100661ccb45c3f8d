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
This module exports the public API of bindat, a self-describing binary format.
"""

from bindat.batch import decode_batch, encode_batch, iter_decode_batch, marshal, unmarshal, unmarshal_batch
from bindat.conf.settings import BindatSettings
from bindat.decoder import Decoder
from bindat.encoder import Encoder
from bindat.exception import (
    BindatError,
    DecodeError,
    DecodeTypeError,
    DecodeUsageError,
    EncodeError,
    EncodeValueError,
    UnsupportedTypeError,
)
from bindat.file import dump, load
from bindat.types import (
    BytesMarshaler,
    BytesUnmarshaler,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)
from bindat.value import Value
from bindat.version import __version__

__all__ = [
    'BindatError',
    'BindatSettings',
    'BytesMarshaler',
    'BytesUnmarshaler',
    'DecodeError',
    'DecodeTypeError',
    'DecodeUsageError',
    'Decoder',
    'EncodeError',
    'EncodeValueError',
    'Encoder',
    'Float32',
    'Float64',
    'Int8',
    'Int16',
    'Int32',
    'Int64',
    'Uint8',
    'Uint16',
    'Uint32',
    'Uint64',
    'UnsupportedTypeError',
    'Value',
    'decode_batch',
    'dump',
    'encode_batch',
    'iter_decode_batch',
    'load',
    'marshal',
    'unmarshal',
    'unmarshal_batch',
    '__version__',
]
