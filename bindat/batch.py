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
A batch is a plain concatenation of records, without a count or any envelope. Records carry their own lengths, so
the same number of destination types is all that's needed to read a batch back.

>>> data = marshal(1, 'two', [3.5])
>>> data.hex()
'4901530374776f41017840600000'
>>> unmarshal_batch(data, (int, str, list[float]))
[1, 'two', [3.5]]
"""

from collections.abc import Iterable, Iterator, Sequence
from typing import Any, Optional

from typing_extensions import Buffer

from bindat.conf.get_settings import get_global_settings
from bindat.conf.settings import BindatSettings
from bindat.decoder import Decoder
from bindat.encoder import Encoder
from bindat.serialization import Deserializer, Serializer


def encode_batch(serializer: Serializer, values: Iterable[Any], *, settings: Optional[BindatSettings] = None) -> None:
    """ Write one record per value, in order."""
    encoder = Encoder(serializer, settings=settings)
    for value in values:
        encoder.encode(value)


def iter_decode_batch(
    deserializer: Deserializer,
    types: Sequence[Any],
    priors: Optional[Sequence[Any]] = None,
    *,
    settings: Optional[BindatSettings] = None,
) -> Iterator[Any]:
    """ Read one record per destination type, yielding each value as soon as it's decoded.

    Values yielded before a failing record stay valid, the error is raised by the `next()` that reaches it.
    """
    if priors is not None and len(priors) != len(types):
        raise ValueError(f'expected {len(types)} priors, got {len(priors)}')
    decoder = Decoder(deserializer, settings=settings)
    for i, type_ in enumerate(types):
        yield decoder.decode(type_, priors[i] if priors is not None else None)


def decode_batch(
    deserializer: Deserializer,
    types: Sequence[Any],
    priors: Optional[Sequence[Any]] = None,
    *,
    settings: Optional[BindatSettings] = None,
) -> list[Any]:
    """ Read one record per destination type, stopping at the first failing record."""
    return list(iter_decode_batch(deserializer, types, priors, settings=settings))


def marshal(value: Any, *values: Any, settings: Optional[BindatSettings] = None) -> bytes:
    """ Encode one or more values as a batch and return the bytes."""
    serializer = Serializer.build_bytes_serializer()
    encode_batch(serializer, (value, *values), settings=settings)
    return bytes(serializer.finalize())


def unmarshal(data: Buffer, type_: Any, *, prior: Any = None, settings: Optional[BindatSettings] = None) -> Any:
    """ Decode the first record of `data` into a value of the given destination type."""
    value, = unmarshal_batch(data, (type_,), priors=(prior,), settings=settings)
    return value


def unmarshal_batch(
    data: Buffer,
    types: Sequence[Any],
    *,
    priors: Optional[Sequence[Any]] = None,
    settings: Optional[BindatSettings] = None,
) -> list[Any]:
    """ Decode one record per destination type from `data`.

    Bytes left after the last record are ignored, unless `REJECT_TRAILING_DATA` is set, in which case they raise
    `ValueError('trailing data')`.
    """
    deserializer = Deserializer.build_bytes_deserializer(data)
    decoder_settings = settings or get_global_settings()
    values = decode_batch(deserializer, types, priors, settings=decoder_settings)
    if decoder_settings.REJECT_TRAILING_DATA:
        deserializer.finalize()
    return values
