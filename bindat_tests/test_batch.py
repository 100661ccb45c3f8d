from io import BytesIO
from typing import Any

import pytest

from bindat import (
    BindatSettings,
    DecodeTypeError,
    decode_batch,
    encode_batch,
    iter_decode_batch,
    marshal,
    unmarshal,
    unmarshal_batch,
)
from bindat.serialization import Deserializer, OutOfDataError, Serializer
from bindat_tests.unittest import strict_settings


def test_batch_is_concatenation() -> None:
    data = marshal(1, 'two', [3.5])
    assert data == marshal(1) + marshal('two') + marshal([3.5])
    assert unmarshal_batch(data, (int, str, list[float])) == [1, 'two', [3.5]]


def test_batch_order() -> None:
    data = marshal('a', 'b', 'c')
    assert unmarshal_batch(data, (str, str, str)) == ['a', 'b', 'c']
    # fewer destinations read a prefix of the batch
    assert unmarshal_batch(data, (str,)) == ['a']


def test_batch_too_many_destinations() -> None:
    data = marshal(1, 2)
    with pytest.raises(OutOfDataError):
        unmarshal_batch(data, (int, int, int))


def test_batch_priors() -> None:
    data = marshal(None, [1])
    assert unmarshal_batch(data, (int, list[int]), priors=(5, [9, 9])) == [5, [1]]
    with pytest.raises(ValueError, match='expected 2 priors, got 1'):
        unmarshal_batch(data, (int, list[int]), priors=(5,))


def test_iter_decode_batch_yields_until_failure() -> None:
    de = Deserializer.build_bytes_deserializer(marshal(1, 'x', 3))
    values = iter_decode_batch(de, (int, int, int))
    assert next(values) == 1
    with pytest.raises(DecodeTypeError):
        next(values)


def test_encode_and_decode_batch_with_streams() -> None:
    fp = BytesIO()
    encode_batch(Serializer.build_stream_serializer(fp), [{'a': 1}, b'\x00', None])
    fp.seek(0)
    de = Deserializer.build_stream_deserializer(fp)
    assert decode_batch(de, (dict[str, int], bytes, Any)) == [{'a': 1}, b'\x00', None]
    assert de.is_empty()


def test_trailing_data() -> None:
    data = marshal(1, 2)
    assert unmarshal(data, int) == 1
    with pytest.raises(ValueError, match='trailing data'):
        unmarshal(data, int, settings=BindatSettings(REJECT_TRAILING_DATA=True))
    with pytest.raises(ValueError, match='trailing data'):
        unmarshal(data, int, settings=strict_settings())
    assert unmarshal_batch(data, (int, int), settings=strict_settings()) == [1, 2]


def test_unmarshal_accepts_buffers() -> None:
    data = marshal('abc')
    assert unmarshal(bytearray(data), str) == 'abc'
    assert unmarshal(memoryview(data), str) == 'abc'


def test_unmarshal_prior() -> None:
    assert unmarshal(b'\x5a', str, prior='kept') == 'kept'
