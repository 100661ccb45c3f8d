import struct
import threading
from collections import OrderedDict
from io import BytesIO

import pytest
from structlog.testing import capture_logs

from bindat import BindatSettings, EncodeValueError, Encoder, marshal
from bindat.serialization import Serializer
from bindat.types import Uint8
from bindat.value import Bool, Bytes, Float, Int, Mapping, Nil, Sequence, Text, Uint


@pytest.mark.parametrize('value, expected', [
    (None, '5a'),
    (True, '54'),
    (False, '46'),
    (0, '4900'),
    (-1, '49ff'),
    (127, '497f'),
    (-128, '4980'),
    (128, '630080'),
    # the smallest signed tier that holds 200 is the 2-byte one
    (200, '6300c8'),
    (-129, '63ff7f'),
    (32767, '637fff'),
    (32768, '7d00008000'),
    (2**31 - 1, '7d7fffffff'),
    (2**31, '970000000080000000'),
    (-2**63, '978000000000000000'),
    (2**63 - 1, '977fffffffffffffff'),
    (2**63, 'a38000000000000000'),
    (2**64 - 1, 'a3ffffffffffffffff'),
    (1.5, '783fc00000'),
    (-2.0, '78c0000000'),
    (0.0, '920000000000000000'),
    (-0.0, '928000000000000000'),
    (1e300, '92' + struct.pack('>d', 1e300).hex()),
    ('', '5300'),
    ('abc', '5303616263'),
    ('héllo', '5306' + 'héllo'.encode('utf-8').hex()),
    (b'', '4200'),
    (b'\x00\x01', '42020001'),
    (bytearray(b'ab'), '42026162'),
    (memoryview(b'ab'), '42026162'),
    ([], '4100'),
    ([1, 'a'], '41024901530161'),
    ((None, True), '41025a54'),
    ({7}, '41014907'),
    (frozenset(), '4100'),
    ({}, '4f00'),
    ({'k': 1}, '4f0153016b4901'),
    (OrderedDict([(1, None)]), '4f0149015a'),
])
def test_encode_runtime_values(value: object, expected: str) -> None:
    assert marshal(value).hex() == expected


@pytest.mark.parametrize('value, expected', [
    (Nil(), '5a'),
    (Bool(True), '54'),
    (Int(7), '4907'),
    (Uint(7), '5507'),
    (Uint(256), '6f0100'),
    (Int(200), '6300c8'),
    (Float(0.0), '920000000000000000'),
    (Text('a'), '530161'),
    (Bytes(b''), '4200'),
    (Sequence((Uint(1), Nil())), '410255015a'),
    (Mapping(((Nil(), Bool(False)),)), '4f015a46'),
])
def test_encode_value_variants(value: object, expected: str) -> None:
    assert marshal(value).hex() == expected


def test_encode_text_tiers() -> None:
    assert marshal('a' * 255)[:2] == b'\x53\xff'
    assert marshal('a' * 256)[:3] == b'\x6d\x01\x00'
    assert marshal('a' * 65536)[:5] == b'\x87\x00\x01\x00\x00'


def test_encode_sequence_tiers() -> None:
    data = marshal([None] * 300)
    assert data[:3] == b'\x5b\x01\x2c'
    assert len(data) == 3 + 300


def test_encode_mapping_tiers() -> None:
    data = marshal({i: None for i in range(70000)})
    assert data[:5] == b'\x83\x00\x01\x11\x70'


@pytest.mark.parametrize('value', [float('nan'), float('inf'), float('-inf'), [1.0, float('nan')]])
def test_encode_non_finite_float(value: object) -> None:
    with pytest.raises(EncodeValueError):
        marshal(value)


@pytest.mark.parametrize('value', [2**64, -2**63 - 1, {'a': [2**70]}])
def test_encode_int_out_of_range(value: object) -> None:
    with pytest.raises(EncodeValueError) as exc_info:
        marshal(value)
    # the error is also a ValueError
    assert isinstance(exc_info.value, ValueError)


def test_encode_invalid_text() -> None:
    with pytest.raises(EncodeValueError):
        marshal('\ud800')


def _noop() -> None:
    pass


@pytest.mark.parametrize('value', [_noop, lambda: None, threading.Lock(), iter([]), object(), 1j])
def test_encode_unrepresentable_as_nil(value: object) -> None:
    assert marshal(value) == b'\x5a'


def test_encode_unrepresentable_logs() -> None:
    with capture_logs() as log_list:
        encoder = Encoder(Serializer.build_bytes_serializer())
        encoder.encode([threading.Lock()])
    logs = '\n'.join(map(str, log_list))
    assert 'unrepresentable value encoded as nil' in logs
    assert 'lock' in logs


def test_encode_bytes_hook() -> None:
    class Key:
        def __bytes__(self) -> bytes:
            return b'\x01\x02'

    assert marshal(Key()).hex() == '42020102'


def test_encode_bytes_hook_error_propagates() -> None:
    class Broken:
        def __bytes__(self) -> bytes:
            raise RuntimeError('no bytes today')

    with pytest.raises(RuntimeError, match='no bytes today'):
        marshal([Broken()])


def test_encode_depth() -> None:
    settings = BindatSettings(MAX_DEPTH=3)
    assert marshal([[[1]]], settings=settings).hex() == '4101410141014901'
    with pytest.raises(EncodeValueError):
        marshal([[[[1]]]], settings=settings)
    with pytest.raises(EncodeValueError):
        marshal({'a': {'b': {'c': {}}}}, settings=settings)


def test_encode_cycle() -> None:
    cycle: list = []
    cycle.append(cycle)
    with pytest.raises(EncodeValueError):
        marshal(cycle)


def test_encode_depth_is_restored_after_error() -> None:
    se = Serializer.build_bytes_serializer()
    encoder = Encoder(se, settings=BindatSettings(MAX_DEPTH=1))
    with pytest.raises(EncodeValueError):
        encoder.encode([[1]])
    encoder.encode([1])


def test_encode_sized_int_keeps_family() -> None:
    se = Serializer.build_bytes_serializer()
    encoder = Encoder(se)
    encoder.write_int(Uint8(1), signed=False)
    encoder.write_int(1, signed=True)
    encoder.write_int(2**64 - 1)
    assert bytes(se.finalize()).hex() == '55014901a3ffffffffffffffff'


def test_encode_sized_int_out_of_family() -> None:
    encoder = Encoder(Serializer.build_bytes_serializer())
    with pytest.raises(EncodeValueError, match='unsigned'):
        encoder.write_int(-1, signed=False)


def test_encode_to_stream() -> None:
    fp = BytesIO()
    encoder = Encoder(Serializer.build_stream_serializer(fp))
    encoder.encode('hi')
    encoder.encode(1)
    assert fp.getvalue().hex() == '530268694901'


def test_encode_to_closed_stream() -> None:
    fp = BytesIO()
    fp.close()
    encoder = Encoder(Serializer.build_stream_serializer(fp))
    with pytest.raises(ValueError):
        encoder.encode(1)
