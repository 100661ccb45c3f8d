from collections.abc import Mapping, Sequence, Sized
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, SupportsIndex

import pytest
from structlog.testing import capture_logs

from bindat import (
    BindatSettings,
    DecodeTypeError,
    DecodeUsageError,
    Decoder,
    Float32,
    Int8,
    Int16,
    Int32,
    Int64,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
    Value,
    marshal,
    unmarshal,
    unmarshal_batch,
)
from bindat.serialization import BadDataError, Deserializer, OutOfDataError, TooLongError
from bindat.value import Bool, Int, Nil, Text, Uint
from bindat.value import Mapping as ValueMapping
from bindat_tests.unittest import strict_settings


@pytest.mark.parametrize('value, type_', [
    (True, bool),
    (False, bool),
    (-5, Int8),
    (200, Uint8),
    (-30000, Int16),
    (60000, Uint16),
    (-2**31, Int32),
    (2**32 - 1, Uint32),
    (-2**63, Int64),
    (2**64 - 1, Uint64),
    (2**64 - 1, int),
    (-2**63, int),
    (1.5, Float32),
    (0.25, float),
    (1e300, float),
    (1e-300, float),
    (0.0, float),
    ('', str),
    ('héllo', str),
    (b'\x00\xff', bytes),
    (bytearray(b'ab'), bytearray),
    ([1, 2], list[int]),
    ([[1], []], list[list[int]]),
    ((1, 2, 3), tuple[int, ...]),
    ((1, 'a'), tuple[int, str]),
    ({1, 2}, set[int]),
    (frozenset({'a'}), frozenset[str]),
    ({'a': 1}, dict[str, int]),
    ({1: [b'x']}, dict[int, list[bytes]]),
    (None, Optional[int]),
    (3, Optional[int]),
    (3, int | None),
])
def test_round_trip(value: Any, type_: Any) -> None:
    assert unmarshal(marshal(value), type_) == value


@pytest.mark.parametrize('value, type_, expected', [
    # numbers go into any numeric destination where they fit
    (Uint(5), Int64, 5),
    (Int(5), Uint64, 5),
    (Uint(127), Int8, 127),
    (300, Uint16, 300),
    (-1, Int64, -1),
    (2.0, int, 2),
    (-3.0, Int8, -3),
    (2.0**70, int, 2**70),
    (3, float, 3.0),
    (2**64 - 1, float, float(2**64 - 1)),
    (3, Float32, 3.0),
    # float32 destinations round to float32 precision
    (1e-300, Float32, 0.0),
    (0.1, float, 0.10000000149011612),
    # abstract collections decode into the builtin that implements them
    ([1, 2], Sequence[int], [1, 2]),
    ({'a': 1}, Mapping[str, int], {'a': 1}),
    ([1, 2], tuple, (1, 2)),
    ([1, 2], list, [1, 2]),
    ({'a': [1]}, dict, {'a': [1]}),
    # sequences of bytes go into bytes
    ([1, 2, 255], bytes, b'\x01\x02\xff'),
    ([], bytes, b''),
    ('abc', bytes, b'abc'),
    ('abc', bytearray, bytearray(b'abc')),
    # fixed tuples zero-fill missing slots
    ([1], tuple[int, str, bool], (1, '', False)),
    ([], tuple[int, int], (0, 0)),
    # list keys become tuples
    ({(1, 2): 'x'}, dict[Any, str], {(1, 2): 'x'}),
    ({(1, 2): 'x'}, Any, {(1, 2): 'x'}),
    # nil values inside containers
    ({'a': None}, dict[str, int], {'a': 0}),
    ([None, 1], list[Optional[int]], [None, 1]),
])
def test_coercion(value: Any, type_: Any, expected: Any) -> None:
    assert unmarshal(marshal(value), type_) == expected


@pytest.mark.parametrize('value, type_', [
    (Uint(2**64 - 1), Int64),
    (Int(-1), Uint8),
    (Int(-1), Uint64),
    (300, Uint8),
    (300, Int8),
    (-129, Int8),
    (2**31, Int32),
    (2.5, int),
    (1e20, Int64),
    (1e300, Float32),
    (True, int),
    (True, str),
    (1, bool),
    (1, str),
    (1.5, str),
    (b'x', str),
    (b'x', int),
    ([1], int),
    ([1], dict[str, int]),
    ({'a': 1}, list[int]),
    ({'a': 1}, bytes),
    ([256], bytes),
    ([-1], bytes),
    ([1, 2, 3, 4], tuple[int, int, int]),
    ([1, 2], tuple[int, str]),
    ([[1]], set[Any]),
    ({'a': 1}, dict[int, int]),
])
def test_incompatible(value: Any, type_: Any) -> None:
    with pytest.raises(DecodeTypeError):
        unmarshal(marshal(value), type_)


def test_overflow_error_message() -> None:
    with pytest.raises(DecodeTypeError) as exc_info:
        unmarshal(marshal(Uint(300)), Int8)
    error = exc_info.value
    assert str(error) == 'cannot decode uint16(300) into value of type Int8: overflow'
    assert error.source == 'uint16(300)'
    assert error.shape is Int8
    assert error.reason == 'overflow'


def test_capacity_error_message() -> None:
    with pytest.raises(DecodeTypeError, match='capacity is 2'):
        unmarshal(marshal([1, 2, 3]), tuple[int, int])


@pytest.mark.parametrize('text, type_, expected', [
    ('true', bool, True),
    ('false', bool, False),
    ('-1234567', int, -1234567),
    ('+42', int, 42),
    ('007', int, 7),
    ('-128', Int8, -128),
    ('18446744073709551615', Uint64, 2**64 - 1),
    ('-' + '0' * 40 + '128', Int8, -128),
    ('9' * 30, int, int('9' * 30)),
    ('1.5', float, 1.5),
    ('-2e3', float, -2000.0),
    ('.5', float, 0.5),
    ('5.', float, 5.0),
    ('1E-2', float, 0.01),
    ('42', float, 42.0),
    ('1.5', Float32, 1.5),
    ('text', str, 'text'),
    ('text', Any, 'text'),
    ('text', Value, Text('text')),
    ('text', Optional[str], 'text'),
])
def test_text_parsing(text: str, type_: Any, expected: Any) -> None:
    assert unmarshal(marshal(text), type_) == expected


@pytest.mark.parametrize('text, type_', [
    ('True', bool),
    ('yes', bool),
    ('1', bool),
    ('', int),
    (' 42', int),
    ('4.2', int),
    ('1_000', int),
    ('0x10', int),
    ('300', Uint8),
    ('-1', Uint64),
    ('9' * 21, Uint64),
    ('9' * 5000, Int8),
    ('9' * 5000, int),
    ('-' + '9' * 5000, int),
    ('abc', float),
    ('inf', float),
    ('nan', float),
    ('1e999', float),
    ('1e39', Float32),
    ('', float),
])
def test_text_parsing_errors(text: str, type_: Any) -> None:
    with pytest.raises(DecodeTypeError):
        unmarshal(marshal(text), type_)


def test_invalid_utf8() -> None:
    data = bytes.fromhex('5301ff')
    with pytest.raises(DecodeTypeError, match='invalid utf-8'):
        unmarshal(data, str)
    with pytest.raises(DecodeTypeError):
        unmarshal(data, Any)
    assert unmarshal(data, bytes) == b'\xff'


@pytest.mark.parametrize('type_, prior, expected', [
    # clearable destinations
    (list[int], [1, 2], []),
    (set[int], {1}, set()),
    (frozenset[int], frozenset({1}), frozenset()),
    (dict[str, int], {'a': 1}, {}),
    (tuple[int, ...], (1,), ()),
    (bytes, b'x', b''),
    (bytearray, bytearray(b'x'), bytearray()),
    (Optional[int], 3, None),
    (Any, 'x', None),
    (Value, Int(1), Nil()),
    # the others keep their prior value, or their zero value
    (int, 7, 7),
    (int, None, 0),
    (Uint8, 5, 5),
    (float, 1.5, 1.5),
    (str, 'a', 'a'),
    (str, None, ''),
    (bool, True, True),
    (bool, None, False),
    (tuple[int, int], (1, 2), (1, 2)),
    (tuple[int, int], None, (0, 0)),
])
def test_nil(type_: Any, prior: Any, expected: Any) -> None:
    assert unmarshal(b'\x5a', type_, prior=prior) == expected


def test_nil_logs() -> None:
    with capture_logs() as log_list:
        decoder = Decoder(Deserializer.build_bytes_deserializer(b'\x5a'))
        assert decoder.decode(int, 3) == 3
    logs = '\n'.join(map(str, log_list))
    assert 'nil ignored for destination' in logs


def test_nil_strict() -> None:
    settings = strict_settings()
    with pytest.raises(DecodeTypeError, match='nil'):
        unmarshal(b'\x5a', int, prior=7, settings=settings)
    with pytest.raises(DecodeTypeError):
        unmarshal(b'\x5a', tuple[int, int], settings=settings)
    assert unmarshal(b'\x5a', list[int], prior=[1], settings=settings) == []
    assert unmarshal(b'\x5a', Optional[int], prior=1, settings=settings) is None


def test_unknown_tag() -> None:
    assert unmarshal(b'\xff', int, prior=5) == 5
    assert unmarshal(b'\xff', int) == 0
    assert unmarshal(b'\xff', list[int], prior=[1]) == [1]
    assert unmarshal(b'\xff', list[int]) == []
    assert unmarshal(b'\xff', Any) is None


def test_unknown_tag_consumes_one_byte() -> None:
    # the byte after an unknown tag is read as the next record
    assert unmarshal_batch(b'\xff\x49\x01', (int, int)) == [0, 1]
    assert unmarshal(bytes.fromhex('410201ff49'), list[int]) == [0, 0]


def test_unknown_tag_logs() -> None:
    with capture_logs() as log_list:
        decoder = Decoder(Deserializer.build_bytes_deserializer(b'\x00'))
        decoder.decode(str)
    logs = '\n'.join(map(str, log_list))
    assert 'unknown tag ignored' in logs
    assert '0x00' in logs


def test_unknown_tag_strict() -> None:
    with pytest.raises(BadDataError, match='unknown tag 0xff'):
        unmarshal(b'\xff', int, settings=strict_settings())


@pytest.mark.parametrize('data', [
    '',
    '63',
    '6300',
    '970000',
    '78000000',
    '920000',
    '5305616263',
    '42',
    '6d00',
    '4102 4901',
    '4f01 5301 61',
    '4f01 530161 49',
])
def test_truncated(data: str) -> None:
    with pytest.raises(OutOfDataError):
        unmarshal(bytes.fromhex(data), Any)


def test_max_length() -> None:
    settings = BindatSettings(MAX_LENGTH=4)
    assert unmarshal(marshal('abcd'), str, settings=settings) == 'abcd'
    for value in ['abcde', b'abcde', [0] * 5, {i: 0 for i in range(5)}]:
        with pytest.raises(TooLongError):
            unmarshal(marshal(value), Any, settings=settings)


def test_max_depth() -> None:
    data = marshal([[[1]]])
    assert unmarshal(data, Any, settings=BindatSettings(MAX_DEPTH=3)) == [[[1]]]
    with pytest.raises(BadDataError):
        unmarshal(data, Any, settings=BindatSettings(MAX_DEPTH=2))
    with pytest.raises(BadDataError):
        unmarshal(data, list[list[list[int]]], settings=BindatSettings(MAX_DEPTH=2))


def test_decode_natural_values() -> None:
    value = {'a': [1, -1, 2**64 - 1, 1.5, None, True, b'x'], 'b': {}}
    assert unmarshal(marshal(value), Any) == value
    assert unmarshal(marshal(value), object) == value


def test_decode_into_value() -> None:
    data = marshal({'n': Uint(1)})
    assert unmarshal(data, Value).to_python() == {'n': 1}
    assert unmarshal(marshal(Int(1)), Value) == Int(1)
    assert unmarshal(marshal(Uint(1)), Value) == Uint(1)
    assert unmarshal(marshal(False), Value) == Bool(False)


def test_prior_is_not_modified() -> None:
    prior = [1, 2, 3]
    result = unmarshal(marshal([9]), list[int], prior=prior)
    assert result == [9]
    assert prior == [1, 2, 3]
    prior_dict = {'a': 1}
    assert unmarshal(marshal({'b': 2}), dict[str, int], prior=prior_dict) == {'b': 2}
    assert prior_dict == {'a': 1}


class Named(Protocol):
    def name(self) -> str:
        ...


@dataclass
class Labeled:
    label: Sized = ''


@pytest.mark.parametrize('value, type_, source', [
    (5, SupportsIndex, 'int8(5)'),
    ([1], Sized, 'sequence[1]'),
    ('abc', Sized, "text('abc')"),
    ({'a': 1}, Sized, 'mapping[1]'),
    (b'x', Named, 'bytes[1]'),
    (True, Named, 'bool(True)'),
    (1.5, Named, 'float32(1.5)'),
])
def test_interface_destination_is_a_type_error(value: Any, type_: Any, source: str) -> None:
    with pytest.raises(DecodeTypeError) as cm:
        unmarshal(marshal(value), type_)
    assert cm.value.source == source
    assert cm.value.shape is type_
    assert cm.value.reason == 'interface destination, decode into Value instead'


def test_interface_destination_cleared_by_nil() -> None:
    assert unmarshal(b'\x5a', Named, prior='x') is None
    assert unmarshal(b'\x5a', Sized, prior=[1]) is None


def test_interface_field_encodes_but_only_decodes_nil() -> None:
    data = marshal(Labeled('ab'))
    assert data.hex() == '4f01 53056c6162656c 53026162'.replace(' ', '')
    with pytest.raises(DecodeTypeError, match='interface destination'):
        unmarshal(data, Labeled)
    # the same record decodes into Value
    assert unmarshal(data, Value) == ValueMapping(((Text('label'), Text('ab')),))
    cleared = bytes.fromhex('4f01 53056c6162656c 5a'.replace(' ', ''))
    assert unmarshal(cleared, Labeled) == Labeled(None)  # type: ignore[arg-type]


@pytest.mark.parametrize('type_', [
    None,
    5,
    'int',
    complex,
    int | str,
    Optional[int | str],
    list[int, str],  # type: ignore[misc]
    dict[str],  # type: ignore[misc]
    tuple[int, ..., str],
    Callable[[], None],
    [int],
])
def test_invalid_destination(type_: Any) -> None:
    with pytest.raises(DecodeUsageError):
        unmarshal(marshal(1), type_)


def test_invalid_destination_reads_nothing() -> None:
    de = Deserializer.build_bytes_deserializer(marshal(1))
    decoder = Decoder(de)
    with pytest.raises(DecodeUsageError):
        decoder.decode(complex)
    assert decoder.decode(int) == 1


def test_huge_decimal_text_is_an_overflow() -> None:
    with pytest.raises(DecodeTypeError) as cm:
        unmarshal(marshal('9' * 5000), int)
    assert cm.value.reason == 'overflow'
    assert cm.value.shape is int
