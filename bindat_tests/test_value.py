import pytest

from bindat import Value, marshal, unmarshal
from bindat.value import VALUE_TYPES, Bool, Bytes, Float, Int, Mapping, Nil, Sequence, Text, Uint


def test_to_python() -> None:
    value = Mapping((
        (Text('a'), Sequence((Int(-1), Uint(1), Float(1.5), Nil(), Bool(True), Bytes(b'x')))),
        (Sequence((Int(1), Int(2))), Text('tuple key')),
    ))
    assert value.to_python() == {
        'a': [-1, 1, 1.5, None, True, b'x'],
        (1, 2): 'tuple key',
    }


def test_to_python_later_keys_win() -> None:
    value = Mapping(((Text('a'), Int(1)), (Text('a'), Int(2))))
    assert value.to_python() == {'a': 2}


def test_to_python_mapping_key() -> None:
    with pytest.raises(TypeError):
        Mapping(((Mapping(), Nil()),)).to_python()


@pytest.mark.parametrize('variant, number', [
    (Int, 2**63),
    (Int, -2**63 - 1),
    (Uint, -1),
    (Uint, 2**64),
])
def test_number_range(variant: type, number: int) -> None:
    with pytest.raises(ValueError):
        variant(number)


def test_value_round_trip_keeps_kinds() -> None:
    value = Mapping((
        (Uint(1), Sequence((Int(1), Uint(1), Float(1.5), Text(''), Bytes(b''), Nil(), Bool(False)))),
        (Nil(), Mapping()),
    ))
    assert unmarshal(marshal(value), Value) == value


def test_value_duplicate_keys_are_kept() -> None:
    value = Mapping(((Text('a'), Int(1)), (Text('a'), Int(2))))
    assert unmarshal(marshal(value), Value) == value


def test_variants_are_hashable() -> None:
    assert len(set(VALUE_TYPES)) == 9
    assert {Sequence((Int(1),)), Sequence((Int(1),))} == {Sequence((Int(1),))}
