from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from bindat import DecodeTypeError, DecodeUsageError, Value, marshal, unmarshal
from bindat.types import Uint8
from bindat.value import Nil, Text
from bindat_tests import unittest


def _noop() -> None:
    pass


@dataclass
class Inner:
    flag: bool = False
    count: Uint8 = Uint8(0)


@dataclass
class Outer:
    name: str = ''
    inner: Inner = field(default_factory=Inner)
    tags: list[str] = field(default_factory=list)
    maybe: Optional[int] = None
    pair: tuple[int, int] = (0, 0)
    _secret: int = 0
    computed: int = field(default=0, init=False)
    hook: Callable[[], None] = _noop


@dataclass
class Node:
    value: int = 0
    children: list['Node'] = field(default_factory=list)


@dataclass(frozen=True)
class Frozen:
    a: int = 0
    b: str = ''


@dataclass(slots=True)
class Slotted:
    a: int = 0


@dataclass
class Validated:
    a: int = 0

    def __post_init__(self) -> None:
        if self.a < 0:
            raise ValueError('negative')


@dataclass
class Loose:
    extra: Any = None
    payload: Value = field(default_factory=Nil)


@dataclass
class Required:
    a: int
    b: list[int]


class RecordsTestCase(unittest.TestCase):
    def test_zero_record_is_empty_mapping(self) -> None:
        self.assertEncodesTo(Outer(), '4f00')
        self.assertEncodesTo(Loose(), '4f00')
        self.assertEqual(unmarshal(b'\x4f\x00', Outer), Outer())

    def test_round_trip(self) -> None:
        value = Outer(
            name='x',
            inner=Inner(True, Uint8(200)),
            tags=['a', ''],
            maybe=0,
            pair=(1, 0),
            _secret=5,
        )
        value.computed = 3
        self.assertRoundTrip(value, Outer)

    def test_field_annotation_is_kept(self) -> None:
        # a Uint8 field is written as an unsigned integer
        self.assertEncodesTo(Inner(count=Uint8(200)), '4f01 5305636f756e74 55c8')
        self.assertEncodesTo([Inner(count=Uint8(1))], '4101 4f01 5305636f756e74 5501')

    def test_present_zero_optional_is_written(self) -> None:
        self.assertEncodesTo(Outer(maybe=0), '4f01 53056d61796265 4900')

    def test_fixed_tuple_is_empty_only_if_every_element_is(self) -> None:
        self.assertEncodesTo(Outer(pair=(0, 0)), '4f00')
        self.assertEncodesTo(Outer(pair=(0, 1)), '4f01 530470616972 4102 4900 4901')

    def test_nested_empty_record_is_omitted(self) -> None:
        self.assertEncodesTo(Outer(inner=Inner()), '4f00')
        self.assertEncodesTo(Outer(inner=Inner(flag=True)), '4f01 5305696e6e6572 4f01 5304666c6167 54')

    def test_unrepresentable_field_is_never_written(self) -> None:
        self.assertEncodesTo(Outer(hook=print), '4f00')

    def test_any_and_value_fields(self) -> None:
        self.assertEncodesTo(Loose(extra=0), '4f01 53056578747261 4900')
        self.assertEncodesTo(Loose(payload=Text('')), '4f01 53077061796c6f6164 5300')
        self.assertRoundTrip(Loose(extra=[1, 'a'], payload=Text('b')), Loose)

    def test_unknown_field(self) -> None:
        with self.assertRaises(DecodeTypeError) as cm:
            unmarshal(marshal({'name': 'x', 'nope': 1}), Outer)
        self.assertIn("no field named 'nope'", str(cm.exception))

    def test_key_must_be_text(self) -> None:
        with self.assertRaises(DecodeTypeError):
            unmarshal(marshal({1: 2}), Outer)

    def test_field_type_mismatch(self) -> None:
        with self.assertRaises(DecodeTypeError):
            unmarshal(marshal({'name': 1}), Outer)
        with self.assertRaises(DecodeTypeError):
            unmarshal(marshal({'inner': {'count': 256}}), Outer)

    def test_not_a_mapping(self) -> None:
        with self.assertRaises(DecodeTypeError):
            unmarshal(marshal([1]), Outer)

    def test_absent_fields_keep_prior(self) -> None:
        prior = Outer(name='keep', tags=['t'], inner=Inner(flag=True))
        result = unmarshal(marshal({'maybe': 3, 'inner': {'count': 7}}), Outer, prior=prior)
        self.assertEqual(result.name, 'keep')
        self.assertEqual(result.tags, ['t'])
        self.assertEqual(result.maybe, 3)
        # nested records are updated field by field too
        self.assertEqual(result.inner, Inner(flag=True, count=Uint8(7)))
        # the prior is left untouched
        self.assertEqual(prior, Outer(name='keep', tags=['t'], inner=Inner(flag=True)))

    def test_absent_fields_get_defaults(self) -> None:
        result = unmarshal(marshal({'name': 'n'}), Outer)
        self.assertEqual(result, Outer(name='n'))
        self.assertIsNot(result.tags, unmarshal(marshal({}), Outer).tags)

    def test_required_fields_get_zero(self) -> None:
        self.assertEqual(unmarshal(marshal({}), Required), Required(0, []))
        self.assertRoundTrip(Required(1, [2]), Required)

    def test_nil_keeps_prior_record(self) -> None:
        prior = Outer(name='keep')
        self.assertIs(unmarshal(b'\x5a', Outer, prior=prior), prior)
        self.assertEqual(unmarshal(b'\x5a', Outer), Outer())
        self.assertEqual(unmarshal(marshal({'maybe': None}), Outer, prior=Outer(maybe=1)), Outer())

    def test_private_and_init_false_fields(self) -> None:
        result = unmarshal(marshal({'_secret': 9, 'computed': 4}), Outer)
        self.assertEqual(result._secret, 9)
        self.assertEqual(result.computed, 4)

    def test_frozen_and_slots(self) -> None:
        self.assertRoundTrip(Frozen(1, 'b'), Frozen)
        prior = Frozen(1, 'b')
        self.assertEqual(unmarshal(marshal({'b': 'c'}), Frozen, prior=prior), Frozen(1, 'c'))
        self.assertRoundTrip(Slotted(2), Slotted)

    def test_post_init_not_called(self) -> None:
        result = unmarshal(marshal({'a': -1}), Validated)
        self.assertEqual(result.a, -1)

    def test_recursive_record(self) -> None:
        tree = Node(1, [Node(2), Node(3, [Node(4)])])
        self.assertRoundTrip(tree, Node)

    def test_list_of_records_uses_prior_elements(self) -> None:
        prior = [Inner(flag=True, count=Uint8(1)), Inner(flag=True)]
        result = unmarshal(marshal([{'count': 7}]), list[Inner], prior=prior)
        self.assertEqual(result, [Inner(flag=True, count=Uint8(7))])

    def test_wrong_prior(self) -> None:
        with self.assertRaises(DecodeUsageError):
            unmarshal(marshal({'name': 'x'}), Outer, prior=Inner())

    def test_record_into_any(self) -> None:
        data = marshal(Outer(name='x', maybe=1))
        self.assertEqual(unmarshal(data, Any), {'name': 'x', 'maybe': 1})

    def test_record_as_dict(self) -> None:
        data = marshal(Inner(flag=True))
        self.assertEqual(unmarshal(data, dict[str, bool]), {'flag': True})

    def test_unrepresentable_field_from_nil(self) -> None:
        result = unmarshal(marshal({'hook': None}), Outer)
        self.assertIs(result.hook, _noop)
        with self.assertRaises(DecodeTypeError):
            unmarshal(marshal({'hook': 1}), Outer)
