import pytest

from bindat.serialization.encoding.tags import Kind, TagInfo, make_tag, parse_tag

TAGS = [
    (0x5A, Kind.NIL, 0),
    (0x54, Kind.BOOL, 0),
    (0x46, Kind.BOOL, 0),
    (0x49, Kind.INT, 1),
    (0x63, Kind.INT, 2),
    (0x7D, Kind.INT, 4),
    (0x97, Kind.INT, 8),
    (0x55, Kind.UINT, 1),
    (0x6F, Kind.UINT, 2),
    (0x89, Kind.UINT, 4),
    (0xA3, Kind.UINT, 8),
    (0x78, Kind.FLOAT, 4),
    (0x92, Kind.FLOAT, 8),
    (0x53, Kind.TEXT, 1),
    (0x6D, Kind.TEXT, 2),
    (0x87, Kind.TEXT, 4),
    (0x42, Kind.BYTES, 1),
    (0x5C, Kind.BYTES, 2),
    (0x76, Kind.BYTES, 4),
    (0x41, Kind.SEQUENCE, 1),
    (0x5B, Kind.SEQUENCE, 2),
    (0x75, Kind.SEQUENCE, 4),
    (0x4F, Kind.MAPPING, 1),
    (0x69, Kind.MAPPING, 2),
    (0x83, Kind.MAPPING, 4),
]


@pytest.mark.parametrize('tag, kind, width', TAGS)
def test_parse_known_tag(tag: int, kind: Kind, width: int) -> None:
    assert parse_tag(tag) == TagInfo(kind, width, tag)


@pytest.mark.parametrize('tag, kind, width', [t for t in TAGS if t[1] not in (Kind.NIL, Kind.BOOL)])
def test_make_tag(tag: int, kind: Kind, width: int) -> None:
    assert make_tag(kind, width) == tag


def test_every_other_byte_is_unknown() -> None:
    known = {tag for tag, _, _ in TAGS}
    for byte in range(256):
        if byte not in known:
            assert parse_tag(byte) is None, hex(byte)


@pytest.mark.parametrize('kind, width', [
    (Kind.FLOAT, 1),
    (Kind.FLOAT, 2),
    (Kind.TEXT, 8),
    (Kind.MAPPING, 8),
    (Kind.INT, 3),
    (Kind.NIL, 1),
    (Kind.BOOL, 1),
])
def test_make_tag_invalid_tier(kind: Kind, width: int) -> None:
    with pytest.raises(ValueError):
        make_tag(kind, width)
