import pytest

from wadkit.errors import ErrorKind, WadError
from wadkit.names import WadName
from wadkit.reader import WadReader


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", b"\0\0\0\0\0\0\0\0"),
        ("\0", b"\0\0\0\0\0\0\0\0"),
        ("\x001234567", b"\0\0\0\0\0\0\0\0"),
        ("A", b"A\0\0\0\0\0\0\0"),
        ("1234567", b"1234567\0"),
        ("12345678", b"12345678"),
        ("123\x005678", b"123\0\0\0\0\0"),
        ("SKY1", b"SKY1\0\0\0\0"),
        ("-", b"-\0\0\0\0\0\0\0"),
        ("_", b"_\0\0\0\0\0\0\0"),
    ],
)
def test_wad_name_from_str(text, expected):
    assert WadName.from_str(text) == expected


@pytest.mark.parametrize(
    "raw",
    [b"123456789", b"1234\xfb", b"\xff123", b"$$ASDF_", b"123456789\0"],
)
def test_wad_name_rejects(raw):
    with pytest.raises(WadError) as info:
        WadName.from_bytes(raw)
    assert info.value.kind is ErrorKind.BAD_WAD_NAME
    assert info.value.detail == raw


def test_lowercase_is_uppercased():
    assert WadName.from_str("sky1") == WadName.from_str("SKY1")


def test_normalisation_is_idempotent():
    name = WadName.from_str("startan3")
    assert WadName(bytes(name)) == name
    assert len(name) == WadName.SIZE


def test_hash_matches_raw_bytes():
    lookup = {WadName.from_str("PNAMES"): 3}
    assert lookup[b"PNAMES\0\0"] == 3


def test_str_and_repr_strip_padding():
    name = WadName.from_str("SKY1")
    assert str(name) == "SKY1"
    assert repr(name) == "WadName('SKY1')"
    assert f"{name}" == "SKY1"


def test_ordering_follows_bytes():
    names = sorted(WadName.from_str(n) for n in ["SKY2", "AAAA", "SKY1"])
    assert [str(n) for n in names] == ["AAAA", "SKY1", "SKY2"]


def test_read_from_reader():
    reader = WadReader(b"THINGS\0\0rest")
    name = WadName.read_from(reader)
    assert name == b"THINGS\0\0"
    assert reader.read_bytes(4) == b"rest"


def test_read_from_short_buffer():
    with pytest.raises(WadError) as info:
        WadName.read_from(WadReader(b"ABC"))
    assert info.value.kind is ErrorKind.IO