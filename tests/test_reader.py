import io
import struct

import pytest

from wadkit.errors import ErrorKind, WadError
from wadkit.reader import PRIMITIVE_SIZES, WadReader


class _TrickleStream(io.RawIOBase):
    """Returns at most one byte per read call."""

    def __init__(self, data):
        self._data = io.BytesIO(data)

    def readable(self):
        return True

    def read(self, size=-1):
        return self._data.read(min(size, 1) if size >= 0 else 1)


@pytest.mark.parametrize(
    "method, fmt, value",
    [
        ("read_u8", "<B", 200),
        ("read_u16", "<H", 0xBEEF),
        ("read_u32", "<I", 0xDEADBEEF),
        ("read_u64", "<Q", 0x0123456789ABCDEF),
        ("read_i8", "<b", -100),
        ("read_i16", "<h", -32768),
        ("read_i32", "<i", -123456789),
        ("read_i64", "<q", -(2**62)),
    ],
)
def test_primitive_round_trip(method, fmt, value):
    reader = WadReader(struct.pack(fmt, value))
    assert getattr(reader, method)() == value


@pytest.mark.parametrize("kind", sorted(PRIMITIVE_SIZES))
def test_read_by_kind_matches_sizes(kind):
    fmt = {"u8": "<B", "u16": "<H", "u32": "<I", "u64": "<Q",
           "i8": "<b", "i16": "<h", "i32": "<i", "i64": "<q"}[kind]
    assert struct.calcsize(fmt) == PRIMITIVE_SIZES[kind]
    reader = WadReader(struct.pack(fmt, 7) + b"tail")
    assert reader.read(kind) == 7
    assert reader.read_bytes(4) == b"tail"


def test_little_endian_order():
    reader = WadReader(b"\x01\x00")
    assert reader.read_u16() == 1


def test_short_read_raises_io_error():
    reader = WadReader(b"\x01")
    with pytest.raises(WadError) as info:
        reader.read_u32()
    assert info.value.kind is ErrorKind.IO


def test_read_bytes_short_raises():
    with pytest.raises(WadError) as info:
        WadReader(b"abc").read_bytes(4)
    assert "failed to fill whole buffer" in str(info.value)


def test_read_bytes_from_trickling_stream():
    data = bytes(range(50))
    reader = WadReader(_TrickleStream(data))
    assert reader.read_bytes(50) == data


def test_read_fixed_block():
    data = bytes(range(256)) * 3
    reader = WadReader(data)
    assert reader.read(768) == data


def test_read_many_u8_returns_bytes():
    reader = WadReader(b"hello")
    assert reader.read_many("u8", 5) == b"hello"


def test_read_many_values():
    values = [1, -2, 300, -32768]
    reader = WadReader(struct.pack("<4h", *values))
    assert reader.read_many("i16", 4) == values


def test_read_many_blocks():
    reader = WadReader(b"aabbcc")
    assert reader.read_many(2, 3) == [b"aa", b"bb", b"cc"]


def test_read_uses_read_from():
    class Pair:
        @classmethod
        def read_from(cls, reader):
            return (reader.read_u8(), reader.read_u8())

    reader = WadReader(b"\x03\x04\x05\x06")
    assert reader.read_many(Pair, 2) == [(3, 4), (5, 6)]


def test_unknown_kind_rejected():
    with pytest.raises(ValueError):
        WadReader(b"\x00").read("f32")


def test_negative_length_rejected():
    with pytest.raises(ValueError):
        WadReader(b"").read_bytes(-1)