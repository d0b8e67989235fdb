import struct

import pytest

from wadkit.errors import ErrorKind, WadError
from wadkit.reader import WadReader
from wadkit.types import (
    WadInfo,
    WadLinedef,
    WadLump,
    WadNode,
    WadSector,
    WadSeg,
    WadSidedef,
    WadSubsector,
    WadTextureHeader,
    WadTexturePatchRef,
    WadThing,
    WadVertex,
)


def test_info_round_trip():
    data = b"IWAD" + struct.pack("<ii", 2306, 4175796)
    info = WadInfo.read_from(WadReader(data))
    assert info == WadInfo(b"IWAD", 2306, 4175796)
    assert len(data) == WadInfo.SIZE


def test_lump_round_trip():
    data = struct.pack("<ii8s", 12, 1380, b"PLAYPAL\0")
    lump = WadLump.read_from(WadReader(data))
    assert (lump.file_pos, lump.size) == (12, 1380)
    assert lump.name == b"PLAYPAL\0"
    assert len(data) == WadLump.SIZE


def test_lump_with_bad_name_fails():
    data = struct.pack("<ii8s", 0, 0, b"BAD$NAME")
    with pytest.raises(WadError) as info:
        WadLump.read_from(WadReader(data))
    assert info.value.kind is ErrorKind.BAD_WAD_NAME


def test_thing_and_vertex_round_trip():
    data = struct.pack("<hhhHH", -1056, 3616, 90, 1, 7) + struct.pack("<hh", -5, 17)
    reader = WadReader(data)
    assert reader.read(WadThing) == WadThing(-1056, 3616, 90, 1, 7)
    assert reader.read(WadVertex) == WadVertex(-5, 17)
    assert WadThing.SIZE + WadVertex.SIZE == len(data)


def test_linedef_round_trip():
    data = struct.pack("<HHHHHhh", 1, 2, 0x0014, 48, 3, 0, -1)
    line = WadLinedef.read_from(WadReader(data))
    assert line == WadLinedef(1, 2, 0x0014, 48, 3, 0, -1)
    assert len(data) == WadLinedef.SIZE


_FLAG_METHODS = [
    (0x0001, "impassable"),
    (0x0002, "blocks_monsters"),
    (0x0004, "is_two_sided"),
    (0x0008, "upper_unpegged"),
    (0x0010, "lower_unpegged"),
    (0x0020, "secret"),
    (0x0040, "blocks_sound"),
    (0x0080, "always_shown_on_map"),
    (0x0100, "never_shown_on_map"),
]


@pytest.mark.parametrize("flag, method", _FLAG_METHODS)
def test_linedef_flags_are_independent(flag, method):
    line = WadLinedef(0, 0, flag, 0, 0, 0, -1)
    results = {name: getattr(line, name)() for _, name in _FLAG_METHODS}
    assert results.pop(method) is True
    assert not any(results.values())


def test_sidedef_round_trip_normalises_names():
    data = struct.pack("<hh8s8s8sH", 5, -3, b"startan3", b"-\0\0\0\0\0\0\0", b"DOOR3\0\0\0", 9)
    side = WadSidedef.read_from(WadReader(data))
    assert (side.x_offset, side.y_offset, side.sector) == (5, -3, 9)
    assert side.upper_texture == b"STARTAN3"
    assert side.lower_texture == b"-\0\0\0\0\0\0\0"
    assert side.middle_texture == b"DOOR3\0\0\0"
    assert len(data) == WadSidedef.SIZE


def test_sector_round_trip():
    data = struct.pack("<hh8s8shHH", 0, 72, b"FLOOR4_8", b"F_SKY1\0\0", 160, 8, 2)
    sector = WadSector.read_from(WadReader(data))
    assert (sector.floor_height, sector.ceiling_height) == (0, 72)
    assert sector.floor_texture == b"FLOOR4_8"
    assert sector.ceiling_texture == b"F_SKY1\0\0"
    assert (sector.light, sector.sector_type, sector.tag) == (160, 8, 2)
    assert len(data) == WadSector.SIZE


def test_subsector_and_seg_round_trip():
    data = struct.pack("<HH", 4, 10) + struct.pack("<HHHHHH", 1, 2, 16384, 7, 1, 32)
    reader = WadReader(data)
    assert reader.read(WadSubsector) == WadSubsector(4, 10)
    assert reader.read(WadSeg) == WadSeg(1, 2, 16384, 7, 1, 32)


def test_node_round_trip():
    values = (10, -20, 30, -40, 1, 2, 3, 4, 5, 6, 7, 8)
    data = struct.pack("<12h2H", *values, 0x8001, 5)
    node = WadNode.read_from(WadReader(data))
    assert node == WadNode(*values, 0x8001, 5)
    assert len(data) == WadNode.SIZE


def test_texture_header_and_patch_ref_round_trip():
    header_data = struct.pack("<8sIHHIH", b"BIGDOOR1", 0, 128, 96, 0, 2)
    patch_data = struct.pack("<hhHHH", -8, 4, 3, 1, 0)
    reader = WadReader(header_data + patch_data)
    header = reader.read(WadTextureHeader)
    assert header.name == b"BIGDOOR1"
    assert (header.width, header.height, header.num_patches) == (128, 96, 2)
    assert reader.read(WadTexturePatchRef) == WadTexturePatchRef(-8, 4, 3, 1, 0)
    assert len(header_data) == WadTextureHeader.SIZE
    assert len(patch_data) == WadTexturePatchRef.SIZE


def test_read_many_records():
    data = struct.pack("<4h", 1, 2, 3, 4)
    vertices = WadReader(data).read_many(WadVertex, 2)
    assert vertices == [WadVertex(1, 2), WadVertex(3, 4)]


def test_truncated_record_fails():
    with pytest.raises(WadError) as info:
        WadSeg.read_from(WadReader(b"\x00" * (WadSeg.SIZE - 1)))
    assert info.value.kind is ErrorKind.IO