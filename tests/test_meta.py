import pytest

from wadkit.errors import ErrorKind, WadError
from wadkit.meta import (
    AnimationMetadata,
    SkyMetadata,
    ThingDirectoryMetadata,
    ThingMetadata,
    WadMetadata,
)
from wadkit.names import WadName

SOURCE_METADATA = r"""
    [[sky]]
        level_pattern = "MAP(0[1-9]|10|11)"
        texture_name = "SKY1"
        tiled_band_size = 0.15
    [[sky]]
        level_pattern = "MAP(1[2-9]|20)"
        texture_name = "SKY2"
        tiled_band_size = 0.15
    [[sky]]
        level_pattern = "MAP(2[1-9]|32)"
        texture_name = "SKY3"
        tiled_band_size = 0.15
    [animations]
        flats = [
            ["NUKAGE1", "NUKAGE2", "NUKAGE3"],
            [],
        ]
        walls = [
            [],
            ["DBRAIN1", "DBRAIN2", "DBRAIN3",  "DBRAIN4"],
        ]
    [things]
        [[things.decoration]]
            thing_type = 10
            sprite = "PLAY"
            sequence = "W"
            obstacle = false
            hanging = false

        [[things.decoration]]
            thing_type = 12
            sprite = "PLAY"
            sequence = "W"
            obstacle = false
            hanging = false
"""

THINGS_METADATA = """
[animations]
[things]
    [[things.decorations]]
        thing_type = 10
        sprite = "PLAY"
        sequence = "W"
        hanging = false
        radius = 16
    [[things.monsters]]
        thing_type = 3004
        sprite = "POSS"
        sequence = "A"
        hanging = false
        radius = 20
    [[things.keys]]
        thing_type = 10
        sprite = "BKEY"
        sequence = "A"
        hanging = false
        radius = 20
"""


def test_wad_metadata():
    meta = WadMetadata.from_text(SOURCE_METADATA)
    assert [str(sky.texture_name) for sky in meta.sky] == ["SKY1", "SKY2", "SKY3"]
    assert meta.sky[0].level_pattern == "MAP(0[1-9]|10|11)"
    assert meta.sky[0].tiled_band_size == pytest.approx(0.15)
    assert meta.animations.flats == [
        [WadName.from_str("NUKAGE1"), WadName.from_str("NUKAGE2"), WadName.from_str("NUKAGE3")],
        [],
    ]
    assert len(meta.animations.walls[1]) == 4
    assert meta.things.decorations == []


@pytest.mark.parametrize(
    "level, sky",
    [("MAP01", "SKY1"), ("MAP11", "SKY1"), ("MAP15", "SKY2"), ("MAP25", "SKY3"), ("MAP32", "SKY3")],
)
def test_sky_for(level, sky):
    meta = WadMetadata.from_text(SOURCE_METADATA)
    assert str(meta.sky_for(WadName.from_str(level)).texture_name) == sky


def test_sky_for_falls_back_to_first():
    meta = WadMetadata.from_text(SOURCE_METADATA)
    assert str(meta.sky_for("E1M1").texture_name) == "SKY1"


def test_sky_for_none_without_skies():
    meta = WadMetadata.from_text("[animations]\n[things]\n")
    assert meta.sky_for("MAP01") is None


def test_sky_for_skips_invalid_pattern():
    meta = WadMetadata(
        sky=[
            SkyMetadata(WadName.from_str("SKY1"), "MAP(", 0.1),
            SkyMetadata(WadName.from_str("SKY2"), "MAP0", 0.1),
        ],
        animations=AnimationMetadata(),
        things=ThingDirectoryMetadata(),
    )
    assert str(meta.sky_for("MAP03").texture_name) == "SKY2"


def test_find_thing_searches_categories_in_order():
    meta = WadMetadata.from_text(THINGS_METADATA)
    assert meta.find_thing(10) == ThingMetadata(10, "PLAY", "W", False, 16)
    assert meta.find_thing(3004).sprite == "POSS"
    assert meta.find_thing(9999) is None


def test_syntax_error():
    with pytest.raises(WadError) as info:
        WadMetadata.from_text("[[sky")
    assert info.value.kind is ErrorKind.BAD_METADATA_SYNTAX


@pytest.mark.parametrize(
    "text",
    [
        "[things]\n",
        "[animations]\n",
        "[animations]\nflats = [[\"BAD$NAME\"]]\n[things]\n",
        "[animations]\n[things]\n[[things.keys]]\nthing_type = \"x\"\n",
        "[animations]\n[things]\n[[things.keys]]\nthing_type = 5\nsprite = \"A\"\n",
        "[[sky]]\ntexture_name = \"SKY1\"\n[animations]\n[things]\n",
    ],
)
def test_schema_errors(text):
    with pytest.raises(WadError) as info:
        WadMetadata.from_text(text)
    assert info.value.kind is ErrorKind.BAD_METADATA_SCHEMA


def test_from_file(tmp_path):
    path = tmp_path / "meta.toml"
    path.write_text(SOURCE_METADATA, encoding="utf-8")
    meta = WadMetadata.from_file(path)
    assert len(meta.sky) == 3


def test_from_file_error_names_file(tmp_path):
    path = tmp_path / "meta.toml"
    path.write_text("[things]\n", encoding="utf-8")
    with pytest.raises(WadError) as info:
        WadMetadata.from_file(path)
    assert info.value.kind is ErrorKind.BAD_METADATA_SCHEMA
    assert info.value.file == path


def test_from_file_missing(tmp_path):
    with pytest.raises(WadError) as info:
        WadMetadata.from_file(tmp_path / "absent.toml")
    assert info.value.kind is ErrorKind.IO