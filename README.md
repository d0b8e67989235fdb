# wadkit

A pure-Python library for reading classic WAD game archives. It needs nothing
beyond the standard library (TOML metadata is read with `tomllib`).

## What it does

- `wadkit.archive.Archive` opens a WAD file (IWAD or PWAD) together with a
  TOML metadata file. It indexes the lumps, finds the levels (a level starts
  at the lump just before each `THINGS` lump) and reads lumps as typed
  records. It is a context manager and closes its file on exit.
- `wadkit.names.WadName` checks and normalises the 8-byte lump and texture
  names: upper-cased and NUL-padded, with only `A-Z`, `0-9`, `_`, `-`, `[`,
  `]` and `\` allowed. It compares and hashes like its raw bytes.
- `wadkit.reader.WadReader` reads little-endian primitives (`"u8"`, `"i16"`,
  `"u32"`, ...), fixed blocks of raw bytes and the records in `wadkit.types`
  from a byte buffer or a binary stream.
- `wadkit.types` holds the on-disk records: `WadInfo`, `WadLump`, `WadThing`,
  `WadVertex`, `WadLinedef` (with its flag tests), `WadSidedef`, `WadSector`,
  `WadSubsector`, `WadSeg`, `WadNode`, `WadTextureHeader` and
  `WadTexturePatchRef`.
- `wadkit.level.Level` loads a level's things, linedefs, sidedefs, vertices,
  segs, subsectors, nodes and sectors, and looks up how they relate: the
  sidedefs and sectors on each side of a seg, the segs of a subsector, and
  the lowest light level next to a sector.
- `wadkit.light.new_light` works out a sector's light level and any flashing,
  flickering, strobing or glowing effect on it; `with_contrast` makes a light
  slightly darker or brighter.
- `wadkit.image.Image` decodes column-based picture lumps, blits one image
  onto another (optionally keeping transparent pixels out) and saves an
  image through a palette as a 24-bit BMP file.
- `wadkit.tex.TextureDirectory` reads palettes, colormaps, patches, composite
  textures, flats and sprites. It builds palette textures with
  `build_palette_texture`, and packs wall textures and flats, together with
  their animation frames, into atlases with `build_texture_atlas` and
  `build_flat_atlas`.
- `wadkit.meta.WadMetadata` loads sky, animation and thing metadata from
  TOML; `sky_for` picks the sky for a level and `find_thing` looks up a thing
  type.
- `wadkit.util` has small helpers: `wad_type_from_info`, `is_untextured`,
  `is_sky_flat`, `from_wad_height`, `from_wad_coords` and `parse_child_id`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
from wadkit.archive import Archive
from wadkit.level import Level
from wadkit.light import new_light
from wadkit.tex import TextureDirectory

with Archive.open("doom1.wad", "doom1.toml") as wad:
    print(wad.num_lumps(), "lumps,", wad.num_levels(), "levels")

    level = Level.from_archive(wad, 0)
    sector = level.sectors[0]
    print(new_light(level, sector))

    textures = TextureDirectory.from_archive(wad)
    names = [side.middle_texture for side in level.sidedefs]
    atlas, bounds = textures.build_texture_atlas(names)
    print(atlas.size, len(bounds))

    meta = wad.metadata()
    sky = meta.sky_for(wad.level_name(0))
    thing = meta.find_thing(10)
```

Lumps are read by kind: a primitive name, a byte count for fixed blocks, or
a record class from `wadkit.types`.

```python
from wadkit.types import WadVertex

vertices = wad.read_lump(wad.level_lump_index(0) + 4, WadVertex)
palettes = wad.read_required_named_lump(b"PLAYPAL\0", 768)
```

## Errors

Problems with archives and metadata raise `wadkit.errors.WadError`. Its
`kind` is an `ErrorKind` member, `detail` carries the specifics, and `file`
names the file it came from where that is known. Problems decoding or saving
a picture raise `wadkit.image.ImageError`. Reading an empty lump, or a lump
whose size is not a whole number of the requested records, raises
`ValueError`.

## What it does not do

wadkit reads and interprets WAD data only. It does not walk a level's BSP
tree to produce wall, floor, ceiling or sky geometry, does not render
anything, and has no command-line tool.