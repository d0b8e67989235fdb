"""Textures, flats, palettes and the atlases built from them."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .errors import ErrorKind, WadError
from .image import Image, ImageError
from .names import WadName
from .reader import WadReader
from .types import WadTextureHeader, WadTexturePatchRef

if TYPE_CHECKING:
    from .archive import Archive

_log = logging.getLogger(__name__)

ImageT = TypeVar("ImageT")

_PALETTE_SIZE = 256 * 3
_COLORMAP_SIZE = 256
_FLAT_SIDE = 64
_FLAT_SIZE = _FLAT_SIDE * _FLAT_SIDE
_MIN_ATLAS_SIDE = 128
_MAX_ATLAS_SIDE = 4096
_TEXTURE_LUMP_NAMES = (b"TEXTURE1", b"TEXTURE2")


@dataclass(frozen=True)
class Bounds:
    """Where an image (or the first frame of its animation) sits in an atlas."""

    pos: tuple[float, float]
    size: tuple[float, float]
    num_frames: int
    row_height: int


@dataclass
class MappedPalette:
    """RGB rows, one per colormap, each mapping 256 palette indices."""

    pixels: bytes
    colormaps: int


@dataclass
class TransparentImage:
    """An atlas of 16-bit pixels that may be transparent."""

    pixels: list[int]
    size: tuple[int, int]


@dataclass
class OpaqueImage:
    """An atlas of 8-bit palette indices."""

    pixels: bytes
    size: tuple[int, int]


@dataclass(frozen=True)
class _AtlasEntry(Generic[ImageT]):
    name: WadName
    image: ImageT
    frame_offset: int
    num_frames: int


@dataclass(frozen=True)
class _AtlasPosition:
    offset: tuple[int, int]
    row_height: int


def _as_name(name: Any) -> WadName | None:
    if isinstance(name, WadName):
        return name
    try:
        return WadName(name)
    except WadError:
        return None


def _next_pow2(x: int) -> int:
    pow2 = 1
    while pow2 < x:
        pow2 *= 2
    return pow2


@dataclass
class TextureDirectory:
    """All wall textures, sprites, flats, palettes and colormaps of a WAD."""

    textures: dict[WadName, Image] = field(default_factory=dict)
    patches: list[tuple[WadName, Image | None]] = field(default_factory=list)
    palettes: list[bytes] = field(default_factory=list)
    colormaps: list[bytes] = field(default_factory=list)
    flats: dict[WadName, bytes] = field(default_factory=dict)
    animated_walls: list[list[WadName]] = field(default_factory=list)
    animated_flats: list[list[WadName]] = field(default_factory=list)

    @classmethod
    def from_archive(cls, wad: Archive) -> TextureDirectory:
        """Read and assemble every texture-related lump of an archive."""
        _log.info("Reading texture directory...")
        palettes = wad.read_required_named_lump(b"PLAYPAL\0", _PALETTE_SIZE)
        colormaps = wad.read_required_named_lump(b"COLORMAP", _COLORMAP_SIZE)
        _log.info("  %4d palettes", len(palettes))
        _log.info("  %4d colormaps", len(colormaps))

        try:
            patches = _read_patches(wad)
        except WadError as exc:
            raise exc.in_file(wad.path) from exc.__cause__
        _log.info("  %4d patches", len(patches))

        started = time.perf_counter()
        _log.info("Reading & assembling textures...")
        textures: dict[WadName, Image] = {}
        for lump_name in _TEXTURE_LUMP_NAMES:
            label = lump_name.decode("ascii")
            index = wad.named_lump_index(lump_name)
            if index is None:
                _log.info("     0 textures in %s", label)
                continue
            buffer = wad.read_lump(index, "u8")
            try:
                count = _read_textures(buffer, patches, textures)
            except WadError as exc:
                raise exc.in_file(wad.path) from exc.__cause__
            _log.info("  %4d textures in %s", count, label)
        _log.info("Done in %.4fs.", time.perf_counter() - started)

        flats = _read_flats(wad)
        _log.info("  %4d flats", len(flats))

        num_sprites = _read_sprites(wad, textures)
        _log.info("  %4d sprites", num_sprites)

        animations = wad.metadata().animations
        return cls(
            textures=textures,
            patches=patches,
            palettes=list(palettes),
            colormaps=list(colormaps),
            flats=flats,
            animated_walls=[list(frames) for frames in animations.walls],
            animated_flats=[list(frames) for frames in animations.flats],
        )

    def texture(self, name: Any) -> Image | None:
        key = _as_name(name)
        return None if key is None else self.textures.get(key)

    def flat(self, name: Any) -> bytes | None:
        key = _as_name(name)
        return None if key is None else self.flats.get(key)

    def num_patches(self) -> int:
        return len(self.patches)

    def patch(self, index: int) -> Image | None:
        """The decoded patch at ``index``, or None if it was missing or bad."""
        return self.patches[index][1]

    def num_palettes(self) -> int:
        return len(self.palettes)

    def palette(self, index: int) -> bytes:
        return self.palettes[index]

    def num_colormaps(self) -> int:
        return len(self.colormaps)

    def colormap(self, index: int) -> bytes:
        return self.colormaps[index]

    def build_palette_texture(
        self, palette: int, colormap_start: int, colormap_end: int
    ) -> MappedPalette:
        """Map a palette through a range of colormaps into RGB rows.

        Rows are placed by absolute colormap index, so a range that does not
        start at zero must still fit in the ``end - start`` rows allocated.
        """
        num_colormaps = colormap_end - colormap_start
        row_size = _COLORMAP_SIZE * 3
        data = bytearray(row_size * num_colormaps)
        colours = self.palettes[palette]
        for i_colormap in range(colormap_start, colormap_end):
            start = i_colormap * row_size
            if start + row_size > len(data):
                raise IndexError(
                    f"colormap {i_colormap} does not fit in a palette texture of "
                    f"{num_colormaps} rows"
                )
            data[start : start + row_size] = b"".join(
                colours[index * 3 : index * 3 + 3] for index in self.colormaps[i_colormap]
            )
        return MappedPalette(pixels=bytes(data), colormaps=colormap_end - colormap_start + 1)

    def build_texture_atlas(
        self, names: Iterable[Any]
    ) -> tuple[TransparentImage, dict[WadName, Bounds]]:
        """Pack the named wall textures (and their animation frames) into one image."""
        entries = _ordered_atlas_entries(self.animated_walls, self.texture, names)
        if not entries:
            return TransparentImage(pixels=[], size=(0, 0)), {}

        max_width = max(entry.image.width for entry in entries)
        num_pixels = sum(entry.image.num_pixels() for entry in entries)
        width, height = _grow_atlas(
            min(_MIN_ATLAS_SIDE, _next_pow2(max_width)), _MIN_ATLAS_SIDE, num_pixels
        )

        transposed = False
        while True:
            positions = _pack_rows(entries, width, height)
            if positions is not None:
                break
            # Try swapping width and height to see if it fits that way.
            width, height = height, width
            transposed = not transposed
            if transposed and width != height:
                continue
            # If all else fails try a larger size for the atlas.
            transposed = False
            width, height = _grow_atlas(width, height, num_pixels)

        atlas = Image(width, height)
        bounds: dict[WadName, Bounds] = {}
        for i, (entry, position) in enumerate(zip(entries, positions)):
            atlas.blit(entry.image, position.offset, True)
            first = positions[i - entry.frame_offset]
            bounds[entry.name] = Bounds(
                pos=(float(first.offset[0]), float(first.offset[1])),
                size=(float(entry.image.width), float(entry.image.height)),
                num_frames=entry.num_frames,
                row_height=first.row_height,
            )

        _log.info("Wall texture atlas size: %dx%d", width, height)
        return (
            TransparentImage(pixels=atlas.pixels, size=(width, height)),
            dict(sorted(bounds.items())),
        )

    def build_flat_atlas(
        self, names: Iterable[Any]
    ) -> tuple[OpaqueImage, dict[WadName, Bounds]]:
        """Pack the named 64x64 flats (and their animation frames) into a grid."""
        entries = _ordered_atlas_entries(self.animated_flats, self.flat, names)
        num_names = len(entries)

        width = _next_pow2(math.ceil(math.sqrt(num_names)) * _FLAT_SIDE)
        flats_per_row = width // _FLAT_SIDE
        num_rows = -(-num_names // flats_per_row) if num_names else 0
        height = _next_pow2(num_rows * _FLAT_SIDE)

        _log.info(
            "Flat atlas size: %dx%d (%d, %d)", width, height, flats_per_row, num_rows
        )
        data = bytearray(b"\xff" * (width * height))
        bounds: dict[WadName, Bounds] = {}
        anim_start = (0.0, 0.0)
        for slot, entry in enumerate(entries):
            if len(entry.image) < _FLAT_SIZE:
                raise ValueError(
                    f"flat {entry.name} has {len(entry.image)} bytes, expected {_FLAT_SIZE}"
                )
            row, column = divmod(slot, flats_per_row)
            ox, oy = column * _FLAT_SIDE, row * _FLAT_SIDE
            if entry.frame_offset == 0:
                anim_start = (float(ox), float(oy))
            bounds[entry.name] = Bounds(
                pos=anim_start,
                size=(float(_FLAT_SIDE), float(_FLAT_SIDE)),
                num_frames=entry.num_frames,
                row_height=_FLAT_SIDE,
            )
            for y in range(_FLAT_SIDE):
                start = ox + (oy + y) * width
                data[start : start + _FLAT_SIDE] = entry.image[
                    y * _FLAT_SIDE : (y + 1) * _FLAT_SIDE
                ]

        return (
            OpaqueImage(pixels=bytes(data), size=(width, height)),
            dict(sorted(bounds.items())),
        )


def _grow_atlas(width: int, height: int, num_pixels: int) -> tuple[int, int]:
    while True:
        if width <= height:
            if width == _MAX_ATLAS_SIDE:
                raise ValueError("Could not fit wall atlas.")
            width *= 2
            height = _MIN_ATLAS_SIDE
        else:
            height *= 2
        if width * height >= num_pixels:
            return width, height


def _pack_rows(
    entries: Sequence[_AtlasEntry[Image]], width: int, height: int
) -> list[_AtlasPosition] | None:
    x = y = row_height = 0
    positions: list[_AtlasPosition] = []
    for entry in entries:
        w, h = entry.image.size()
        if x + w > width:
            x = 0
            y += row_height
            row_height = 0
        row_height = max(row_height, h)
        if y + h > height:
            return None
        positions.append(_AtlasPosition(offset=(x, y), row_height=row_height))
        x += w
    return positions


def _search_for_frame(
    name: WadName, animations: Sequence[Sequence[WadName]]
) -> list[WadName] | None:
    for animation in animations:
        if any(frame == name for frame in animation):
            return list(animation)
    return None


def _ordered_atlas_entries(
    animations: Sequence[Sequence[WadName]],
    lookup: Callable[[WadName], ImageT | None],
    names: Iterable[Any],
) -> list[_AtlasEntry[ImageT]]:
    by_first_frame: dict[WadName, list[WadName] | None] = {}
    for raw in names:
        name = _as_name(raw)
        if name is None:
            continue
        frames = _search_for_frame(name, animations)
        first = frames[0] if frames is not None else name
        by_first_frame[first] = frames

    entries: list[_AtlasEntry[ImageT]] = []
    for first in sorted(by_first_frame):
        frames = by_first_frame[first]
        if frames is None:
            image = lookup(first)
            if image is not None:
                entries.append(_AtlasEntry(first, image, 0, 1))
            continue
        for offset, frame in enumerate(frames):
            image = lookup(frame)
            if image is None:
                _log.warning("Unable to find texture/sprite: %s", frame)
                continue
            entries.append(_AtlasEntry(WadName(frame), image, offset, len(frames)))
    return entries


def _read_patches(wad: Archive) -> list[tuple[WadName, Image | None]]:
    reader = WadReader(wad.read_required_named_lump(b"PNAMES\0\0", "u8"))
    num_patches = reader.read_u32()
    _log.info("Reading %d patches....", num_patches)
    started = time.perf_counter()
    patches: list[tuple[WadName, Image | None]] = []
    missing = 0
    for _ in range(num_patches):
        name = WadName.read_from(reader)
        index = wad.named_lump_index(name)
        if index is None:
            missing += 1
            patches.append((name, None))
            continue
        try:
            image: Image | None = Image.from_buffer(wad.read_lump(index, "u8"))
        except ImageError as exc:
            _log.warning("Skipping patch: %s", WadError(ErrorKind.BAD_IMAGE, (name, exc)))
            image = None
        patches.append((name, image))
    _log.info(
        "Done in %.4fs; %d missing patches.", time.perf_counter() - started, missing
    )
    return patches


def _read_textures(
    lump: bytes,
    patches: Sequence[tuple[WadName, Image | None]],
    textures: dict[WadName, Image],
) -> int:
    num_textures = WadReader(lump).read_u32()
    offsets = WadReader(lump[4 : 4 + 4 * num_textures])
    for _ in range(num_textures):
        reader = WadReader(lump[offsets.read_u32() :])
        header = WadTextureHeader.read_from(reader)
        try:
            image = Image.from_header(header)
        except ImageError as exc:
            _log.warning(
                "Skipping texture: %s", WadError(ErrorKind.BAD_IMAGE, (header.name, exc))
            )
            continue

        for i_patch in range(header.num_patches):
            pref = WadTexturePatchRef.read_from(reader)
            offset = (pref.origin_x, max(pref.origin_y, 0))
            if pref.patch >= len(patches):
                _log.warning(
                    "PatchRef index %d out of bounds (%d) in %s, skipping.",
                    pref.patch,
                    len(patches),
                    header.name,
                )
                continue
            patch_name, patch = patches[pref.patch]
            if patch is None:
                _log.warning(
                    "PatchRef %s, required by %s is missing.", patch_name, header.name
                )
                continue
            image.blit(patch, offset, i_patch == 0)

        textures[header.name] = image
    return num_textures


def _read_flats(wad: Archive) -> dict[WadName, bytes]:
    start = wad.required_named_lump_index(b"F_START\0")
    end = wad.required_named_lump_index(b"F_END\0\0\0")
    return {
        wad.lump_name(index): wad.read_lump(index, "u8")
        for index in range(start, end)
        if not wad.is_virtual_lump(index)
    }


def _read_sprites(wad: Archive, textures: dict[WadName, Image]) -> int:
    start = wad.required_named_lump_index(b"S_START\0") + 1
    end = wad.required_named_lump_index(b"S_END\0\0\0")
    _log.info("Reading %d sprites....", end - start)
    started = time.perf_counter()
    for index in range(start, end):
        name = wad.lump_name(index)
        try:
            textures[name] = Image.from_buffer(wad.read_lump(index, "u8"))
        except ImageError as exc:
            _log.warning("Skipping sprite: %s", WadError(ErrorKind.BAD_IMAGE, (name, exc)))
    _log.info("Done in %.4fs.", time.perf_counter() - started)
    return end - start