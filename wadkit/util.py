"""Small helpers for interpreting raw WAD values."""

from __future__ import annotations

import enum

from .types import WadInfo

_IWAD_HEADER = b"IWAD"
_PWAD_HEADER = b"PWAD"
_SKY_FLAT = b"F_SKY1\0\0"


class WadType(enum.Enum):
    """Whether a WAD is a complete game (IWAD) or a patch on one (PWAD)."""

    INITIAL = "IWAD"
    PATCH = "PWAD"


def wad_type_from_info(wad_info: WadInfo) -> WadType | None:
    """Classify a WAD by its header identifier, or None if it is unknown."""
    identifier = bytes(wad_info.identifier)
    if identifier == _IWAD_HEADER:
        return WadType.INITIAL
    if identifier == _PWAD_HEADER:
        return WadType.PATCH
    return None


def is_untextured(name: bytes) -> bool:
    """True for the special ``-`` texture name meaning "no texture"."""
    return len(name) >= 2 and name[0] == ord("-") and name[1] == 0


def is_sky_flat(name: bytes) -> bool:
    """True for the flat that marks a sky ceiling or floor."""
    return bytes(name) == _SKY_FLAT


def from_wad_height(x: int) -> float:
    """Convert a WAD height to world units."""
    return x / 100.0


def from_wad_coords(x: int, y: int) -> tuple[float, float]:
    """Convert a WAD map position to a world-space 2D point."""
    return (-from_wad_height(x), from_wad_height(y))


def parse_child_id(child_id: int) -> tuple[int, bool]:
    """Split a BSP child id into its index and whether it names a leaf."""
    return (child_id & 0x7FFF, bool(child_id & 0x8000))