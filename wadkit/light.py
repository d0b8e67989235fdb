"""Sector lighting and its animated effects."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .level import Level
    from .types import WadSector


class LightEffectKind(enum.Enum):
    GLOW = "glow"
    RANDOM = "random"
    ALTERNATE = "alternate"


class Contrast(enum.Enum):
    DARKEN = "darken"
    BRIGHTEN = "brighten"


@dataclass(frozen=True)
class LightEffect:
    alt_level: float
    speed: float
    duration: float
    sync: float
    kind: LightEffectKind


@dataclass(frozen=True)
class LightInfo:
    level: float
    effect: LightEffect | None = None


_FLASH = 1
_FAST_STROBE_1 = 2
_SLOW_STROBE = 3
_FAST_STROBE_2 = 4
_GLOW = 8
_SLOW_STROBE_SYNC = 12
_FAST_STROBE_SYNC = 13
_FLICKER = 17

_FLASH_SPEED = 20.0
_FLASH_DURATION = 0.06
_FLICKER_SPEED = 8.0
_FLICKER_DURATION = 0.5
_SLOW_STROBE_SPEED = 1.0
_SLOW_STROBE_DURATION = 0.85
_FAST_STROBE_SPEED = 2.0
_FAST_STROBE_DURATION = 0.7
_GLOW_SPEED = 0.5

_EFFECTS: dict[int, tuple[LightEffectKind, float, float]] = {
    _FLASH: (LightEffectKind.RANDOM, _FLASH_SPEED, _FLASH_DURATION),
    _FLICKER: (LightEffectKind.RANDOM, _FLICKER_SPEED, _FLICKER_DURATION),
    _SLOW_STROBE: (LightEffectKind.ALTERNATE, _SLOW_STROBE_SPEED, _SLOW_STROBE_DURATION),
    _SLOW_STROBE_SYNC: (
        LightEffectKind.ALTERNATE,
        _SLOW_STROBE_SPEED,
        _SLOW_STROBE_DURATION,
    ),
    _FAST_STROBE_1: (LightEffectKind.ALTERNATE, _FAST_STROBE_SPEED, _FAST_STROBE_DURATION),
    _FAST_STROBE_2: (LightEffectKind.ALTERNATE, _FAST_STROBE_SPEED, _FAST_STROBE_DURATION),
    _FAST_STROBE_SYNC: (
        LightEffectKind.ALTERNATE,
        _FAST_STROBE_SPEED,
        _FAST_STROBE_DURATION,
    ),
    _GLOW: (LightEffectKind.GLOW, _GLOW_SPEED, 0.0),
}

_SYNCHRONISED = frozenset({_SLOW_STROBE_SYNC, _FAST_STROBE_SYNC, _GLOW})

_CONTRAST_STEP = 2.0 / 31.0


def _light_to_float(level: int) -> float:
    return (level >> 3) / 31.0


def _id_to_sync(sector_id: int) -> float:
    return ((sector_id * 1664525 + 1013904223) & 0xFFFF) / 15.0


def _clamp(level: float) -> float:
    return min(1.0, max(0.0, level))


def new_light(level: Level, sector: WadSector) -> LightInfo:
    """Work out a sector's light level and any animated effect on it."""
    base_level = _light_to_float(sector.light)
    effect = _EFFECTS.get(sector.sector_type)
    if effect is None:
        return LightInfo(base_level)
    alt_level = _light_to_float(level.sector_min_light(sector))
    if alt_level == base_level:
        return LightInfo(base_level)
    if sector.sector_type in _SYNCHRONISED:
        sync = 0.0
    else:
        sync = _id_to_sync(level.sector_id(sector))
    kind, speed, duration = effect
    return LightInfo(
        base_level,
        LightEffect(
            alt_level=alt_level,
            speed=speed,
            duration=duration,
            sync=sync,
            kind=kind,
        ),
    )


def with_contrast(light_info: LightInfo, contrast: Contrast) -> LightInfo:
    """The same light made slightly darker or brighter, clamped to [0, 1]."""
    step = -_CONTRAST_STEP if contrast is Contrast.DARKEN else _CONTRAST_STEP
    return dataclasses.replace(light_info, level=_clamp(light_info.level + step))