"""Game metadata that a WAD does not carry itself, read from TOML."""

from __future__ import annotations

import logging
import os
import re
import tomllib
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .errors import ErrorKind, WadError
from .names import WadName

_log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class SkyMetadata:
    texture_name: WadName
    level_pattern: str
    tiled_band_size: float


@dataclass
class AnimationMetadata:
    flats: list[list[WadName]] = field(default_factory=list)
    walls: list[list[WadName]] = field(default_factory=list)


@dataclass
class ThingMetadata:
    thing_type: int
    sprite: str
    sequence: str
    hanging: bool
    radius: int


@dataclass
class ThingDirectoryMetadata:
    decorations: list[ThingMetadata] = field(default_factory=list)
    weapons: list[ThingMetadata] = field(default_factory=list)
    powerups: list[ThingMetadata] = field(default_factory=list)
    artifacts: list[ThingMetadata] = field(default_factory=list)
    ammo: list[ThingMetadata] = field(default_factory=list)
    keys: list[ThingMetadata] = field(default_factory=list)
    monsters: list[ThingMetadata] = field(default_factory=list)

    def categories(self) -> list[list[ThingMetadata]]:
        """All thing lists, in lookup order."""
        return [
            self.decorations,
            self.weapons,
            self.powerups,
            self.artifacts,
            self.ammo,
            self.keys,
            self.monsters,
        ]


@dataclass
class WadMetadata:
    sky: list[SkyMetadata] = field(default_factory=list)
    animations: AnimationMetadata = field(default_factory=AnimationMetadata)
    things: ThingDirectoryMetadata = field(default_factory=ThingDirectoryMetadata)

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> WadMetadata:
        """Load metadata from a TOML file."""
        try:
            with open(path, encoding="utf-8") as source:
                text = source.read()
        except OSError as exc:
            raise WadError(ErrorKind.IO, exc) from exc
        try:
            return cls.from_text(text)
        except WadError as exc:
            raise exc.in_file(path) from exc.__cause__

    @classmethod
    def from_text(cls, text: str) -> WadMetadata:
        """Parse metadata from TOML text."""
        try:
            document = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise WadError(ErrorKind.BAD_METADATA_SYNTAX, [str(exc)]) from exc
        return _decode_metadata(document)

    def sky_for(self, name: bytes | str) -> SkyMetadata | None:
        """The sky whose level pattern matches ``name``, else the first sky."""
        if not isinstance(name, WadName):
            name = WadName(name)
        level = bytes(name).decode("ascii")
        for sky in self.sky:
            try:
                pattern = re.compile(sky.level_pattern)
            except re.error:
                _log.warning(
                    "Invalid level pattern %s for sky %s.",
                    sky.level_pattern,
                    sky.texture_name,
                )
                continue
            if pattern.search(level):
                return sky
        if self.sky:
            _log.warning("No sky found for level %s, using %s.", name, self.sky[0].texture_name)
            return self.sky[0]
        _log.error("No sky metadata provided.")
        return None

    def find_thing(self, thing_type: int) -> ThingMetadata | None:
        """The metadata for a thing type, searching each category in turn."""
        for category in self.things.categories():
            for thing in category:
                if thing.thing_type == thing_type:
                    return thing
        return None


def _schema_error(message: str) -> WadError:
    return WadError(ErrorKind.BAD_METADATA_SCHEMA, message)


def _required(table: dict[str, Any], key: str, where: str) -> Any:
    if key not in table:
        raise _schema_error(f"missing field `{key}` in {where}")
    return table[key]


def _as_table(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise _schema_error(f"expected a table for {where}")
    return value


def _as_list(table: dict[str, Any], key: str, where: str, item: Callable[[Any, str], T]) -> list[T]:
    # Missing arrays decode as empty.
    value = table.get(key, [])
    path = f"{where}.{key}"
    if not isinstance(value, list):
        raise _schema_error(f"expected an array for {path}")
    return [item(entry, f"{path}[{i}]") for i, entry in enumerate(value)]


def _as_str(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise _schema_error(f"expected a string for {where}")
    return value


def _as_int(value: Any, where: str, bits: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _schema_error(f"expected an integer for {where}")
    if not 0 <= value < (1 << bits):
        raise _schema_error(f"integer out of range for {where}")
    return value


def _as_float(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _schema_error(f"expected a float for {where}")
    return float(value)


def _as_bool(value: Any, where: str) -> bool:
    if not isinstance(value, bool):
        raise _schema_error(f"expected a boolean for {where}")
    return value


def _as_name(value: Any, where: str) -> WadName:
    text = _as_str(value, where)
    try:
        return WadName.from_str(text)
    except WadError as exc:
        raise _schema_error(f"Could not decode WadName. ({where})") from exc


def _name_list(value: Any, where: str) -> list[WadName]:
    if not isinstance(value, list):
        raise _schema_error(f"expected an array for {where}")
    return [_as_name(entry, f"{where}[{i}]") for i, entry in enumerate(value)]


def _decode_sky(value: Any, where: str) -> SkyMetadata:
    table = _as_table(value, where)
    return SkyMetadata(
        texture_name=_as_name(_required(table, "texture_name", where), f"{where}.texture_name"),
        level_pattern=_as_str(_required(table, "level_pattern", where), f"{where}.level_pattern"),
        tiled_band_size=_as_float(
            _required(table, "tiled_band_size", where), f"{where}.tiled_band_size"
        ),
    )


def _decode_thing(value: Any, where: str) -> ThingMetadata:
    table = _as_table(value, where)
    return ThingMetadata(
        thing_type=_as_int(_required(table, "thing_type", where), f"{where}.thing_type", 16),
        sprite=_as_str(_required(table, "sprite", where), f"{where}.sprite"),
        sequence=_as_str(_required(table, "sequence", where), f"{where}.sequence"),
        hanging=_as_bool(_required(table, "hanging", where), f"{where}.hanging"),
        radius=_as_int(_required(table, "radius", where), f"{where}.radius", 32),
    )


def _decode_metadata(document: dict[str, Any]) -> WadMetadata:
    animations = _as_table(_required(document, "animations", "metadata"), "animations")
    things = _as_table(_required(document, "things", "metadata"), "things")
    return WadMetadata(
        sky=_as_list(document, "sky", "metadata", _decode_sky),
        animations=AnimationMetadata(
            flats=_as_list(animations, "flats", "animations", _name_list),
            walls=_as_list(animations, "walls", "animations", _name_list),
        ),
        things=ThingDirectoryMetadata(
            **{
                key: _as_list(things, key, "things", _decode_thing)
                for key in (
                    "decorations",
                    "weapons",
                    "powerups",
                    "artifacts",
                    "ammo",
                    "keys",
                    "monsters",
                )
            }
        ),
    )