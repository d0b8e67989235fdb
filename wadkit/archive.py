"""Random access to the lumps of a WAD file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

from .errors import ErrorKind, WadError
from .meta import WadMetadata
from .names import WadName
from .reader import PRIMITIVE_SIZES, WadReader
from .types import WadInfo, WadLump
from .util import wad_type_from_info

_log = logging.getLogger(__name__)

_THINGS_LUMP = b"THINGS\0\0"


@dataclass(frozen=True, slots=True)
class _LumpInfo:
    name: WadName
    offset: int
    size: int


def _element_size(kind: Any) -> int:
    if isinstance(kind, str):
        if kind not in PRIMITIVE_SIZES:
            raise ValueError(f"unknown primitive kind: {kind!r}")
        return PRIMITIVE_SIZES[kind]
    if isinstance(kind, int) and not isinstance(kind, bool):
        return kind
    return kind.SIZE


def _lookup_key(name: Any) -> WadName | None:
    if isinstance(name, WadName):
        return name
    try:
        return WadName(name)
    except WadError:
        return None


class Archive:
    """An open WAD file with its lump directory and game metadata."""

    def __init__(
        self,
        file: BinaryIO,
        path: Path,
        lumps: list[_LumpInfo],
        index_map: dict[WadName, int],
        levels: list[int],
        meta: WadMetadata,
    ) -> None:
        self._file = file
        self.path = path
        self._lumps = lumps
        self._index_map = index_map
        self._levels = levels
        self._meta = meta

    @classmethod
    def open(
        cls,
        wad_path: str | os.PathLike[str],
        meta_path: str | os.PathLike[str],
    ) -> Archive:
        """Open a WAD file, read its directory and load its metadata."""
        path = Path(wad_path)
        _log.info("Loading wad file '%s'...", path)
        try:
            file = open(path, "rb")
        except OSError as exc:
            raise WadError(ErrorKind.IO, exc, path) from exc

        try:
            reader = WadReader(file)
            try:
                header = WadInfo.read_from(reader)
            except WadError as exc:
                raise exc.in_file(path) from exc
            if wad_type_from_info(header) is None:
                raise WadError(ErrorKind.BAD_WAD_HEADER, file=path)

            lumps: list[_LumpInfo] = []
            index_map: dict[WadName, int] = {}
            levels: list[int] = []
            try:
                file.seek(header.info_table_offset)
            except (OSError, ValueError) as exc:
                raise WadError(ErrorKind.IO, exc, path) from exc
            for i_lump in range(header.num_lumps):
                try:
                    entry = WadLump.read_from(reader)
                except WadError as exc:
                    raise exc.in_file(path) from exc
                index_map[entry.name] = len(lumps)
                lumps.append(_LumpInfo(entry.name, entry.file_pos, entry.size))
                # Level lumps are recognised by the THINGS lump that follows them.
                if entry.name == _THINGS_LUMP:
                    if i_lump == 0:
                        raise WadError(ErrorKind.BAD_WAD_HEADER, file=path)
                    levels.append(i_lump - 1)

            meta = WadMetadata.from_file(meta_path)
        except BaseException:
            file.close()
            raise

        return cls(file, path, lumps, index_map, levels, meta)

    def close(self) -> None:
        """Close the underlying file."""
        self._file.close()

    def __enter__(self) -> Archive:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def num_levels(self) -> int:
        return len(self._levels)

    def level_lump_index(self, level_index: int) -> int:
        """Index of the marker lump that starts the given level."""
        return self._levels[level_index]

    def level_name(self, level_index: int) -> WadName:
        return self.lump_name(self._levels[level_index])

    def num_lumps(self) -> int:
        return len(self._lumps)

    def named_lump_index(self, name: Any) -> int | None:
        """Index of the last lump called ``name``, or None."""
        key = _lookup_key(name)
        if key is None:
            return None
        return self._index_map.get(key)

    def required_named_lump_index(self, name: Any) -> int:
        """Like named_lump_index, but raise WadError when the lump is absent."""
        index = self.named_lump_index(name)
        if index is None:
            raise WadError(ErrorKind.MISSING_REQUIRED_LUMP, repr(name), self.path)
        return index

    def lump_name(self, lump_index: int) -> WadName:
        return self._lumps[lump_index].name

    def is_virtual_lump(self, lump_index: int) -> bool:
        """True for marker lumps that carry no data."""
        return self._lumps[lump_index].size == 0

    def read_required_named_lump(self, name: Any, kind: Any) -> bytes | list[Any]:
        """Read a named lump, raising WadError when it is absent."""
        index = self.required_named_lump_index(name)
        return self.read_lump(index, kind)

    def read_named_lump(self, name: Any, kind: Any) -> bytes | list[Any] | None:
        """Read a named lump, or return None when it is absent."""
        index = self.named_lump_index(name)
        if index is None:
            return None
        return self.read_lump(index, kind)

    def read_lump(self, index: int, kind: Any) -> bytes | list[Any]:
        """Read a whole lump as a sequence of ``kind`` values."""
        info = self._lumps[index]
        element = _element_size(kind)
        if info.size <= 0:
            raise ValueError(f"lump {info.name} is empty")
        if info.size % element:
            raise ValueError(
                f"lump {info.name} of {info.size} bytes is not a whole number "
                f"of {element}-byte elements"
            )
        reader = self._seek(info.offset)
        try:
            return reader.read_many(kind, info.size // element)
        except WadError as exc:
            raise exc.in_file(self.path) from exc

    def read_lump_single(self, index: int, kind: Any) -> Any:
        """Read a lump holding exactly one ``kind`` value."""
        info = self._lumps[index]
        element = _element_size(kind)
        if info.size != element:
            raise ValueError(
                f"lump {info.name} of {info.size} bytes does not hold one "
                f"{element}-byte element"
            )
        reader = self._seek(info.offset)
        try:
            return reader.read(kind)
        except WadError as exc:
            raise exc.in_file(self.path) from exc

    def metadata(self) -> WadMetadata:
        return self._meta

    def _seek(self, offset: int) -> WadReader:
        try:
            self._file.seek(offset)
        except (OSError, ValueError) as exc:
            raise WadError(ErrorKind.IO, exc, self.path) from exc
        return WadReader(self._file)