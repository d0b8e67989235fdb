"""Error type shared by every part of the WAD reader."""

from __future__ import annotations

import enum
import os
from pathlib import Path
from typing import Any


class ErrorKind(enum.Enum):
    """The kinds of failure reported while reading WAD data."""

    IO = "i/o error"
    BAD_WAD_HEADER = "invalid header"
    BAD_WAD_NAME = "invalid wad name"
    MISSING_REQUIRED_LUMP = "missing required lump"
    BAD_METADATA_SCHEMA = "invalid data in metadata"
    BAD_METADATA_SYNTAX = "TOML syntax error in metadata"
    BAD_IMAGE = "Bad image"

    @property
    def description(self) -> str:
        """Short human-readable description of the kind."""
        return self.value


class WadError(Exception):
    """A failure while reading a WAD file or its metadata.

    ``detail`` carries the kind-specific payload: the underlying error for
    ``IO``, the offending bytes for ``BAD_WAD_NAME``, the lump name for
    ``MISSING_REQUIRED_LUMP``, the decoder message for ``BAD_METADATA_SCHEMA``,
    the list of syntax errors for ``BAD_METADATA_SYNTAX`` and a
    ``(name, error)`` pair for ``BAD_IMAGE``.
    """

    def __init__(
        self,
        kind: ErrorKind,
        detail: Any = None,
        file: str | os.PathLike[str] | None = None,
    ) -> None:
        super().__init__(kind, detail)
        self.kind = kind
        self.detail = detail
        self.file = Path(file) if file is not None else None

    def in_file(self, path: str | os.PathLike[str]) -> WadError:
        """Return a copy of this error attributed to ``path``."""
        error = WadError(self.kind, self.detail, path)
        error.__cause__ = self.__cause__
        return error.with_traceback(self.__traceback__)

    def _describe_kind(self) -> str:
        kind, detail = self.kind, self.detail
        desc = kind.description
        if kind is ErrorKind.IO:
            return str(detail) if detail is not None else desc
        if kind is ErrorKind.BAD_WAD_HEADER:
            return desc
        if kind is ErrorKind.BAD_WAD_NAME:
            return f"{desc} ({list(bytes(detail or b''))})"
        if kind is ErrorKind.MISSING_REQUIRED_LUMP:
            return f"{desc} ({detail})"
        if kind is ErrorKind.BAD_METADATA_SCHEMA:
            return f"{desc}: {detail}"
        if kind is ErrorKind.BAD_METADATA_SYNTAX:
            return f"{desc}: {detail!r}"
        name, inner = detail
        return f"{desc}: in {name}: {inner}"

    def __str__(self) -> str:
        message = self._describe_kind()
        if self.file is not None:
            return f"in '{self.file}': {message}"
        return message