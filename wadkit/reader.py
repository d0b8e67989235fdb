"""Little-endian reading of WAD primitives and records."""

from __future__ import annotations

import io
import struct
from typing import Any, BinaryIO

from .errors import ErrorKind, WadError

_FORMATS = {
    "u8": struct.Struct("<B"),
    "u16": struct.Struct("<H"),
    "u32": struct.Struct("<I"),
    "u64": struct.Struct("<Q"),
    "i8": struct.Struct("<b"),
    "i16": struct.Struct("<h"),
    "i32": struct.Struct("<i"),
    "i64": struct.Struct("<q"),
}

PRIMITIVE_SIZES = {name: fmt.size for name, fmt in _FORMATS.items()}


class WadReader:
    """Reads WAD values from a byte buffer or a binary stream.

    A ``kind`` is one of the primitive names (``"u8"``, ``"i16"``, ...), an
    integer ``n`` for a fixed block of ``n`` raw bytes, or any object with a
    ``read_from(reader)`` method.
    """

    def __init__(self, source: bytes | bytearray | memoryview | BinaryIO) -> None:
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))
        self._stream = source

    def read_bytes(self, n: int) -> bytes:
        """Read exactly ``n`` bytes, failing if the source runs out."""
        if n < 0:
            raise ValueError(f"cannot read a negative number of bytes: {n}")
        chunks = []
        remaining = n
        while remaining:
            try:
                chunk = self._stream.read(remaining)
            except OSError as exc:
                raise WadError(ErrorKind.IO, exc) from exc
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        if remaining:
            raise WadError(ErrorKind.IO, "failed to fill whole buffer")
        return b"".join(chunks)

    def _unpack(self, name: str) -> int:
        fmt = _FORMATS[name]
        return fmt.unpack(self.read_bytes(fmt.size))[0]

    def read_u8(self) -> int:
        return self._unpack("u8")

    def read_u16(self) -> int:
        return self._unpack("u16")

    def read_u32(self) -> int:
        return self._unpack("u32")

    def read_u64(self) -> int:
        return self._unpack("u64")

    def read_i8(self) -> int:
        return self._unpack("i8")

    def read_i16(self) -> int:
        return self._unpack("i16")

    def read_i32(self) -> int:
        return self._unpack("i32")

    def read_i64(self) -> int:
        return self._unpack("i64")

    def read(self, kind: Any) -> Any:
        """Read one value of the given kind."""
        if isinstance(kind, str):
            if kind not in _FORMATS:
                raise ValueError(f"unknown primitive kind: {kind!r}")
            return self._unpack(kind)
        if isinstance(kind, int) and not isinstance(kind, bool):
            return self.read_bytes(kind)
        return kind.read_from(self)

    def read_many(self, kind: Any, n: int) -> bytes | list[Any]:
        """Read ``n`` values of the given kind; ``"u8"`` yields ``bytes``."""
        if kind == "u8":
            return self.read_bytes(n)
        return [self.read(kind) for _ in range(n)]