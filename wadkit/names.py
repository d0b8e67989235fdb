"""Eight-byte lump and texture names."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import ErrorKind, WadError

if TYPE_CHECKING:
    from .reader import WadReader

_ALLOWED = frozenset(b"ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-[]\\")
_LENGTH = 8


def _normalise(data: bytes) -> bytes:
    """Upper-case and NUL-pad a name, rejecting invalid characters."""
    name = bytearray()
    nulled = False
    for byte in data[:_LENGTH]:
        if byte >= 0x80:
            raise WadError(ErrorKind.BAD_WAD_NAME, data)
        if byte == 0:
            nulled = True
            break
        upper = bytes([byte]).upper()[0]
        if upper not in _ALLOWED:
            raise WadError(ErrorKind.BAD_WAD_NAME, data)
        name.append(upper)
    if not nulled and len(data) > _LENGTH:
        raise WadError(ErrorKind.BAD_WAD_NAME, data)
    return bytes(name).ljust(_LENGTH, b"\0")


class WadName(bytes):
    """A normalised, NUL-padded eight-byte WAD name.

    Compares and hashes like its raw eight bytes, so it can be looked up
    with a plain ``bytes`` key.
    """

    SIZE = _LENGTH

    def __new__(cls, value: bytes | bytearray | str = b"") -> WadName:
        if isinstance(value, str):
            value = value.encode("utf-8")
        return super().__new__(cls, _normalise(bytes(value)))

    @classmethod
    def from_bytes(cls, value: bytes | bytearray) -> WadName:
        """Build a name from raw bytes, raising WadError if invalid."""
        return cls(bytes(value))

    @classmethod
    def from_str(cls, value: str) -> WadName:
        """Build a name from text, raising WadError if invalid."""
        return cls(value.encode("utf-8"))

    @classmethod
    def read_from(cls, reader: WadReader) -> WadName:
        """Read an eight-byte name from a reader."""
        return cls(reader.read_bytes(_LENGTH))

    def __str__(self) -> str:
        return self.rstrip(b"\0").decode("ascii")

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    def __repr__(self) -> str:
        return f"WadName({str(self)!r})"