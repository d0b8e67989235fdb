"""Paletted images: WAD patches, sprites and composed textures."""

from __future__ import annotations

import os
import struct
from collections.abc import Sequence

from .types import WadTextureHeader

_MAX_DIMENSION = 4096
_EMPTY_PIXEL = 0xFF00
_TRANSPARENT_PIXEL = 0xFFFF
_BMP_HEADER_SIZE = 54


class ImageError(Exception):
    """An image could not be built, decoded or saved."""


class Image:
    """A grid of 16-bit pixels: the low byte is a palette index, a set high
    bit marks a transparent pixel."""

    def __init__(self, width: int, height: int) -> None:
        _check_size(width, height)
        self.width = width
        self.height = height
        self.x_offset = 0
        self.y_offset = 0
        self.pixels: list[int] = [_EMPTY_PIXEL] * (width * height)

    @classmethod
    def from_header(cls, header: WadTextureHeader) -> Image:
        """Create a blank image sized for a texture header."""
        return cls(header.width, header.height)

    @classmethod
    def from_buffer(cls, buffer: bytes) -> Image:
        """Decode an image stored in the WAD column-run (patch) format."""
        buffer = bytes(buffer)
        size = len(buffer)

        def field(pos: int, fmt: str, what: str) -> int:
            width = struct.calcsize(fmt)
            if pos + width > size:
                raise ImageError(f"missing {what}")
            return struct.unpack_from(fmt, buffer, pos)[0]

        width = field(0, "<H", "width")
        height = field(2, "<H", "height")
        _check_size(width, height)
        x_offset = field(4, "<h", "x offset")
        y_offset = field(6, "<h", "y offset")

        pixels = [_TRANSPARENT_PIXEL] * (width * height)
        for column in range(width):
            table_pos = 8 + 4 * column
            if table_pos + 4 > size:
                raise ImageError(f"unfinished column {column}, {width}x{height}")
            (pos,) = struct.unpack_from("<I", buffer, table_pos)
            if pos >= size:
                raise ImageError(
                    f"invalid column offset in {column}, offset={pos}, size={size}"
                )
            run = 0
            while True:
                if pos >= size:
                    raise ImageError(f"unfinshed column {column}, run {run}")
                row_start = buffer[pos]
                pos += 1
                if row_start == 255:
                    break

                if pos >= size:
                    raise ImageError(f"missing run length: column {column}, run {run}")
                run_length = buffer[pos]
                pos += 1

                if row_start + run_length > height:
                    raise ImageError(
                        f"run too big: column {column}, run {run} "
                        f"({row_start} +{run_length}), size {width}x{height}"
                    )

                if pos >= size:
                    raise ImageError(
                        f"missing padding byte 1: column {column}, run {run}"
                    )
                pos += 1

                left = size - pos
                if left < run_length:
                    raise ImageError(
                        f"source underrun: column {column}, run {run} "
                        f"({row_start}, +{run_length}), bytes left {left}"
                    )
                start = row_start * width + column
                pixels[start : start + run_length * width : width] = buffer[
                    pos : pos + run_length
                ]
                pos += run_length

                if pos >= size:
                    raise ImageError(
                        f"missing padding byte 2: column {column}, run {run}"
                    )
                pos += 1
                run += 1

        image = cls.__new__(cls)
        image.width = width
        image.height = height
        image.x_offset = x_offset
        image.y_offset = y_offset
        image.pixels = pixels
        return image

    def blit(
        self,
        source: Image,
        offset: Sequence[int],
        ignore_transparency: bool,
    ) -> None:
        """Copy ``source`` onto this image at ``offset`` (x, y), clipped.

        Unless ``ignore_transparency`` is set, source pixels with the high
        bit set are left out.
        """
        ox, oy = offset
        x_start = -ox if ox < 0 else 0
        y_start = -oy if oy < 0 else 0
        x_end = source.width if self.width > source.width + ox else self.width - ox
        y_end = source.height if self.height > source.height + oy else self.height - oy
        copy_width = x_end - x_start
        copy_height = y_end - y_start
        if copy_width <= 0 or copy_height <= 0:
            return

        for row in range(y_start, y_start + copy_height):
            src = row * source.width + x_start
            dst = (row + oy) * self.width + x_start + ox
            source_row = source.pixels[src : src + copy_width]
            if ignore_transparency:
                self.pixels[dst : dst + copy_width] = source_row
            else:
                dest_row = self.pixels[dst : dst + copy_width]
                self.pixels[dst : dst + copy_width] = [
                    s if s < 0x8000 else d for s, d in zip(source_row, dest_row)
                ]

    def size(self) -> tuple[int, int]:
        """The image's (width, height)."""
        return (self.width, self.height)

    def num_pixels(self) -> int:
        return len(self.pixels)

    def save_bmp(
        self,
        palette: Sequence[Sequence[int]] | bytes,
        path: str | os.PathLike[str],
    ) -> None:
        """Write the image as a 24-bit BMP, mapping pixels through ``palette``.

        ``palette`` is 256 (r, g, b) triples or 768 flat bytes.
        """
        colours = _palette_triples(palette)
        row_size = (3 * self.width + 3) & ~3
        padding = bytes(row_size - 3 * self.width)
        data = bytearray()
        for y in reversed(range(self.height)):
            row = self.pixels[y * self.width : (y + 1) * self.width]
            for pixel in row:
                r, g, b = colours[pixel & 0xFF]
                data += bytes((b, g, r))
            data += padding

        header = struct.pack(
            "<2sIHHI", b"BM", _BMP_HEADER_SIZE + len(data), 0, 0, _BMP_HEADER_SIZE
        ) + struct.pack(
            "<IiiHHIIiiII", 40, self.width, self.height, 1, 24, 0, len(data), 2835, 2835, 0, 0
        )
        try:
            with open(path, "wb") as out:
                out.write(header)
                out.write(data)
        except OSError as exc:
            raise ImageError(f"failed to save bmp {str(path)!r}") from exc


def _check_size(width: int, height: int) -> None:
    if width >= _MAX_DIMENSION or height >= _MAX_DIMENSION:
        raise ImageError(f"image too large {width}x{height}")


def _palette_triples(
    palette: Sequence[Sequence[int]] | bytes,
) -> list[tuple[int, int, int]]:
    if isinstance(palette, (bytes, bytearray, memoryview)) or (
        len(palette) == 768 and all(isinstance(v, int) for v in palette)
    ):
        flat = bytes(palette)
        if len(flat) != 768:
            raise ImageError("invalid palette")
        return [tuple(flat[i : i + 3]) for i in range(0, 768, 3)]
    if len(palette) != 256:
        raise ImageError("invalid palette")
    return [tuple(colour[:3]) for colour in palette]