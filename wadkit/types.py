"""On-disk WAD records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .names import WadName
from .reader import WadReader


@dataclass(frozen=True, slots=True)
class WadInfo:
    """The WAD file header."""

    identifier: bytes
    num_lumps: int
    info_table_offset: int

    SIZE: ClassVar[int] = 12

    @classmethod
    def read_from(cls, reader: WadReader) -> WadInfo:
        return cls(
            identifier=reader.read_bytes(4),
            num_lumps=reader.read_i32(),
            info_table_offset=reader.read_i32(),
        )


@dataclass(frozen=True, slots=True)
class WadLump:
    """An entry in the lump directory."""

    file_pos: int
    size: int
    name: WadName

    SIZE: ClassVar[int] = 16

    @classmethod
    def read_from(cls, reader: WadReader) -> WadLump:
        return cls(
            file_pos=reader.read_i32(),
            size=reader.read_i32(),
            name=WadName.read_from(reader),
        )


@dataclass(frozen=True, slots=True)
class WadThing:
    x: int
    y: int
    angle: int
    thing_type: int
    flags: int

    SIZE: ClassVar[int] = 10

    @classmethod
    def read_from(cls, reader: WadReader) -> WadThing:
        return cls(
            x=reader.read_i16(),
            y=reader.read_i16(),
            angle=reader.read_i16(),
            thing_type=reader.read_u16(),
            flags=reader.read_u16(),
        )


@dataclass(frozen=True, slots=True)
class WadVertex:
    x: int
    y: int

    SIZE: ClassVar[int] = 4

    @classmethod
    def read_from(cls, reader: WadReader) -> WadVertex:
        return cls(x=reader.read_i16(), y=reader.read_i16())


@dataclass(frozen=True, slots=True)
class WadLinedef:
    start_vertex: int
    end_vertex: int
    flags: int
    special_type: int
    sector_tag: int
    right_side: int
    left_side: int

    SIZE: ClassVar[int] = 14

    @classmethod
    def read_from(cls, reader: WadReader) -> WadLinedef:
        return cls(
            start_vertex=reader.read_u16(),
            end_vertex=reader.read_u16(),
            flags=reader.read_u16(),
            special_type=reader.read_u16(),
            sector_tag=reader.read_u16(),
            right_side=reader.read_i16(),
            left_side=reader.read_i16(),
        )

    def impassable(self) -> bool:
        return bool(self.flags & 0x0001)

    def blocks_monsters(self) -> bool:
        return bool(self.flags & 0x0002)

    def is_two_sided(self) -> bool:
        return bool(self.flags & 0x0004)

    def upper_unpegged(self) -> bool:
        return bool(self.flags & 0x0008)

    def lower_unpegged(self) -> bool:
        return bool(self.flags & 0x0010)

    def secret(self) -> bool:
        return bool(self.flags & 0x0020)

    def blocks_sound(self) -> bool:
        return bool(self.flags & 0x0040)

    def always_shown_on_map(self) -> bool:
        return bool(self.flags & 0x0080)

    def never_shown_on_map(self) -> bool:
        return bool(self.flags & 0x0100)


@dataclass(frozen=True, slots=True)
class WadSidedef:
    x_offset: int
    y_offset: int
    upper_texture: WadName
    lower_texture: WadName
    middle_texture: WadName
    sector: int

    SIZE: ClassVar[int] = 30

    @classmethod
    def read_from(cls, reader: WadReader) -> WadSidedef:
        return cls(
            x_offset=reader.read_i16(),
            y_offset=reader.read_i16(),
            upper_texture=WadName.read_from(reader),
            lower_texture=WadName.read_from(reader),
            middle_texture=WadName.read_from(reader),
            sector=reader.read_u16(),
        )


@dataclass(frozen=True, slots=True)
class WadSector:
    floor_height: int
    ceiling_height: int
    floor_texture: WadName
    ceiling_texture: WadName
    light: int
    sector_type: int
    tag: int

    SIZE: ClassVar[int] = 26

    @classmethod
    def read_from(cls, reader: WadReader) -> WadSector:
        return cls(
            floor_height=reader.read_i16(),
            ceiling_height=reader.read_i16(),
            floor_texture=WadName.read_from(reader),
            ceiling_texture=WadName.read_from(reader),
            light=reader.read_i16(),
            sector_type=reader.read_u16(),
            tag=reader.read_u16(),
        )


@dataclass(frozen=True, slots=True)
class WadSubsector:
    num_segs: int
    first_seg: int

    SIZE: ClassVar[int] = 4

    @classmethod
    def read_from(cls, reader: WadReader) -> WadSubsector:
        return cls(num_segs=reader.read_u16(), first_seg=reader.read_u16())


@dataclass(frozen=True, slots=True)
class WadSeg:
    start_vertex: int
    end_vertex: int
    angle: int
    linedef: int
    direction: int
    offset: int

    SIZE: ClassVar[int] = 12

    @classmethod
    def read_from(cls, reader: WadReader) -> WadSeg:
        return cls(
            start_vertex=reader.read_u16(),
            end_vertex=reader.read_u16(),
            angle=reader.read_u16(),
            linedef=reader.read_u16(),
            direction=reader.read_u16(),
            offset=reader.read_u16(),
        )


@dataclass(frozen=True, slots=True)
class WadNode:
    line_x: int
    line_y: int
    step_x: int
    step_y: int
    right_y_max: int
    right_y_min: int
    right_x_max: int
    right_x_min: int
    left_y_max: int
    left_y_min: int
    left_x_max: int
    left_x_min: int
    right: int
    left: int

    SIZE: ClassVar[int] = 28

    @classmethod
    def read_from(cls, reader: WadReader) -> WadNode:
        return cls(
            line_x=reader.read_i16(),
            line_y=reader.read_i16(),
            step_x=reader.read_i16(),
            step_y=reader.read_i16(),
            right_y_max=reader.read_i16(),
            right_y_min=reader.read_i16(),
            right_x_max=reader.read_i16(),
            right_x_min=reader.read_i16(),
            left_y_max=reader.read_i16(),
            left_y_min=reader.read_i16(),
            left_x_max=reader.read_i16(),
            left_x_min=reader.read_i16(),
            right=reader.read_u16(),
            left=reader.read_u16(),
        )


@dataclass(frozen=True, slots=True)
class WadTextureHeader:
    name: WadName
    masked: int
    width: int
    height: int
    column_directory: int
    num_patches: int

    SIZE: ClassVar[int] = 22

    @classmethod
    def read_from(cls, reader: WadReader) -> WadTextureHeader:
        return cls(
            name=WadName.read_from(reader),
            masked=reader.read_u32(),
            width=reader.read_u16(),
            height=reader.read_u16(),
            column_directory=reader.read_u32(),
            num_patches=reader.read_u16(),
        )


@dataclass(frozen=True, slots=True)
class WadTexturePatchRef:
    origin_x: int
    origin_y: int
    patch: int
    stepdir: int
    colormap: int

    SIZE: ClassVar[int] = 10

    @classmethod
    def read_from(cls, reader: WadReader) -> WadTexturePatchRef:
        return cls(
            origin_x=reader.read_i16(),
            origin_y=reader.read_i16(),
            patch=reader.read_u16(),
            stepdir=reader.read_u16(),
            colormap=reader.read_u16(),
        )