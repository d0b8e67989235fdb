"""The geometry of a single level, read from its group of lumps."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

from .types import (
    WadLinedef,
    WadNode,
    WadSector,
    WadSeg,
    WadSidedef,
    WadSubsector,
    WadThing,
    WadVertex,
)
from .util import from_wad_coords

if TYPE_CHECKING:
    from .archive import Archive

_log = logging.getLogger(__name__)

T = TypeVar("T")

_THINGS_OFFSET = 1
_LINEDEFS_OFFSET = 2
_SIDEDEFS_OFFSET = 3
_VERTICES_OFFSET = 4
_SEGS_OFFSET = 5
_SSECTORS_OFFSET = 6
_NODES_OFFSET = 7
_SECTORS_OFFSET = 8


def _get(items: Sequence[T], index: int) -> T | None:
    if 0 <= index < len(items):
        return items[index]
    return None


@dataclass(eq=False)
class Level:
    """All records of one level, with lookups between them."""

    things: list[WadThing] = field(default_factory=list)
    linedefs: list[WadLinedef] = field(default_factory=list)
    sidedefs: list[WadSidedef] = field(default_factory=list)
    vertices: list[WadVertex] = field(default_factory=list)
    segs: list[WadSeg] = field(default_factory=list)
    subsectors: list[WadSubsector] = field(default_factory=list)
    nodes: list[WadNode] = field(default_factory=list)
    sectors: list[WadSector] = field(default_factory=list)

    @classmethod
    def from_archive(cls, wad: Archive, index: int) -> Level:
        """Read the level with the given level index from an archive."""
        name = wad.level_name(index)
        _log.info("Reading level data for '%s'...", name)
        start = wad.level_lump_index(index)
        level = cls(
            things=wad.read_lump(start + _THINGS_OFFSET, WadThing),
            linedefs=wad.read_lump(start + _LINEDEFS_OFFSET, WadLinedef),
            sidedefs=wad.read_lump(start + _SIDEDEFS_OFFSET, WadSidedef),
            vertices=wad.read_lump(start + _VERTICES_OFFSET, WadVertex),
            segs=wad.read_lump(start + _SEGS_OFFSET, WadSeg),
            subsectors=wad.read_lump(start + _SSECTORS_OFFSET, WadSubsector),
            nodes=wad.read_lump(start + _NODES_OFFSET, WadNode),
            sectors=wad.read_lump(start + _SECTORS_OFFSET, WadSector),
        )
        _log.info("Loaded level '%s':", name)
        for label in (
            "things",
            "linedefs",
            "sidedefs",
            "vertices",
            "segs",
            "subsectors",
            "nodes",
            "sectors",
        ):
            _log.info("    %4d %s", len(getattr(level, label)), label)
        return level

    def vertex(self, vertex_id: int) -> tuple[float, float] | None:
        """World-space position of a vertex, or None if it does not exist."""
        vertex = _get(self.vertices, vertex_id)
        if vertex is None:
            return None
        return from_wad_coords(vertex.x, vertex.y)

    def seg_linedef(self, seg: WadSeg) -> WadLinedef | None:
        return _get(self.linedefs, seg.linedef)

    def seg_vertices(
        self, seg: WadSeg
    ) -> tuple[tuple[float, float], tuple[float, float]] | None:
        start = self.vertex(seg.start_vertex)
        end = self.vertex(seg.end_vertex)
        if start is None or end is None:
            return None
        return (start, end)

    def seg_sidedef(self, seg: WadSeg) -> WadSidedef | None:
        """The sidedef a seg faces: right for direction 0, otherwise left."""
        line = self.seg_linedef(seg)
        if line is None:
            return None
        if seg.direction == 0:
            return self.right_sidedef(line)
        return self.left_sidedef(line)

    def seg_back_sidedef(self, seg: WadSeg) -> WadSidedef | None:
        """The sidedef behind a seg: right for direction 1, otherwise left."""
        line = self.seg_linedef(seg)
        if line is None:
            return None
        if seg.direction == 1:
            return self.right_sidedef(line)
        return self.left_sidedef(line)

    def seg_sector(self, seg: WadSeg) -> WadSector | None:
        side = self.seg_sidedef(seg)
        return None if side is None else self.sidedef_sector(side)

    def seg_back_sector(self, seg: WadSeg) -> WadSector | None:
        side = self.seg_back_sidedef(seg)
        return None if side is None else self.sidedef_sector(side)

    def left_sidedef(self, linedef: WadLinedef) -> WadSidedef | None:
        if linedef.left_side == -1:
            return None
        return _get(self.sidedefs, linedef.left_side)

    def right_sidedef(self, linedef: WadLinedef) -> WadSidedef | None:
        if linedef.right_side == -1:
            return None
        return _get(self.sidedefs, linedef.right_side)

    def sidedef_sector(self, sidedef: WadSidedef) -> WadSector | None:
        return _get(self.sectors, sidedef.sector)

    def ssector(self, index: int) -> WadSubsector | None:
        return _get(self.subsectors, index)

    def ssector_segs(self, ssector: WadSubsector) -> list[WadSeg] | None:
        """The segs bounding a subsector, or None if they run off the end."""
        start = ssector.first_seg
        end = start + ssector.num_segs
        if end <= len(self.segs):
            return self.segs[start:end]
        return None

    def sector_id(self, sector: WadSector) -> int:
        """Index of this exact sector object in the level's sector list."""
        for index, candidate in enumerate(self.sectors):
            if candidate is sector:
                return index
        raise ValueError("sector does not belong to this level")

    def sector_min_light(self, sector: WadSector) -> int:
        """The lowest light level among a sector and its neighbours."""
        min_light = sector.light
        sector_id = self.sector_id(sector)
        for line in self.linedefs:
            left = self.left_sidedef(line)
            right = self.right_sidedef(line)
            if left is None or right is None:
                continue
            if left.sector == sector_id:
                adjacent = _get(self.sectors, right.sector)
            elif right.sector == sector_id:
                adjacent = _get(self.sectors, left.sector)
            else:
                continue
            if adjacent is None:
                _log.warning(
                    "Bad WAD: Cannot access all adjacent sectors to find minimum light."
                )
                continue
            min_light = min(min_light, adjacent.light)
        return min_light