"""Corridor carving between connected main rooms.

Every hall is an axis-aligned rectangle whose short side equals the
configured thickness. A pair of rooms gets one straight hall when a band of
that thickness around the midpoint fits inside both rooms, otherwise an
L-shaped pair of legs.

The L-shape geometry is written once in terms of a primary axis (the one the
first leg follows) and a secondary axis, then instantiated for x-first or
y-first by swapping spans. The eight sign/axis combinations are therefore the
same formula with different inputs; ``l_shape_case`` names the combination
for a given room pair.
"""
from __future__ import annotations

import math
from typing import List, NamedTuple, Optional, Sequence, Tuple

from ..logging_utils import get_logger
from .geometry import Point, Segment
from .rooms import HALL, Envelope, Room

log = get_logger("layoutforge.halls")

X, Y = 0, 1
Span = Tuple[int, int]


class RoomEdge(NamedTuple):
    segment: Segment
    room_a: Room
    room_b: Room

    def to_dict(self):
        return {"segment": self.segment.to_dict(), "room_a": self.room_a.to_dict(), "room_b": self.room_b.to_dict()}


def _span(room: Room, axis: int) -> Span:
    return (room.x_min, room.x_max) if axis == X else (room.y_min, room.y_max)


def _rect(axis: int, along: Span, across: Span) -> Room:
    (a0, a1), (c0, c1) = along, across
    if axis == X:
        return Room(a0, c0, a1 - a0, c1 - c0, HALL)
    return Room(c0, a0, c1 - c0, a1 - a0, HALL)


def _band(center: float, thickness: int) -> Span:
    lo = math.floor(center) - thickness // 2
    return (lo, lo + thickness)


def room_at(point: Point, rooms: Sequence[Room]) -> Optional[Room]:
    for room in rooms:
        if room.contains(point):
            return room
    return None


def straight_hall(a: Room, b: Room, thickness: int, axis: int) -> Optional[Room]:
    """Single hall running along ``axis``, or None when the band does not fit both rooms.

    The returned rectangle may have a non-positive length when the facing
    edges touch or cross; callers filter those out.
    """
    across = 1 - axis
    band = _band((a.center[across] + b.center[across]) / 2, thickness)
    for room in (a, b):
        lo, hi = _span(room, across)
        if lo > band[0] or hi < band[1]:
            return None
    first, second = (a, b) if _span(a, axis)[0] <= _span(b, axis)[0] else (b, a)
    return _rect(axis, (_span(first, axis)[1], _span(second, axis)[0]), band)


def l_shape_case(a: Room, b: Room) -> Tuple[int, int, int]:
    """``(primary_axis, sign_x, sign_y)`` for the L-shaped hall from ``a`` to ``b``."""
    (ax, ay), (bx, by) = a.center, b.center
    dx, dy = bx - ax, by - ay
    primary = X if abs(dx) >= abs(dy) else Y
    return primary, (1 if dx >= 0 else -1), (1 if dy >= 0 else -1)


def l_shaped_hall(a: Room, b: Room, thickness: int) -> List[Room]:
    primary, sign_x, sign_y = l_shape_case(a, b)
    secondary = 1 - primary
    forward = sign_x if primary == X else sign_y
    source, target = (a, b) if forward > 0 else (b, a)
    # first leg: out of the source's far side, across the target's center column
    band = _band(source.center[secondary], thickness)
    column = _band(target.center[primary], thickness)
    first = _rect(primary, (_span(source, primary)[1], column[1]), band)
    # second leg: down the column from the first leg to the target's near side
    if target.center[secondary] >= source.center[secondary]:
        along = (band[1], _span(target, secondary)[0])
    else:
        along = (_span(target, secondary)[1], band[0])
    second = _rect(secondary, along, column)
    return [first, second]


class HallCarver:
    def __init__(self, thickness: int, envelope: Optional[Envelope] = None):
        self.thickness = thickness
        self.envelope = envelope if envelope is not None else Envelope()
        self.halls: List[Room] = []
        self.connections: List[RoomEdge] = []
        self.straight = 0
        self.l_shaped = 0
        self.degenerate_segments = 0
        self.unresolved_edges = 0

    def _emit(self, rect: Room) -> bool:
        if rect.w <= 0 or rect.h <= 0:
            self.degenerate_segments += 1
            return False
        self.halls.append(rect)
        self.envelope.include(rect)
        return True

    def connect(self, a: Room, b: Room) -> None:
        hall = straight_hall(a, b, self.thickness, X) or straight_hall(a, b, self.thickness, Y)
        if hall is not None:
            self.straight += 1
            self._emit(hall)
            return
        self.l_shaped += 1
        for leg in l_shaped_hall(a, b, self.thickness):
            self._emit(leg)

    def carve(self, edges: Sequence[Segment], main_rooms: Sequence[Room]) -> Tuple[List[Room], List[RoomEdge]]:
        """Carve halls for every edge whose endpoints resolve to two distinct main rooms.

        Rooms whose facing edges already touch get no rectangle but keep their
        ``RoomEdge``: they are adjacent, hence connected. ``connections`` can
        therefore outnumber the hall groups.
        """
        self.envelope.include_all(main_rooms)
        for seg in edges:
            a = room_at(seg.p0, main_rooms)
            b = room_at(seg.p1, main_rooms)
            if a is None or b is None or a == b:
                self.unresolved_edges += 1
                log.warn(event="edge_unresolved", p0=seg.p0, p1=seg.p1)
                continue
            self.connections.append(RoomEdge(seg, a, b))
            self.connect(a, b)
        return self.halls, self.connections


def carve(
    edges: Sequence[Segment],
    main_rooms: Sequence[Room],
    thickness: int,
    envelope: Optional[Envelope] = None,
) -> Tuple[List[Room], List[RoomEdge]]:
    return HallCarver(thickness, envelope).carve(edges, main_rooms)


__all__ = [
    "RoomEdge",
    "HallCarver",
    "carve",
    "room_at",
    "straight_hall",
    "l_shaped_hall",
    "l_shape_case",
    "X",
    "Y",
]
