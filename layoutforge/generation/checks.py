"""Structural checks over a finished layout.

Used by ``scripts/diagnose_seeds.py`` and the test-suite to flag layouts that
break the pipeline guarantees. Each entry in the returned dict is a list of
offending items; an all-empty result means the layout is sound.
"""
from __future__ import annotations

from itertools import combinations
from typing import Dict, List

from .pipeline import DungeonLayout


def analyze(layout: DungeonLayout) -> Dict[str, List]:
    config = layout.config
    rooms = layout.rooms
    issues: Dict[str, List] = {
        "overlapping_rooms": [],
        "bad_hall_shapes": [],
        "outside_bounds": [],
        "too_many_main_rooms": [],
        "unknown_connection_rooms": [],
    }
    for a, b in combinations(rooms, 2):
        if a.overlaps(b):
            issues["overlapping_rooms"].append((a.to_dict(), b.to_dict()))
    t = config.hall_thickness
    for hall in layout.halls:
        if hall.w <= 0 or hall.h <= 0 or t not in (hall.w, hall.h):
            issues["bad_hall_shapes"].append(hall.to_dict())
    if layout.bounds is not None:
        for rect in rooms + layout.halls:
            if not layout.bounds.encloses(rect):
                issues["outside_bounds"].append(rect.to_dict())
    if len(layout.main_rooms) > config.max_main_rooms:
        issues["too_many_main_rooms"].append(len(layout.main_rooms))
    main = set(layout.main_rooms)
    for edge in layout.connections:
        if edge.room_a not in main or edge.room_b not in main:
            issues["unknown_connection_rooms"].append(edge.segment.to_dict())
    return issues


def is_sound(layout: DungeonLayout) -> bool:
    return not any(analyze(layout).values())


__all__ = ["analyze", "is_sound"]
