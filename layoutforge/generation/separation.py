"""Overlap resolution for freshly sampled rooms.

Rooms are held in a plain list used as an index-addressed arena: every
correction builds a new ``Room`` value and writes it back by index, so two
corrections touching the same room in one round always see its latest
position.
"""
from __future__ import annotations

import math
import random
from typing import List, NamedTuple, Optional, Tuple

from ..logging_utils import get_logger
from .config import SEPARATION_MTV, GenerationConfig
from .rooms import Room

log = get_logger("layoutforge.separation")


class SeparationResult(NamedTuple):
    rooms: List[Room]
    iterations: int
    converged: bool
    dropped: int


def _round_away(value: float) -> int:
    return math.ceil(value) if value >= 0 else math.floor(value)


def vector_push(anchor: Room, other: Room, multiplier: float, rng: Optional[random.Random] = None) -> Tuple[int, int]:
    """Displacement for ``other`` away from ``anchor`` along the dominant center axis.

    The push adds the corner offset to half the center offset. When widths
    differ a lot the sum can point back toward the anchor for one round; the
    iteration cap and ``drop_residual_overlaps`` absorb that.
    """
    ax, ay = anchor.center
    ox, oy = other.center
    dx, dy = ox - ax, oy - ay
    push_x = push_y = 0.0
    if abs(dx) >= abs(dy):
        push_x = (other.x - anchor.x) + _round_away(dx / 2)
    else:
        push_y = (other.y - anchor.y) + _round_away(dy / 2)
    step = (_round_away(push_x * multiplier), _round_away(push_y * multiplier))
    if step == (0, 0) and rng is not None:
        # coincident rooms give no direction at all
        sign = rng.choice((-1, 1))
        step = (sign, 0) if rng.random() < 0.5 else (0, sign)
    return step


def penetration(a: Room, b: Room) -> Tuple[float, float]:
    """Overlap depth of two rectangles on x and y (negative when apart)."""
    ax, ay = a.center
    bx, by = b.center
    x_overlap = (a.w + b.w) / 2 - abs(bx - ax)
    y_overlap = (a.h + b.h) / 2 - abs(by - ay)
    return x_overlap, y_overlap


def minimum_translation(a: Room, b: Room) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """Split correction along the axis of least penetration.

    Returns ``(move_a, move_b)``; each room takes half of the overlap rounded
    up, ``b`` in the direction of the center offset and ``a`` opposite.
    """
    x_overlap, y_overlap = penetration(a, b)
    ax, ay = a.center
    bx, by = b.center
    if x_overlap <= y_overlap:
        share = math.ceil(x_overlap / 2)
        sign = 1 if bx - ax >= 0 else -1
        return (-sign * share, 0), (sign * share, 0)
    share = math.ceil(y_overlap / 2)
    sign = 1 if by - ay >= 0 else -1
    return (0, -sign * share), (0, sign * share)


def drop_residual_overlaps(rooms: List[Room]) -> List[Room]:
    """Keep a room only when it overlaps no earlier kept room (first found wins)."""
    kept: List[Room] = []
    for room in rooms:
        if any(room.overlaps(k) for k in kept):
            continue
        kept.append(room)
    return kept


def run_separation(rooms: List[Room], config: GenerationConfig, rng: Optional[random.Random] = None) -> SeparationResult:
    arena = list(rooms)
    count = len(arena)
    max_iterations = config.max_separation_iterations
    growth = max(1, max_iterations // 6)
    multiplier = config.separation_step_multiplier
    use_mtv = config.separation == SEPARATION_MTV
    iterations = 0
    overlaps = True
    while overlaps and iterations < max_iterations:
        multiplier += multiplier / growth
        overlaps = False
        for i in range(count):
            for j in range(count):
                if i == j or not arena[i].overlaps(arena[j]):
                    continue
                overlaps = True
                if use_mtv:
                    move_i, move_j = minimum_translation(arena[i], arena[j])
                    arena[i] = arena[i].moved(*move_i)
                    arena[j] = arena[j].moved(*move_j)
                else:
                    arena[j] = arena[j].moved(*vector_push(arena[i], arena[j], multiplier, rng))
        iterations += 1
    kept = drop_residual_overlaps(arena)
    dropped = count - len(kept)
    if dropped:
        log.info(event="rooms_dropped", dropped=dropped, iterations=iterations, policy=config.separation)
    return SeparationResult(kept, iterations, not overlaps, dropped)


def separate(rooms: List[Room], config: GenerationConfig, rng: Optional[random.Random] = None) -> List[Room]:
    return run_separation(rooms, config, rng).rooms


__all__ = [
    "SeparationResult",
    "separate",
    "run_separation",
    "drop_residual_overlaps",
    "vector_push",
    "minimum_translation",
    "penetration",
]
