"""Room connectivity graph: triangulation, spanning tree and loop reintroduction."""
from __future__ import annotations

import math
import random
from typing import Callable, List, NamedTuple, Sequence

from .geometry import Point, Segment, minimum_spanning_tree, triangulate, unique_points
from .rooms import Room

TriangulateFn = Callable[[Sequence[Point]], List[Segment]]
SpanningTreeFn = Callable[[Sequence[Point], Sequence[Segment]], List[Segment]]


class ConnectivityGraph(NamedTuple):
    triangulation: List[Segment]
    tree: List[Segment]


def build_connectivity_graph(
    main_rooms: Sequence[Room],
    triangulate_fn: TriangulateFn = triangulate,
    spanning_tree_fn: SpanningTreeFn = minimum_spanning_tree,
) -> ConnectivityGraph:
    """Triangulate main-room centers and extract their minimum spanning tree.

    Fewer than two distinct centers give an empty graph and exactly two give
    the single connecting edge for both outputs, whatever back end is used.
    """
    points = unique_points(r.center for r in main_rooms)
    if len(points) < 2:
        return ConnectivityGraph([], [])
    if len(points) == 2:
        edge = Segment.of(points[0], points[1])
        return ConnectivityGraph([edge], [edge])
    edges = triangulate_fn(points)
    return ConnectivityGraph(list(edges), list(spanning_tree_fn(points, edges)))


def augment_spanning_tree(
    tree: Sequence[Segment],
    all_edges: Sequence[Segment],
    percentage: float,
    rng: random.Random,
) -> List[Segment]:
    """Re-add up to ``floor(percentage * len(all_edges))`` non-tree edges.

    Both lists are shuffled copies and the shuffled full list is scanned in
    order, so the picked edges are not a uniform sample of the non-tree
    edges.
    """
    target = math.floor(percentage * len(all_edges))
    shuffled_tree = list(tree)
    shuffled_all = list(all_edges)
    rng.shuffle(shuffled_tree)
    rng.shuffle(shuffled_all)
    in_tree = set(shuffled_tree)
    additions: List[Segment] = []
    for edge in shuffled_all:
        if len(additions) >= target:
            break
        if edge in in_tree or edge in additions:
            continue
        additions.append(edge)
    return list(tree) + additions


__all__ = ["ConnectivityGraph", "build_connectivity_graph", "augment_spanning_tree"]
