"""Geometric graph back end: Delaunay triangulation and Euclidean MST.

This module is the only place that touches scipy and networkx. The rest of
the pipeline depends on the two functions ``triangulate`` and
``minimum_spanning_tree``; ``connectivity.build_connectivity_graph`` accepts
replacements for both.
"""
from __future__ import annotations

import math
from typing import Iterable, List, NamedTuple, Sequence, Tuple

import networkx as nx
import numpy as np
from scipy.spatial import Delaunay, QhullError

Point = Tuple[float, float]


class Segment(NamedTuple):
    p0: Point
    p1: Point

    @classmethod
    def of(cls, a: Point, b: Point) -> "Segment":
        a = (float(a[0]), float(a[1]))
        b = (float(b[0]), float(b[1]))
        return cls(a, b) if a <= b else cls(b, a)

    @property
    def length(self) -> float:
        return math.dist(self.p0, self.p1)

    def to_dict(self):
        return {"p0": list(self.p0), "p1": list(self.p1)}


def unique_points(points: Iterable[Point]) -> List[Point]:
    seen = set()
    out: List[Point] = []
    for p in points:
        key = (float(p[0]), float(p[1]))
        if key in seen:
            continue
        seen.add(key)
        out.append(key)
    return out


def _is_colinear(points: Sequence[Point]) -> bool:
    arr = np.asarray(points, dtype=float)
    return np.linalg.matrix_rank(arr - arr[0]) < 2


def _chain(points: Sequence[Point]) -> List[Segment]:
    """Consecutive segments along the line through colinear points."""
    arr = np.asarray(points, dtype=float)
    offsets = arr - arr[0]
    far = offsets[int(np.argmax(np.abs(offsets).sum(axis=1)))]
    order = np.argsort(offsets @ far, kind="stable")
    ordered = [points[int(i)] for i in order]
    return [Segment.of(a, b) for a, b in zip(ordered, ordered[1:])]


def triangulate(points: Sequence[Point]) -> List[Segment]:
    pts = unique_points(points)
    if len(pts) < 2:
        return []
    if len(pts) == 2:
        return [Segment.of(pts[0], pts[1])]
    if _is_colinear(pts):
        return _chain(pts)
    try:
        tri = Delaunay(np.asarray(pts, dtype=float))
    except QhullError:
        return _chain(pts)
    seen = set()
    edges: List[Segment] = []
    for simplex in tri.simplices:
        a, b, c = (int(i) for i in simplex)
        for i, j in ((a, b), (b, c), (a, c)):
            key = (min(i, j), max(i, j))
            if key in seen:
                continue
            seen.add(key)
            edges.append(Segment.of(pts[key[0]], pts[key[1]]))
    return edges


def minimum_spanning_tree(points: Sequence[Point], edges: Sequence[Segment]) -> List[Segment]:
    """Kruskal MST over ``edges`` weighted by Euclidean length.

    Returned in the order the edges were given so the result is stable for a
    stable input.
    """
    graph = nx.Graph()
    graph.add_nodes_from(unique_points(points))
    for seg in edges:
        graph.add_edge(seg.p0, seg.p1, weight=seg.length)
    tree = nx.minimum_spanning_tree(graph, weight="weight", algorithm="kruskal")
    keep = {Segment.of(u, v) for u, v in tree.edges()}
    out: List[Segment] = []
    for seg in edges:
        if seg in keep:
            out.append(seg)
            keep.discard(seg)
    return out


__all__ = ["Point", "Segment", "triangulate", "minimum_spanning_tree", "unique_points"]
