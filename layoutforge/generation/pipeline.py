"""Batch orchestration of the layout generation stages.

Each stage is a plain function over ``GenerationState`` and ``STAGES`` lists
them in order. ``generate`` runs them back to back with per-stage timing; the
stepper in ``stepper.py`` walks the same table one entry at a time.
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..logging_utils import get_logger
from .config import GenerationConfig
from .connectivity import ConnectivityGraph, augment_spanning_tree, build_connectivity_graph
from .geometry import Segment, minimum_spanning_tree, triangulate
from .halls import HallCarver, RoomEdge
from .metrics import init_metrics
from .random_source import RandomContext
from .rooms import Bounds, Envelope, Room, RoomFactory
from .secondary import reintegrate
from .selection import select_main_rooms
from .separation import run_separation

log = get_logger("layoutforge.pipeline")


@dataclass
class DungeonLayout:
    seed: int
    config: GenerationConfig
    main_rooms: List[Room]
    secondary_rooms: List[Room]
    halls: List[Room]
    connections: List[RoomEdge]
    bounds: Optional[Bounds]
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def rooms(self) -> List[Room]:
        return self.main_rooms + self.secondary_rooms

    def to_dict(self, include_metrics: bool = False) -> Dict[str, Any]:
        data = {
            "seed": self.seed,
            "main_rooms": [r.to_dict() for r in self.main_rooms],
            "secondary_rooms": [r.to_dict() for r in self.secondary_rooms],
            "halls": [h.to_dict() for h in self.halls],
            "connections": [c.to_dict() for c in self.connections],
            "bounds": self.bounds.to_dict() if self.bounds is not None else None,
        }
        if include_metrics:
            data["metrics"] = self.metrics
        return data


@dataclass
class GenerationState:
    config: GenerationConfig
    seed: int
    rng: RandomContext
    triangulate_fn: Callable = triangulate
    spanning_tree_fn: Callable = minimum_spanning_tree
    metrics: Dict[str, Any] = field(default_factory=init_metrics)
    envelope: Envelope = field(default_factory=Envelope)
    rooms: List[Room] = field(default_factory=list)
    main_rooms: List[Room] = field(default_factory=list)
    pool: List[Room] = field(default_factory=list)
    graph: ConnectivityGraph = field(default_factory=lambda: ConnectivityGraph([], []))
    edges: List[Segment] = field(default_factory=list)
    halls: List[Room] = field(default_factory=list)
    connections: List[RoomEdge] = field(default_factory=list)
    secondary_rooms: List[Room] = field(default_factory=list)

    def to_layout(self) -> DungeonLayout:
        return DungeonLayout(
            seed=self.seed,
            config=self.config,
            main_rooms=list(self.main_rooms),
            secondary_rooms=list(self.secondary_rooms),
            halls=list(self.halls),
            connections=list(self.connections),
            bounds=self.envelope.bounds,
            metrics=self.metrics,
        )


def new_state(
    config: GenerationConfig,
    seed: Optional[int] = None,
    triangulate_fn: Callable = triangulate,
    spanning_tree_fn: Callable = minimum_spanning_tree,
) -> GenerationState:
    # 0 is a valid deterministic seed; None draws one
    if seed is None:
        seed = random.randint(1, 1_000_000)
    return GenerationState(
        config=config,
        seed=seed,
        rng=RandomContext(seed),
        triangulate_fn=triangulate_fn,
        spanning_tree_fn=spanning_tree_fn,
    )


def populate_rooms(state: GenerationState) -> None:
    factory = RoomFactory(state.config, state.rng)
    state.rooms = factory.populate()
    state.metrics['rooms_sampled'] = len(state.rooms)
    state.metrics['forced_main_rooms'] = factory.forced_main_rooms


def separate_rooms(state: GenerationState) -> None:
    result = run_separation(state.rooms, state.config, state.rng)
    state.rooms = result.rooms
    state.metrics['separation_iterations'] = result.iterations
    state.metrics['separation_converged'] = result.converged
    state.metrics['rooms_dropped'] = result.dropped


def choose_main_rooms(state: GenerationState) -> None:
    state.main_rooms, state.pool = select_main_rooms(state.rooms, state.config)
    state.envelope.include_all(state.main_rooms)
    state.metrics['main_rooms'] = len(state.main_rooms)


def connect_main_rooms(state: GenerationState) -> None:
    state.graph = build_connectivity_graph(state.main_rooms, state.triangulate_fn, state.spanning_tree_fn)
    state.metrics['triangulation_edges'] = len(state.graph.triangulation)
    state.metrics['tree_edges'] = len(state.graph.tree)


def add_loops(state: GenerationState) -> None:
    state.edges = augment_spanning_tree(
        state.graph.tree, state.graph.triangulation, state.config.extra_edge_percentage, state.rng
    )
    state.metrics['extra_edges'] = len(state.edges) - len(state.graph.tree)


def carve_halls(state: GenerationState) -> None:
    carver = HallCarver(state.config.hall_thickness, state.envelope)
    state.halls, state.connections = carver.carve(state.edges, state.main_rooms)
    state.metrics['halls'] = len(state.halls)
    state.metrics['straight_halls'] = carver.straight
    state.metrics['l_shaped_halls'] = carver.l_shaped
    state.metrics['degenerate_segments'] = carver.degenerate_segments
    state.metrics['unresolved_edges'] = carver.unresolved_edges


def readd_secondary_rooms(state: GenerationState) -> None:
    state.secondary_rooms = reintegrate(state.halls, state.pool, state.main_rooms, state.envelope)
    state.metrics['secondary_rooms'] = len(state.secondary_rooms)


STAGES: Tuple[Tuple[str, Callable[[GenerationState], None]], ...] = (
    ('populate', populate_rooms),
    ('separate', separate_rooms),
    ('select_main_rooms', choose_main_rooms),
    ('connectivity', connect_main_rooms),
    ('augment_tree', add_loops),
    ('carve_halls', carve_halls),
    ('secondary_rooms', readd_secondary_rooms),
)


def generate(
    config: Optional[GenerationConfig] = None,
    rng_seed: Optional[int] = None,
    triangulate_fn: Callable = triangulate,
    spanning_tree_fn: Callable = minimum_spanning_tree,
) -> DungeonLayout:
    """Run every stage and return the finished layout.

    ``metrics['phase_ms']`` maps stage name -> duration (ms) and
    ``metrics['runtime_ms']`` holds the total; neither is part of
    ``DungeonLayout.to_dict()`` so equal seeds still serialize identically.
    """
    config = config or GenerationConfig()
    state = new_state(config, rng_seed, triangulate_fn, spanning_tree_fn)
    start = time.perf_counter()
    phase_times = {}
    for label, stage in STAGES:
        ps = time.perf_counter()
        stage(state)
        phase_times[label] = int((time.perf_counter() - ps) * 1000)
        log.debug(event="stage_done", stage=label, seed=state.seed)
    state.metrics['phase_ms'] = phase_times
    state.metrics['runtime_ms'] = int((time.perf_counter() - start) * 1000)
    log.info(
        event="layout_generated",
        seed=state.seed,
        main_rooms=len(state.main_rooms),
        secondary_rooms=len(state.secondary_rooms),
        halls=len(state.halls),
        runtime_ms=state.metrics['runtime_ms'],
    )
    return state.to_layout()


__all__ = ["DungeonLayout", "GenerationState", "STAGES", "generate", "new_state"]
