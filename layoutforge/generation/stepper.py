"""Stage-at-a-time driver over the shared ``STAGES`` table.

Useful for visual debuggers and the ``/api/layout/stages`` endpoint: each
``step()`` runs exactly one stage and reports a small summary of what it
produced. Running all steps yields the same layout ``generate`` would.
"""
from __future__ import annotations

import time
from typing import Any, Dict, NamedTuple, Optional

from .config import GenerationConfig
from .errors import GenerationError
from .pipeline import STAGES, DungeonLayout, GenerationState, new_state


class StageResult(NamedTuple):
    index: int
    name: str
    done: bool
    summary: Dict[str, Any]

    def to_dict(self):
        return {"index": self.index, "name": self.name, "done": self.done, "summary": self.summary}


def _summarize(name: str, state: GenerationState) -> Dict[str, Any]:
    m = state.metrics
    if name == 'populate':
        return {"rooms": len(state.rooms), "forced_main_rooms": m['forced_main_rooms']}
    if name == 'separate':
        return {
            "rooms": len(state.rooms),
            "iterations": m['separation_iterations'],
            "converged": m['separation_converged'],
            "dropped": m['rooms_dropped'],
        }
    if name == 'select_main_rooms':
        return {"main_rooms": len(state.main_rooms), "pool": len(state.pool)}
    if name == 'connectivity':
        return {"triangulation_edges": m['triangulation_edges'], "tree_edges": m['tree_edges']}
    if name == 'augment_tree':
        return {"edges": len(state.edges), "extra_edges": m['extra_edges']}
    if name == 'carve_halls':
        return {
            "halls": len(state.halls),
            "connections": len(state.connections),
            "degenerate_segments": m['degenerate_segments'],
            "unresolved_edges": m['unresolved_edges'],
        }
    return {"secondary_rooms": len(state.secondary_rooms)}


class LayoutStepper:
    def __init__(self, config: Optional[GenerationConfig] = None, seed: Optional[int] = None):
        self.state = new_state(config or GenerationConfig(), seed)
        self._index = 0
        self._phase_times: Dict[str, int] = {}
        self._started = time.perf_counter()

    @property
    def seed(self) -> int:
        return self.state.seed

    @property
    def done(self) -> bool:
        return self._index >= len(STAGES)

    @property
    def stage_name(self) -> Optional[str]:
        """Name of the stage the next ``step()`` will run (None once finished)."""
        if self.done:
            return None
        return STAGES[self._index][0]

    def step(self) -> StageResult:
        if self.done:
            raise GenerationError("layout generation already complete")
        name, stage = STAGES[self._index]
        ps = time.perf_counter()
        stage(self.state)
        self._phase_times[name] = int((time.perf_counter() - ps) * 1000)
        index = self._index
        self._index += 1
        if self.done:
            self.state.metrics['phase_ms'] = dict(self._phase_times)
            self.state.metrics['runtime_ms'] = int((time.perf_counter() - self._started) * 1000)
        return StageResult(index, name, self.done, _summarize(name, self.state))

    def run_to_completion(self) -> DungeonLayout:
        while not self.done:
            self.step()
        return self.state.to_layout()


__all__ = ["LayoutStepper", "StageResult"]
