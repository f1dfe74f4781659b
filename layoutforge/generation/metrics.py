from typing import Dict


def init_metrics() -> Dict[str, int | float | bool | dict]:
    return {
        'rooms_sampled': 0,
        'forced_main_rooms': 0,
        'separation_iterations': 0,
        'separation_converged': False,
        'rooms_dropped': 0,
        'main_rooms': 0,
        'triangulation_edges': 0,
        'tree_edges': 0,
        'extra_edges': 0,
        'halls': 0,
        'straight_halls': 0,
        'l_shaped_halls': 0,
        'degenerate_segments': 0,
        'unresolved_edges': 0,
        'secondary_rooms': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
