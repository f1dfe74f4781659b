"""Public layout generation interface.

``generate(config, seed)`` is the whole pipeline; the stage modules are
importable on their own for tests and tooling.
"""

from .config import (
    GenerationConfig,
    SAMPLING_NORMAL,
    SAMPLING_UNIFORM,
    SEPARATION_MTV,
    SEPARATION_VECTOR_PUSH,
)  # noqa: F401
from .errors import ConfigurationError, GenerationError  # noqa: F401
from .geometry import Segment  # noqa: F401
from .halls import RoomEdge  # noqa: F401
from .pipeline import DungeonLayout, generate  # noqa: F401
from .rooms import CANDIDATE, HALL, MAIN, SECONDARY, Bounds, Room  # noqa: F401
from .stepper import LayoutStepper, StageResult  # noqa: F401

__all__ = [
    "GenerationConfig",
    "SAMPLING_NORMAL",
    "SAMPLING_UNIFORM",
    "SEPARATION_MTV",
    "SEPARATION_VECTOR_PUSH",
    "ConfigurationError",
    "GenerationError",
    "Segment",
    "RoomEdge",
    "DungeonLayout",
    "generate",
    "CANDIDATE",
    "HALL",
    "MAIN",
    "SECONDARY",
    "Bounds",
    "Room",
    "LayoutStepper",
    "StageResult",
]
