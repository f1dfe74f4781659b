import dataclasses
import os
import typing
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigurationError

SAMPLING_UNIFORM = "uniform"
SAMPLING_NORMAL = "normal"
SAMPLING_MODES = (SAMPLING_UNIFORM, SAMPLING_NORMAL)

SEPARATION_VECTOR_PUSH = "vector_push"
SEPARATION_MTV = "mtv"
SEPARATION_POLICIES = (SEPARATION_VECTOR_PUSH, SEPARATION_MTV)

ENV_PREFIX = "LAYOUTFORGE_"


@dataclass(frozen=True)
class GenerationConfig:
    number_of_rooms: int = 150
    min_main_rooms: int = 8
    max_main_rooms: int = 20
    min_room_width: int = 4
    max_room_width: int = 24
    min_room_height: int = 4
    max_room_height: int = 24
    min_main_room_width: int = 14
    min_main_room_height: int = 14
    max_main_room_width: Optional[int] = None
    max_main_room_height: Optional[int] = None
    horizontal_spread: int = 60
    vertical_spread: int = 40
    sampling: str = SAMPLING_UNIFORM
    width_mean: Optional[float] = None
    height_mean: Optional[float] = None
    width_stddev: Optional[float] = None
    height_stddev: Optional[float] = None
    separation: str = SEPARATION_VECTOR_PUSH
    separation_step_multiplier: float = 0.25
    max_separation_iterations: int = 120
    extra_edge_percentage: float = 0.15
    hall_thickness: int = 2

    def __post_init__(self):
        self.validate()

    # Upper bounds used when backfilling main-sized rooms
    @property
    def main_width_range(self):
        upper = self.max_main_room_width if self.max_main_room_width is not None else self.max_room_width
        return self.min_main_room_width, upper

    @property
    def main_height_range(self):
        upper = self.max_main_room_height if self.max_main_room_height is not None else self.max_room_height
        return self.min_main_room_height, upper

    def validate(self) -> None:
        for name in ("number_of_rooms", "min_main_rooms", "max_main_rooms", "max_separation_iterations", "hall_thickness"):
            _require_positive_int(name, getattr(self, name))
        for name in (
            "min_room_width",
            "max_room_width",
            "min_room_height",
            "max_room_height",
            "min_main_room_width",
            "min_main_room_height",
        ):
            _require_positive_int(name, getattr(self, name))
        for name in ("horizontal_spread", "vertical_spread"):
            value = getattr(self, name)
            if not _is_int(value) or value < 0:
                raise ConfigurationError(name, "must be a non-negative integer")
        _require_ordered("min_main_rooms", self.min_main_rooms, "max_main_rooms", self.max_main_rooms)
        _require_ordered("min_room_width", self.min_room_width, "max_room_width", self.max_room_width)
        _require_ordered("min_room_height", self.min_room_height, "max_room_height", self.max_room_height)
        for name in ("max_main_room_width", "max_main_room_height"):
            value = getattr(self, name)
            if value is not None and not _is_int(value):
                raise ConfigurationError(name, "must be an integer")
        lo, hi = self.main_width_range
        _require_ordered("min_main_room_width", lo, "max_main_room_width", hi)
        lo, hi = self.main_height_range
        _require_ordered("min_main_room_height", lo, "max_main_room_height", hi)
        if self.sampling not in SAMPLING_MODES:
            raise ConfigurationError("sampling", f"must be one of {', '.join(SAMPLING_MODES)}")
        if self.separation not in SEPARATION_POLICIES:
            raise ConfigurationError("separation", f"must be one of {', '.join(SEPARATION_POLICIES)}")
        for name in ("width_stddev", "height_stddev"):
            value = getattr(self, name)
            if value is not None and not value > 0:
                raise ConfigurationError(name, "must be greater than zero")
        if not self.separation_step_multiplier > 0:
            raise ConfigurationError("separation_step_multiplier", "must be greater than zero")
        if not 0 <= self.extra_edge_percentage <= 1:
            raise ConfigurationError("extra_edge_percentage", "must lie within [0, 1]")

    def replace(self, **changes) -> "GenerationConfig":
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], base: Optional["GenerationConfig"] = None) -> "GenerationConfig":
        """Build a config from loosely typed values (query strings, env vars, CLI pairs).

        Unknown keys are rejected so that typos surface instead of silently
        falling back to defaults.
        """
        hints = _field_types()
        changes = {}
        for key, raw in mapping.items():
            if key not in hints:
                raise ConfigurationError(key, "unknown configuration field")
            changes[key] = _coerce(key, raw, hints[key])
        base = base or cls()
        return dataclasses.replace(base, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GenerationConfig":
        environ = os.environ if environ is None else environ
        overrides = {}
        for name in _field_types():
            env_key = ENV_PREFIX + name.upper()
            if env_key in environ and environ[env_key] != "":
                overrides[name] = environ[env_key]
        return cls.from_mapping(overrides)


def _field_types() -> Dict[str, Any]:
    hints = typing.get_type_hints(GenerationConfig)
    return {f.name: hints[f.name] for f in dataclasses.fields(GenerationConfig)}


def _coerce(name: str, raw: Any, hint: Any) -> Any:
    optional = type(None) in typing.get_args(hint)
    target = next((a for a in typing.get_args(hint) if a is not type(None)), hint) if optional else hint
    if raw is None or (optional and isinstance(raw, str) and raw.strip().lower() in ("", "none", "null")):
        if optional:
            return None
        raise ConfigurationError(name, "value required")
    if target is str:
        return str(raw).strip()
    if isinstance(raw, bool):
        raise ConfigurationError(name, f"expected {target.__name__}")
    try:
        if target is int:
            if isinstance(raw, float):
                if not raw.is_integer():
                    raise ValueError(raw)
                return int(raw)
            return int(str(raw).strip())
        if target is float:
            return float(str(raw).strip()) if not isinstance(raw, (int, float)) else float(raw)
    except ValueError:
        raise ConfigurationError(name, f"expected {target.__name__}, got {raw!r}") from None
    return raw


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require_positive_int(name: str, value) -> None:
    if not _is_int(value) or value <= 0:
        raise ConfigurationError(name, "must be a positive integer")


def _require_ordered(lo_name: str, lo, hi_name: str, hi) -> None:
    if lo > hi:
        raise ConfigurationError(lo_name, f"must not exceed {hi_name} ({lo} > {hi})")


__all__ = [
    "GenerationConfig",
    "SAMPLING_UNIFORM",
    "SAMPLING_NORMAL",
    "SEPARATION_VECTOR_PUSH",
    "SEPARATION_MTV",
]
