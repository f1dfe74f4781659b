"""Structured event logging for the generator.

Every record is a flat set of fields rendered either as ``key=value`` pairs
or, with ``LAYOUTFORGE_LOG_JSON`` set, as one compact JSON object per line.
Level and output mode are read from the environment on each call so tests and
the CLI can flip them without reloading the module.

Usage:
    from layoutforge.logging_utils import get_logger
    log = get_logger("layoutforge.separation")
    log.info(event="rooms_dropped", dropped=3)

Fields set to None are omitted. Reserved keys: level, ts.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}


def is_truthy(value) -> bool:
    """Interpret flag-like strings from env vars and query args."""
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _threshold() -> int:
    return LEVELS.get(os.getenv("LAYOUTFORGE_LOG_LEVEL", "info").lower(), LEVELS["info"])


def _kv_value(value) -> str:
    if isinstance(value, (int, float)):
        return str(value)
    return str(value).replace(" ", "_")


def render(level: str, fields: dict) -> str:
    present = {k: v for k, v in fields.items() if v is not None}
    stamp = int(time.time())
    if is_truthy(os.getenv("LAYOUTFORGE_LOG_JSON", "0")):
        # tuples and rooms fall back to str() rather than failing the record
        return json.dumps({**present, "level": level, "ts": stamp}, separators=(",", ":"), default=str)
    head = [f"level={level}", f"ts={stamp}"]
    return " ".join(head + [f"{k}={_kv_value(v)}" for k, v in present.items()])


class _Logger:
    def __init__(self, name: str):
        self.name = name

    def log(self, level: str, **fields):
        if LEVELS[level] < _threshold():
            return
        fields.setdefault("logger", self.name)
        stream = sys.stderr if level == "error" else sys.stdout
        print(render(level, fields), file=stream)

    def debug(self, **fields):
        self.log("debug", **fields)

    def info(self, **fields):
        self.log("info", **fields)

    def warn(self, **fields):
        self.log("warn", **fields)

    def error(self, **fields):
        self.log("error", **fields)


_LOGGER_CACHE: dict[str, _Logger] = {}


def get_logger(name: str = "layoutforge") -> _Logger:
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]
