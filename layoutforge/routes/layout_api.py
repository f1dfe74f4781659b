"""
project: layoutforge
module: layout_api.py
License: MIT

Layout generation API routes.

Query parameters other than ``seed`` and ``metrics`` are treated as
generation config overrides, so ``/api/layout?seed=7&hall_thickness=3``
carves thicker halls for seed 7. Invalid overrides surface as HTTP 400 via
the app-level ``ConfigurationError`` handler.
"""

import hashlib
import os
import random
import threading

from flask import Blueprint, current_app, has_app_context, jsonify, request

from layoutforge.generation import GenerationConfig, LayoutStepper, generate
from layoutforge.logging_utils import get_logger, is_truthy

bp_layout = Blueprint("layout_api", __name__)
log = get_logger("layoutforge.api")

MAX_SEED = 9223372036854775807
_RESERVED_PARAMS = ("seed", "metrics")


def _coerce_seed(raw_seed):
    """Convert provided seed (int or str) into bounded 64-bit signed int."""
    if raw_seed is None:
        return random.randint(1, 1_000_000)
    if isinstance(raw_seed, bool):
        return int(raw_seed)
    if isinstance(raw_seed, int):
        return raw_seed % MAX_SEED
    if isinstance(raw_seed, str):
        s = raw_seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdigit():
            return int(s) % MAX_SEED
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % MAX_SEED
    return random.randint(1, 1_000_000)


# Simple in-process cache (seed, config) -> DungeonLayout. Lock protected since
# the dev server may serve requests from several threads.
_layout_cache = {}
_layout_cache_lock = threading.Lock()
_LAYOUT_CACHE_MAX = 8


def _cache_disabled() -> bool:
    if os.environ.get("LAYOUTFORGE_DISABLE_CACHE") == "1":
        return True
    return has_app_context() and bool(current_app.config.get("LAYOUT_CACHE_DISABLED"))


def get_cached_layout(seed: int, config: GenerationConfig):
    if _cache_disabled():
        return generate(config, seed)
    key = (seed, config)
    with _layout_cache_lock:
        layout = _layout_cache.get(key)
        if layout is not None:
            return layout
    layout = generate(config, seed)
    with _layout_cache_lock:
        _layout_cache[key] = layout
        if len(_layout_cache) > _LAYOUT_CACHE_MAX:
            first_key = next(iter(_layout_cache.keys()))
            if first_key != key:
                _layout_cache.pop(first_key, None)
    return layout


def clear_layout_cache():
    with _layout_cache_lock:
        _layout_cache.clear()


def _request_config() -> GenerationConfig:
    overrides = {k: v for k, v in request.args.items() if k not in _RESERVED_PARAMS}
    return GenerationConfig.from_mapping(overrides, base=GenerationConfig.from_env())


def _request_seed() -> int:
    return _coerce_seed(request.args.get("seed"))


@bp_layout.route("/api/layout", methods=["GET"])
def layout():
    """Generate (or fetch cached) layout geometry.

    Response: ``DungeonLayout.to_dict()``; with ``metrics=1`` the generation
    metrics are included under ``metrics``.
    """
    config = _request_config()
    seed = _request_seed()
    result = get_cached_layout(seed, config)
    include_metrics = is_truthy(request.args.get("metrics", "0"))
    log.debug(event="layout_request", seed=seed, metrics=include_metrics)
    return jsonify(result.to_dict(include_metrics=include_metrics))


@bp_layout.route("/api/layout/metrics", methods=["GET"])
def layout_metrics():
    config = _request_config()
    seed = _request_seed()
    result = get_cached_layout(seed, config)
    return jsonify({"seed": seed, "metrics": result.metrics})


@bp_layout.route("/api/layout/stages", methods=["GET"])
def layout_stages():
    """Run the stages one at a time and report each stage summary (never cached)."""
    config = _request_config()
    seed = _request_seed()
    stepper = LayoutStepper(config, seed)
    stages = []
    while not stepper.done:
        stages.append(stepper.step().to_dict())
    return jsonify({"seed": seed, "stages": stages})


@bp_layout.route("/api/layout/config", methods=["GET"])
def layout_config():
    return jsonify(GenerationConfig.from_env().to_dict())
