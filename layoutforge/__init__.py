"""
project: layoutforge
module: __init__.py
License: MIT

Flask application factory.

The generation core lives in ``layoutforge.generation`` and has no Flask
dependency; this module only wires the HTTP blueprint around it.
Configuration is sourced from environment variables (optionally loaded from
a ``.env`` file) and can be overridden per app for tests.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

from layoutforge.generation.errors import ConfigurationError

__version__ = "0.4.0"

# Load .env if present so LAYOUTFORGE_* settings can be supplied without
# exporting shell variables during development.
load_dotenv()


def create_app(overrides=None):
    """Build a Flask app exposing the layout API.

    ``overrides`` is merged into ``app.config`` after the environment
    defaults, e.g. ``{"TESTING": True, "LAYOUT_CACHE_DISABLED": True}``.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.update(
        LAYOUT_CACHE_DISABLED=os.getenv("LAYOUTFORGE_DISABLE_CACHE") == "1",
    )
    if overrides:
        app.config.update(overrides)

    from layoutforge.routes.layout_api import bp_layout

    app.register_blueprint(bp_layout)

    @app.errorhandler(ConfigurationError)
    def bad_configuration(e):
        return jsonify(e.to_dict()), 400

    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        logging.exception("Unhandled exception (id=%s)", error_id)
        return jsonify({"error": "internal error", "error_id": error_id}), 500

    return app


__all__ = ["create_app", "__version__"]
