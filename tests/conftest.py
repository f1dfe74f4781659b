import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from layoutforge import create_app  # noqa: E402
from layoutforge.routes.layout_api import clear_layout_cache  # noqa: E402


@pytest.fixture(autouse=True)
def _clean_layout_env(monkeypatch):
    # Developer shells may export overrides; tests always start from defaults
    for key in list(os.environ):
        if key.startswith("LAYOUTFORGE_"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture(scope="session")
def test_app():
    app = create_app({"TESTING": True})
    return app


@pytest.fixture()
def client(test_app):
    clear_layout_cache()
    return test_app.test_client()
