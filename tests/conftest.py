from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tapcanvas.server.app import create_app
from tapcanvas.server.config import Settings
from tapcanvas.server.store import MarkerStore

RED = "hsl(10,100%,70%)"
BLUE = "hsl(220, 100%, 70%)"


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "markers.db"


@pytest.fixture
def settings(db_path):
    return Settings(db_path=str(db_path), marker_lifespan_s=60, marker_radius=40)


@pytest.fixture
def store(db_path):
    """Store handed to the app; the app's lifespan opens and closes it."""
    return MarkerStore(db_path)


@pytest.fixture
def client(settings, store):
    app = create_app(settings, store)
    with TestClient(app) as c:
        yield c
