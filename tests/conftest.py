"""Shared test fixtures for the OS Grid Reference API test suite."""

import os

import pytest

# Rate limiting would trip on the volume of test requests
os.environ["RATE_LIMIT_ENABLED"] = "false"

from osgrid.main import app  # noqa: E402


@pytest.fixture()
def client():
    """FastAPI test client."""
    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c


@pytest.fixture()
def no_datum_shift(monkeypatch):
    """Project WGS84 values directly, as older data was produced."""
    import osgrid.config as config
    monkeypatch.setattr(config, "GRID_DATUM_SHIFT", False)
