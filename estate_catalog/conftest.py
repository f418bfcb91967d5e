"""Pytest configuration and fixtures."""

from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from estate_catalog.dependencies import get_catalog_store
from estate_catalog.main import app
from estate_catalog.store import InMemoryCatalogStore, SQLiteCatalogStore


def make_property(
    title: str,
    type: str = "apartment",
    area_range: str = "100_to_150",
    price_range: str = "3_to_4_million",
    bedrooms: int = 2,
    bathrooms: int = 2,
    **extra: Any,
) -> Dict[str, Any]:
    """Store-level property record (snake_case keys)."""
    record = {
        "type": type,
        "area_range": area_range,
        "price_range": price_range,
        "title": title,
        "bedrooms": bedrooms,
        "bathrooms": bathrooms,
        "image": None,
    }
    record.update(extra)
    return record


def api_property(
    title: str,
    type: str = "apartment",
    area_range: str = "100_to_150",
    price_range: str = "3_to_4_million",
    bedrooms: int = 2,
    bathrooms: int = 2,
    **extra: Any,
) -> Dict[str, Any]:
    """Wire-format property payload (camelCase keys)."""
    payload = {
        "type": type,
        "areaRange": area_range,
        "priceRange": price_range,
        "title": title,
        "bedrooms": bedrooms,
        "bathrooms": bathrooms,
    }
    payload.update(extra)
    return payload


SUNSET_VIEW = dict(
    title="Sunset View", type="apartment", area_range="100_to_150",
    price_range="3_to_4_million", bedrooms=2, bathrooms=2,
)
MOUNTAIN_LODGE = dict(
    title="Mountain Lodge", type="chalet", area_range="over_200",
    price_range="over_5_million", bedrooms=4, bathrooms=3,
)


@pytest.fixture
def sqlite_store(tmp_path) -> SQLiteCatalogStore:
    """Fresh SQLite store in a temp directory for each test."""
    store = SQLiteCatalogStore(tmp_path / "catalog.db")
    store.init_schema()
    return store


@pytest.fixture
def memory_store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore()


@pytest.fixture(params=["sqlite", "memory"])
def store(request, tmp_path):
    """Both store backends; tests using this run once per backend."""
    if request.param == "sqlite":
        sqlite = SQLiteCatalogStore(tmp_path / "catalog.db")
        sqlite.init_schema()
        return sqlite
    return InMemoryCatalogStore()


@pytest.fixture
def scenario_store(store):
    """Store seeded with P1 (Sunset View) and P2 (Mountain Lodge)."""
    store.create_project({"name": "Palm Hills", "properties": [make_property(**SUNSET_VIEW)]})
    store.create_project({"name": "Alpine Ridge", "properties": [make_property(**MOUNTAIN_LODGE)]})
    return store


@pytest.fixture
def client(sqlite_store):
    """FastAPI test client backed by a temp SQLite store."""
    app.dependency_overrides[get_catalog_store] = lambda: sqlite_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
