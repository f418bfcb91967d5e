"""
estate_catalog/dependencies.py

FastAPI dependencies that hand each request a catalog service.
Configuration flags are read at call time so tests can patch them.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends

from estate_catalog import config
from estate_catalog.service import CatalogService
from estate_catalog.store import CatalogStore, build_store

_store: Optional[CatalogStore] = None


def get_catalog_store() -> CatalogStore:
    """Process-wide store; built once from CATALOG_BACKEND and DATABASE_PATH."""
    global _store
    if _store is None:
        _store = build_store(config.CATALOG_BACKEND, config.DATABASE_PATH)
    return _store


def get_catalog_service(store: CatalogStore = Depends(get_catalog_store)) -> CatalogService:
    return CatalogService(
        store,
        require_location=config.REQUIRE_LOCATION,
        filter_mode=config.FILTER_MODE,
    )
