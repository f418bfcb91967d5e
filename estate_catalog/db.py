# estate_catalog/db.py
# SQLite connection handling and schema for the catalog store

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Union

from estate_catalog.logging_config import get_logger
from estate_catalog.models import AreaRange, PriceRange, PropertyType

logger = get_logger(__name__)


def _sql_in(enum_cls) -> str:
    """Render an enum's values as a SQL IN list for CHECK constraints."""
    return ", ".join(f"'{member.value}'" for member in enum_cls)


SCHEMA = f"""
CREATE TABLE IF NOT EXISTS projects (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT,
    developer TEXT,
    image TEXT,
    location_json TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS properties (
    id TEXT PRIMARY KEY,
    project_id TEXT NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    type TEXT NOT NULL CHECK (type IN ({_sql_in(PropertyType)})),
    area_range TEXT NOT NULL CHECK (area_range IN ({_sql_in(AreaRange)})),
    price_range TEXT NOT NULL CHECK (price_range IN ({_sql_in(PriceRange)})),
    title TEXT NOT NULL DEFAULT '',
    bedrooms INTEGER NOT NULL CHECK (bedrooms >= 1),
    bathrooms INTEGER NOT NULL CHECK (bathrooms >= 1),
    image TEXT
);

CREATE INDEX IF NOT EXISTS idx_properties_project_position ON properties(project_id, position);
"""


@contextmanager
def get_db_connection(db_path: Union[str, Path]) -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for a SQLite connection with Row factory and foreign keys on.
    The connection is always closed; commit/rollback is up to the caller
    (use ``with conn:`` for a transaction).
    """
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: Union[str, Path]) -> None:
    """Create the catalog tables and indexes if they don't exist."""
    with get_db_connection(db_path) as conn:
        conn.executescript(SCHEMA)
        conn.commit()
    logger.info("[DB] Ensured catalog schema at %s", db_path)
