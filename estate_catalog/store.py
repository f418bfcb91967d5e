"""
estate_catalog/store.py

Catalog Store: persistence for projects and the properties they own.

Two backends share one interface:
- SQLiteCatalogStore: one connection per operation, one transaction per write.
- InMemoryCatalogStore: insertion-ordered dicts, for tests and local runs.

Both return projects with their properties fully resolved, in storage order,
and both keep a property-id -> project-id index so a property can be fetched
without scanning every project.

Write payloads are plain dicts built by the service layer:
    {"name", "description", "developer", "image", "location", "properties"}
where ``location`` is a GeoJSON-style dict and each property is a dict with
``id`` (optional), ``type``, ``area_range``, ``price_range``, ``title``,
``bedrooms``, ``bathrooms``, ``image``.
"""

from __future__ import annotations

import copy
import json
import sqlite3
import uuid
from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

from estate_catalog.db import get_db_connection, init_db
from estate_catalog.errors import ConfigurationError, StoreError, ValidationError
from estate_catalog.models import Project, Property, now_iso

PROJECT_FIELDS = ("name", "description", "developer", "image", "location")


def new_id() -> str:
    return uuid.uuid4().hex


def foreign_property_error(property_id: str) -> ValidationError:
    return ValidationError(f"Property id {property_id!r} already belongs to another project.")


class CatalogStore(ABC):
    """Persistence interface consumed by the catalog service."""

    @abstractmethod
    def find_projects(self, name_filter: Optional[str] = None) -> List[Project]:
        """All projects, or those whose name contains ``name_filter`` (case-insensitive)."""

    @abstractmethod
    def find_project_by_id(self, project_id: str) -> Optional[Project]:
        ...

    @abstractmethod
    def find_property_by_id(self, property_id: str) -> Optional[Property]:
        ...

    @abstractmethod
    def create_project(self, data: Dict[str, Any]) -> Project:
        ...

    @abstractmethod
    def update_project(self, project_id: str, changes: Dict[str, Any]) -> Optional[Project]:
        """Apply ``changes``; a ``properties`` key replaces the whole collection."""

    @abstractmethod
    def delete_project(self, project_id: str) -> Optional[Project]:
        """Delete a project and the properties it owns; return what was deleted."""


# ---------------------------------------------------------
# SQLite backend
# ---------------------------------------------------------

def _row_to_property(row: sqlite3.Row) -> Property:
    return Property(
        id=row["id"],
        type=row["type"],
        area_range=row["area_range"],
        price_range=row["price_range"],
        title=row["title"],
        bedrooms=row["bedrooms"],
        bathrooms=row["bathrooms"],
        image=row["image"],
    )


def _row_to_project(row: sqlite3.Row, properties: List[Property]) -> Project:
    location = json.loads(row["location_json"]) if row["location_json"] else None
    return Project(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        developer=row["developer"],
        image=row["image"],
        location=location,
        properties=properties,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class SQLiteCatalogStore(CatalogStore):
    def __init__(self, db_path: Union[str, Path]):
        self.db_path = db_path

    def init_schema(self) -> None:
        init_db(self.db_path)

    @contextmanager
    def _translate_errors(self, action: str) -> Iterator[None]:
        """Map sqlite3 failures onto the catalog error taxonomy."""
        try:
            yield
        except sqlite3.IntegrityError as e:
            raise ValidationError(f"Invalid data while {action}: {e}") from e
        except OverflowError as e:
            raise ValidationError(f"Invalid data while {action}: value out of range.") from e
        except sqlite3.Error as e:
            raise StoreError(f"Server error while {action}.") from e

    def _load_projects(
        self,
        conn: sqlite3.Connection,
        name_filter: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> List[Project]:
        clauses: List[str] = []
        params: List[Any] = []
        if project_id is not None:
            clauses.append("p.id = ?")
            params.append(project_id)
        if name_filter:
            # instr() instead of LIKE so % and _ in the filter stay literal
            clauses.append("instr(lower(p.name), lower(?)) > 0")
            params.append(name_filter)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        project_rows = conn.execute(
            f"SELECT p.* FROM projects p {where} ORDER BY p.rowid", params
        ).fetchall()
        if not project_rows:
            return []

        property_rows = conn.execute(
            f"""
            SELECT pr.*
            FROM properties pr
            JOIN projects p ON p.id = pr.project_id
            {where}
            ORDER BY pr.project_id, pr.position
            """,
            params,
        ).fetchall()

        grouped: Dict[str, List[Property]] = defaultdict(list)
        for row in property_rows:
            grouped[row["project_id"]].append(_row_to_property(row))

        return [_row_to_project(row, grouped.get(row["id"], [])) for row in project_rows]

    def _insert_properties(
        self, conn: sqlite3.Connection, project_id: str, properties: Sequence[Dict[str, Any]]
    ) -> None:
        supplied = [prop["id"] for prop in properties if prop.get("id")]
        if supplied:
            placeholders = ", ".join("?" for _ in supplied)
            owned = conn.execute(
                f"SELECT id FROM properties WHERE id IN ({placeholders}) AND project_id != ? LIMIT 1",
                [*supplied, project_id],
            ).fetchone()
            if owned:
                raise foreign_property_error(owned["id"])

        conn.executemany(
            """
            INSERT INTO properties (
                id, project_id, position, type, area_range, price_range,
                title, bedrooms, bathrooms, image
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    prop.get("id") or new_id(),
                    project_id,
                    position,
                    prop["type"],
                    prop["area_range"],
                    prop["price_range"],
                    prop.get("title") or "",
                    prop["bedrooms"],
                    prop["bathrooms"],
                    prop.get("image"),
                )
                for position, prop in enumerate(properties)
            ],
        )

    def find_projects(self, name_filter: Optional[str] = None) -> List[Project]:
        with self._translate_errors("fetching projects"), get_db_connection(self.db_path) as conn:
            return self._load_projects(conn, name_filter=name_filter)

    def find_project_by_id(self, project_id: str) -> Optional[Project]:
        with self._translate_errors("fetching project"), get_db_connection(self.db_path) as conn:
            projects = self._load_projects(conn, project_id=project_id)
        return projects[0] if projects else None

    def find_property_by_id(self, property_id: str) -> Optional[Property]:
        with self._translate_errors("fetching property"), get_db_connection(self.db_path) as conn:
            row = conn.execute("SELECT * FROM properties WHERE id = ?", (property_id,)).fetchone()
        return _row_to_property(row) if row else None

    def create_project(self, data: Dict[str, Any]) -> Project:
        project_id = new_id()
        now = now_iso()
        location = data.get("location")
        with self._translate_errors("creating project"), get_db_connection(self.db_path) as conn:
            with conn:
                conn.execute(
                    """
                    INSERT INTO projects (
                        id, name, description, developer, image, location_json, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        project_id,
                        data["name"],
                        data.get("description"),
                        data.get("developer"),
                        data.get("image"),
                        json.dumps(location) if location else None,
                        now,
                        now,
                    ),
                )
                self._insert_properties(conn, project_id, data.get("properties") or [])
            return self._load_projects(conn, project_id=project_id)[0]

    def update_project(self, project_id: str, changes: Dict[str, Any]) -> Optional[Project]:
        with self._translate_errors("updating project"), get_db_connection(self.db_path) as conn:
            with conn:
                exists = conn.execute("SELECT 1 FROM projects WHERE id = ?", (project_id,)).fetchone()
                if not exists:
                    return None

                fields = []
                params: List[Any] = []
                for name in PROJECT_FIELDS:
                    if name not in changes:
                        continue
                    if name == "location":
                        fields.append("location_json = ?")
                        params.append(json.dumps(changes[name]) if changes[name] else None)
                    else:
                        fields.append(f"{name} = ?")
                        params.append(changes[name])
                fields.append("updated_at = ?")
                params.append(now_iso())
                params.append(project_id)
                conn.execute(f"UPDATE projects SET {', '.join(fields)} WHERE id = ?", params)

                if "properties" in changes:
                    conn.execute("DELETE FROM properties WHERE project_id = ?", (project_id,))
                    self._insert_properties(conn, project_id, changes["properties"] or [])
            return self._load_projects(conn, project_id=project_id)[0]

    def delete_project(self, project_id: str) -> Optional[Project]:
        with self._translate_errors("deleting project"), get_db_connection(self.db_path) as conn:
            projects = self._load_projects(conn, project_id=project_id)
            if not projects:
                return None
            with conn:
                # properties go with it (ON DELETE CASCADE)
                conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
        return projects[0]


# ---------------------------------------------------------
# In-memory backend
# ---------------------------------------------------------

class InMemoryCatalogStore(CatalogStore):
    """Dict-backed store with a property-owner index."""

    def __init__(self) -> None:
        self._projects: Dict[str, Dict[str, Any]] = {}
        self._property_owner: Dict[str, str] = {}

    def _to_project(self, record: Dict[str, Any]) -> Project:
        return Project(**copy.deepcopy(record))

    def _claim_property_ids(self, project_id: str, properties: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Assign ids to new properties and reject ids owned by another project."""
        claimed = []
        for prop in properties:
            prop = copy.deepcopy(prop)
            if prop.get("id"):
                owner = self._property_owner.get(prop["id"])
                if owner is not None and owner != project_id:
                    raise foreign_property_error(prop["id"])
            else:
                prop["id"] = new_id()
            prop.setdefault("title", "")
            prop["title"] = prop["title"] or ""
            claimed.append(prop)
        return claimed

    def _index_properties(self, project_id: str, properties: Sequence[Dict[str, Any]]) -> None:
        for prop in properties:
            self._property_owner[prop["id"]] = project_id

    def _unindex_properties(self, record: Dict[str, Any]) -> None:
        for prop in record["properties"]:
            self._property_owner.pop(prop["id"], None)

    def find_projects(self, name_filter: Optional[str] = None) -> List[Project]:
        records = list(self._projects.values())
        if name_filter:
            needle = name_filter.lower()
            records = [r for r in records if needle in r["name"].lower()]
        return [self._to_project(r) for r in records]

    def find_project_by_id(self, project_id: str) -> Optional[Project]:
        record = self._projects.get(project_id)
        return self._to_project(record) if record else None

    def find_property_by_id(self, property_id: str) -> Optional[Property]:
        owner = self._property_owner.get(property_id)
        if owner is None:
            return None
        record = self._projects.get(owner)
        if record is None:
            return None
        for prop in record["properties"]:
            if prop["id"] == property_id:
                return Property(**copy.deepcopy(prop))
        return None

    def create_project(self, data: Dict[str, Any]) -> Project:
        project_id = new_id()
        properties = self._claim_property_ids(project_id, data.get("properties") or [])
        now = now_iso()
        record = {
            "id": project_id,
            "name": data["name"],
            "description": data.get("description"),
            "developer": data.get("developer"),
            "image": data.get("image"),
            "location": copy.deepcopy(data.get("location")),
            "properties": properties,
            "created_at": now,
            "updated_at": now,
        }
        self._projects[project_id] = record
        self._index_properties(project_id, properties)
        return self._to_project(record)

    def update_project(self, project_id: str, changes: Dict[str, Any]) -> Optional[Project]:
        record = self._projects.get(project_id)
        if record is None:
            return None

        # claim first so a rejected id leaves the record untouched
        properties = None
        if "properties" in changes:
            properties = self._claim_property_ids(project_id, changes["properties"] or [])

        for name in PROJECT_FIELDS:
            if name in changes:
                record[name] = copy.deepcopy(changes[name])
        if properties is not None:
            self._unindex_properties(record)
            record["properties"] = properties
            self._index_properties(project_id, properties)
        record["updated_at"] = now_iso()
        return self._to_project(record)

    def delete_project(self, project_id: str) -> Optional[Project]:
        record = self._projects.pop(project_id, None)
        if record is None:
            return None
        self._unindex_properties(record)
        return self._to_project(record)


def build_store(backend: str, db_path: Union[str, Path]) -> CatalogStore:
    """Construct the configured store backend."""
    if backend == "sqlite":
        return SQLiteCatalogStore(db_path)
    if backend == "memory":
        return InMemoryCatalogStore()
    raise ConfigurationError(f"Unknown catalog backend {backend!r}")
