"""
estate_catalog/service.py

Catalog service: ties the validation layer, the catalog store and the search
engine together for each API operation, and turns "nothing found" into
NotFoundError.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from estate_catalog.errors import NotFoundError
from estate_catalog.logging_config import get_logger
from estate_catalog.models import FilterMode, Project, Property
from estate_catalog.schemas import (
    LocationInput,
    ProjectCreateRequest,
    ProjectUpdateRequest,
    PropertyInput,
    PropertySearchRequest,
)
from estate_catalog.search import SearchResult, search_properties
from estate_catalog.store import CatalogStore
from estate_catalog.validation import (
    has_coordinates,
    validate_project_create,
    validate_project_update,
    validate_search_request,
)

logger = get_logger(__name__)


def property_record(prop: PropertyInput) -> Dict[str, Any]:
    """Convert a validated property payload into a store record."""
    return {
        "id": prop.id,
        "type": prop.type.value,
        "area_range": prop.area_range.value,
        "price_range": prop.price_range.value,
        "title": prop.title,
        "bedrooms": prop.bedrooms,
        "bathrooms": prop.bathrooms,
        "image": prop.image,
    }


def location_record(location: LocationInput) -> Dict[str, Any]:
    return {"type": "Point", "coordinates": list(location.coordinates)}


class CatalogService:
    def __init__(
        self,
        store: CatalogStore,
        require_location: bool = False,
        filter_mode: FilterMode = FilterMode.independent,
    ):
        self.store = store
        self.require_location = require_location
        self.filter_mode = filter_mode

    def list_projects(self, query: Optional[str] = None) -> List[Project]:
        return self.store.find_projects(name_filter=query.strip() if query else None)

    def get_project(self, project_id: str) -> Project:
        project = self.store.find_project_by_id(project_id)
        if project is None:
            raise NotFoundError("Project not found.")
        return project

    def get_property(self, property_id: str) -> Property:
        prop = self.store.find_property_by_id(property_id)
        if prop is None:
            raise NotFoundError("Property not found.")
        return prop

    def create_project(self, request: ProjectCreateRequest) -> Project:
        validate_project_create(request, require_location=self.require_location)

        data: Dict[str, Any] = {
            "name": request.name,
            "description": request.description,
            "developer": request.developer,
            "image": request.image,
            "location": location_record(request.location) if has_coordinates(request.location) else None,
            "properties": self._property_records(request.properties or []),
        }
        project = self.store.create_project(data)
        logger.info("[PROJECTS] Created project_id=%s with %d properties", project.id, len(project.properties))
        return project

    def update_project(self, project_id: str, request: ProjectUpdateRequest) -> Project:
        validate_project_update(request)

        changes: Dict[str, Any] = {}
        if request.name:
            changes["name"] = request.name
        for name in ("description", "developer", "image"):
            value = getattr(request, name)
            if value is not None:
                changes[name] = value
        if has_coordinates(request.location):
            changes["location"] = location_record(request.location)
        if request.properties is not None:
            changes["properties"] = self._property_records(request.properties)

        project = self.store.update_project(project_id, changes)
        if project is None:
            raise NotFoundError("Project not found.")
        logger.info("[PROJECTS] Updated project_id=%s fields=%s", project_id, sorted(changes))
        return project

    def delete_project(self, project_id: str) -> Project:
        project = self.store.delete_project(project_id)
        if project is None:
            raise NotFoundError("Project not found.")
        logger.info(
            "[PROJECTS] Deleted project_id=%s and %d owned properties", project_id, len(project.properties)
        )
        return project

    def search_properties(self, request: PropertySearchRequest) -> SearchResult:
        criteria = validate_search_request(request, filter_mode=self.filter_mode)
        projects = self.store.find_projects()
        result = search_properties(projects, criteria)
        logger.debug("[SEARCH] criteria=%s results=%d", criteria, result.count)
        return result

    @staticmethod
    def _property_records(properties: Sequence[PropertyInput]) -> List[Dict[str, Any]]:
        return [property_record(prop) for prop in properties]
