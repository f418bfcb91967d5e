"""
estate_catalog/routes_projects.py

Project CRUD and cross-project property search endpoints.

Every handler returns the ``{success, data}`` envelope; failures are raised
as catalog errors and turned into ``{success, error}`` by the exception
handlers registered in ``estate_catalog.main``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse

from estate_catalog.dependencies import get_catalog_service
from estate_catalog.responses import success_response
from estate_catalog.schemas import (
    MessageResponse,
    ProjectCreateRequest,
    ProjectMessageResponse,
    ProjectUpdateRequest,
    PropertySearchRequest,
    PropertySearchResponse,
)
from estate_catalog.service import CatalogService

router = APIRouter(
    prefix="/api/projects",
    tags=["projects"],
)


@router.get("", response_model=None)
def list_projects(
    query: Optional[str] = Query(None, max_length=200, description="Case-insensitive name filter"),
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    """List projects with their properties, optionally filtered by name."""
    return success_response(service.list_projects(query))


@router.post("/search", response_model=None)
def search_properties(
    request: PropertySearchRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    """
    Search properties across every project.

    Filters (type, areaRange, priceRange, key) narrow the flattened catalog
    one after another; ``all=true`` returns everything unfiltered.

    Raises:
        InvalidFilterError (400): enum filter outside its enumeration
        ValidationError (400): required filters missing in all_or_none mode
        StoreError (500): store failure
    """
    result = service.search_properties(request)
    return success_response(PropertySearchResponse(count=result.count, properties=result.properties))


# Declared before /{project_id} so "properties" is never taken for a project id
@router.get("/properties/{property_id}", response_model=None)
def get_property(
    property_id: str = Path(..., min_length=1),
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    """Get a single property by its globally unique id."""
    return success_response(service.get_property(property_id))


@router.get("/{project_id}", response_model=None)
def get_project(
    project_id: str = Path(..., min_length=1),
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return success_response(service.get_project(project_id))


@router.post("", response_model=None, status_code=201)
def create_project(
    request: ProjectCreateRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    """
    Create a project with its properties inline.

    Raises:
        ValidationError (400): missing name/location, bad property fields
        StoreError (500): store failure
    """
    project = service.create_project(request)
    return success_response(
        ProjectMessageResponse(message="Project created successfully.", project=project),
        status_code=201,
    )


@router.api_route("/{project_id}", methods=["PATCH", "PUT"], response_model=None)
def update_project(
    request: ProjectUpdateRequest,
    project_id: str = Path(..., min_length=1),
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    """Partially update a project; ``properties`` replaces the whole collection."""
    project = service.update_project(project_id, request)
    return success_response(ProjectMessageResponse(message="Project updated successfully.", project=project))


@router.delete("/{project_id}", response_model=None)
def delete_project(
    project_id: str = Path(..., min_length=1),
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    """Delete a project together with the properties it owns."""
    service.delete_project(project_id)
    return success_response(MessageResponse(message="Project deleted successfully."))
