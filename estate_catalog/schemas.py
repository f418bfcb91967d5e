"""
estate_catalog/schemas.py

Pydantic request/response contracts for the projects API.
Every request body forbids unknown fields.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, validator

from estate_catalog.models import AreaRange, PriceRange, Project, Property, PropertyType


def _trim(v):
    if isinstance(v, str):
        return v.strip()
    return v


# ========================================================================
# PROJECT WRITE SCHEMAS
# ========================================================================

class LocationInput(BaseModel):
    """GeoJSON-style point; only ``coordinates`` is meaningful."""
    type: str = Field("Point", description="Geometry type (always 'Point')")
    coordinates: Optional[List[float]] = Field(None, description="[longitude, latitude]")

    class Config:
        extra = "forbid"


class PropertyInput(BaseModel):
    """Property payload nested in project create/update requests.

    Enum fields are typed so unknown values are rejected here; presence and
    the ``>= 1`` room counts are checked by the validation layer.
    """
    id: Optional[str] = Field(None, min_length=1, max_length=64, description="Existing property id to keep")
    type: Optional[PropertyType] = Field(None, description="Property type")
    area_range: Optional[AreaRange] = Field(None, alias="areaRange", description="Area range bucket")
    price_range: Optional[PriceRange] = Field(None, alias="priceRange", description="Price range bucket")
    title: str = Field("", max_length=200, description="Listing title")
    bedrooms: Optional[int] = Field(None, description="Number of bedrooms (>= 1)")
    bathrooms: Optional[int] = Field(None, description="Number of bathrooms (>= 1)")
    image: Optional[str] = Field(None, max_length=500, description="Image URL or path")

    class Config:
        extra = "forbid"
        populate_by_name = True

    @validator("title", pre=True)
    def trim_title(cls, v):
        """Trim whitespace from title."""
        return _trim(v)


class ProjectCreateRequest(BaseModel):
    """Request schema for creating a project with its properties inline."""
    name: Optional[str] = Field(None, max_length=200, description="Project name (required)")
    description: Optional[str] = Field(None, description="Free-text description")
    developer: Optional[str] = Field(None, max_length=200, description="Developer name or reference")
    image: Optional[str] = Field(None, max_length=500, description="Image URL or path")
    location: Optional[LocationInput] = Field(None, description="Geo point")
    properties: Optional[List[PropertyInput]] = Field(None, description="Owned properties, in order")

    class Config:
        extra = "forbid"

    @validator("name", pre=True)
    def trim_name(cls, v):
        """Trim whitespace from name."""
        return _trim(v)


class ProjectUpdateRequest(BaseModel):
    """Request schema for a partial project update.

    ``properties``, when present, replaces the whole collection.
    """
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    developer: Optional[str] = Field(None, max_length=200)
    image: Optional[str] = Field(None, max_length=500)
    location: Optional[LocationInput] = None
    properties: Optional[List[PropertyInput]] = None

    class Config:
        extra = "forbid"

    @validator("name", pre=True)
    def trim_name(cls, v):
        return _trim(v)


class ProjectMessageResponse(BaseModel):
    message: str
    project: Project


class MessageResponse(BaseModel):
    message: str


# ========================================================================
# PROPERTY SEARCH SCHEMAS
# ========================================================================

class PropertySearchRequest(BaseModel):
    """Request schema for cross-project property search.

    Categorical filters are plain strings here; the validation layer checks
    them against the enum registry so an unknown value is reported by filter
    name. Empty strings count as absent.
    """
    type: Optional[str] = Field(None, description="Property type filter")
    area_range: Optional[str] = Field(None, alias="areaRange", description="Area range filter")
    price_range: Optional[str] = Field(None, alias="priceRange", description="Price range filter")
    key: Optional[str] = Field(None, max_length=200, description="Case-insensitive title substring")
    include_all: bool = Field(False, alias="all", description="Return every property unfiltered")

    class Config:
        extra = "forbid"
        populate_by_name = True


class PropertySearchResponse(BaseModel):
    """Response schema for property search."""
    count: int = Field(0, description="Number of matching properties")
    properties: List[Property] = Field(default_factory=list, description="Matching properties in storage order")
