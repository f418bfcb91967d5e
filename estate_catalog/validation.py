"""
estate_catalog/validation.py

Stateless checks run before a project write and before a search.

Enum membership is always checked against ``models.ENUM_REGISTRY``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Sequence

from estate_catalog.errors import InvalidFilterError, ValidationError
from estate_catalog.models import ENUM_REGISTRY, FilterMode
from estate_catalog.schemas import (
    LocationInput,
    ProjectCreateRequest,
    ProjectUpdateRequest,
    PropertyInput,
    PropertySearchRequest,
)
from estate_catalog.search import SearchCriteria

MIN_ROOMS = 1
MAX_ROOMS = 10_000
ROOM_FIELDS = ("bedrooms", "bathrooms")

MISSING_FILTERS_MESSAGE = "Type, areaRange, and priceRange are required when not requesting all properties."
NAME_REQUIRED_MESSAGE = "Name is required."
NAME_AND_LOCATION_REQUIRED_MESSAGE = "Name and location with coordinates are required."


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def check_enum_value(wire_name: str, value: Any) -> Enum:
    """Return the enum member for ``value`` or raise InvalidFilterError naming the filter."""
    entry = ENUM_REGISTRY[wire_name]
    try:
        return entry.enum(value)
    except ValueError:
        raise InvalidFilterError(wire_name, f"Invalid {entry.label}.")


# ---------------------------------------------------------
# Search filters
# ---------------------------------------------------------

def validate_search_request(request: PropertySearchRequest, filter_mode: FilterMode) -> SearchCriteria:
    """Turn a raw search request into typed SearchCriteria.

    ``all=true`` bypasses every check. In ``all_or_none`` mode the three
    categorical filters must be supplied together; in ``independent`` mode
    each one is optional on its own.
    """
    if request.include_all:
        return SearchCriteria(include_all=True)

    raw = {
        wire_name: _blank_to_none(getattr(request, entry.attribute))
        for wire_name, entry in ENUM_REGISTRY.items()
    }

    if filter_mode == FilterMode.all_or_none and any(value is None for value in raw.values()):
        raise ValidationError(MISSING_FILTERS_MESSAGE)

    parsed = {
        ENUM_REGISTRY[wire_name].attribute: check_enum_value(wire_name, value)
        for wire_name, value in raw.items()
        if value is not None
    }
    return SearchCriteria(key=_blank_to_none(request.key), **parsed)


# ---------------------------------------------------------
# Project writes
# ---------------------------------------------------------

def validate_property_inputs(properties: Sequence[PropertyInput]) -> None:
    """Check room counts, required enum fields and id uniqueness for every property.

    Enum values themselves are already typed on ``PropertyInput``, so pydantic
    rejects an unknown value before this runs.
    """
    seen_ids = set()
    for index, prop in enumerate(properties):
        where = f"properties[{index}]"

        for room_field in ROOM_FIELDS:
            value = getattr(prop, room_field)
            if value is None:
                raise ValidationError(f"{where}.{room_field} is required.")
            if value < MIN_ROOMS:
                raise ValidationError(f"{where}.{room_field} must be at least {MIN_ROOMS}.")
            if value > MAX_ROOMS:
                raise ValidationError(f"{where}.{room_field} must be at most {MAX_ROOMS}.")

        for wire_name, entry in ENUM_REGISTRY.items():
            value = getattr(prop, entry.attribute)
            if value is None:
                raise ValidationError(f"{where}.{wire_name} is required.")

        if prop.id is not None:
            if prop.id in seen_ids:
                raise ValidationError(f"{where}.id {prop.id!r} is duplicated.")
            seen_ids.add(prop.id)


def validate_coordinates(location: LocationInput) -> None:
    coordinates = location.coordinates or []
    if len(coordinates) != 2:
        raise ValidationError("location.coordinates must be a [longitude, latitude] pair.")
    longitude, latitude = coordinates
    if not -180.0 <= longitude <= 180.0 or not -90.0 <= latitude <= 90.0:
        raise ValidationError("location.coordinates are out of range.")


def has_coordinates(location: Optional[LocationInput]) -> bool:
    return location is not None and bool(location.coordinates)


def validate_project_create(request: ProjectCreateRequest, require_location: bool) -> None:
    if require_location:
        if not request.name or not has_coordinates(request.location):
            raise ValidationError(NAME_AND_LOCATION_REQUIRED_MESSAGE)
    elif not request.name:
        raise ValidationError(NAME_REQUIRED_MESSAGE)

    if has_coordinates(request.location):
        validate_coordinates(request.location)
    validate_property_inputs(request.properties or [])


def validate_project_update(request: ProjectUpdateRequest) -> None:
    if has_coordinates(request.location):
        validate_coordinates(request.location)
    if request.properties is not None:
        validate_property_inputs(request.properties)
