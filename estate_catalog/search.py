"""
estate_catalog/search.py

Cross-project property search.

Properties have no store of their own: a search flattens every project's
properties into one sequence (project order, then property order) and narrows
it with a chain of optional predicates. This module does no I/O and no
validation; criteria arrive already parsed by ``estate_catalog.validation``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from estate_catalog.models import AreaRange, PriceRange, Project, Property, PropertyType

Predicate = Callable[[Property], bool]


@dataclass(frozen=True)
class SearchCriteria:
    """Validated search filters. ``None`` means match-all for that filter."""

    type: Optional[PropertyType] = None
    area_range: Optional[AreaRange] = None
    price_range: Optional[PriceRange] = None
    key: Optional[str] = None
    include_all: bool = False


@dataclass
class SearchResult:
    properties: List[Property] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.properties)


def flatten_properties(projects: Iterable[Project]) -> List[Property]:
    """Concatenate each project's properties, keeping project then property order."""
    flattened: List[Property] = []
    for project in projects:
        flattened.extend(project.properties)
    return flattened


def title_contains(key: str) -> Predicate:
    needle = key.lower()
    return lambda prop: needle in (prop.title or "").lower()


def build_predicates(criteria: SearchCriteria) -> List[Predicate]:
    """Return the active filters in pipeline order (type, area, price, key)."""
    predicates: List[Predicate] = []
    if criteria.type is not None:
        predicates.append(lambda prop: prop.type == criteria.type)
    if criteria.area_range is not None:
        predicates.append(lambda prop: prop.area_range == criteria.area_range)
    if criteria.price_range is not None:
        predicates.append(lambda prop: prop.price_range == criteria.price_range)
    if criteria.key:
        predicates.append(title_contains(criteria.key))
    return predicates


def search_properties(projects: Iterable[Project], criteria: SearchCriteria) -> SearchResult:
    """Flatten ``projects`` and apply every active filter in ``criteria``.

    ``include_all`` skips the filters and returns the whole flattened catalog.
    """
    properties = flatten_properties(projects)
    if criteria.include_all:
        return SearchResult(properties=properties)

    for predicate in build_predicates(criteria):
        properties = [prop for prop in properties if predicate(prop)]
    return SearchResult(properties=properties)
