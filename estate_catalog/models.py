from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Type

from pydantic import BaseModel, Field


# Enums
class PropertyType(str, Enum):
    chalet = "chalet"
    apartment = "apartment"
    twin_villa = "twin_villa"
    standalone_villa = "standalone_villa"


class AreaRange(str, Enum):
    less_than_100 = "less_than_100"
    from_100_to_150 = "100_to_150"
    from_150_to_200 = "150_to_200"
    over_200 = "over_200"


class PriceRange(str, Enum):
    from_2_to_3_million = "2_to_3_million"
    from_3_to_4_million = "3_to_4_million"
    from_4_to_5_million = "4_to_5_million"
    over_5_million = "over_5_million"


class FilterMode(str, Enum):
    independent = "independent"  # every search filter optional on its own
    all_or_none = "all_or_none"  # type, areaRange and priceRange required together


class EnumField(NamedTuple):
    wire_name: str
    attribute: str
    enum: Type[Enum]
    label: str


# Single registry of the closed enumerations, shared by write validation and search
ENUM_REGISTRY: Dict[str, EnumField] = {
    "type": EnumField("type", "type", PropertyType, "property type"),
    "areaRange": EnumField("areaRange", "area_range", AreaRange, "area range"),
    "priceRange": EnumField("priceRange", "price_range", PriceRange, "price range"),
}


def now_iso() -> str:
    """Current UTC time as an ISO string with a Z suffix."""
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


# Models
class GeoPoint(BaseModel):
    type: str = "Point"
    coordinates: List[float]  # [longitude, latitude]


class Property(BaseModel):
    """A sellable unit owned by exactly one project."""

    id: str
    type: PropertyType
    area_range: AreaRange = Field(..., alias="areaRange")
    price_range: PriceRange = Field(..., alias="priceRange")
    title: str = ""
    bedrooms: int
    bathrooms: int
    image: Optional[str] = None

    class Config:
        populate_by_name = True


class Project(BaseModel):
    """A development aggregate owning an ordered collection of properties."""

    id: str
    name: str
    description: Optional[str] = None
    developer: Optional[str] = None
    image: Optional[str] = None
    location: Optional[GeoPoint] = None
    properties: List[Property] = Field(default_factory=list)
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True
