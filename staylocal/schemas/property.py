"""Pydantic v2 request/response schemas for property endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from staylocal.models.enums import Amenity, PropertyType

# ---------------------------------------------------------------------------
# Nested value objects
# ---------------------------------------------------------------------------


class PropertyImage(BaseModel):
    url: str = Field(..., min_length=1, max_length=1024)
    caption: str | None = Field(None, max_length=200)


class HouseRules(BaseModel):
    check_in: str = "15:00"
    check_out: str = "11:00"
    smoking_allowed: bool = False
    pets_allowed: bool = False
    parties_allowed: bool = False


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PropertyCreate(BaseModel):
    """Schema for listing a new property. The caller becomes its host."""

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    property_type: PropertyType
    city: str = Field(..., min_length=1, max_length=120)
    state: str | None = Field(None, max_length=120)
    country: str = Field("USA", max_length=120)
    zip_code: str | None = Field(None, max_length=20)
    full_address: str | None = Field(None, max_length=500)
    latitude: float = Field(0.0, ge=-90, le=90)
    longitude: float = Field(0.0, ge=-180, le=180)
    price_per_night: Decimal = Field(..., ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    max_guests: int = Field(..., ge=1)
    bedrooms: int = Field(1, ge=0)
    beds: int = Field(1, ge=0)
    bathrooms: int = Field(1, ge=0)
    amenities: list[Amenity] = Field(default_factory=list)
    images: list[PropertyImage] = Field(default_factory=list)
    house_rules: HouseRules = Field(default_factory=HouseRules)
    is_available: bool = True


class PropertyUpdate(BaseModel):
    """Schema for partially updating a property. All fields optional.

    Rating and approval are deliberately absent: they are owned by the review
    and approval flows.
    """

    title: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1, max_length=2000)
    property_type: PropertyType | None = None
    city: str | None = Field(None, min_length=1, max_length=120)
    state: str | None = Field(None, max_length=120)
    country: str | None = Field(None, max_length=120)
    zip_code: str | None = Field(None, max_length=20)
    full_address: str | None = Field(None, max_length=500)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    price_per_night: Decimal | None = Field(None, ge=0)
    currency: str | None = Field(None, min_length=3, max_length=3)
    max_guests: int | None = Field(None, ge=1)
    bedrooms: int | None = Field(None, ge=0)
    beds: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)
    amenities: list[Amenity] | None = None
    images: list[PropertyImage] | None = None
    house_rules: HouseRules | None = None
    is_available: bool | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class HostSummary(BaseModel):
    id: uuid.UUID
    name: str
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class PropertyResponse(BaseModel):
    """Public property information returned from the API."""

    id: uuid.UUID
    host_id: uuid.UUID
    host: HostSummary | None = None
    title: str
    description: str
    property_type: str
    city: str
    state: str | None = None
    country: str
    zip_code: str | None = None
    full_address: str | None = None
    latitude: float
    longitude: float
    price_per_night: Decimal
    currency: str
    max_guests: int
    bedrooms: int
    beds: int
    bathrooms: int
    amenities: list[str]
    images: list[PropertyImage]
    house_rules: HouseRules
    rating_average: float
    rating_count: int
    is_available: bool
    is_approved: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PropertySummary(BaseModel):
    """Compact property view embedded in reservation details."""

    id: uuid.UUID
    title: str
    property_type: str
    city: str
    country: str
    full_address: str | None = None
    images: list[PropertyImage]
    house_rules: HouseRules

    model_config = ConfigDict(from_attributes=True)


class PropertyListResponse(BaseModel):
    """Paginated list of properties."""

    items: list[PropertyResponse]
    total: int
    page: int
    pages: int
