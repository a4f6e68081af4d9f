"""Property listing models."""

from datetime import date, datetime
from typing import Any

from pydantic import Field, model_validator

from .base import CamelModel
from .enums import PropertyStatus


class Amenities(CamelModel):
    """Fixed set of amenity flags."""

    wifi: bool = False
    parking: bool = False
    breakfast: bool = False
    air_conditioning: bool = False
    heating: bool = False
    tv: bool = False
    kitchen: bool = False
    workspace: bool = False


class AvailabilityWindow(CamelModel):
    """Dates between which a listing accepts bookings."""

    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def check_order(self) -> "AvailabilityWindow":
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValueError("availability end date must be after start date")
        return self

    def contains(self, check_in: date, check_out: date) -> bool:
        """True when the stay fits inside the window; open ends are unbounded."""
        if self.start_date and check_in < self.start_date:
            return False
        if self.end_date and check_out > self.end_date:
            return False
        return True


class BookedInterval(CamelModel):
    """A reserved stay recorded on the property."""

    booking_id: str
    user_id: str
    check_in: date
    check_out: date


class Review(CamelModel):
    """Guest review embedded in a property."""

    user_id: str
    username: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(default="", max_length=500)
    created_at: datetime


class Property(CamelModel):
    """A bookable listing owned by a vendor."""

    property_id: str = Field(..., alias="_id")
    user_id: str = Field(..., alias="userID")
    name: str
    type: str
    description: str
    location: str
    address: str
    price: float = Field(..., ge=0)
    bedrooms: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)
    square_feet: str | None = None
    max_guests: int = Field(..., ge=1)
    amenities: Amenities = Field(default_factory=Amenities)
    availability: AvailabilityWindow = Field(default_factory=AvailabilityWindow)
    images: list[str] = Field(default_factory=list)
    status: PropertyStatus = PropertyStatus.AVAILABLE
    mobile: str
    email: str
    booked_dates: list[BookedInterval] = Field(default_factory=list)
    reviews: list[Review] = Field(default_factory=list)
    average_rating: float = 0
    review_count: int = 0
    version: int = 0
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def sync_rating(self) -> "Property":
        self.recompute_rating()
        return self

    def recompute_rating(self) -> None:
        """Derive average_rating and review_count from reviews."""
        if self.reviews:
            total = sum(r.rating for r in self.reviews)
            self.average_rating = total / len(self.reviews)
            self.review_count = len(self.reviews)
        else:
            self.average_rating = 0
            self.review_count = 0

    def has_review_from(self, user_id: str) -> bool:
        return any(r.user_id == user_id for r in self.reviews)


class PropertyDraft(CamelModel):
    """Validated listing fields submitted by a vendor form."""

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    bedrooms: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)
    square_feet: str | None = None
    max_guests: int = Field(..., ge=1)
    amenities: Amenities = Field(default_factory=Amenities)
    availability: AvailabilityWindow = Field(default_factory=AvailabilityWindow)
    mobile: str
    email: str


class PropertySearch(CamelModel):
    """Search filters accepted by the public listing endpoint."""

    type: str | None = None
    location: str | None = None
    price: float | None = Field(default=None, ge=0)
    max_guests: int | None = Field(default=None, ge=1)
    check_in: date | None = None
    check_out: date | None = None
    average_rating: float | None = Field(default=None, ge=0, le=5)


def filter_amenities(raw: dict[str, Any]) -> Amenities:
    """Keep only known amenity flags from a camelCase or snake_case dict."""
    known = {}
    for field_name, field in Amenities.model_fields.items():
        alias = field.alias or field_name
        if alias in raw:
            known[field_name] = bool(raw[alias])
        elif field_name in raw:
            known[field_name] = bool(raw[field_name])
    return Amenities(**known)
