"""Booking models."""

from datetime import date, datetime

from pydantic import Field

from .base import CamelModel
from .enums import BookingStatus
from .property import Property


class BookingCreate(CamelModel):
    """Booking request body.

    Every field is optional at the schema level so that a missing value is
    reported with the booking-specific message rather than a generic
    validation error.
    """

    property_id: str | None = None
    check_in: date | None = None
    check_out: date | None = None
    guests: int | None = Field(default=None, ge=1)
    total_amount: float | None = Field(default=None, ge=0)


class Booking(CamelModel):
    """A confirmed stay."""

    booking_id: str = Field(..., alias="_id")
    property_id: str
    user_id: str
    check_in: date
    check_out: date
    guests: int = Field(..., ge=1)
    nights: int = Field(..., ge=1)
    total_amount: float = Field(..., ge=0)
    status: BookingStatus = BookingStatus.CONFIRMED
    created_at: datetime


class BookingWithProperty(Booking):
    """Booking with its property attached, as shown on dashboards."""

    property: Property | None = None
