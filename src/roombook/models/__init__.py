"""Pydantic models for RoomBook data entities."""

from .booking import Booking, BookingCreate, BookingWithProperty
from .enums import (
    BookingFilter,
    BookingStatus,
    NotificationType,
    PendingStatus,
    PropertyStatus,
    UserRole,
    VendorRequestAction,
    VendorRequestStatus,
)
from .errors import BookingError, ErrorCode, ErrorResponse
from .property import (
    Amenities,
    AvailabilityWindow,
    BookedInterval,
    Property,
    PropertyDraft,
    PropertySearch,
    Review,
    filter_amenities,
)
from .user import (
    Credentials,
    Notification,
    TokenClaims,
    User,
    UserCreate,
    UserSummary,
)
from .vendor_request import (
    Requester,
    VendorRequest,
    VendorRequestCreate,
    VendorRequestDecision,
    VendorRequestWithRequester,
)

__all__ = [
    # Enums
    "BookingFilter",
    "BookingStatus",
    "NotificationType",
    "PendingStatus",
    "PropertyStatus",
    "UserRole",
    "VendorRequestAction",
    "VendorRequestStatus",
    # Errors
    "BookingError",
    "ErrorCode",
    "ErrorResponse",
    # User
    "Credentials",
    "Notification",
    "TokenClaims",
    "User",
    "UserCreate",
    "UserSummary",
    # Property
    "Amenities",
    "AvailabilityWindow",
    "BookedInterval",
    "Property",
    "PropertyDraft",
    "PropertySearch",
    "Review",
    "filter_amenities",
    # Booking
    "Booking",
    "BookingCreate",
    "BookingWithProperty",
    # Vendor requests
    "Requester",
    "VendorRequest",
    "VendorRequestCreate",
    "VendorRequestDecision",
    "VendorRequestWithRequester",
]
