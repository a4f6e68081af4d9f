"""Enumeration types for RoomBook data models."""

from enum import Enum


class UserRole(str, Enum):
    """Role of an account; gates vendor and admin features."""

    USER = "user"
    VENDOR = "vendor"
    ADMIN = "admin"


class PendingStatus(str, Enum):
    """Whether a user has an open vendor request."""

    PENDING = "pending"
    NOT_PENDING = "not_pending"


class PropertyStatus(str, Enum):
    """Listing status of a property."""

    AVAILABLE = "available"
    BOOKED = "booked"
    UNAVAILABLE = "unavailable"


class BookingStatus(str, Enum):
    """Status of a booking."""

    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class BookingFilter(str, Enum):
    """Time-relative booking buckets shown on the user dashboard."""

    UPCOMING = "upcoming"
    CURRENT = "current"
    PAST = "past"


class VendorRequestStatus(str, Enum):
    """Lifecycle of a vendor application."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class VendorRequestAction(str, Enum):
    """Admin decision on a vendor application."""

    APPROVE = "approve"
    REJECT = "reject"


class NotificationType(str, Enum):
    """Category of an in-app notification."""

    INFO = "info"
    BOOKING = "booking"
    CANCELLATION = "cancellation"
    REVIEW = "review"
    VENDOR_REQUEST = "vendor_request"
