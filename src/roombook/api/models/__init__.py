"""API request and response models."""

from roombook.api.models.common import (
    AuthResponse,
    BookingResponse,
    DataResponse,
    ReviewCreate,
    ReviewResponse,
    SuccessMessage,
    UnreadCount,
    UserEnvelope,
    ValidationErrorDetail,
    ValidationErrorResponse,
    VendorRequestResponse,
    format_validation_errors,
)

__all__ = [
    "AuthResponse",
    "BookingResponse",
    "DataResponse",
    "ReviewCreate",
    "ReviewResponse",
    "SuccessMessage",
    "UnreadCount",
    "UserEnvelope",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
    "VendorRequestResponse",
    "format_validation_errors",
]
