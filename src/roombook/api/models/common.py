"""Shared API request/response models.

Response envelopes and validation error formatting used across endpoints.
Domain entities (Property, Booking, User, ...) live in ``roombook.models``.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from roombook.models import Booking, Review, User, VendorRequest
from roombook.models.base import CamelModel

T = TypeVar("T")

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


class ValidationErrorDetail(BaseModel):
    """Detail of a single validation error."""

    model_config = ConfigDict(strict=True)

    loc: list[str] = Field(
        ...,
        description="Path to the field that failed validation",
        examples=[["body", "checkIn"]],
    )
    msg: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Error type identifier")


class ValidationErrorResponse(BaseModel):
    """Response format for request validation errors (HTTP 422)."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: str = "ERR_VALIDATION"
    message: str = "Request validation failed"
    recovery: str = "Check the request parameters and try again"
    details: list[ValidationErrorDetail] = Field(default_factory=list)


class SuccessMessage(BaseModel):
    """Generic success response for operations without data payload."""

    model_config = ConfigDict(strict=True)

    success: bool = True
    message: str = Field(
        default="Operation completed successfully",
        description="Human-readable success message",
    )


class DataResponse(BaseModel, Generic[T]):
    """``{success, message, data}`` envelope used by list and detail endpoints."""

    success: bool = True
    message: str | None = None
    data: T


class AuthResponse(SuccessMessage):
    """Login/signup acknowledgement with the signed-in account."""

    user: User | None = None


class UserEnvelope(BaseModel):
    user: User


class UnreadCount(CamelModel):
    unread_count: int


class ReviewCreate(CamelModel):
    """Review submission body."""

    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(default="", max_length=500)


class BookingResponse(DataResponse[Booking]):
    message: str | None = "Booking successful!"


class ReviewResponse(DataResponse[Review]):
    message: str | None = "Review added"


class VendorRequestResponse(DataResponse[VendorRequest]):
    message: str | None = "Message saved successfully!"


def format_validation_errors(errors: Any) -> ValidationErrorResponse:
    """Convert Pydantic validation errors to ValidationErrorResponse.

    Args:
        errors: Sequence of error dicts from ``ValidationError.errors()``

    Returns:
        ValidationErrorResponse ready for JSON serialization.
    """
    details = [
        ValidationErrorDetail(
            loc=[str(loc) for loc in error.get("loc", [])],
            msg=str(error.get("msg", "")),
            type=str(error.get("type", "")),
        )
        for error in errors
    ]
    return ValidationErrorResponse(details=details)
