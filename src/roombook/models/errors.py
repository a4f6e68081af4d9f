"""Standard error codes for RoomBook.

Every domain failure is raised as ``BookingError`` carrying one of these
codes. The API layer converts it to an ``ErrorResponse`` body and maps the
code to an HTTP status (see ``roombook.api.exceptions``).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Error codes grouped by domain."""

    # Booking errors (ERR_001-ERR_009)
    INVALID_DATE_RANGE = "ERR_001"
    CHECK_IN_IN_PAST = "ERR_002"
    MAX_GUESTS_EXCEEDED = "ERR_003"
    OUTSIDE_AVAILABILITY = "ERR_004"
    DATES_UNAVAILABLE = "ERR_005"
    OWN_PROPERTY = "ERR_006"
    MISSING_BOOKING_DETAILS = "ERR_007"
    BOOKING_NOT_FOUND = "ERR_008"
    NOT_BOOKING_OWNER = "ERR_009"

    # Property errors
    PROPERTY_NOT_FOUND = "ERR_PROP_001"
    NOT_PROPERTY_OWNER = "ERR_PROP_002"
    INVALID_PROPERTY_INPUT = "ERR_PROP_003"
    INVALID_IMAGE_TYPE = "ERR_PROP_004"
    IMAGE_TOO_LARGE = "ERR_PROP_005"
    CONCURRENT_MODIFICATION = "ERR_PROP_006"

    # Review errors
    ALREADY_REVIEWED = "ERR_REV_001"
    REVIEW_REQUIRES_BOOKING = "ERR_REV_002"

    # Authentication errors
    AUTH_REQUIRED = "ERR_AUTH_001"
    SESSION_EXPIRED = "ERR_AUTH_002"
    INVALID_TOKEN = "ERR_AUTH_003"
    INVALID_CREDENTIALS = "ERR_AUTH_004"
    FORBIDDEN = "ERR_AUTH_005"
    USER_EXISTS = "ERR_AUTH_006"
    WEAK_PASSWORD = "ERR_AUTH_007"
    INVALID_EMAIL = "ERR_AUTH_008"
    USER_NOT_FOUND = "ERR_AUTH_009"
    MISSING_FIELDS = "ERR_AUTH_010"
    OAUTH_FAILED = "ERR_AUTH_011"

    # Vendor request errors
    VENDOR_REQUEST_NOT_FOUND = "ERR_VR_001"
    INVALID_ACTION = "ERR_VR_002"
    REQUEST_ALREADY_PENDING = "ERR_VR_003"
    NOT_ELIGIBLE_FOR_VENDOR = "ERR_VR_004"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    # Booking errors
    ErrorCode.INVALID_DATE_RANGE: "Check-out date must be after check-in date.",
    ErrorCode.CHECK_IN_IN_PAST: "Check-in date cannot be in the past.",
    ErrorCode.MAX_GUESTS_EXCEEDED: "Number of guests exceeds the property's capacity.",
    ErrorCode.OUTSIDE_AVAILABILITY: "Booking is outside the property's availability range.",
    ErrorCode.DATES_UNAVAILABLE: "This property is already booked for the selected dates.",
    ErrorCode.OWN_PROPERTY: "You cannot book your own property.",
    ErrorCode.MISSING_BOOKING_DETAILS: "Please provide all the required details.",
    ErrorCode.BOOKING_NOT_FOUND: "Booking not found",
    ErrorCode.NOT_BOOKING_OWNER: "You can only cancel your own bookings.",
    # Property errors
    ErrorCode.PROPERTY_NOT_FOUND: "Property not found",
    ErrorCode.NOT_PROPERTY_OWNER: "You can only manage your own properties.",
    ErrorCode.INVALID_PROPERTY_INPUT: "Invalid input format",
    ErrorCode.INVALID_IMAGE_TYPE: "Invalid file type, only JPG, PNG, WEBP are allowed",
    ErrorCode.IMAGE_TOO_LARGE: "Image exceeds the maximum upload size",
    ErrorCode.CONCURRENT_MODIFICATION: "The property was modified by another request",
    # Review errors
    ErrorCode.ALREADY_REVIEWED: "You have already reviewed this property",
    ErrorCode.REVIEW_REQUIRES_BOOKING: "Only guests who booked this property can review it",
    # Authentication errors
    ErrorCode.AUTH_REQUIRED: "Unauthorized - No token provided",
    ErrorCode.SESSION_EXPIRED: "Session expired. Please log in again.",
    ErrorCode.INVALID_TOKEN: "Unauthorized - Invalid token",
    ErrorCode.INVALID_CREDENTIALS: "Invalid credentials",
    ErrorCode.FORBIDDEN: "Unauthorized: insufficient role for this action",
    ErrorCode.USER_EXISTS: "User already exists",
    ErrorCode.WEAK_PASSWORD: (
        "Password must be at least 8 characters long, include 1 uppercase, "
        "1 lowercase, 1 number, and 1 special character"
    ),
    ErrorCode.INVALID_EMAIL: "Invalid email format",
    ErrorCode.USER_NOT_FOUND: "User not found",
    ErrorCode.MISSING_FIELDS: "All fields are required",
    ErrorCode.OAUTH_FAILED: "Social login failed",
    # Vendor request errors
    ErrorCode.VENDOR_REQUEST_NOT_FOUND: "Request not found",
    ErrorCode.INVALID_ACTION: "Invalid action",
    ErrorCode.REQUEST_ALREADY_PENDING: "A vendor request is already being processed",
    ErrorCode.NOT_ELIGIBLE_FOR_VENDOR: "Only regular users can apply to become vendors",
}

ERROR_RECOVERY: dict[ErrorCode, str] = {
    # Booking error recovery
    ErrorCode.INVALID_DATE_RANGE: "Choose a check-out date after the check-in date",
    ErrorCode.CHECK_IN_IN_PAST: "Choose a check-in date from today onwards",
    ErrorCode.MAX_GUESTS_EXCEEDED: "Reduce the number of guests",
    ErrorCode.OUTSIDE_AVAILABILITY: "Pick dates inside the listing's availability window",
    ErrorCode.DATES_UNAVAILABLE: "Pick dates that do not overlap existing bookings",
    ErrorCode.OWN_PROPERTY: "Book a property listed by another vendor",
    ErrorCode.MISSING_BOOKING_DETAILS: "Provide property, dates and guest count",
    ErrorCode.BOOKING_NOT_FOUND: "Verify the booking ID",
    ErrorCode.NOT_BOOKING_OWNER: "Sign in with the account that made the booking",
    # Property error recovery
    ErrorCode.PROPERTY_NOT_FOUND: "Verify the property ID",
    ErrorCode.NOT_PROPERTY_OWNER: "Sign in with the vendor account that owns the listing",
    ErrorCode.INVALID_PROPERTY_INPUT: "Check email, mobile, amenities and availability fields",
    ErrorCode.INVALID_IMAGE_TYPE: "Upload JPG, PNG or WEBP images",
    ErrorCode.IMAGE_TOO_LARGE: "Upload images of 5 MB or less",
    ErrorCode.CONCURRENT_MODIFICATION: "Reload the property and try again",
    # Review error recovery
    ErrorCode.ALREADY_REVIEWED: "Each guest can review a property once",
    ErrorCode.REVIEW_REQUIRES_BOOKING: "Book the property before reviewing it",
    # Authentication error recovery
    ErrorCode.AUTH_REQUIRED: "Log in and retry",
    ErrorCode.SESSION_EXPIRED: "Log in again",
    ErrorCode.INVALID_TOKEN: "Log in again",
    ErrorCode.INVALID_CREDENTIALS: "Check email and password",
    ErrorCode.FORBIDDEN: "Use an account with the required role",
    ErrorCode.USER_EXISTS: "Log in with the existing account",
    ErrorCode.WEAK_PASSWORD: "Choose a stronger password",
    ErrorCode.INVALID_EMAIL: "Enter a valid email address",
    ErrorCode.USER_NOT_FOUND: "Sign up or log in again",
    ErrorCode.MISSING_FIELDS: "Fill in every required field",
    ErrorCode.OAUTH_FAILED: "Retry the social login or use email and password",
    # Vendor request error recovery
    ErrorCode.VENDOR_REQUEST_NOT_FOUND: "Refresh the request list",
    ErrorCode.INVALID_ACTION: "Use 'approve' or 'reject'",
    ErrorCode.REQUEST_ALREADY_PENDING: "Wait for an admin to review the open request",
    ErrorCode.NOT_ELIGIBLE_FOR_VENDOR: "No action needed",
}


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        message: Optional[str] = None,
        details: Optional[dict[str, str]] = None,
    ) -> "ErrorResponse":
        """Create an ErrorResponse from an error code.

        Args:
            code: The error code
            message: Optional message overriding the default for the code
            details: Optional additional context about the error

        Returns:
            An ErrorResponse with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=message or ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class BookingError(Exception):
    """Exception raised by RoomBook domain operations."""

    def __init__(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code
        self.message = message or ERROR_MESSAGES[code]
        self.recovery = ERROR_RECOVERY[code]
        self.details = details
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse body."""
        return ErrorResponse.from_code(self.code, self.message, self.details)
