"""FastAPI exception handlers for converting BookingError to HTTP responses.

Every failure leaves the API as ``{success, error_code, message, recovery,
details}``. The ErrorCode-to-HTTP status mapping follows REST conventions:
- 400 Bad Request: Validation/business rule violations
- 401 Unauthorized: Authentication required or failed
- 403 Forbidden: Authorization failures
- 404 Not Found: Resource not found
- 409 Conflict: Concurrent modification of a listing
- 413/415: Rejected image uploads
- 422 Unprocessable Entity: Request schema validation
- 500 Internal Server Error: Anything unexpected

Usage:
    from roombook.api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from roombook.api.models.common import format_validation_errors
from roombook.models.errors import BookingError, ErrorCode
from roombook.utils.logging import get_logger

logger = get_logger(__name__)

# Map ErrorCode to HTTP status codes
ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    # Ownership and role failures -> 403 Forbidden
    ErrorCode.OWN_PROPERTY: HTTP_403_FORBIDDEN,
    ErrorCode.NOT_BOOKING_OWNER: HTTP_403_FORBIDDEN,
    ErrorCode.NOT_PROPERTY_OWNER: HTTP_403_FORBIDDEN,
    ErrorCode.REVIEW_REQUIRES_BOOKING: HTTP_403_FORBIDDEN,
    ErrorCode.FORBIDDEN: HTTP_403_FORBIDDEN,
    # Authentication errors -> 401 Unauthorized
    ErrorCode.AUTH_REQUIRED: HTTP_401_UNAUTHORIZED,
    ErrorCode.SESSION_EXPIRED: HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_TOKEN: HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_CREDENTIALS: HTTP_401_UNAUTHORIZED,
    ErrorCode.OAUTH_FAILED: HTTP_401_UNAUTHORIZED,
    # Not found errors -> 404 Not Found
    ErrorCode.BOOKING_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.PROPERTY_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.VENDOR_REQUEST_NOT_FOUND: HTTP_404_NOT_FOUND,
    # Lost optimistic-concurrency race -> 409 Conflict
    ErrorCode.CONCURRENT_MODIFICATION: HTTP_409_CONFLICT,
    # Upload rejections
    ErrorCode.IMAGE_TOO_LARGE: HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    ErrorCode.INVALID_IMAGE_TYPE: HTTP_415_UNSUPPORTED_MEDIA_TYPE,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode.

    Returns:
        HTTP status code, defaults to 400 if not explicitly mapped.
    """
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    """Convert a domain BookingError to its JSON error body and status."""
    status_code = get_http_status_for_error(exc.code)
    if status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info(
            "%s %s rejected with %s", request.method, request.url.path, exc.code.value
        )

    return JSONResponse(
        status_code=status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request schema failures in the standard error envelope."""
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content=format_validation_errors(exc.errors()).model_dump(mode="json"),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with a generic error response.

    The real error is logged; the client only sees a generic message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    error_response = {
        "success": False,
        "error_code": "ERR_INTERNAL",
        "message": "An unexpected error occurred",
        "recovery": "Please try again later or contact support",
        "details": None,
    }

    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(BookingError, booking_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
