"""Unit tests for error codes and the error envelope."""

from roombook.api.exceptions import get_http_status_for_error
from roombook.models import BookingError, ErrorCode, ErrorResponse
from roombook.models.errors import ERROR_MESSAGES, ERROR_RECOVERY


class TestErrorCatalogue:
    def test_every_code_has_message_and_recovery(self) -> None:
        for code in ErrorCode:
            assert ERROR_MESSAGES[code]
            assert ERROR_RECOVERY[code]

    def test_codes_are_unique(self) -> None:
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))


class TestBookingError:
    def test_defaults_to_catalogue_message(self) -> None:
        error = BookingError(ErrorCode.OWN_PROPERTY)
        assert error.message == "You cannot book your own property."
        assert str(error) == error.message

    def test_custom_message_and_details(self) -> None:
        error = BookingError(
            ErrorCode.MAX_GUESTS_EXCEEDED,
            message="This property allows a maximum of 4 guests.",
            details={"maximum": "4"},
        )
        body = error.to_response()
        assert isinstance(body, ErrorResponse)
        assert body.model_dump(mode="json") == {
            "success": False,
            "error_code": "ERR_003",
            "message": "This property allows a maximum of 4 guests.",
            "recovery": "Reduce the number of guests",
            "details": {"maximum": "4"},
        }


class TestHttpStatusMapping:
    def test_known_codes(self) -> None:
        assert get_http_status_for_error(ErrorCode.OWN_PROPERTY) == 403
        assert get_http_status_for_error(ErrorCode.AUTH_REQUIRED) == 401
        assert get_http_status_for_error(ErrorCode.PROPERTY_NOT_FOUND) == 404
        assert get_http_status_for_error(ErrorCode.CONCURRENT_MODIFICATION) == 409
        assert get_http_status_for_error(ErrorCode.IMAGE_TOO_LARGE) == 413
        assert get_http_status_for_error(ErrorCode.INVALID_IMAGE_TYPE) == 415

    def test_business_rules_default_to_400(self) -> None:
        assert get_http_status_for_error(ErrorCode.DATES_UNAVAILABLE) == 400
        assert get_http_status_for_error(ErrorCode.ALREADY_REVIEWED) == 400
