"""Unit tests for VendorRequestService."""

import pytest

from roombook.models import (
    BookingError,
    ErrorCode,
    NotificationType,
    PendingStatus,
    User,
    UserRole,
    VendorRequestCreate,
)
from roombook.services.notifications import NotificationService
from roombook.services.users import UserService
from roombook.services.vendor_requests import VendorRequestService


def application(**overrides: str) -> VendorRequestCreate:
    data = {
        "firstName": "Rahim",
        "lastName": "Uddin",
        "email": "rahim@example.com",
        "mobile": "+8801712345678",
        "message": "I would like to list my guest house.",
    }
    data.update(overrides)
    return VendorRequestCreate.model_validate(data)


class TestSubmit:
    def test_marks_requester_pending(
        self, vendor_requests: VendorRequestService, users: UserService, guest: User
    ) -> None:
        request = vendor_requests.submit(guest.user_id, application())

        assert request.requester_id == guest.user_id
        assert users.require_user(guest.user_id).pending_status == PendingStatus.PENDING

    def test_missing_fields(self, vendor_requests: VendorRequestService, guest: User) -> None:
        with pytest.raises(BookingError) as exc_info:
            vendor_requests.submit(guest.user_id, application(lastName=" "))
        assert exc_info.value.code == ErrorCode.MISSING_FIELDS
        assert exc_info.value.details == {"fields": "last_name"}

    def test_message_limit(self, vendor_requests: VendorRequestService, guest: User) -> None:
        with pytest.raises(BookingError) as exc_info:
            vendor_requests.submit(guest.user_id, application(message="x" * 101))
        assert exc_info.value.code == ErrorCode.MISSING_FIELDS
        assert "100" in exc_info.value.message

    def test_vendor_not_eligible(
        self, vendor_requests: VendorRequestService, vendor: User
    ) -> None:
        with pytest.raises(BookingError) as exc_info:
            vendor_requests.submit(vendor.user_id, application())
        assert exc_info.value.code == ErrorCode.NOT_ELIGIBLE_FOR_VENDOR

    def test_one_pending_request_at_a_time(
        self, vendor_requests: VendorRequestService, guest: User
    ) -> None:
        vendor_requests.submit(guest.user_id, application())
        with pytest.raises(BookingError) as exc_info:
            vendor_requests.submit(guest.user_id, application())
        assert exc_info.value.code == ErrorCode.REQUEST_ALREADY_PENDING


class TestListPending:
    def test_attaches_requester(
        self, vendor_requests: VendorRequestService, guest: User
    ) -> None:
        vendor_requests.submit(guest.user_id, application())

        [pending] = vendor_requests.list_pending()
        assert pending.requester is not None
        assert pending.requester.username == "guest"
        assert pending.requester.role == UserRole.USER


class TestResolve:
    @pytest.mark.parametrize(
        "action,role,message",
        [
            ("approve", UserRole.VENDOR, "Your vendor request has been approved! 🎉"),
            ("reject", UserRole.USER, "Your vendor request has been rejected."),
        ],
    )
    def test_decision(
        self,
        vendor_requests: VendorRequestService,
        users: UserService,
        notifications: NotificationService,
        guest: User,
        action: str,
        role: UserRole,
        message: str,
    ) -> None:
        request = vendor_requests.submit(guest.user_id, application())

        vendor_requests.resolve(request.request_id, action)

        user = users.require_user(guest.user_id)
        assert user.role == role
        assert user.pending_status == PendingStatus.NOT_PENDING
        [note] = notifications.list_for_user(guest.user_id)
        assert note.message == message
        assert note.type == NotificationType.VENDOR_REQUEST
        assert vendor_requests.list_pending() == []

    def test_invalid_action(self, vendor_requests: VendorRequestService, guest: User) -> None:
        request = vendor_requests.submit(guest.user_id, application())
        with pytest.raises(BookingError) as exc_info:
            vendor_requests.resolve(request.request_id, "maybe")
        assert exc_info.value.code == ErrorCode.INVALID_ACTION

    def test_unknown_request(self, vendor_requests: VendorRequestService) -> None:
        with pytest.raises(BookingError) as exc_info:
            vendor_requests.resolve("missing", "approve")
        assert exc_info.value.code == ErrorCode.VENDOR_REQUEST_NOT_FOUND

    def test_rejected_user_can_apply_again(
        self, vendor_requests: VendorRequestService, guest: User
    ) -> None:
        request = vendor_requests.submit(guest.user_id, application())
        vendor_requests.resolve(request.request_id, "reject")

        assert vendor_requests.submit(guest.user_id, application()).request_id
