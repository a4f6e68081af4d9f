"""Integration tests for the complete RoomBook flow.

Drives the API through RoomBookClient, one client per person, against a
single app backed by mocked DynamoDB:
1. A guest signs up and applies to become a vendor
2. An admin approves the application
3. The new vendor lists a property
4. Another guest searches, books and reviews it
5. Both sides receive notifications; the guest cancels
"""

import datetime as dt
from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from roombook.api.main import create_app
from roombook.client import ApiError, BookingDashboard, RoomBookClient, VendorRequestForm
from roombook.models import BookingFilter, PendingStatus, User, UserRole

pytestmark = pytest.mark.integration

TODAY = dt.datetime.now(dt.UTC).date()


@pytest.fixture
def open_session(aws: None) -> Generator[Callable[[], RoomBookClient], None, None]:
    """Factory for API clients that share one app but keep separate cookies."""
    app = create_app()
    opened: list[TestClient] = []

    def open_client() -> RoomBookClient:
        test_client = TestClient(app)
        test_client.__enter__()
        opened.append(test_client)
        return RoomBookClient(test_client)

    yield open_client

    for test_client in opened:
        test_client.__exit__(None, None, None)


class TestBookingFlow:
    def test_vendor_onboarding_to_cancelled_stay(
        self,
        open_session: Callable[[], RoomBookClient],
        admin: User,
        listing_form: Any,
    ) -> None:
        host = open_session()
        staff = open_session()
        guest = open_session()

        # 1. Sign up and apply
        applicant = host.signup("lakehost", "lakehost@example.com", "Secret1!")
        assert applicant.role == UserRole.USER

        form = VendorRequestForm(
            first_name="Rahim",
            last_name="Uddin",
            email="lakehost@example.com",
            mobile="1712345678",
            message="Cottage by the lake",
        )
        assert form.submit(host) == "/"
        assert host.me().pending_status == PendingStatus.PENDING

        # 2. Admin approval
        staff.admin_login("admin@example.com", "Secret1!")
        [request] = staff.admin_vendor_requests()
        assert request.mobile == "+8801712345678"
        staff.update_vendor_request(request.request_id, "approve")

        me = host.me()
        assert me.role == UserRole.VENDOR
        assert me.pending_status == PendingStatus.NOT_PENDING
        assert host.unread_count() == 1

        # 3. List a property
        host.create_property(listing_form())
        [prop] = host.vendor_properties()
        assert prop.amenities.wifi

        # 4. Search, book and review
        guest.signup("traveller", "traveller@example.com", "Secret1!")
        check_in = TODAY + dt.timedelta(days=10)
        check_out = TODAY + dt.timedelta(days=13)

        [found] = guest.search_properties(
            location="sylhet", maxGuests=2, checkIn=check_in, checkOut=check_out
        )
        assert found.property_id == prop.property_id

        booking = guest.book_property(
            prop.property_id, check_in, check_out, 2, price_per_night=found.price
        )
        assert booking.nights == 3
        assert booking.total_amount == 450

        with pytest.raises(ApiError) as exc_info:
            guest.book_property(prop.property_id, check_in, check_out, 1)
        assert exc_info.value.error_code == "ERR_005"

        # Booked nights drop the listing from a search over the same dates
        assert guest.search_properties(checkIn=check_in, checkOut=check_out) == []

        review = guest.add_review(prop.property_id, 5, "Lovely jetty")
        assert review.username == "traveller"
        assert guest.get_property(prop.property_id).average_rating == 5

        dashboard = BookingDashboard.fetch(guest)
        assert dashboard.counts()[BookingFilter.UPCOMING] == 1

        # 5. Notifications and cancellation
        messages = [n.message for n in host.notifications()]
        assert any("traveller booked Lakeside Cottage" in m for m in messages)

        guest.cancel_booking(booking.booking_id)
        assert guest.get_bookings() == []
        assert guest.get_property(prop.property_id).booked_dates == []
        assert host.unread_count() == 4

        host.mark_notifications_read()
        assert host.unread_count() == 0

    def test_guest_cannot_use_vendor_or_admin_routes(
        self, open_session: Callable[[], RoomBookClient]
    ) -> None:
        guest = open_session()
        guest.signup("traveller", "traveller@example.com", "Secret1!")

        with pytest.raises(ApiError) as exc_info:
            guest.vendor_properties()
        assert exc_info.value.status_code == 403

        with pytest.raises(ApiError) as exc_info:
            guest.admin_users()
        assert exc_info.value.status_code == 403

        guest.logout()
        assert guest.me() is None
