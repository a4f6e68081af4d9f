"""Unit tests for admin moderation routes."""

import datetime as dt
from typing import Any

import pytest
from fastapi.testclient import TestClient
from starlette.status import (
    HTTP_200_OK,
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
)

from roombook.models import BookingCreate, Property, User, VendorRequestCreate

TODAY = dt.datetime.now(dt.UTC).date()


@pytest.fixture
def as_admin(login_as: Any, admin: User) -> User:
    login_as("admin@example.com")
    return admin


@pytest.fixture
def pending_request(vendor_requests: Any, guest: User) -> str:
    request = vendor_requests.submit(
        guest.user_id,
        VendorRequestCreate(
            first_name="Rahim",
            last_name="Uddin",
            email="rahim@example.com",
            mobile="+8801712345678",
            message="Guest house in Sylhet",
        ),
    )
    return request.request_id


class TestAccess:
    def test_vendor_is_forbidden(self, client: TestClient, login_as: Any, vendor: User) -> None:
        login_as("host@example.com")
        assert client.get("/api/admin/getUsers").status_code == HTTP_403_FORBIDDEN


class TestUsers:
    def test_lists_users(
        self, client: TestClient, as_admin: User, guest: User, vendor: User
    ) -> None:
        response = client.get("/api/admin/getUsers")

        assert response.status_code == HTTP_200_OK
        users = response.json()["data"]
        assert {u["username"] for u in users} == {"admin", "guest", "host"}
        # Only the admin has logged in
        assert users[0]["username"] == "admin"
        assert "notifications" not in users[0]

    def test_role_filter_and_paging(
        self, client: TestClient, as_admin: User, guest: User, vendor: User
    ) -> None:
        vendors = client.get("/api/admin/getUsers?role=vendor").json()["data"]
        assert [u["username"] for u in vendors] == ["host"]

        page = client.get("/api/admin/getUsers?page=2&limit=2").json()["data"]
        assert len(page) == 1

    def test_limit_bounds(self, client: TestClient, as_admin: User) -> None:
        response = client.get("/api/admin/getUsers?limit=1000")
        assert response.status_code == HTTP_422_UNPROCESSABLE_ENTITY


class TestVendorRequests:
    def test_lists_pending_with_requester(
        self, client: TestClient, as_admin: User, pending_request: str
    ) -> None:
        [request] = client.get("/api/admin/getVendorRequests").json()["data"]

        assert request["_id"] == pending_request
        assert request["requester"]["username"] == "guest"

    def test_approve(
        self,
        client: TestClient,
        as_admin: User,
        login_as: Any,
        pending_request: str,
    ) -> None:
        response = client.put(
            "/api/admin/updateVendorRequest",
            json={"requestId": pending_request, "action": "approve"},
        )

        assert response.status_code == HTTP_200_OK
        assert response.json()["message"] == (
            "Request processed, user updated, and notification saved"
        )
        assert client.get("/api/admin/getVendorRequests").json()["data"] == []

        # Promotion applies on the next request without logging in again
        login_as("guest@example.com")
        assert client.get("/api/vendor/getProperties").status_code == HTTP_200_OK

    def test_invalid_action(
        self, client: TestClient, as_admin: User, pending_request: str
    ) -> None:
        response = client.put(
            "/api/admin/updateVendorRequest",
            json={"requestId": pending_request, "action": "promote"},
        )

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Invalid action"

    def test_unknown_request(self, client: TestClient, as_admin: User) -> None:
        response = client.put(
            "/api/admin/updateVendorRequest", json={"requestId": "nope", "action": "reject"}
        )
        assert response.status_code == HTTP_404_NOT_FOUND


class TestModeration:
    def test_properties_and_removal(
        self, client: TestClient, as_admin: User, listing: Property
    ) -> None:
        [prop] = client.get("/api/admin/getProperties").json()["data"]
        assert prop["_id"] == listing.property_id

        response = client.delete(f"/api/admin/deleteProperty/{listing.property_id}")
        assert response.status_code == HTTP_200_OK
        assert client.get("/api/admin/getProperties").json()["data"] == []

    def test_bookings_and_cancellation(
        self,
        client: TestClient,
        as_admin: User,
        bookings: Any,
        listing: Property,
        guest: User,
    ) -> None:
        booking = bookings.book(
            guest.user_id,
            guest.username,
            BookingCreate(
                property_id=listing.property_id,
                check_in=TODAY + dt.timedelta(days=3),
                check_out=TODAY + dt.timedelta(days=4),
                guests=1,
            ),
        )

        [listed] = client.get("/api/admin/getBookings").json()["data"]
        assert listed["_id"] == booking.booking_id

        response = client.delete(f"/api/admin/deleteBooking/{booking.booking_id}")
        assert response.status_code == HTTP_200_OK
        assert client.get("/api/admin/getBookings").json()["data"] == []
