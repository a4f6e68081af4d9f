"""HTTP client for the RoomBook API.

The server keeps the session in an httponly ``token`` cookie; the underlying
``httpx.Client`` stores it after login and sends it on every later call.

Usage:
    client = RoomBookClient.connect("http://localhost:4000")
    client.login("guest@example.com", "Secret1!")
    rooms = client.search_properties(location="Dhaka", maxGuests=2)
"""

import datetime as dt
import json
from collections.abc import Sequence
from typing import Any

import httpx

from roombook.models import (
    Booking,
    BookingWithProperty,
    Notification,
    Property,
    Review,
    User,
    UserSummary,
    VendorRequest,
    VendorRequestWithRequester,
)
from roombook.services import booking_rules
from roombook.utils.logging import get_logger

logger = get_logger(__name__)

ImageFile = tuple[str, bytes, str]


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body
        if isinstance(body, dict):
            self.error_code = body.get("error_code")
            message = body.get("message") or body.get("error")
        else:
            self.error_code = None
            message = None
        self.message = message or f"Request failed with status {status_code}"
        super().__init__(self.message)


class RoomBookClient:
    """Typed wrapper over every RoomBook endpoint."""

    def __init__(self, http: httpx.Client) -> None:
        self.http = http

    @classmethod
    def connect(
        cls,
        base_url: str,
        transport: httpx.BaseTransport | None = None,
        timeout: float = 10.0,
    ) -> "RoomBookClient":
        return cls(httpx.Client(base_url=base_url, transport=transport, timeout=timeout))

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "RoomBookClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self.http.request(method, path, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = response.text
        if response.is_error:
            logger.debug("%s %s -> %d", method, path, response.status_code)
            raise ApiError(response.status_code, body)
        return body

    # Session

    def signup(self, username: str, email: str, password: str) -> User:
        body = self._request(
            "POST",
            "/api/auth/signup",
            json={"username": username, "email": email, "password": password},
        )
        return User.model_validate(body["user"])

    def login(self, email: str, password: str) -> User:
        body = self._request(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )
        return User.model_validate(body["user"])

    def admin_login(self, email: str, password: str) -> User:
        body = self._request(
            "POST", "/api/auth/admin/login", json={"email": email, "password": password}
        )
        return User.model_validate(body["user"])

    def logout(self) -> None:
        self._request("POST", "/api/auth/logout")
        self.http.cookies.clear()

    def me(self) -> User | None:
        """Current session user, or None when signed out."""
        try:
            body = self._request("GET", "/api/auth/me")
        except ApiError as e:
            if e.status_code == 401:
                return None
            raise
        return User.model_validate(body["user"])

    # Listings

    def search_properties(self, **filters: Any) -> list[Property]:
        """Search listings; keyword names match the query parameters."""
        params = {k: _query_value(v) for k, v in filters.items() if v not in (None, "")}
        body = self._request("GET", "/api/auth/getProperties", params=params)
        return [Property.model_validate(p) for p in body["data"]]

    def get_property(self, property_id: str) -> Property:
        body = self._request("GET", f"/api/auth/getProperty/{property_id}")
        return Property.model_validate(body["data"])

    def create_property(self, fields: dict[str, Any], images: Sequence[ImageFile] = ()) -> None:
        self._request(
            "POST",
            "/api/vendor/create-property",
            data=_form_fields(fields),
            files=[("images", image) for image in images] or None,
        )

    def update_property(
        self,
        property_id: str,
        fields: dict[str, Any],
        images: Sequence[ImageFile] = (),
        removed_images: Sequence[str] = (),
    ) -> Property:
        data: dict[str, Any] = _form_fields(fields)
        if removed_images:
            data["removedImages"] = list(removed_images)
        body = self._request(
            "PUT",
            f"/api/vendor/update-property/{property_id}",
            data=data,
            files=[("images", image) for image in images] or None,
        )
        return Property.model_validate(body["data"])

    def vendor_properties(self) -> list[Property]:
        body = self._request("GET", "/api/vendor/getProperties")
        return [Property.model_validate(p) for p in body["data"]]

    def vendor_property(self, property_id: str) -> Property:
        body = self._request("GET", f"/api/vendor/getProperty/{property_id}")
        return Property.model_validate(body["data"])

    def delete_property(self, property_id: str) -> None:
        self._request("DELETE", f"/api/vendor/deleteProperty/{property_id}")

    # Bookings and reviews

    def book_property(
        self,
        property_id: str,
        check_in: dt.date,
        check_out: dt.date,
        guests: int,
        price_per_night: float | None = None,
    ) -> Booking:
        """Book a stay.

        The date range is checked locally first; an invalid stay raises
        ``BookingError`` without any request being sent.
        """
        nights = booking_rules.count_nights(check_in, check_out)
        payload: dict[str, Any] = {
            "propertyId": property_id,
            "checkIn": check_in.isoformat(),
            "checkOut": check_out.isoformat(),
            "guests": guests,
        }
        if price_per_night is not None:
            payload["totalAmount"] = nights * price_per_night
        body = self._request("POST", "/api/user/book-property", json=payload)
        return Booking.model_validate(body["data"])

    def get_bookings(self, which: str | None = None) -> list[BookingWithProperty]:
        params = {"filter": which} if which else None
        body = self._request("GET", "/api/user/getBookings", params=params)
        return [BookingWithProperty.model_validate(b) for b in body["data"]]

    def cancel_booking(self, booking_id: str) -> None:
        self._request("DELETE", f"/api/user/properties/bookings/{booking_id}")

    def add_review(self, property_id: str, rating: int, comment: str = "") -> Review:
        body = self._request(
            "POST",
            f"/api/user/properties/reviews/{property_id}",
            json={"rating": rating, "comment": comment},
        )
        return Review.model_validate(body["data"])

    # Vendor applications

    def post_vendor_request(self, payload: dict[str, str]) -> VendorRequest:
        body = self._request("POST", "/api/user/postVendorRequest", json=payload)
        return VendorRequest.model_validate(body["data"])

    # Notifications

    def notifications(self) -> list[Notification]:
        body = self._request("GET", "/api/user/notifications")
        return [Notification.model_validate(n) for n in body]

    def unread_count(self) -> int:
        return int(self._request("GET", "/api/user/notifications/unread-count")["unreadCount"])

    def mark_notifications_read(self) -> None:
        self._request("PUT", "/api/user/notifications/mark-as-read")

    # Administration

    def admin_users(
        self, page: int = 1, limit: int = 10, role: str | None = None
    ) -> list[UserSummary]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if role:
            params["role"] = role
        body = self._request("GET", "/api/admin/getUsers", params=params)
        return [UserSummary.model_validate(u) for u in body["data"]]

    def admin_vendor_requests(self) -> list[VendorRequestWithRequester]:
        body = self._request("GET", "/api/admin/getVendorRequests")
        return [VendorRequestWithRequester.model_validate(r) for r in body["data"]]

    def update_vendor_request(self, request_id: str, action: str) -> None:
        self._request(
            "PUT",
            "/api/admin/updateVendorRequest",
            json={"requestId": request_id, "action": action},
        )

    def admin_properties(self) -> list[Property]:
        body = self._request("GET", "/api/admin/getProperties")
        return [Property.model_validate(p) for p in body["data"]]

    def admin_delete_property(self, property_id: str) -> None:
        self._request("DELETE", f"/api/admin/deleteProperty/{property_id}")

    def admin_bookings(self) -> list[BookingWithProperty]:
        body = self._request("GET", "/api/admin/getBookings")
        return [BookingWithProperty.model_validate(b) for b in body["data"]]

    def admin_delete_booking(self, booking_id: str) -> None:
        self._request("DELETE", f"/api/admin/deleteBooking/{booking_id}")


def _query_value(value: Any) -> Any:
    if isinstance(value, dt.date):
        return value.isoformat()
    return value


def _form_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Encode listing fields for a multipart form; dicts become JSON strings."""
    encoded: dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, dict):
            encoded[key] = json.dumps(value, default=str)
        else:
            encoded[key] = str(value)
    return encoded
