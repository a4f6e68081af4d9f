"""Pytest configuration and fixtures for RoomBook tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto
- Service instances wired to the mocked tables
- Sample users, listings and an API TestClient
"""

import datetime as dt
import os
from collections.abc import Generator
from typing import Any

import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ["DYNAMODB_TABLE_PREFIX"] = "test-roombook"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret"
os.environ.setdefault("UPLOAD_DIR", "/tmp/roombook-test-uploads")

from roombook.api.dependencies import (  # noqa: E402
    get_booking_service,
    get_notification_service,
    get_property_service,
    get_review_service,
    get_user_service,
    get_vendor_request_service,
    reset_services,
)
from roombook.models import Property, User, UserRole  # noqa: E402
from roombook.services.dynamodb import get_dynamodb_service  # noqa: E402

PASSWORD = "Secret1!"

TODAY = dt.datetime.now(dt.UTC).date()


def _listing_fields(**overrides: Any) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "name": "Lakeside Cottage",
        "type": "Cottage",
        "description": "Two-bedroom cottage with a private jetty.",
        "location": "Sylhet",
        "address": "12 Lake Road, Sylhet",
        "price": "150",
        "bedrooms": "2",
        "bathrooms": "1",
        "squareFeet": "900",
        "maxGuests": "4",
        "amenities": '{"wifi": true, "parking": true, "hotTub": true}',
        "availability": (
            '{"startDate": "%s", "endDate": "%s"}'
            % (TODAY.isoformat(), (TODAY + dt.timedelta(days=365)).isoformat())
        ),
        "mobile": "+8801712345678",
        "email": "Host@Example.com",
    }
    fields.update(overrides)
    return fields


# === Core fixtures ===


@pytest.fixture(autouse=True)
def reset_singletons(tmp_path: Any, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Give each test fresh settings, services and an empty upload directory."""
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    reset_services()
    yield
    reset_services()


@pytest.fixture
def aws() -> Generator[None, None, None]:
    """Mocked AWS with every RoomBook table created."""
    with mock_aws():
        get_dynamodb_service().create_tables()
        yield


@pytest.fixture
def users(aws: None) -> Any:
    return get_user_service()


@pytest.fixture
def notifications(aws: None) -> Any:
    return get_notification_service()


@pytest.fixture
def properties(aws: None) -> Any:
    return get_property_service()


@pytest.fixture
def bookings(aws: None) -> Any:
    return get_booking_service()


@pytest.fixture
def reviews(aws: None) -> Any:
    return get_review_service()


@pytest.fixture
def vendor_requests(aws: None) -> Any:
    return get_vendor_request_service()


# === Sample data ===


@pytest.fixture
def guest(users: Any) -> User:
    return users.create_user("guest", "guest@example.com", PASSWORD)


@pytest.fixture
def vendor(users: Any) -> User:
    return users.create_user("host", "host@example.com", PASSWORD, role=UserRole.VENDOR)


@pytest.fixture
def admin(users: Any) -> User:
    return users.create_user("admin", "admin@example.com", PASSWORD, role=UserRole.ADMIN)


@pytest.fixture
def listing(properties: Any, vendor: User) -> Property:
    return properties.create(vendor.user_id, _listing_fields(), uploads=[])


# === API client ===


@pytest.fixture
def client(aws: None) -> Generator[Any, None, None]:
    """TestClient against a freshly configured app."""
    from fastapi.testclient import TestClient

    from roombook.api.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def listing_form() -> Any:
    """Factory for valid listing form fields, as a vendor would submit them."""
    return _listing_fields


@pytest.fixture
def login_as(client: Any) -> Any:
    """Sign the TestClient in; the session cookie is kept by the client."""

    def login(email: str, password: str = PASSWORD) -> None:
        client.cookies.clear()
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text

    return login
