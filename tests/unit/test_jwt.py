"""Unit tests for session token helpers."""

import datetime as dt

import pytest
from jose import jwt

from roombook.models import BookingError, ErrorCode, User, UserRole
from roombook.utils.jwt import create_jwt, decode_jwt, try_decode_jwt


@pytest.fixture
def user() -> User:
    now = dt.datetime.now(dt.UTC)
    return User(
        user_id="u-1",
        username="guest",
        email="guest@example.com",
        role=UserRole.VENDOR,
        created_at=now,
        updated_at=now,
    )


class TestCreateJwt:
    def test_carries_session_claims(self, user: User) -> None:
        claims = jwt.get_unverified_claims(create_jwt(user))
        assert claims["userId"] == "u-1"
        assert claims["username"] == "guest"
        assert claims["email"] == "guest@example.com"
        assert claims["role"] == "vendor"

    def test_expires_one_hour_after_issue(self, user: User) -> None:
        issued = dt.datetime(2025, 6, 1, 12, 0, tzinfo=dt.UTC)
        claims = jwt.get_unverified_claims(create_jwt(user, now=issued))
        assert claims["exp"] - claims["iat"] == 3600


class TestDecodeJwt:
    def test_round_trip(self, user: User) -> None:
        claims = decode_jwt(create_jwt(user))
        assert claims.user_id == "u-1"
        assert claims.role == UserRole.VENDOR

    def test_missing_token(self) -> None:
        with pytest.raises(BookingError) as exc_info:
            decode_jwt(None)
        assert exc_info.value.code == ErrorCode.AUTH_REQUIRED

    def test_expired_token(self, user: User) -> None:
        token = create_jwt(user, now=dt.datetime.now(dt.UTC) - dt.timedelta(hours=2))
        with pytest.raises(BookingError) as exc_info:
            decode_jwt(token)
        assert exc_info.value.code == ErrorCode.SESSION_EXPIRED

    def test_wrong_signature(self, user: User) -> None:
        token = jwt.encode(
            {"userId": "u-1", "username": "x", "email": "x@example.com", "role": "admin"},
            "another-secret",
            algorithm="HS256",
        )
        with pytest.raises(BookingError) as exc_info:
            decode_jwt(token)
        assert exc_info.value.code == ErrorCode.INVALID_TOKEN

    def test_garbage_token(self) -> None:
        with pytest.raises(BookingError) as exc_info:
            decode_jwt("not-a-jwt")
        assert exc_info.value.code == ErrorCode.INVALID_TOKEN

    def test_try_decode_swallows_invalid_tokens(self, user: User) -> None:
        assert try_decode_jwt("not-a-jwt") is None
        assert try_decode_jwt(None) is None
        assert try_decode_jwt(create_jwt(user)).user_id == "u-1"
