"""JWT helpers for session tokens.

Tokens carry ``userId``, ``username``, ``email`` and ``role`` claims, are
signed with HMAC (HS256 by default) using the configured secret and expire
after ``JWT_EXPIRES_MINUTES`` (one hour by default). There is no refresh or
revocation: a client logs in again once the token expires.
"""

import datetime as dt
import logging
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from roombook.config import get_settings
from roombook.models.errors import BookingError, ErrorCode
from roombook.models.user import TokenClaims, User

logger = logging.getLogger(__name__)


def create_jwt(user: User, now: dt.datetime | None = None) -> str:
    """Sign a session token for a user.

    Args:
        user: Account to issue the token for
        now: Issue time (defaults to current UTC time)

    Returns:
        Encoded JWT string
    """
    settings = get_settings()
    issued = now or dt.datetime.now(dt.UTC)
    payload: dict[str, Any] = {
        "userId": user.user_id,
        "username": user.username,
        "email": user.email,
        "role": user.role.value,
        "iat": int(issued.timestamp()),
        "exp": int((issued + dt.timedelta(minutes=settings.jwt_expires_minutes)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_jwt(token: str | None) -> TokenClaims:
    """Verify a session token and return its claims.

    Raises:
        BookingError: AUTH_REQUIRED when no token is given, SESSION_EXPIRED
            for an expired token, INVALID_TOKEN for anything else.
    """
    if not token:
        raise BookingError(ErrorCode.AUTH_REQUIRED)

    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise BookingError(ErrorCode.SESSION_EXPIRED) from None
    except JWTError as e:
        logger.debug("Rejected token: %s", type(e).__name__)
        raise BookingError(ErrorCode.INVALID_TOKEN) from None

    try:
        return TokenClaims.model_validate(payload)
    except ValueError:
        raise BookingError(ErrorCode.INVALID_TOKEN) from None


def try_decode_jwt(token: str | None) -> TokenClaims | None:
    """Decode a token when present and valid, otherwise return None."""
    try:
        return decode_jwt(token)
    except BookingError:
        return None
