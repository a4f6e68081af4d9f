"""Session authentication for API routes.

The session JWT is read from the ``token`` cookie set at login, or from an
``Authorization: Bearer`` header for non-browser clients.
"""

from collections.abc import Callable

from fastapi import Depends, Request, Response

from roombook.api.dependencies import get_user_service
from roombook.config import get_settings
from roombook.models import BookingError, ErrorCode, TokenClaims, User, UserRole
from roombook.services.users import UserService
from roombook.utils.jwt import create_jwt, decode_jwt, try_decode_jwt

TOKEN_COOKIE = "token"


def get_token(request: Request) -> str | None:
    token = request.cookies.get(TOKEN_COOKIE)
    if token:
        return token
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def get_current_claims(request: Request) -> TokenClaims:
    """Claims of the signed-in caller; 401 when missing, expired or invalid."""
    return decode_jwt(get_token(request))


def get_optional_claims(request: Request) -> TokenClaims | None:
    """Claims of the caller when a valid session exists, else None."""
    return try_decode_jwt(get_token(request))


def get_current_user(
    claims: TokenClaims = Depends(get_current_claims),
    users: UserService = Depends(get_user_service),
) -> User:
    """Load the caller's account; role and pending status come from storage."""
    return users.require_user(claims.user_id)


def require_role(*roles: UserRole) -> Callable[..., User]:
    """Dependency factory that admits only callers holding one of ``roles``.

    Example:
        @router.get("/getUsers")
        async def get_users(admin: User = Depends(require_role(UserRole.ADMIN))):
            ...
    """

    def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise BookingError(
                ErrorCode.FORBIDDEN,
                details={"required_role": ",".join(r.value for r in roles)},
            )
        return user

    return dependency


def set_session_cookie(response: Response, user: User) -> str:
    """Issue a session token for ``user`` and store it in the cookie."""
    settings = get_settings()
    token = create_jwt(user)
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
        max_age=settings.jwt_expires_minutes * 60,
    )
    return token


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=TOKEN_COOKIE,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
