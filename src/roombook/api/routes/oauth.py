"""Google social login.

- GET /auth/google: redirect to Google's consent screen
- GET /auth/google/callback: exchange the code, sign the user in and send
  the browser back to the frontend
"""

import secrets
from urllib.parse import urlencode

from fastapi import APIRouter, Cookie, Depends, Query
from fastapi.responses import RedirectResponse
from starlette.status import HTTP_302_FOUND

from roombook.api.dependencies import get_google_oauth_client, get_user_service
from roombook.api.security import set_session_cookie
from roombook.config import get_settings
from roombook.models import BookingError
from roombook.services.google_oauth import GoogleOAuthClient
from roombook.services.users import UserService
from roombook.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["oauth"])

STATE_COOKIE = "oauth_state"
STATE_MAX_AGE = 600


def _login_failed(reason: str) -> RedirectResponse:
    url = f"{get_settings().frontend_url}/login?{urlencode({'error': reason})}"
    response = RedirectResponse(url=url, status_code=HTTP_302_FOUND)
    response.delete_cookie(STATE_COOKIE, path="/auth")
    return response


@router.get("/google", response_model=None, summary="Start Google sign-in")
async def google_login(
    oauth: GoogleOAuthClient = Depends(get_google_oauth_client),
) -> RedirectResponse:
    """Send the browser to Google with a one-time state bound to this browser."""
    state = secrets.token_urlsafe(32)
    response = RedirectResponse(url=oauth.authorization_url(state), status_code=HTTP_302_FOUND)
    response.set_cookie(
        key=STATE_COOKIE,
        value=state,
        max_age=STATE_MAX_AGE,
        path="/auth",
        httponly=True,
        samesite="lax",
        secure=get_settings().is_production,
    )
    return response


@router.get("/google/callback", response_model=None, summary="Google sign-in callback")
async def google_callback(
    code: str | None = Query(None, description="Authorization code from Google"),
    error: str | None = Query(None, description="OAuth2 error code"),
    state: str | None = Query(None, description="State issued by /auth/google"),
    expected_state: str | None = Cookie(None, alias=STATE_COOKIE),
    oauth: GoogleOAuthClient = Depends(get_google_oauth_client),
    users: UserService = Depends(get_user_service),
) -> RedirectResponse:
    """Finish Google sign-in.

    On success the session cookie is set and the browser lands on
    ``FRONTEND_URL/auth-success``; on failure it lands on the login page
    with an ``error`` query parameter. The ``state`` parameter must match
    the cookie set when sign-in started.
    """
    if error:
        logger.info("Google sign-in aborted: %s", error)
        return _login_failed(error)

    if not (
        state
        and expected_state
        and secrets.compare_digest(state.encode(), expected_state.encode())
    ):
        logger.warning("Google sign-in rejected: state mismatch")
        return _login_failed("invalid_state")

    if not code:
        logger.info("Google sign-in aborted: missing code")
        return _login_failed("missing_code")

    try:
        profile = oauth.fetch_profile(code)
        user = users.login_with_google(profile.google_id, profile.email, profile.name)
    except BookingError as e:
        logger.warning("Google sign-in failed: %s", e.message)
        return _login_failed("google_auth_failed")

    response = RedirectResponse(
        url=f"{get_settings().frontend_url}/auth-success", status_code=HTTP_302_FOUND
    )
    response.delete_cookie(STATE_COOKIE, path="/auth")
    set_session_cookie(response, user)
    return response
