"""Google sign-in via the OAuth 2.0 authorization code flow."""

from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from roombook.config import Settings
from roombook.models import BookingError, ErrorCode
from roombook.utils.logging import get_logger

logger = get_logger(__name__)

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPES = ("openid", "profile", "email")


@dataclass(frozen=True)
class GoogleProfile:
    google_id: str
    email: str
    name: str | None = None


class GoogleOAuthClient:
    """Builds the consent redirect and exchanges codes for a profile."""

    def __init__(self, settings: Settings, http: httpx.Client | None = None) -> None:
        self.settings = settings
        self.http = http or httpx.Client(timeout=10.0)

    def authorization_url(self, state: str | None = None) -> str:
        params = {
            "client_id": self.settings.google_client_id,
            "redirect_uri": self.settings.google_redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "access_type": "online",
            "prompt": "select_account",
        }
        if state:
            params["state"] = state
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    def fetch_profile(self, code: str) -> GoogleProfile:
        """Exchange an authorization code and read the user's profile.

        Raises:
            BookingError: OAUTH_FAILED if Google rejects the code or the
                profile lacks an email.
        """
        try:
            token_response = self.http.post(
                TOKEN_URL,
                data={
                    "code": code,
                    "client_id": self.settings.google_client_id,
                    "client_secret": self.settings.google_client_secret,
                    "redirect_uri": self.settings.google_redirect_uri,
                    "grant_type": "authorization_code",
                },
            )
            token_response.raise_for_status()
            access_token = token_response.json()["access_token"]

            profile_response = self.http.get(
                USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"}
            )
            profile_response.raise_for_status()
            profile = profile_response.json()
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.warning("Google code exchange failed: %s", e)
            raise BookingError(ErrorCode.OAUTH_FAILED) from e

        if not profile.get("sub") or not profile.get("email"):
            raise BookingError(ErrorCode.OAUTH_FAILED, details={"reason": "profile incomplete"})

        return GoogleProfile(
            google_id=str(profile["sub"]),
            email=profile["email"],
            name=profile.get("name"),
        )
