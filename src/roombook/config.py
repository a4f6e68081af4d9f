"""Runtime configuration read from environment variables."""

import os
from functools import lru_cache

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Application settings.

    Values come from the process environment; see ``get_settings``.
    """

    environment: str = "dev"
    log_level: str = "INFO"
    table_prefix: str = "roombook-dev"
    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = Field(default=60, ge=1)
    upload_dir: str = "uploads"
    max_upload_bytes: int = 5 * 1024 * 1024
    frontend_url: str = "http://localhost:5173"
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    google_client_id: str = ""
    google_client_secret: str = ""
    google_redirect_uri: str = "http://localhost:4000/auth/google/callback"

    @property
    def is_production(self) -> bool:
        return self.environment == "prod"


@lru_cache
def get_settings() -> Settings:
    """Build settings from the environment once per process.

    Call ``get_settings.cache_clear()`` after changing environment
    variables in tests.
    """
    environment = os.getenv("ENVIRONMENT", "dev")
    frontend_url = os.getenv("FRONTEND_URL", "http://localhost:5173")
    origins = os.getenv("CORS_ORIGINS")

    return Settings(
        environment=environment,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        table_prefix=os.getenv("DYNAMODB_TABLE_PREFIX", f"roombook-{environment}"),
        jwt_secret=os.getenv("JWT_SECRET", "dev-secret-change-me"),
        jwt_expires_minutes=int(os.getenv("JWT_EXPIRES_MINUTES", "60")),
        upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
        max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024))),
        frontend_url=frontend_url,
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()]
        if origins
        else [frontend_url],
        google_client_id=os.getenv("GOOGLE_CLIENT_ID", ""),
        google_client_secret=os.getenv("GOOGLE_CLIENT_SECRET", ""),
        google_redirect_uri=os.getenv(
            "GOOGLE_REDIRECT_URI", "http://localhost:4000/auth/google/callback"
        ),
    )
