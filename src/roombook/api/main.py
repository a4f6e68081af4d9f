"""FastAPI application for the RoomBook REST API.

Routers:
- /api/auth: sessions and public listing search
- /api/vendor: listing management
- /api/user: bookings, reviews, vendor applications, notifications
- /api/admin: moderation
- /auth/google: social login
- /uploads: stored listing images
"""

from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from mangum import Mangum

from roombook import __version__
from roombook.api.exceptions import register_exception_handlers
from roombook.api.middleware import CorrelationIdMiddleware
from roombook.api.routes import (
    admin_router,
    auth_router,
    oauth_router,
    user_router,
    vendor_router,
)
from roombook.config import get_settings
from roombook.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


async def ping() -> dict[str, Any]:
    """Health check endpoint at /api/ping."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "roombook-api",
    }


def create_app() -> FastAPI:
    """Build the application from the current settings."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="RoomBook API",
        description="REST API for listings, bookings and vendor moderation",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    register_exception_handlers(app)

    app.include_router(auth_router, prefix="/api")
    app.include_router(vendor_router, prefix="/api")
    app.include_router(user_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")
    app.include_router(oauth_router)
    app.add_api_route("/api/ping", ping, methods=["GET"], tags=["health"])

    app.mount(
        "/uploads",
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )

    logger.info("RoomBook API configured for environment %s", settings.environment)
    return app


app = create_app()

# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 4000, reload: bool = False) -> None:
    """Run the FastAPI server with uvicorn.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 4000)
        reload: Enable hot reload for development (default: False)
    """
    import uvicorn

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run("roombook.api.main:app", host=host, port=port, reload=True)
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
