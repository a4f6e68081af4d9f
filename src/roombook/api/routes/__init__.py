"""API routes package.

Routers are organized by audience:

- auth: session endpoints and public listing search (/api/auth)
- vendor: listing management for vendors (/api/vendor)
- user: bookings, reviews, vendor applications, notifications (/api/user)
- admin: moderation of users, listings, bookings and requests (/api/admin)
- oauth: Google sign-in (/auth/google, outside the /api prefix)
"""

from roombook.api.routes.admin import router as admin_router
from roombook.api.routes.auth import router as auth_router
from roombook.api.routes.oauth import router as oauth_router
from roombook.api.routes.user import router as user_router
from roombook.api.routes.vendor import router as vendor_router

__all__ = [
    "admin_router",
    "auth_router",
    "oauth_router",
    "user_router",
    "vendor_router",
]
