"""Python client for the RoomBook API and the page rules built on it."""

from .forms import BookingForm, StayQuote, VendorRequestForm
from .http import ApiError, RoomBookClient
from .request_counter import PendingRequestCounter, pending_requests
from .views import BookingDashboard, NavLink, VendorPropertyGrid, nav_links

__all__ = [
    "ApiError",
    "BookingDashboard",
    "BookingForm",
    "NavLink",
    "PendingRequestCounter",
    "RoomBookClient",
    "StayQuote",
    "VendorPropertyGrid",
    "VendorRequestForm",
    "nav_links",
    "pending_requests",
]
