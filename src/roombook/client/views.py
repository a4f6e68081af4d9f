"""Page state derived from API data: navigation, vendor grid, dashboard."""

import datetime as dt
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from roombook.models import (
    BookingFilter,
    BookingWithProperty,
    PendingStatus,
    Property,
    User,
    UserRole,
)
from roombook.services import booking_rules

if TYPE_CHECKING:
    from .http import RoomBookClient

PROCESSING_LABEL = "Processing Request..."


@dataclass(frozen=True)
class NavLink:
    """A navigation entry; ``href`` is None for a plain label."""

    label: str
    href: str | None = None


def nav_links(user: User | None) -> list[NavLink]:
    """Navigation entries for the session user (None when signed out).

    Regular users see a Contact link for the vendor application, replaced by
    a non-link "Processing Request..." label while their request is pending.
    """
    links = [NavLink("Home", "/")]
    if user is None:
        links += [NavLink("Login", "/login"), NavLink("Sign Up", "/signup")]
        return links

    if user.role == UserRole.ADMIN:
        links.append(NavLink("Dashboard", "/admin"))
    else:
        links.append(NavLink("Dashboard", "/dashboard"))

    if user.role == UserRole.VENDOR:
        links.append(NavLink("Create Property", "/create-property"))
    elif user.role == UserRole.USER:
        if user.pending_status == PendingStatus.PENDING:
            links.append(NavLink(PROCESSING_LABEL))
        else:
            links.append(NavLink("Contact", "/contact"))
    return links


@dataclass
class VendorPropertyGrid:
    """The vendor's own listings as shown on their dashboard."""

    client: "RoomBookClient"
    properties: list[Property] = field(default_factory=list)

    def load(self) -> list[Property]:
        self.properties = self.client.vendor_properties()
        return self.properties

    def delete(self, property_id: str) -> None:
        """Delete a listing on the server, then drop exactly its card."""
        self.client.delete_property(property_id)
        self.properties = [p for p in self.properties if p.property_id != property_id]


@dataclass
class BookingDashboard:
    """A guest's bookings split into upcoming, current and past stays."""

    bookings: Sequence[BookingWithProperty] = ()

    @classmethod
    def fetch(cls, client: "RoomBookClient") -> "BookingDashboard":
        return cls(bookings=client.get_bookings())

    def show(
        self, which: BookingFilter, now: dt.datetime | None = None
    ) -> list[BookingWithProperty]:
        return booking_rules.filter_bookings(
            self.bookings, which, now or dt.datetime.now(dt.UTC)
        )

    def counts(self, now: dt.datetime | None = None) -> dict[BookingFilter, int]:
        buckets = booking_rules.partition_bookings(
            self.bookings, now or dt.datetime.now(dt.UTC)
        )
        return {which: len(items) for which, items in buckets.items()}
