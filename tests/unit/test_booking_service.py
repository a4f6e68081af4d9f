"""Unit tests for BookingService.

Tests for:
- Reserving a stay and the booked_dates entry on the listing
- Validation failures surfaced as BookingError
- Optimistic concurrency between racing bookings
- Listing, filtering and cancelling bookings
"""

import datetime as dt
from unittest.mock import patch

import pytest

from roombook.models import (
    BookingCreate,
    BookingError,
    BookingFilter,
    ErrorCode,
    NotificationType,
    Property,
    User,
)
from roombook.services.bookings import BookingService
from roombook.services.notifications import NotificationService
from roombook.services.properties import PropertyService
from roombook.services.users import UserService

TODAY = dt.datetime.now(dt.UTC).date()


def stay(listing: Property, start: int, end: int, guests: int = 2) -> BookingCreate:
    return BookingCreate(
        property_id=listing.property_id,
        check_in=TODAY + dt.timedelta(days=start),
        check_out=TODAY + dt.timedelta(days=end),
        guests=guests,
    )


class TestBook:
    def test_creates_booking_and_reserves_dates(
        self,
        bookings: BookingService,
        properties: PropertyService,
        listing: Property,
        guest: User,
    ) -> None:
        booking = bookings.book(guest.user_id, guest.username, stay(listing, 10, 15))

        assert booking.nights == 5
        assert booking.total_amount == 750
        assert bookings.get_booking(booking.booking_id) == booking

        prop = properties.require_property(listing.property_id)
        [interval] = prop.booked_dates
        assert interval.booking_id == booking.booking_id
        assert interval.check_in == booking.check_in
        assert prop.version == listing.version + 1

    def test_client_total_is_ignored(
        self, bookings: BookingService, listing: Property, guest: User
    ) -> None:
        body = stay(listing, 10, 12)
        body.total_amount = 1

        booking = bookings.book(guest.user_id, guest.username, body)
        assert booking.total_amount == 300

    def test_notifies_owner(
        self,
        bookings: BookingService,
        notifications: NotificationService,
        listing: Property,
        vendor: User,
        guest: User,
    ) -> None:
        bookings.book(guest.user_id, guest.username, stay(listing, 10, 12))

        [note] = notifications.list_for_user(vendor.user_id)
        assert note.type == NotificationType.BOOKING
        assert "guest booked Lakeside Cottage" in note.message

    def test_missing_details(self, bookings: BookingService, guest: User) -> None:
        with pytest.raises(BookingError) as exc_info:
            bookings.book(guest.user_id, guest.username, BookingCreate(property_id="p"))
        assert exc_info.value.code == ErrorCode.MISSING_BOOKING_DETAILS

    def test_dates_checked_before_listing_lookup(
        self, bookings: BookingService, guest: User
    ) -> None:
        body = BookingCreate(
            property_id="missing",
            check_in=TODAY - dt.timedelta(days=1),
            check_out=TODAY + dt.timedelta(days=1),
            guests=1,
        )
        with pytest.raises(BookingError) as exc_info:
            bookings.book(guest.user_id, guest.username, body)
        assert exc_info.value.code == ErrorCode.CHECK_IN_IN_PAST

    def test_unknown_listing(self, bookings: BookingService, guest: User) -> None:
        body = BookingCreate(
            property_id="missing",
            check_in=TODAY + dt.timedelta(days=1),
            check_out=TODAY + dt.timedelta(days=2),
            guests=1,
        )
        with pytest.raises(BookingError) as exc_info:
            bookings.book(guest.user_id, guest.username, body)
        assert exc_info.value.code == ErrorCode.PROPERTY_NOT_FOUND

    def test_own_listing(self, bookings: BookingService, listing: Property, vendor: User) -> None:
        with pytest.raises(BookingError) as exc_info:
            bookings.book(vendor.user_id, vendor.username, stay(listing, 10, 12))
        assert exc_info.value.code == ErrorCode.OWN_PROPERTY

    def test_overlapping_stay_rejected_back_to_back_allowed(
        self, bookings: BookingService, listing: Property, guest: User, users: UserService
    ) -> None:
        other = users.create_user("other", "other@example.com", "Secret1!")
        bookings.book(guest.user_id, guest.username, stay(listing, 10, 15))

        with pytest.raises(BookingError) as exc_info:
            bookings.book(other.user_id, other.username, stay(listing, 14, 16))
        assert exc_info.value.code == ErrorCode.DATES_UNAVAILABLE

        booking = bookings.book(other.user_id, other.username, stay(listing, 15, 16))
        assert booking.nights == 1


class TestConcurrency:
    def test_racing_booking_loses(
        self,
        bookings: BookingService,
        properties: PropertyService,
        listing: Property,
        guest: User,
        vendor: User,
    ) -> None:
        stale = properties.require_property(listing.property_id)
        bookings.book(guest.user_id, guest.username, stay(listing, 10, 15))

        # Second request read the listing before the first one committed
        with patch.object(properties, "require_property", return_value=stale):
            with pytest.raises(BookingError) as exc_info:
                bookings.book("someone-else", "other", stay(listing, 12, 14))
        assert exc_info.value.code == ErrorCode.CONCURRENT_MODIFICATION

        prop = properties.require_property(listing.property_id)
        assert len(prop.booked_dates) == 1
        assert len(bookings.list_all()) == 1


class TestListing:
    def test_list_for_user_with_property(
        self, bookings: BookingService, listing: Property, guest: User
    ) -> None:
        bookings.book(guest.user_id, guest.username, stay(listing, 10, 12))

        [booking] = bookings.list_for_user(guest.user_id)
        assert booking.property is not None
        assert booking.property.name == "Lakeside Cottage"

    def test_no_bookings_is_empty_list(self, bookings: BookingService, guest: User) -> None:
        assert bookings.list_for_user(guest.user_id) == []

    def test_filter(self, bookings: BookingService, listing: Property, guest: User) -> None:
        bookings.book(guest.user_id, guest.username, stay(listing, 10, 12))
        later = dt.datetime.combine(TODAY + dt.timedelta(days=20), dt.time(), tzinfo=dt.UTC)

        assert len(bookings.list_for_user(guest.user_id, BookingFilter.UPCOMING)) == 1
        assert bookings.list_for_user(guest.user_id, BookingFilter.PAST) == []
        assert len(bookings.list_for_user(guest.user_id, BookingFilter.PAST, now=later)) == 1


class TestCancel:
    def test_frees_dates_and_notifies_owner(
        self,
        bookings: BookingService,
        properties: PropertyService,
        notifications: NotificationService,
        listing: Property,
        vendor: User,
        guest: User,
    ) -> None:
        booking = bookings.book(guest.user_id, guest.username, stay(listing, 10, 12))

        bookings.cancel(booking.booking_id, user_id=guest.user_id)

        assert bookings.get_booking(booking.booking_id) is None
        assert properties.require_property(listing.property_id).booked_dates == []
        latest = notifications.list_for_user(vendor.user_id)[0]
        assert latest.type == NotificationType.CANCELLATION
        # Freed nights can be booked again
        assert bookings.book(guest.user_id, guest.username, stay(listing, 10, 12))

    def test_only_owner_can_cancel(
        self, bookings: BookingService, listing: Property, guest: User, vendor: User
    ) -> None:
        booking = bookings.book(guest.user_id, guest.username, stay(listing, 10, 12))
        with pytest.raises(BookingError) as exc_info:
            bookings.cancel(booking.booking_id, user_id=vendor.user_id)
        assert exc_info.value.code == ErrorCode.NOT_BOOKING_OWNER

    def test_admin_cancel_skips_owner_check(
        self, bookings: BookingService, listing: Property, guest: User
    ) -> None:
        booking = bookings.book(guest.user_id, guest.username, stay(listing, 10, 12))
        bookings.cancel(booking.booking_id)
        assert bookings.get_booking(booking.booking_id) is None

    def test_unknown_booking(self, bookings: BookingService) -> None:
        with pytest.raises(BookingError) as exc_info:
            bookings.cancel("missing")
        assert exc_info.value.code == ErrorCode.BOOKING_NOT_FOUND
