"""Unit tests for ReviewService."""

import datetime as dt

import pytest

from roombook.models import BookingCreate, BookingError, ErrorCode, Property, User
from roombook.services.bookings import BookingService
from roombook.services.notifications import NotificationService
from roombook.services.properties import PropertyService
from roombook.services.reviews import ReviewService
from roombook.services.users import UserService

TODAY = dt.datetime.now(dt.UTC).date()


def book(bookings: BookingService, listing: Property, user: User, start: int) -> None:
    bookings.book(
        user.user_id,
        user.username,
        BookingCreate(
            property_id=listing.property_id,
            check_in=TODAY + dt.timedelta(days=start),
            check_out=TODAY + dt.timedelta(days=start + 2),
            guests=1,
        ),
    )


class TestAddReview:
    def test_updates_rating_summary(
        self,
        reviews: ReviewService,
        bookings: BookingService,
        properties: PropertyService,
        users: UserService,
        listing: Property,
        guest: User,
    ) -> None:
        other = users.create_user("other", "other@example.com", "Secret1!")
        book(bookings, listing, guest, 10)
        book(bookings, listing, other, 20)

        reviews.add_review(listing.property_id, guest.user_id, guest.username, 5, " Lovely ")
        reviews.add_review(listing.property_id, other.user_id, other.username, 2)

        prop = properties.require_property(listing.property_id)
        assert prop.review_count == 2
        assert prop.average_rating == 3.5
        assert prop.reviews[0].comment == "Lovely"

    def test_requires_booking(
        self, reviews: ReviewService, listing: Property, guest: User
    ) -> None:
        with pytest.raises(BookingError) as exc_info:
            reviews.add_review(listing.property_id, guest.user_id, guest.username, 4)
        assert exc_info.value.code == ErrorCode.REVIEW_REQUIRES_BOOKING

    def test_one_review_per_guest(
        self,
        reviews: ReviewService,
        bookings: BookingService,
        listing: Property,
        guest: User,
    ) -> None:
        book(bookings, listing, guest, 10)
        reviews.add_review(listing.property_id, guest.user_id, guest.username, 4)

        with pytest.raises(BookingError) as exc_info:
            reviews.add_review(listing.property_id, guest.user_id, guest.username, 1)
        assert exc_info.value.code == ErrorCode.ALREADY_REVIEWED

    def test_unknown_listing(self, reviews: ReviewService, guest: User) -> None:
        with pytest.raises(BookingError) as exc_info:
            reviews.add_review("missing", guest.user_id, guest.username, 4)
        assert exc_info.value.code == ErrorCode.PROPERTY_NOT_FOUND

    def test_notifies_owner(
        self,
        reviews: ReviewService,
        bookings: BookingService,
        notifications: NotificationService,
        listing: Property,
        vendor: User,
        guest: User,
    ) -> None:
        book(bookings, listing, guest, 10)
        reviews.add_review(listing.property_id, guest.user_id, guest.username, 5)

        latest = notifications.list_for_user(vendor.user_id)[0]
        assert latest.message == "guest left a 5-star review on Lakeside Cottage."
