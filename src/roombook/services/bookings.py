"""Booking lifecycle: reserve, list and cancel stays.

A booking and the matching ``booked_dates`` entry on its property are written
in one DynamoDB transaction guarded by the property's version, so two guests
racing for the same nights cannot both succeed.
"""

import datetime as dt
import uuid
from typing import TYPE_CHECKING

from roombook.models import (
    BookedInterval,
    Booking,
    BookingCreate,
    BookingError,
    BookingFilter,
    BookingWithProperty,
    ErrorCode,
    NotificationType,
    Property,
)
from roombook.services import booking_rules
from roombook.services.dynamodb import serialize_item, to_item
from roombook.utils.logging import get_logger, log_booking_event

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService
    from .notifications import NotificationService
    from .properties import PropertyService

logger = get_logger(__name__)


class BookingService:
    """Service for stays stored in the ``bookings`` table."""

    TABLE = "bookings"

    def __init__(
        self,
        db: "DynamoDBService",
        properties: "PropertyService",
        notifications: "NotificationService",
    ) -> None:
        """Initialize booking service.

        Args:
            db: DynamoDB service instance
            properties: Listing reads and versioned listing writes
            notifications: Used to tell owners about bookings and cancellations
        """
        self.db = db
        self.properties = properties
        self.notifications = notifications

    def get_booking(self, booking_id: str) -> Booking | None:
        item = self.db.get_item(self.TABLE, {"booking_id": booking_id})
        return Booking.model_validate(item) if item else None

    def book(
        self,
        user_id: str,
        username: str,
        body: BookingCreate,
        today: dt.date | None = None,
    ) -> Booking:
        """Reserve a stay.

        The total is recomputed from the listing price; any client-sent
        amount is ignored.

        Raises:
            BookingError: MISSING_BOOKING_DETAILS, CHECK_IN_IN_PAST,
                INVALID_DATE_RANGE, PROPERTY_NOT_FOUND, OWN_PROPERTY,
                MAX_GUESTS_EXCEEDED, OUTSIDE_AVAILABILITY, DATES_UNAVAILABLE
                or CONCURRENT_MODIFICATION.
        """
        if not (body.property_id and body.check_in and body.check_out and body.guests):
            raise BookingError(ErrorCode.MISSING_BOOKING_DETAILS)

        booking_rules.validate_dates(body.check_in, body.check_out, today)
        prop = self.properties.require_property(body.property_id)
        nights = booking_rules.validate_stay(
            prop, body.check_in, body.check_out, body.guests, user_id, today
        )

        booking = Booking(
            booking_id=uuid.uuid4().hex,
            property_id=prop.property_id,
            user_id=user_id,
            check_in=body.check_in,
            check_out=body.check_out,
            guests=body.guests,
            nights=nights,
            total_amount=nights * prop.price,
            created_at=dt.datetime.now(dt.UTC),
        )

        expected_version = prop.version
        prop.booked_dates.append(
            BookedInterval(
                booking_id=booking.booking_id,
                user_id=user_id,
                check_in=booking.check_in,
                check_out=booking.check_out,
            )
        )
        committed = self.db.transact_write(
            [
                {
                    "Put": {
                        "TableName": self.db.table_name(self.TABLE),
                        "Item": serialize_item(to_item(booking)),
                        "ConditionExpression": "attribute_not_exists(booking_id)",
                    }
                },
                self.properties.transact_put(prop, expected_version),
            ]
        )
        if not committed:
            log_booking_event(
                logger,
                "booking_conflict",
                property_id=prop.property_id,
                user_id=user_id,
                error="version changed",
            )
            raise BookingError(
                ErrorCode.CONCURRENT_MODIFICATION,
                details={"property_id": prop.property_id},
            )

        log_booking_event(
            logger,
            "booking_created",
            booking_id=booking.booking_id,
            property_id=prop.property_id,
            user_id=user_id,
            nights=nights,
        )
        self.notifications.send(
            prop.user_id,
            f"{username} booked {prop.name} from {booking.check_in} to {booking.check_out}.",
            NotificationType.BOOKING,
        )
        return booking

    def list_for_user(
        self,
        user_id: str,
        which: BookingFilter | None = None,
        now: dt.datetime | None = None,
    ) -> list[BookingWithProperty]:
        """A guest's bookings with their listings attached, newest first.

        Args:
            user_id: Guest whose bookings to list
            which: Optional dashboard bucket to keep
            now: Reference instant for the bucket (defaults to current time)
        """
        items = self.db.query_by_gsi(
            table=self.TABLE,
            index_name="user_id-index",
            partition_key_name="user_id",
            partition_key_value=user_id,
        )
        bookings = self._with_properties(items)
        if which is not None:
            bookings = booking_rules.filter_bookings(
                bookings, which, now or dt.datetime.now(dt.UTC)
            )
        return bookings

    def list_all(self) -> list[BookingWithProperty]:
        return self._with_properties(self.db.scan(self.TABLE))

    def _with_properties(self, items: list[dict]) -> list[BookingWithProperty]:
        cache: dict[str, Property | None] = {}
        results = []
        for item in items:
            property_id = item["property_id"]
            if property_id not in cache:
                cache[property_id] = self.properties.get_property(property_id)
            results.append(
                BookingWithProperty.model_validate({**item, "property": cache[property_id]})
            )
        return sorted(results, key=lambda b: b.created_at, reverse=True)

    def cancel(self, booking_id: str, user_id: str | None = None) -> Booking:
        """Cancel a booking and free its nights on the listing.

        Args:
            booking_id: Booking to cancel
            user_id: Required booking owner; None skips the check (admin)

        Raises:
            BookingError: BOOKING_NOT_FOUND, NOT_BOOKING_OWNER or
                CONCURRENT_MODIFICATION.
        """
        booking = self.get_booking(booking_id)
        if booking is None:
            raise BookingError(ErrorCode.BOOKING_NOT_FOUND, details={"booking_id": booking_id})
        if user_id is not None and booking.user_id != user_id:
            raise BookingError(ErrorCode.NOT_BOOKING_OWNER, details={"booking_id": booking_id})

        delete_booking = {
            "Delete": {
                "TableName": self.db.table_name(self.TABLE),
                "Key": serialize_item({"booking_id": booking_id}),
            }
        }

        prop = self.properties.get_property(booking.property_id)
        if prop is None:
            # Listing already gone; only the booking record is left
            self.db.delete_item(self.TABLE, {"booking_id": booking_id})
        else:
            expected_version = prop.version
            prop.booked_dates = [b for b in prop.booked_dates if b.booking_id != booking_id]
            committed = self.db.transact_write(
                [delete_booking, self.properties.transact_put(prop, expected_version)]
            )
            if not committed:
                raise BookingError(
                    ErrorCode.CONCURRENT_MODIFICATION,
                    details={"property_id": prop.property_id},
                )
            self.notifications.send(
                prop.user_id,
                f"A booking for {prop.name} from {booking.check_in} to "
                f"{booking.check_out} was cancelled.",
                NotificationType.CANCELLATION,
            )

        log_booking_event(
            logger,
            "booking_cancelled",
            booking_id=booking_id,
            property_id=booking.property_id,
            user_id=booking.user_id,
        )
        return booking

    def has_booked(self, user_id: str, property_id: str) -> bool:
        """True if the user holds at least one booking on the listing."""
        items = self.db.query_by_gsi(
            table=self.TABLE,
            index_name="user_id-index",
            partition_key_name="user_id",
            partition_key_value=user_id,
        )
        return any(item["property_id"] == property_id for item in items)
