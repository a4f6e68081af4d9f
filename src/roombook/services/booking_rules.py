"""Date-interval rules for stays.

Pure functions shared by the booking service and the Python client:
night counting, pricing, validation of a requested stay against a
property, overlap detection and dashboard classification.

Stays are half-open intervals ``[check_in, check_out)``: a guest checking
out on the 15th does not collide with a guest checking in on the 15th.
"""

import datetime as dt
import math
from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar

from roombook.models.enums import BookingFilter
from roombook.models.errors import BookingError, ErrorCode
from roombook.models.property import BookedInterval, Property

SECONDS_PER_DAY = 86400

DateLike = dt.date | dt.datetime


class Stay(Protocol):
    check_in: dt.date
    check_out: dt.date


S = TypeVar("S", bound=Stay)


def _as_datetime(value: DateLike) -> dt.datetime:
    """Promote a date to midnight UTC; give naive datetimes UTC."""
    if isinstance(value, dt.datetime):
        return value if value.tzinfo else value.replace(tzinfo=dt.UTC)
    return dt.datetime(value.year, value.month, value.day, tzinfo=dt.UTC)


def count_nights(check_in: DateLike, check_out: DateLike) -> int:
    """Number of nights between two instants, rounded up to whole days.

    Raises:
        BookingError: INVALID_DATE_RANGE when check_out is not after check_in.
    """
    start, end = _as_datetime(check_in), _as_datetime(check_out)
    if end <= start:
        raise BookingError(ErrorCode.INVALID_DATE_RANGE)
    return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)


def calculate_total(check_in: DateLike, check_out: DateLike, price_per_night: float) -> float:
    """Total price of a stay: nights times the nightly price."""
    return count_nights(check_in, check_out) * price_per_night


def ranges_overlap(
    a_in: dt.date, a_out: dt.date, b_in: dt.date, b_out: dt.date
) -> bool:
    """True when two half-open stays share at least one night."""
    return a_in < b_out and b_in < a_out


def find_conflicts(
    check_in: dt.date,
    check_out: dt.date,
    booked: Iterable[BookedInterval],
) -> list[BookedInterval]:
    """Booked intervals that collide with the requested stay."""
    return [
        b for b in booked if ranges_overlap(check_in, check_out, b.check_in, b.check_out)
    ]


def validate_dates(
    check_in: dt.date, check_out: dt.date, today: dt.date | None = None
) -> int:
    """Reject past check-ins and inverted ranges; return the night count."""
    today = today or dt.datetime.now(dt.UTC).date()
    if check_in < today:
        raise BookingError(ErrorCode.CHECK_IN_IN_PAST)
    return count_nights(check_in, check_out)


def validate_stay(
    prop: Property,
    check_in: dt.date,
    check_out: dt.date,
    guests: int,
    booker_id: str,
    today: dt.date | None = None,
) -> int:
    """Validate a requested stay against a property.

    Checks run in a fixed order and the first failure wins.

    Returns:
        Number of nights for the stay.

    Raises:
        BookingError: with the code of the first failed rule.
    """
    nights = validate_dates(check_in, check_out, today)

    if prop.user_id == booker_id:
        raise BookingError(ErrorCode.OWN_PROPERTY)

    if guests > prop.max_guests:
        raise BookingError(
            ErrorCode.MAX_GUESTS_EXCEEDED,
            message=f"This property allows a maximum of {prop.max_guests} guests.",
            details={"requested": str(guests), "maximum": str(prop.max_guests)},
        )

    if not prop.availability.contains(check_in, check_out):
        raise BookingError(ErrorCode.OUTSIDE_AVAILABILITY)

    conflicts = find_conflicts(check_in, check_out, prop.booked_dates)
    if conflicts:
        raise BookingError(
            ErrorCode.DATES_UNAVAILABLE,
            details={
                "conflicting_check_in": conflicts[0].check_in.isoformat(),
                "conflicting_check_out": conflicts[0].check_out.isoformat(),
            },
        )

    return nights


def classify_booking(
    check_in: DateLike, check_out: DateLike, now: DateLike
) -> BookingFilter:
    """Place a stay relative to ``now``; exact boundaries count as current."""
    start, end, at = _as_datetime(check_in), _as_datetime(check_out), _as_datetime(now)
    if start > at:
        return BookingFilter.UPCOMING
    if end < at:
        return BookingFilter.PAST
    return BookingFilter.CURRENT


def filter_bookings(
    bookings: Sequence[S], which: BookingFilter, now: DateLike
) -> list[S]:
    """Bookings that fall in one dashboard bucket, preserving order."""
    return [b for b in bookings if classify_booking(b.check_in, b.check_out, now) == which]


def partition_bookings(
    bookings: Sequence[S], now: DateLike
) -> dict[BookingFilter, list[S]]:
    """Split bookings into the three disjoint dashboard buckets."""
    buckets: dict[BookingFilter, list[S]] = {f: [] for f in BookingFilter}
    for booking in bookings:
        buckets[classify_booking(booking.check_in, booking.check_out, now)].append(booking)
    return buckets
