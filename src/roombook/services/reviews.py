"""Guest reviews embedded in property listings."""

import datetime as dt
from typing import TYPE_CHECKING

from roombook.models import BookingError, ErrorCode, NotificationType, Review
from roombook.utils.logging import get_logger

if TYPE_CHECKING:
    from .bookings import BookingService
    from .notifications import NotificationService
    from .properties import PropertyService

logger = get_logger(__name__)


class ReviewService:
    """Add reviews to listings.

    A guest may review a listing once, and only after booking it. The
    listing's ``average_rating`` and ``review_count`` are recomputed on
    every write.
    """

    def __init__(
        self,
        properties: "PropertyService",
        bookings: "BookingService",
        notifications: "NotificationService",
    ) -> None:
        self.properties = properties
        self.bookings = bookings
        self.notifications = notifications

    def add_review(
        self,
        property_id: str,
        user_id: str,
        username: str,
        rating: int,
        comment: str = "",
    ) -> Review:
        """Attach a review to a listing.

        Raises:
            BookingError: PROPERTY_NOT_FOUND, REVIEW_REQUIRES_BOOKING,
                ALREADY_REVIEWED or CONCURRENT_MODIFICATION.
        """
        prop = self.properties.require_property(property_id)

        if not self.bookings.has_booked(user_id, property_id):
            raise BookingError(
                ErrorCode.REVIEW_REQUIRES_BOOKING, details={"property_id": property_id}
            )
        if prop.has_review_from(user_id):
            raise BookingError(
                ErrorCode.ALREADY_REVIEWED, details={"property_id": property_id}
            )

        review = Review(
            user_id=user_id,
            username=username,
            rating=rating,
            comment=comment.strip(),
            created_at=dt.datetime.now(dt.UTC),
        )
        expected_version = prop.version
        prop.reviews.append(review)
        self.properties.save(prop, expected_version=expected_version)

        logger.info(
            "Review added to %s by %s (rating %d, average %.2f)",
            property_id,
            user_id,
            rating,
            prop.average_rating,
        )
        self.notifications.send(
            prop.user_id,
            f"{username} left a {rating}-star review on {prop.name}.",
            NotificationType.REVIEW,
        )
        return review
