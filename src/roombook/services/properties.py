"""Property listings: search, vendor management and admin moderation."""

import datetime as dt
import json
import re
import uuid
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from botocore.exceptions import ClientError
from pydantic import ValidationError

from roombook.models import (
    AvailabilityWindow,
    BookingError,
    ErrorCode,
    NotificationType,
    Property,
    PropertyDraft,
    PropertySearch,
    filter_amenities,
)
from roombook.services import booking_rules
from roombook.services.dynamodb import serialize_item, to_item
from roombook.services.users import normalize_email
from roombook.utils.logging import get_logger

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService
    from .images import ImageStorage, ImageUpload
    from .notifications import NotificationService

logger = get_logger(__name__)

MOBILE_PATTERN = re.compile(r"^\+?[1-9]\d{9,14}$")

# Multipart form fields that carry JSON documents
JSON_FIELDS = ("amenities", "availability")


def _invalid_input(reason: str) -> BookingError:
    return BookingError(ErrorCode.INVALID_PROPERTY_INPUT, details={"reason": reason})


def parse_listing_form(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Turn raw multipart form values into model input.

    ``amenities`` and ``availability`` arrive as JSON strings. Blank values
    are dropped so that partial updates leave those fields untouched.

    Raises:
        BookingError: INVALID_PROPERTY_INPUT for malformed JSON.
    """
    parsed: dict[str, Any] = {}
    for key, value in fields.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        if key in JSON_FIELDS and isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                raise _invalid_input(f"{key} is not valid JSON") from None
            if not isinstance(value, dict):
                raise _invalid_input(f"{key} must be an object")
        if key == "amenities":
            value = filter_amenities(value)
        parsed[key] = value
    return parsed


def validate_contact(mobile: str, email: str) -> str:
    """Check listing contact details and return the normalised email.

    Raises:
        BookingError: INVALID_PROPERTY_INPUT for a malformed phone or email.
    """
    if not MOBILE_PATTERN.match(mobile or ""):
        raise _invalid_input("mobile")
    try:
        return normalize_email(email)
    except BookingError:
        raise _invalid_input("email") from None


def matches_search(prop: Property, search: PropertySearch) -> bool:
    """True when a listing satisfies every supplied filter."""
    if search.type and prop.type.lower() != search.type.strip().lower():
        return False
    if search.location:
        needle = search.location.strip().lower()
        if needle not in prop.location.lower() and needle not in prop.address.lower():
            return False
    if search.price is not None and prop.price > search.price:
        return False
    if search.max_guests is not None and prop.max_guests < search.max_guests:
        return False
    if search.average_rating is not None and prop.average_rating < search.average_rating:
        return False
    if search.check_in and search.check_out:
        if not prop.availability.contains(search.check_in, search.check_out):
            return False
        if booking_rules.find_conflicts(search.check_in, search.check_out, prop.booked_dates):
            return False
    return True


class PropertyService:
    """Service for listings stored in the ``properties`` table."""

    TABLE = "properties"
    BOOKINGS_TABLE = "bookings"

    def __init__(
        self,
        db: "DynamoDBService",
        images: "ImageStorage",
        notifications: "NotificationService",
    ) -> None:
        """Initialize property service.

        Args:
            db: DynamoDB service instance
            images: Storage for uploaded listing images
            notifications: Used to tell guests about removed listings
        """
        self.db = db
        self.images = images
        self.notifications = notifications

    # Reads

    def get_property(self, property_id: str) -> Property | None:
        item = self.db.get_item(self.TABLE, {"property_id": property_id})
        return Property.model_validate(item) if item else None

    def require_property(self, property_id: str) -> Property:
        prop = self.get_property(property_id)
        if prop is None:
            raise BookingError(
                ErrorCode.PROPERTY_NOT_FOUND, details={"property_id": property_id}
            )
        return prop

    def require_owned(self, property_id: str, owner_id: str) -> Property:
        """Get a listing and check that ``owner_id`` owns it."""
        prop = self.require_property(property_id)
        if prop.user_id != owner_id:
            raise BookingError(
                ErrorCode.NOT_PROPERTY_OWNER, details={"property_id": property_id}
            )
        return prop

    def list_all(self) -> list[Property]:
        props = [Property.model_validate(i) for i in self.db.scan(self.TABLE)]
        return sorted(props, key=lambda p: p.created_at, reverse=True)

    def list_by_owner(self, owner_id: str) -> list[Property]:
        items = self.db.query_by_gsi(
            table=self.TABLE,
            index_name="user_id-index",
            partition_key_name="user_id",
            partition_key_value=owner_id,
        )
        props = [Property.model_validate(i) for i in items]
        return sorted(props, key=lambda p: p.created_at, reverse=True)

    def search(
        self, search: PropertySearch, exclude_owner: str | None = None
    ) -> list[Property]:
        """Public listing search.

        Args:
            search: Filters; empty filters return every listing
            exclude_owner: Hide listings owned by this user (the caller)

        Raises:
            BookingError: INVALID_DATE_RANGE when both dates are given in
                the wrong order.
        """
        if search.check_in and search.check_out:
            booking_rules.count_nights(search.check_in, search.check_out)

        return [
            prop
            for prop in self.list_all()
            if prop.user_id != exclude_owner and matches_search(prop, search)
        ]

    # Vendor writes

    def create(
        self,
        owner_id: str,
        fields: Mapping[str, Any],
        uploads: list["ImageUpload"],
    ) -> Property:
        """Create a listing from form fields and uploaded images.

        Raises:
            BookingError: INVALID_PROPERTY_INPUT, INVALID_IMAGE_TYPE or
                IMAGE_TOO_LARGE.
        """
        try:
            draft = PropertyDraft.model_validate(parse_listing_form(fields))
        except ValidationError as e:
            raise _invalid_input(_first_error(e)) from None
        email = validate_contact(draft.mobile, draft.email)

        for upload in uploads:
            self.images.validate(upload)

        now = dt.datetime.now(dt.UTC)
        prop = Property(
            property_id=uuid.uuid4().hex,
            user_id=owner_id,
            **draft.model_dump(exclude={"email"}),
            email=email,
            images=self.images.save_all(uploads),
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.put_item(self.TABLE, to_item(prop))
        except ClientError:
            self.images.delete_all(prop.images)
            raise
        logger.info("Property created: %s by %s", prop.property_id, owner_id)
        return prop

    def update(
        self,
        property_id: str,
        owner_id: str,
        fields: Mapping[str, Any],
        uploads: list["ImageUpload"],
        removed_images: list[str],
    ) -> Property:
        """Apply a partial edit to an owned listing.

        Removed images are unlinked from disk; new uploads are appended.

        Raises:
            BookingError: PROPERTY_NOT_FOUND, NOT_PROPERTY_OWNER,
                INVALID_PROPERTY_INPUT or CONCURRENT_MODIFICATION.
        """
        prop = self.require_owned(property_id, owner_id)
        changes = _draft_changes(parse_listing_form(fields))
        if "availability" in changes:
            changes["availability"] = {
                **prop.availability.model_dump(),
                **_snake_keys(changes["availability"]),
            }

        merged = {**prop.model_dump(), **changes}
        try:
            updated = Property.model_validate(merged)
        except ValidationError as e:
            raise _invalid_input(_first_error(e)) from None
        updated.email = validate_contact(updated.mobile, updated.email)

        for upload in uploads:
            self.images.validate(upload)

        removed = [img for img in removed_images if img in prop.images]
        kept = [img for img in prop.images if img not in removed]
        added = self.images.save_all(uploads)
        updated.images = kept + added

        try:
            saved = self.save(updated, expected_version=prop.version)
        except BookingError:
            self.images.delete_all(added)
            raise
        self.images.delete_all(removed)
        logger.info("Property updated: %s", property_id)
        return saved

    def delete(self, property_id: str, owner_id: str | None = None) -> Property:
        """Remove a listing, its images and its bookings.

        Args:
            property_id: Listing to delete
            owner_id: Required owner; None skips the check (admin removal)

        Guests with bookings on the listing are notified.
        """
        if owner_id is None:
            prop = self.require_property(property_id)
        else:
            prop = self.require_owned(property_id, owner_id)

        bookings = self.db.query_by_gsi(
            table=self.BOOKINGS_TABLE,
            index_name="property_id-index",
            partition_key_name="property_id",
            partition_key_value=property_id,
        )
        for booking in bookings:
            self.db.delete_item(self.BOOKINGS_TABLE, {"booking_id": booking["booking_id"]})
            self.notifications.send(
                booking["user_id"],
                f"Your booking at {prop.name} was cancelled because the property was removed.",
                NotificationType.CANCELLATION,
            )

        self.db.delete_item(self.TABLE, {"property_id": property_id})
        self.images.delete_all(prop.images)
        logger.info(
            "Property deleted: %s (%d bookings removed)", property_id, len(bookings)
        )
        return prop

    # Versioned writes

    def save(self, prop: Property, expected_version: int) -> Property:
        """Write a listing if nobody else changed it since it was read.

        Raises:
            BookingError: CONCURRENT_MODIFICATION when the stored version moved.
        """
        self._bump(prop, expected_version)
        stored = self.db.put_item(
            self.TABLE,
            to_item(prop),
            condition_expression="#v = :v",
            expression_attribute_values={":v": expected_version},
            expression_attribute_names={"#v": "version"},
        )
        if not stored:
            raise BookingError(
                ErrorCode.CONCURRENT_MODIFICATION,
                details={"property_id": prop.property_id},
            )
        return prop

    def transact_put(self, prop: Property, expected_version: int) -> dict[str, Any]:
        """Build a versioned Put for use inside a write transaction."""
        self._bump(prop, expected_version)
        return {
            "Put": {
                "TableName": self.db.table_name(self.TABLE),
                "Item": serialize_item(to_item(prop)),
                "ConditionExpression": "#v = :v",
                "ExpressionAttributeNames": {"#v": "version"},
                "ExpressionAttributeValues": serialize_item({":v": expected_version}),
            }
        }

    @staticmethod
    def _bump(prop: Property, expected_version: int) -> None:
        prop.version = expected_version + 1
        prop.updated_at = dt.datetime.now(dt.UTC)
        prop.recompute_rating()


def _draft_changes(changes: dict[str, Any]) -> dict[str, Any]:
    """Keep editable listing fields, keyed by field name."""
    editable = {}
    for name, field in PropertyDraft.model_fields.items():
        for key in (field.alias, name):
            if key and key in changes:
                editable[name] = changes[key]
                break
    return editable


def _snake_keys(window: Any) -> dict[str, Any]:
    if isinstance(window, AvailabilityWindow):
        return window.model_dump()
    aliases = {"startDate": "start_date", "endDate": "end_date"}
    return {aliases.get(k, k): v for k, v in dict(window).items()}


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]
