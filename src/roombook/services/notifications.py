"""In-app notifications embedded in user records."""

import datetime as dt
import uuid
from typing import TYPE_CHECKING, Any

from roombook.models import BookingError, ErrorCode, Notification, NotificationType
from roombook.models.user import MAX_NOTIFICATION_LENGTH, MAX_NOTIFICATIONS
from roombook.services.dynamodb import to_item
from roombook.utils.logging import get_logger

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService

logger = get_logger(__name__)


class NotificationService:
    """Push, list and acknowledge notifications for a user.

    Notifications live in the user's ``notifications`` list; only the newest
    ``MAX_NOTIFICATIONS`` are kept.
    """

    TABLE = "users"

    def __init__(self, db: "DynamoDBService") -> None:
        self.db = db

    def _load(self, user_id: str) -> list[Notification]:
        item = self.db.get_item(self.TABLE, {"user_id": user_id})
        if item is None:
            raise BookingError(ErrorCode.USER_NOT_FOUND)
        return [Notification.model_validate(n) for n in item.get("notifications", [])]

    def _append(self, user_id: str, notification: Notification) -> list[Any] | None:
        """Atomically add to the end of the list; None when the user is missing."""
        attrs = self.db.update_item(
            table=self.TABLE,
            key={"user_id": user_id},
            update_expression=(
                "SET notifications = list_append(if_not_exists(notifications, :empty), :new)"
            ),
            expression_attribute_values={":empty": [], ":new": [to_item(notification)]},
            condition_expression="attribute_exists(user_id)",
        )
        return None if attrs is None else attrs.get("notifications", [])

    def _trim(self, user_id: str, length: int) -> None:
        """Drop the oldest entries beyond MAX_NOTIFICATIONS.

        Only applies while the list still has ``length`` entries; a trim lost
        to a concurrent write is left for the next delivery.
        """
        excess = length - MAX_NOTIFICATIONS
        if excess <= 0:
            return
        self.db.update_item(
            table=self.TABLE,
            key={"user_id": user_id},
            update_expression="REMOVE " + ", ".join(f"notifications[{i}]" for i in range(excess)),
            expression_attribute_values={":len": length},
            condition_expression="size(notifications) = :len",
        )

    def send(
        self,
        user_id: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
    ) -> bool:
        """Deliver a notification.

        Delivery problems are logged and reported through the return value;
        they never propagate to the caller.

        Returns:
            True if the notification was stored.
        """
        text = (message or "").strip()[:MAX_NOTIFICATION_LENGTH]
        if not user_id or not text:
            logger.warning("Skipping notification with missing user or message")
            return False

        notification = Notification(
            notification_id=uuid.uuid4().hex,
            message=text,
            type=type,
            created_at=dt.datetime.now(dt.UTC),
        )
        try:
            stored = self._append(user_id, notification)
            if stored is None:
                logger.warning("Notification for unknown user %s dropped", user_id)
                return False
            self._trim(user_id, len(stored))
        except Exception:
            logger.exception("Failed to deliver notification to user %s", user_id)
            return False

        logger.info("Notification sent to user %s", user_id)
        return True

    def list_for_user(self, user_id: str) -> list[Notification]:
        """Notifications for a user, newest first."""
        notifications = self._load(user_id)
        return sorted(notifications, key=lambda n: n.created_at, reverse=True)

    def unread_count(self, user_id: str) -> int:
        return sum(1 for n in self._load(user_id) if not n.read)

    def mark_all_read(self, user_id: str) -> int:
        """Mark every notification as read.

        Each unread entry is flagged by position, guarded by its id, so
        notifications delivered in the meantime are kept as they are.

        Returns:
            Number of notifications that changed state.

        Raises:
            BookingError: USER_NOT_FOUND, or CONCURRENT_MODIFICATION when a
                trim moved the entries since they were read.
        """
        unread = [
            (i, n.notification_id) for i, n in enumerate(self._load(user_id)) if not n.read
        ]
        if not unread:
            return 0

        values: dict[str, Any] = {":t": True}
        flags, guards = [], []
        for i, notification_id in unread:
            values[f":id{i}"] = notification_id
            flags.append(f"notifications[{i}].#r = :t")
            guards.append(f"notifications[{i}].notification_id = :id{i}")

        updated = self.db.update_item(
            table=self.TABLE,
            key={"user_id": user_id},
            update_expression="SET " + ", ".join(flags),
            expression_attribute_values=values,
            expression_attribute_names={"#r": "read"},
            condition_expression=" AND ".join(guards),
        )
        if updated is None:
            raise BookingError(
                ErrorCode.CONCURRENT_MODIFICATION,
                message="Notifications changed while being marked as read",
                details={"user_id": user_id},
            )
        return len(unread)
