"""Unit tests for NotificationService."""

from unittest.mock import patch

import pytest

from roombook.models import BookingError, ErrorCode, Notification, NotificationType, User
from roombook.models.user import MAX_NOTIFICATIONS
from roombook.services.notifications import NotificationService


class TestSend:
    def test_stores_notification(self, notifications: NotificationService, guest: User) -> None:
        assert notifications.send(guest.user_id, "  Hello there ", NotificationType.BOOKING)

        [stored] = notifications.list_for_user(guest.user_id)
        assert stored.message == "Hello there"
        assert stored.type == NotificationType.BOOKING
        assert not stored.read

    def test_trims_long_messages(self, notifications: NotificationService, guest: User) -> None:
        notifications.send(guest.user_id, "x" * 600)

        [stored] = notifications.list_for_user(guest.user_id)
        assert len(stored.message) == 500

    def test_keeps_newest_fifty(self, notifications: NotificationService, guest: User) -> None:
        for i in range(MAX_NOTIFICATIONS + 5):
            notifications.send(guest.user_id, f"message {i}")

        stored = notifications.list_for_user(guest.user_id)
        assert len(stored) == MAX_NOTIFICATIONS
        assert stored[0].message == f"message {MAX_NOTIFICATIONS + 4}"
        assert "message 4" not in {n.message for n in stored}

    def test_unknown_user_returns_false(self, notifications: NotificationService) -> None:
        assert notifications.send("missing-user", "Hello") is False

    def test_empty_message_returns_false(
        self, notifications: NotificationService, guest: User
    ) -> None:
        assert notifications.send(guest.user_id, "   ") is False
        assert notifications.list_for_user(guest.user_id) == []

    def test_storage_failure_is_swallowed(
        self, notifications: NotificationService, guest: User
    ) -> None:
        with patch.object(notifications, "_append", side_effect=RuntimeError("boom")):
            assert notifications.send(guest.user_id, "Hello") is False


class TestReadState:
    def test_unread_count_and_mark_all_read(
        self, notifications: NotificationService, guest: User
    ) -> None:
        notifications.send(guest.user_id, "one")
        notifications.send(guest.user_id, "two")
        assert notifications.unread_count(guest.user_id) == 2

        assert notifications.mark_all_read(guest.user_id) == 2
        assert notifications.unread_count(guest.user_id) == 0
        assert notifications.mark_all_read(guest.user_id) == 0

    def test_newest_first(self, notifications: NotificationService, guest: User) -> None:
        notifications.send(guest.user_id, "older")
        notifications.send(guest.user_id, "newer")

        assert [n.message for n in notifications.list_for_user(guest.user_id)] == [
            "newer",
            "older",
        ]

    def test_delivery_during_mark_all_read_is_kept(
        self, notifications: NotificationService, guest: User
    ) -> None:
        notifications.send(guest.user_id, "first")
        load = notifications._load

        def load_then_deliver(user_id: str) -> list[Notification]:
            loaded = load(user_id)
            notifications.send(user_id, "second")
            return loaded

        with patch.object(notifications, "_load", side_effect=load_then_deliver):
            assert notifications.mark_all_read(guest.user_id) == 1

        stored = {n.message: n.read for n in notifications.list_for_user(guest.user_id)}
        assert stored == {"first": True, "second": False}
        assert notifications.unread_count(guest.user_id) == 1

    def test_concurrent_sends_both_arrive(
        self, notifications: NotificationService, guest: User
    ) -> None:
        other = NotificationService(notifications.db)

        notifications.send(guest.user_id, "from one worker")
        other.send(guest.user_id, "from another worker")

        assert {n.message for n in notifications.list_for_user(guest.user_id)} == {
            "from one worker",
            "from another worker",
        }

    def test_mark_all_read_conflict_after_trim(
        self, notifications: NotificationService, guest: User
    ) -> None:
        for i in range(MAX_NOTIFICATIONS):
            notifications.send(guest.user_id, f"message {i}")
        load = notifications._load

        def load_then_overflow(user_id: str) -> list[Notification]:
            loaded = load(user_id)
            notifications.send(user_id, "overflow")
            return loaded

        with patch.object(notifications, "_load", side_effect=load_then_overflow):
            with pytest.raises(BookingError) as exc_info:
                notifications.mark_all_read(guest.user_id)

        assert exc_info.value.code == ErrorCode.CONCURRENT_MODIFICATION
        assert notifications.unread_count(guest.user_id) == MAX_NOTIFICATIONS
