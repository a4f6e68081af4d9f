"""Process-wide count of pending vendor requests for the admin views."""

import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .http import RoomBookClient

Listener = Callable[[int], None]


class PendingRequestCounter:
    """Shared counter with change notification.

    Views subscribe to be told the new count whenever it changes; the count
    never drops below zero.
    """

    def __init__(self, count: int = 0) -> None:
        self._count = max(count, 0)
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        return self._count

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _apply(self, change: Callable[[int], int]) -> None:
        with self._lock:
            self._count = max(change(self._count), 0)
            current = self._count
            listeners = list(self._listeners)
        for listener in listeners:
            listener(current)

    def set(self, count: int) -> None:
        self._apply(lambda _: count)

    def decrement(self) -> None:
        """Record one request resolved by an admin."""
        self._apply(lambda current: current - 1)

    def refresh(self, client: "RoomBookClient") -> int:
        """Reload the count from the server."""
        self.set(len(client.admin_vendor_requests()))
        return self._count


pending_requests = PendingRequestCounter()
