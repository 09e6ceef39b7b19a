from __future__ import annotations

import logging
import threading
from typing import Callable, Tuple

from .model import NotificationEvent

logger = logging.getLogger(__name__)

NotificationHandler = Callable[[NotificationEvent], None]


class NotificationBus:
    """In-process publish/subscribe channel for notification events.

    Constructed once by the container and handed to producers and to the
    session manager. Subscribers are held in an immutable tuple that is
    replaced on subscribe/unsubscribe, so ``publish`` iterates a snapshot and
    never takes the lock.
    """

    def __init__(self) -> None:
        self._handlers: Tuple[NotificationHandler, ...] = ()
        self._write_lock = threading.Lock()
        self._closed = False

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: NotificationHandler) -> Callable[[], None]:
        with self._write_lock:
            if self._closed:
                raise RuntimeError("NotificationBus is closed")
            self._handlers = self._handlers + (handler,)

        def unsubscribe() -> None:
            self._remove(handler)

        return unsubscribe

    def _remove(self, handler: NotificationHandler) -> None:
        with self._write_lock:
            handlers = list(self._handlers)
            if handler in handlers:
                handlers.remove(handler)
                self._handlers = tuple(handlers)

    def publish(self, event: NotificationEvent) -> int:
        """Deliver to every subscriber; returns how many handled it without error."""

        delivered = 0
        for handler in self._handlers:
            try:
                handler(event)
                delivered += 1
            except Exception:
                logger.exception("Notification subscriber failed for user %s", event.user_id)
        return delivered

    def close(self) -> None:
        with self._write_lock:
            self._closed = True
            self._handlers = ()
