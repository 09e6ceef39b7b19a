from __future__ import annotations

import logging
from typing import Union

from ..common.datetime_utils import now_utc
from ..common.validators import require_id, require_non_empty
from ..core.enums import NotificationKind
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.policies import can_manage_notification
from ..users.model import Identity
from .bus import NotificationBus
from .model import NotificationEvent, NotificationRecord
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


def parse_notification_kind(value: Union[NotificationKind, str, None]) -> NotificationKind:
    if value is None or value == "":
        return NotificationKind.INFO
    try:
        return NotificationKind(value)
    except ValueError:
        raise ValidationError(f"Unknown notification type: {value!r}")


class NotificationService:
    """Single entry point for cross-cutting notifications.

    Producers (leave, payroll, task, geofence workflows and the chat pipeline)
    only ever call ``publish``; which live connection, if any, receives the
    event is decided by the bus subscribers.
    """

    def __init__(self, notifications: NotificationRepository, bus: NotificationBus):
        self._notifications = notifications
        self._bus = bus

    def publish(self, user_id: int, message: str, kind: Union[NotificationKind, str, None] = None) -> NotificationRecord:
        user_id = require_id(user_id, "User")
        message = require_non_empty(message, "Notification message")
        kind = parse_notification_kind(kind)

        record = self._notifications.create(user_id=user_id, message=message, kind=kind, created_at=now_utc())
        delivered = self._bus.publish(NotificationEvent.from_record(record))
        logger.debug(
            "Notification %s (%s) stored for user %s, %d subscriber(s)",
            record.notification_id,
            kind.value,
            user_id,
            delivered,
        )
        return record

    def mark_read(self, identity: Identity, notification_id: int) -> bool:
        record = self._notifications.get_by_id(require_id(notification_id, "Notification"))
        if not record:
            raise NotFoundError("Notification not found")
        if not can_manage_notification(identity.role, requester_id=identity.user_id, owner_id=record.user_id):
            raise AuthorizationError("Access denied")
        if record.read:
            return False
        return self._notifications.mark_read(record.notification_id)
