from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import NotificationKind
from .model import NotificationRecord


class NotificationRepository(Protocol):
    def create(self, *, user_id: int, message: str, kind: NotificationKind, created_at: datetime) -> NotificationRecord:
        raise NotImplementedError

    def get_by_id(self, notification_id: int) -> Optional[NotificationRecord]:
        raise NotImplementedError

    def mark_read(self, notification_id: int) -> bool:
        raise NotImplementedError
