from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import to_iso
from ..core.enums import NotificationKind


@dataclass(frozen=True)
class NotificationRecord:
    notification_id: int
    user_id: int
    message: str
    kind: NotificationKind
    created_at: datetime
    read: bool = False


@dataclass(frozen=True)
class NotificationEvent:
    """In-process event published on the bus after a record is stored."""

    notification_id: int
    user_id: int
    message: str
    kind: NotificationKind
    created_at: datetime

    @classmethod
    def from_record(cls, record: NotificationRecord) -> "NotificationEvent":
        return cls(
            notification_id=record.notification_id,
            user_id=record.user_id,
            message=record.message,
            kind=record.kind,
            created_at=record.created_at,
        )

    def to_payload(self) -> dict:
        return {
            "notification_id": self.notification_id,
            "user_id": self.user_id,
            "message": self.message,
            "kind": self.kind.value,
            "created_at": to_iso(self.created_at),
        }
