from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import to_iso
from ..core.enums import MessageKind


@dataclass(frozen=True)
class DepartmentMessage:
    """One entry of a department's append-only broadcast log.

    ``group_id`` is a cache of ``department_group_id(department)`` at send time.
    """

    message_id: int
    group_id: str
    department: str
    sender_id: int
    sender_name: str
    content: str
    kind: MessageKind
    created_at: datetime

    def to_payload(self) -> dict:
        return {
            "message_id": self.message_id,
            "group_id": self.group_id,
            "department": self.department,
            "sender_id": self.sender_id,
            "sender_name": self.sender_name,
            "message": self.content,
            "type": self.kind.value,
            "timestamp": to_iso(self.created_at),
        }
