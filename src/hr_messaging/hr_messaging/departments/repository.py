from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from ..core.enums import MessageKind
from .model import DepartmentMessage


class DepartmentMessageRepository(Protocol):
    def append(
        self,
        *,
        group_id: str,
        department: str,
        sender_id: int,
        sender_name: str,
        content: str,
        kind: MessageKind,
        created_at: datetime,
    ) -> DepartmentMessage:
        raise NotImplementedError

    def list_by_group(self, group_id: str, *, limit: int = 200) -> Sequence[DepartmentMessage]:
        raise NotImplementedError
