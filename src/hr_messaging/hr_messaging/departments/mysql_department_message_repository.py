from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..core.enums import MessageKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import DepartmentMessage
from .repository import DepartmentMessageRepository


class MySQLDepartmentMessageRepository(DepartmentMessageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO department_messages(group_id, department, sender_id, sender_name, content, kind, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (group_id, department, int(sender_id), sender_name, content, kind.value, created_at),
            )
            return DepartmentMessage(
                message_id=int(cur.lastrowid),
                group_id=group_id,
                department=department,
                sender_id=int(sender_id),
                sender_name=sender_name,
                content=content,
                kind=kind,
                created_at=created_at,
            )

    def list_by_group(self, group_id: str, *, limit: int = 200) -> Sequence[DepartmentMessage]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT * FROM (
                    SELECT message_id, group_id, department, sender_id, sender_name, content, kind, created_at
                    FROM department_messages
                    WHERE group_id=%s
                    ORDER BY message_id DESC
                    LIMIT %s
                ) recent
                ORDER BY message_id ASC
                """,
                (group_id, int(limit)),
            )
            return [
                DepartmentMessage(
                    message_id=int(r["message_id"]),
                    group_id=r["group_id"],
                    department=r["department"],
                    sender_id=int(r["sender_id"]),
                    sender_name=r["sender_name"],
                    content=r["content"],
                    kind=MessageKind(r["kind"]),
                    created_at=r["created_at"],
                )
                for r in fetchall(cur)
            ]
