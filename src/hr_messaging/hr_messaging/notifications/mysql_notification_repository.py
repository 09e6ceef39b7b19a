from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import NotificationKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import NotificationRecord
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, message: str, kind: NotificationKind, created_at: datetime) -> NotificationRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, message, kind, is_read, created_at)
                VALUES(%s,%s,%s,0,%s)
                """,
                (int(user_id), message, kind.value, created_at),
            )
            return NotificationRecord(
                notification_id=int(cur.lastrowid),
                user_id=int(user_id),
                message=message,
                kind=kind,
                created_at=created_at,
            )

    def get_by_id(self, notification_id: int) -> Optional[NotificationRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, user_id, message, kind, is_read, created_at
                FROM notifications
                WHERE notification_id=%s
                """,
                (int(notification_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return NotificationRecord(
                notification_id=int(row["notification_id"]),
                user_id=int(row["user_id"]),
                message=row["message"],
                kind=NotificationKind(row["kind"]),
                created_at=row["created_at"],
                read=bool(row["is_read"]),
            )

    def mark_read(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE notification_id=%s AND is_read=0",
                (int(notification_id),),
            )
            return cur.rowcount > 0
