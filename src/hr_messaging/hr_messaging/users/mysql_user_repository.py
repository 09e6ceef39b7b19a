from __future__ import annotations

from typing import Optional, Sequence

from ..conversations.directory import department_group_id
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import DirectoryUser
from .repository import UserDirectory


class MySQLUserDirectory(UserDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def resolve_user(self, user_id: int) -> Optional[DirectoryUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.full_name, u.role, u.is_active, d.dept_name
                FROM users u
                LEFT JOIN departments d ON d.dept_id = u.dept_id
                WHERE u.user_id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return DirectoryUser(
                user_id=int(row["user_id"]),
                full_name=row["full_name"],
                role=Role(row["role"]),
                department=row.get("dept_name"),
                is_active=bool(row.get("is_active", True)),
            )

    def list_department_members(self, department: str) -> Sequence[int]:
        group_id = department_group_id(department)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT dept_id, dept_name FROM departments")
            dept_ids = [
                int(r["dept_id"])
                for r in fetchall(cur)
                if (r["dept_name"] or "").strip() and department_group_id(r["dept_name"]) == group_id
            ]
            if not dept_ids:
                return []

            placeholders = ",".join(["%s"] * len(dept_ids))
            cur.execute(
                f"""
                SELECT user_id
                FROM users
                WHERE dept_id IN ({placeholders}) AND is_active=1
                ORDER BY user_id
                """,
                tuple(dept_ids),
            )
            return [int(r["user_id"]) for r in fetchall(cur)]
