from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "hr_messaging")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    params = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
        "use_pure": True,
    }
    if with_database:
        params["database"] = target.database
    return mysql.connector.connect(**params)


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql must stay usable whatever DB_NAME points at.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside quotes. ``--`` comment lines are dropped."""

    buf: list[str] = []
    quote: Optional[str] = None
    escaped = False

    for line in sql.splitlines(keepends=True):
        if quote is None and line.lstrip().startswith("--"):
            continue
        for ch in line:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif quote is not None:
                if ch == quote:
                    quote = None
            elif ch in ("'", '"', "`"):
                quote = ch
            elif ch == ";":
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                continue
            buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Apply an idempotent schema file; returns the number of statements run."""

    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(_as_target(db_config))
    count = 0
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %d schema statements from %s", count, schema_path)
    return count


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


DEMO_DEPARTMENTS = ("Sales", "HR", "IT")

# full_name, username, password, role, department
DEMO_USERS = (
    ("System Admin", "admin", "admin123", "admin", None),
    ("Hannah Reyes", "hr", "hr123", "hr", "HR"),
    ("Sam Porter", "sales1", "staff123", "staff", "Sales"),
    ("Sofia Lind", "sales2", "staff123", "staff", "Sales"),
    ("Ian Tran", "it1", "staff123", "staff", "IT"),
)


def ensure_demo_users(db_config: dict) -> list[tuple[int, str]]:
    """Upsert demo departments and users; returns ``(user_id, role)`` pairs."""

    conn = _connect(_as_target(db_config))
    seeded: list[tuple[int, str]] = []
    try:
        cur = conn.cursor(dictionary=True)

        for name in DEMO_DEPARTMENTS:
            cur.execute("INSERT IGNORE INTO departments (dept_name) VALUES (%s)", (name,))

        def dept_id(name: Optional[str]) -> Optional[int]:
            if name is None:
                return None
            cur.execute("SELECT dept_id FROM departments WHERE dept_name=%s", (name,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing departments row for dept_name={name}")
            return int(row["dept_id"])

        for full_name, username, password, role, department in DEMO_USERS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE username=%s", (username,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    """
                    UPDATE users
                    SET full_name=%s, password_hash=%s, role=%s, dept_id=%s, is_active=1
                    WHERE username=%s
                    """,
                    (full_name, password_hash, role, dept_id(department), username),
                )
                user_id = int(existing["user_id"])
            else:
                cur.execute(
                    """
                    INSERT INTO users (full_name, username, password_hash, role, dept_id, is_active)
                    VALUES (%s, %s, %s, %s, %s, 1)
                    """,
                    (full_name, username, password_hash, role, dept_id(department)),
                )
                user_id = int(cur.lastrowid)
            seeded.append((user_id, role))

        conn.commit()
    finally:
        conn.close()

    logger.info("Seeded %d demo users", len(seeded))
    return seeded
