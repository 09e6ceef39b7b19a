from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError, TransientError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)``; commit on success, roll back on error.

    Driver errors are translated so services never import mysql.connector:
    duplicate keys become ``ConflictError``, everything else ``TransientError``.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise TransientError("Database unavailable") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        if e.errno == errorcode.ER_DUP_ENTRY:
            raise ConflictError(str(e)) from e
        raise TransientError("Database write failed") from e
    except mysql.connector.Error as e:
        conn.rollback()
        raise TransientError("Database operation failed") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
