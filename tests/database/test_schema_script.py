from __future__ import annotations

from pathlib import Path

from src.hr_messaging.hr_messaging.database.bootstrap import _strip_create_db_and_use, iter_sql_statements

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_iter_sql_statements_respects_quotes_and_comments():
    sql = """
    -- leading comment; with a semicolon
    INSERT INTO t (a) VALUES ('x;y');
    INSERT INTO t (a) VALUES ("it's");
    SELECT 1
    """

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t (a) VALUES ('x;y')",
        'INSERT INTO t (a) VALUES ("it\'s")',
        "SELECT 1",
    ]


def test_strip_create_db_and_use():
    sql = "CREATE DATABASE IF NOT EXISTS foo;\nUSE foo;\nCREATE TABLE x (id INT);\n"

    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE x (id INT)"]


def test_schema_defines_messaging_tables():
    statements = list(iter_sql_statements(_strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))))
    created = [s.split()[5] for s in statements if s.upper().startswith("CREATE TABLE IF NOT EXISTS")]

    assert {
        "departments",
        "users",
        "chat_conversations",
        "chat_messages",
        "department_messages",
        "notifications",
    } <= set(created)
    assert all(s.upper().startswith("CREATE TABLE IF NOT EXISTS") for s in statements)
