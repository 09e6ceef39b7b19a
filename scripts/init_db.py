"""Create the messaging tables (conversations, chat/department messages, notifications).

Safe to re-run: every statement in database/schema.sql is CREATE ... IF NOT EXISTS.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hr_messaging.hr_messaging.database.bootstrap import apply_schema, list_tables

MESSAGING_TABLES = ("chat_conversations", "chat_messages", "department_messages", "notifications")


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    statements = apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = set(list_tables(db_config))

    missing = [t for t in MESSAGING_TABLES if t not in tables]
    if missing:
        raise SystemExit(f"Schema applied to {target} but messaging tables are missing: {', '.join(missing)}")

    print(f"OK: messaging schema ready on {target} ({statements} statements, {len(tables)} tables)")


if __name__ == "__main__":
    main()
