from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hr_messaging.hr_messaging.database.bootstrap import ensure_demo_users
from src.hr_messaging.hr_messaging.users.tokens import issue_token


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    seeded = ensure_demo_users(db_config)

    print(
        "OK: Seeded demo users -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )
    for user_id, role in seeded:
        token = issue_token(
            settings.JWT_SECRET,
            user_id=user_id,
            role=role,
            algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
            expires_in=24 * 3600,
        )
        print(f"  user_id={user_id} role={role} token={token}")


if __name__ == "__main__":
    main()
