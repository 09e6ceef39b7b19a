"""Settings shared by every environment module."""

import os


def db_config_from_env(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "hr_messaging"),
        "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
    }


JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# Comma separated list, or "*"
CORS_ALLOWED_ORIGINS = [o.strip() for o in os.getenv("CORS_ALLOWED_ORIGINS", "*").split(",") if o.strip()]
if CORS_ALLOWED_ORIGINS == ["*"]:
    CORS_ALLOWED_ORIGINS = "*"

SOCKETIO_ASYNC_MODE = os.getenv("SOCKETIO_ASYNC_MODE", "threading")

NOTIFY_FANOUT_WORKERS = int(os.getenv("NOTIFY_FANOUT_WORKERS", "8"))
NOTIFY_FANOUT_TIMEOUT_SECONDS = float(os.getenv("NOTIFY_FANOUT_TIMEOUT_SECONDS", "2.0"))
