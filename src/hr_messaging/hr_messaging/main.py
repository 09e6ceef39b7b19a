from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_socketio import SocketIO

from config import get_settings_module

from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .realtime.controller import register as register_realtime
from .realtime.emitter import SocketIOGateway

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> Tuple[Flask, SocketIO]:
    load_dotenv(override=False)
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    socketio = SocketIO(
        app,
        cors_allowed_origins=getattr(settings, "CORS_ALLOWED_ORIGINS", "*"),
        async_mode=getattr(settings, "SOCKETIO_ASYNC_MODE", "threading"),
    )

    container = build_container(
        db_config=db_config,
        gateway=SocketIOGateway(socketio),
        jwt_secret=getattr(settings, "JWT_SECRET"),
        jwt_algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
        fanout_workers=int(getattr(settings, "NOTIFY_FANOUT_WORKERS", 8)),
        fanout_timeout=float(getattr(settings, "NOTIFY_FANOUT_TIMEOUT_SECONDS", 2.0)),
    )
    app.extensions["hr_messaging"] = container
    atexit.register(container.close)

    register_realtime(socketio, container)

    @app.route("/healthz", endpoint="healthz")
    def healthz():
        return jsonify({"ok": True, "sessions": container.session_manager.active_count})

    return app, socketio
