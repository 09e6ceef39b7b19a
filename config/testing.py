import os

from config.config import *  # noqa: F401,F403
from config.config import db_config_from_env

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret"

DB_CONFIG = db_config_from_env(default_password="12345")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
NOTIFY_FANOUT_TIMEOUT_SECONDS = 0.5
