import os

from config.config import *  # noqa: F401,F403
from config.config import db_config_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
JWT_SECRET = os.getenv("JWT_SECRET", "please-set-JWT_SECRET")

DB_CONFIG = db_config_from_env()

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
