from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import pooling


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 0


class DatabaseConnection:
    """DB connection factory shared by all repositories.

    Note: Each repository call borrows a short-lived connection; with
    ``pool_size > 0`` connections come from a mysql-connector pool so that
    concurrent socket handlers do not reconnect on every event.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._pool_lock = threading.Lock()

    @classmethod
    def from_dict(cls, db_config: dict) -> "DatabaseConnection":
        return cls(
            DBConfig(
                host=str(db_config["host"]),
                port=int(db_config.get("port", 3306)),
                user=str(db_config["user"]),
                password=str(db_config["password"]),
                database=str(db_config["database"]),
                pool_size=int(db_config.get("pool_size", 0)),
            )
        )

    def _params(self) -> dict:
        return {
            "host": self._config.host,
            "port": int(self._config.port),
            "user": self._config.user,
            "password": self._config.password,
            "database": self._config.database,
        }

    def connect(self):
        if self._config.pool_size > 0:
            with self._pool_lock:
                if self._pool is None:
                    self._pool = pooling.MySQLConnectionPool(
                        pool_name="hr_messaging",
                        pool_size=self._config.pool_size,
                        **self._params(),
                    )
            return self._pool.get_connection()
        return mysql.connector.connect(**self._params())
