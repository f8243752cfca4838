from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import ClassVar

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


def db_config_from_dict(db_config: dict) -> DBConfig:
    return DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )


class DatabaseConnection:
    """Connection factory, one shared instance per distinct :class:`DBConfig`.

    Every unit of work opens its own short-lived connection, so a rollback (a
    lost sequence race, a failed insert) never leaks into another request.
    Connections report matched rather than changed rows, so an UPDATE that
    rewrites identical values still counts as a hit.
    """

    _instances: ClassVar[dict[DBConfig, "DatabaseConnection"]] = {}
    _instances_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        with cls._instances_lock:
            instance = cls._instances.get(config)
            if instance is None:
                instance = cls._instances[config] = cls(config)
            return instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=self._config.port,
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            autocommit=False,
            client_flags=[ClientFlag.FOUND_ROWS],
        )
