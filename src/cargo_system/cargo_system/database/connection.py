from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

import mysql.connector

# Business hours, dates and counters are all kept in Western Indonesia Time
SESSION_TIME_ZONE = "+07:00"


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_mapping(cls, data: Mapping) -> "DBConfig":
        return cls(
            host=str(data["host"]),
            port=int(data.get("port", 3306)),
            user=str(data["user"]),
            password=str(data.get("password", "")),
            database=str(data["database"]),
        )


class DatabaseConnection:
    """Hands out short-lived mysql-connector connections, one per repository call.

    A single factory is shared per process; asking for a different config
    replaces it (scripts and tests switch databases this way).
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance._config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def database(self) -> str:
        return self._config.database

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=self._config.port,
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            charset="utf8mb4",
            time_zone=SESSION_TIME_ZONE,
            autocommit=False,
        )
