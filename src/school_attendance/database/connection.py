from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "school_attendance"

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "DBConfig":
        defaults = cls()
        return cls(
            host=str(values.get("host") or defaults.host),
            port=int(values.get("port") or defaults.port),
            user=str(values.get("user") or defaults.user),
            password=str(values.get("password") or ""),
            database=str(values.get("database") or defaults.database),
        )

    def server_kwargs(self) -> dict:
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "charset": "utf8mb4",
            "use_pure": True,
        }


class DatabaseConnection:
    """Process wide factory of short lived mysql-connector connections.

    Every repository call opens its own connection and closes it when done,
    so request threads never share a socket.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self.config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = cls(config)
        return cls._instance

    def connect(self, *, with_database: bool = True):
        kwargs = self.config.server_kwargs()
        if with_database:
            kwargs["database"] = self.config.database
        return mysql.connector.connect(**kwargs)
