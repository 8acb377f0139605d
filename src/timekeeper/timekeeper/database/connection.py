from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "timekeeper"

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "DBConfig":
        defaults = cls()
        return cls(
            host=str(values.get("host") or defaults.host),
            port=int(values.get("port") or defaults.port),
            user=str(values.get("user") or defaults.user),
            password=str(values.get("password") or ""),
            database=str(values.get("database") or defaults.database),
        )

    def describe(self) -> str:
        """Connection target for log lines; never includes the password."""
        return f"{self.user}@{self.host}:{self.port}/{self.database}"

    def connect_kwargs(self, *, with_database: bool = True) -> dict:
        kwargs: dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "charset": "utf8mb4",
        }
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class DatabaseConnection:
    """Connection factory handed to every MySQL repository.

    Each ``db_cursor`` block opens its own short-lived connection, so a block
    is exactly one transaction.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        return mysql.connector.connect(autocommit=False, **self._config.connect_kwargs())
