from __future__ import annotations

from typing import Sequence

from mysql.connector.errors import IntegrityError

from ..core.exceptions import PodInUse
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import PodRepository


class MySQLPodRepository(PodRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_names(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT pod_name FROM pods ORDER BY pod_name")
            return [r["pod_name"] for r in fetchall(cur)]

    def exists(self, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM pods WHERE pod_name=%s", (name,))
            return fetchone(cur) is not None

    def add(self, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT IGNORE INTO pods(pod_name) VALUES(%s)", (name,))
            return cur.rowcount > 0

    def remove(self, name: str) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM pods WHERE pod_name=%s", (name,))
                return cur.rowcount > 0
        except IntegrityError:
            # fk_employees_pod is ON DELETE RESTRICT
            raise PodInUse(f"POD {name} still has employees assigned")
