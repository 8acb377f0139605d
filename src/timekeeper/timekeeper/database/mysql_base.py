"""Small helpers shared by the MySQL repositories."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Iterator, Optional, Sized

from mysql.connector import errorcode
from mysql.connector.errors import Error, IntegrityError

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

Row = dict[str, Any]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection) -> Iterator[tuple[Any, Any]]:
    """Yield ``(connection, dict cursor)`` for one transaction.

    The block commits when it exits normally; any exception (domain errors
    raised mid-transaction included) rolls every statement back.
    """
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=True)
    try:
        yield conn, cur
    except BaseException:
        try:
            conn.rollback()
        except Error:
            logger.warning("Rollback failed", exc_info=True)
        raise
    else:
        conn.commit()
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Row]:
    return cur.fetchone() or None


def fetchall(cur) -> list[Row]:
    return list(cur.fetchall() or ())


def is_duplicate_key(err: IntegrityError) -> bool:
    return err.errno == errorcode.ER_DUP_ENTRY


def as_decimal(value: Any, default: Optional[Decimal] = None) -> Optional[Decimal]:
    # DECIMAL columns normally arrive as Decimal; the pure driver may hand back str
    if value is None:
        return default
    return value if isinstance(value, Decimal) else Decimal(str(value))


def in_clause(values: Sized) -> str:
    """Placeholder list for ``IN (...)``; callers must not pass an empty sequence."""
    return ", ".join("%s" for _ in range(len(values)))
