"""Schema and demo-data loading for a fresh MySQL database."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

DEMO_ACCOUNTS = (
    # first, last, email, password, role, pod, position
    ("Ada", "Admin", "admin@example.com", "admin123", "admin", "Platform", "Administrator"),
    ("Max", "Manager", "manager@example.com", "manager123", "manager", "Platform", "Engineering Manager"),
    ("Eve", "Employee", "employee@example.com", "employee123", "employee", "Payments", "Developer"),
)

# Lines dropped before splitting: comments and database selection, so a
# script runs against whichever database DB_CONFIG names.
_IGNORED_LINES = re.compile(r"(?im)^\s*(?:--.*|CREATE\s+DATABASE\b.*?;|USE\b.*?;)\s*$")

# Quoted literals are kept whole so a ';' inside them never ends a statement.
_SQL_TOKEN = re.compile(r"""'(?:\\.|''|[^'\\])*'|"(?:\\.|""|[^"\\])*"|;|[^'";]+|['"]""", re.S)


def _connect(target: DBConfig, *, with_database: bool = True):
    return mysql.connector.connect(use_pure=True, **target.connect_kwargs(with_database=with_database))


def split_statements(sql: str) -> Iterator[str]:
    pending: list[str] = []
    for token in _SQL_TOKEN.findall(_IGNORED_LINES.sub("", sql)):
        if token != ";":
            pending.append(token)
            continue
        statement = "".join(pending).strip()
        pending.clear()
        if statement:
            yield statement

    statement = "".join(pending).strip()
    if statement:
        yield statement


def _run_script(db_config: dict, path: str | Path) -> int:
    target = DBConfig.from_mapping(db_config)
    statements = list(split_statements(Path(path).read_text(encoding="utf-8")))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for statement in statements:
            cur.execute(statement)
        conn.commit()
    except mysql.connector.Error:
        conn.rollback()
        logger.error("Failed running %s against %s", path, target.describe())
        raise
    finally:
        conn.close()
    return len(statements)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_mapping(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("Applied schema %s (%d statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    logger.info("Applied seed %s (%d statements)", seed_path, count)


def ensure_demo_accounts(db_config: dict) -> None:
    """Upsert the demo admin/manager/employee logins with real password hashes."""

    conn = _connect(DBConfig.from_mapping(db_config))
    try:
        cur = conn.cursor(dictionary=True)
        for first, last, email, password, role, pod, position in DEMO_ACCOUNTS:
            cur.execute("INSERT IGNORE INTO pods (pod_name) VALUES (%s)", (pod,))
            password_hash = generate_password_hash(password)
            cur.execute("SELECT employee_id FROM employees WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE employees
                    SET first_name=%s, last_name=%s, password_hash=%s, role=%s, pod_name=%s, position=%s, is_active=1
                    WHERE email=%s
                    """,
                    (first, last, password_hash, role, pod, position, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO employees (first_name, last_name, email, password_hash, role, pod_name, position)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    """,
                    (first, last, email, password_hash, role, pod, position),
                )
        conn.commit()
        logger.info("Demo accounts ready (%d)", len(DEMO_ACCOUNTS))
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_mapping(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
