"""Schema management for the MySQL store.

``schema.sql`` only holds ``CREATE TABLE IF NOT EXISTS`` statements, each
terminated by a ``;`` at the end of a line, so applying it twice is a no-op.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def iter_statements(sql: str) -> Iterator[str]:
    pending: list[str] = []
    for line in sql.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        pending.append(line)
        if stripped.endswith(";"):
            yield "\n".join(pending).rstrip().rstrip(";")
            pending = []
    if pending:
        yield "\n".join(pending)


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        cur.close()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: Optional[Path] = None) -> int:
    """Create the database and every missing table. Returns the statement count."""

    ensure_database_exists(conn_factory)
    statements = list(iter_statements((schema_path or SCHEMA_PATH).read_text(encoding="utf-8")))

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
        cur.close()
    finally:
        conn.close()
    logger.info("Applied %d schema statements to %s", len(statements), conn_factory.config.database)
    return len(statements)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        names = sorted(row[0] for row in cur.fetchall())
        cur.close()
        return names
    finally:
        conn.close()
