"""Small helpers shared by the mysql-connector repositories."""

from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .connection import DatabaseConnection

Row = Dict[str, Any]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """One connection and cursor per unit of work; commit on success, roll back on error."""

    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
    except Exception:
        conn.rollback()
        raise
    else:
        conn.commit()
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Row]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Row]:
    return list(cur.fetchall() or ())


def in_clause(values: Sequence[Any]) -> str:
    # callers skip the query when values is empty
    return ", ".join("%s" for _ in values)


def as_date(value: Any) -> Optional[date]:
    if value is None or (isinstance(value, date) and not isinstance(value, datetime)):
        return value
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("ascii")
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise TypeError(f"Cannot read a DATE column from {type(value).__name__}")


def load_json_list(value: Any) -> list:
    """Subjects are stored as a JSON array in a TEXT column."""

    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if not value:
        return []
    return list(json.loads(value))
