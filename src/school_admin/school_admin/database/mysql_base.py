from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Tuple

import mysql.connector

from ..core.exceptions import StorageError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit when the block finishes, roll back on any error.

    Driver errors are re-raised as StorageError with the driver message.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        raise StorageError(str(exc)) from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        raise StorageError(str(exc)) from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: Iterable[Any]) -> Tuple[str, tuple]:
    """Build "%s,%s,..." placeholders for an IN (...) filter."""

    items = tuple(values)
    return ",".join(["%s"] * len(items)), items
