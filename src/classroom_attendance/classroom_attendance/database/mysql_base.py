from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

import mysql.connector
from mysql.connector import errorcode

from ..common.app_logger import get_logger
from ..core.exceptions import DuplicateRecord, StoreError
from .connection import DatabaseConnection

logger = get_logger("database")


def translate_error(exc: mysql.connector.Error) -> StoreError:
    if getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY:
        return DuplicateRecord(str(exc))
    return StoreError(str(exc))


def _rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error as exc:
        # The server discards an open transaction when the connection drops.
        logger.warning("rollback failed: %s", exc)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """One connection, one transaction.

    Commits when the block exits normally and rolls back on every other exit path
    (driver errors, domain errors raised inside the block, interrupts). Driver
    errors leave as StoreError / DuplicateRecord.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        raise translate_error(exc) from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        _rollback(conn)
        raise translate_error(exc) from exc
    except BaseException:
        _rollback(conn)
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
