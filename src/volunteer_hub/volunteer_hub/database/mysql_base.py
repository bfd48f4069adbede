from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def unique_violation_as_conflict(message: str) -> Iterator[None]:
    """Translate MySQL duplicate-key failures into a domain ConflictError."""
    try:
        yield
    except mysql.connector.IntegrityError as exc:
        if exc.errno == errorcode.ER_DUP_ENTRY:
            raise ConflictError(message) from exc
        raise


@contextmanager
def named_lock(conn_factory: DatabaseConnection, name: str, *, timeout_seconds: int = 10) -> Iterator[None]:
    """Hold a MySQL advisory lock (GET_LOCK) for the duration of the block."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        try:
            cur.execute("SELECT GET_LOCK(%s, %s)", (name, int(timeout_seconds)))
            (acquired,) = cur.fetchone()
            if acquired != 1:
                raise TimeoutError(f"Could not acquire lock {name!r}")
            try:
                yield
            finally:
                cur.execute("SELECT RELEASE_LOCK(%s)", (name,))
                cur.fetchone()
        finally:
            cur.close()
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def placeholders(count: int) -> str:
    """Return ``%s,%s,...`` for an IN (...) clause."""
    return ",".join(["%s"] * count)
