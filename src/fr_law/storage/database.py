"""SQLite access for the statute database.

The service only reads: the connection is opened with ``mode=ro`` and shared
across request threads.
"""
from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path
from typing import Union

from fr_law.errors import DatabaseNotFoundError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def open_database(path: PathLike, readonly: bool = True) -> sqlite3.Connection:
    db_path = os.path.abspath(str(path))
    if readonly:
        if not os.path.exists(db_path):
            raise DatabaseNotFoundError(db_path)
        conn = sqlite3.connect(
            f"file:{Path(db_path).as_posix()}?mode=ro",
            uri=True,
            check_same_thread=False,
        )
    else:
        conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    logger.debug(f"Opened database {db_path} (readonly={readonly})")
    return conn


def safe_count(db: sqlite3.Connection, sql: str) -> int:
    """Run a COUNT query, treating a missing table as zero rows."""
    try:
        row = db.execute(sql).fetchone()
    except sqlite3.OperationalError as e:
        logger.debug(f"Count query failed ({e}): {sql}")
        return 0
    return int(row[0]) if row else 0


def read_metadata(db: sqlite3.Connection, key: str, default: str = 'unknown') -> str:
    try:
        row = db.execute("SELECT value FROM db_metadata WHERE key = ?", (key,)).fetchone()
    except sqlite3.OperationalError:
        return default
    return row["value"] if row else default


__all__ = ['open_database', 'read_metadata', 'safe_count']
