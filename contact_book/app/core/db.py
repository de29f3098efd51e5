"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a cursor context manager (``get_cursor``) and
``init_db`` which applies migrations when the application starts.

Applied migration versions are stored in the ``migrations`` table and
new migrations are executed in order.  To change the schema append a
new ``(version, sql)`` pair to ``MIGRATIONS``; never edit one that has
already shipped.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .config import settings

logger = logging.getLogger(__name__)

# Project root, i.e. the directory that contains the ``contact_book`` package.
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

MIGRATIONS: List[Tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS contacts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL,
            phone_number TEXT NOT NULL,
            email TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
    (
        2,
        """
        -- Empty values are not considered duplicates of each other.
        CREATE UNIQUE INDEX IF NOT EXISTS ux_contacts_email
            ON contacts (email) WHERE email <> '';
        CREATE UNIQUE INDEX IF NOT EXISTS ux_contacts_phone_number
            ON contacts (phone_number) WHERE phone_number <> '';
        """,
    ),
]


def resolve_path(path: str) -> str:
    """Return ``path`` unchanged if absolute, else resolve it against the project root."""
    if os.path.isabs(path):
        return path
    return str((BASE_DIR / path).resolve())


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    ``database_url`` defaults to ``settings.database_url``.  An in-memory
    database cannot be used because every operation opens its own
    connection.
    """
    return resolve_path(database_url or settings.database_url)


def get_connection(db_path: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  No type detection is enabled; ``created_at`` comes back as the
    text SQLite stored.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(db_path: str) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, commit on success and always close the connection."""
    conn = get_connection(db_path)
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: str) -> int:
    """Initialise the database and apply pending migrations.

    Returns the schema version after all migrations ran.
    """
    with get_cursor(db_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) AS version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                logger.info("Applied migration %s to %s", version, db_path)
                current_version = version

    return current_version
