"""
Persistence for contacts.

``ContactStore`` wraps the ``contacts`` table created by ``core.db``.
Every method opens its own connection, commits and closes it, so one
store instance can be shared by all requests of the application.

All queries use parameterized statements.  ``sqlite3`` errors never
leave this module as-is: a rejected unique index becomes
``ConflictError`` and anything else becomes ``StoreError``.  A missing
contact is only an error for ``find_by_id``; ``update`` and ``delete``
of an unknown id are no-ops.

Listing and searching both order by ascending ``id``, i.e. creation
order.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from contact_book.app.core.db import get_cursor
from contact_book.app.core.errors import ConflictError, NotFoundError, StoreError
from contact_book.app.schemas.contact import Contact, NewContact

logger = logging.getLogger(__name__)

UNIQUE_FIELDS = ("email", "phone_number")

# SQLite INTEGER is a signed 64-bit value.
SQLITE_MAX_INTEGER = 2 ** 63 - 1
SQLITE_MIN_INTEGER = -(2 ** 63)


def storable_id(contact_id: int) -> bool:
    """Whether ``contact_id`` fits in an SQLite INTEGER column."""
    return SQLITE_MIN_INTEGER <= contact_id <= SQLITE_MAX_INTEGER


def page_bounds(page: int, per_page: int) -> Tuple[int, int]:
    """Return ``(limit, offset)`` for a 1-indexed page.

    ``page`` and ``per_page`` below 1 are clamped to 1; both values are
    capped so they fit in an SQLite INTEGER.  A page far past the end
    simply comes back empty.
    """
    page = max(1, page)
    per_page = min(max(1, per_page), SQLITE_MAX_INTEGER)
    return per_page, min((page - 1) * per_page, SQLITE_MAX_INTEGER)


def like_pattern(term: str) -> str:
    """Wrap ``term`` in ``%`` wildcards, escaping LIKE metacharacters."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def conflicting_fields(exc: sqlite3.IntegrityError) -> Tuple[str, ...]:
    """Names of the unique columns mentioned in an integrity error message."""
    message = str(exc)
    if "UNIQUE constraint failed" not in message:
        return ()
    return tuple(field for field in UNIQUE_FIELDS if f"contacts.{field}" in message)


class ContactStore:
    """CRUD, pagination, search and existence checks over ``contacts``."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        try:
            with get_cursor(self.db_path) as cursor:
                yield cursor
        except sqlite3.IntegrityError as exc:
            fields = conflicting_fields(exc)
            if fields:
                raise ConflictError(fields, exc) from exc
            raise StoreError(f"Integrity error: {exc}", exc) from exc
        except sqlite3.Error as exc:
            raise StoreError(f"Database error: {exc}", exc) from exc
        except OverflowError as exc:
            # Raised by sqlite3 when binding an int wider than 64 bits.
            raise StoreError(f"Value out of range: {exc}", exc) from exc

    def create(self, new: NewContact) -> Contact:
        """Insert a new contact and return it with ``id`` and ``created_at`` set.

        No duplicate check happens here; run ``ContactValidator`` first
        for a friendly message.  The unique indexes still reject a
        duplicate that slipped through with ``ConflictError``.
        """
        with self._cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO contacts (first_name, last_name, phone_number, email)
                VALUES (?, ?, ?, ?)
                """,
                (new.first_name, new.last_name, new.phone_number, new.email),
            )
            contact_id = cursor.lastrowid
            row = cursor.execute(
                "SELECT * FROM contacts WHERE id = ?", (contact_id,)
            ).fetchone()
        logger.info("Created contact %s", contact_id)
        return self._row_to_contact(row)

    def update(self, contact: Contact) -> None:
        """Overwrite names, phone number and email of ``contact.id``.

        ``created_at`` is left alone.  Updating an id that does not exist
        succeeds without touching anything.
        """
        if not storable_id(contact.id):
            logger.debug("Update of missing contact %s ignored", contact.id)
            return
        with self._cursor() as cursor:
            cursor.execute(
                """
                UPDATE contacts
                SET first_name = ?, last_name = ?, phone_number = ?, email = ?
                WHERE id = ?
                """,
                (
                    contact.first_name,
                    contact.last_name,
                    contact.phone_number,
                    contact.email,
                    contact.id,
                ),
            )
            affected = cursor.rowcount
        if affected:
            logger.info("Updated contact %s", contact.id)
        else:
            logger.debug("Update of missing contact %s ignored", contact.id)

    def delete(self, contact_id: int) -> None:
        """Delete a contact.  Deleting a missing id is not an error."""
        if not storable_id(contact_id):
            return
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM contacts WHERE id = ?", (contact_id,))
            affected = cursor.rowcount
        if affected:
            logger.info("Deleted contact %s", contact_id)

    def find_by_id(self, contact_id: int) -> Contact:
        if not storable_id(contact_id):
            raise NotFoundError(contact_id)
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT * FROM contacts WHERE id = ?", (contact_id,)
            ).fetchone()
        if row is None:
            raise NotFoundError(contact_id)
        return self._row_to_contact(row)

    def list(self, page: int = 1, per_page: int = 10) -> List[Contact]:
        """Return one page of contacts in creation order."""
        limit, offset = page_bounds(page, per_page)
        with self._cursor() as cursor:
            rows = cursor.execute(
                "SELECT * FROM contacts ORDER BY id ASC LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
        return [self._row_to_contact(row) for row in rows]

    def search(self, term: str, page: int = 1, per_page: int = 10) -> List[Contact]:
        """Return one page of contacts whose first or last name contains ``term``.

        Matching follows SQLite ``LIKE``: case-insensitive for ASCII.  An
        empty term matches every contact.
        """
        limit, offset = page_bounds(page, per_page)
        pattern = like_pattern(term)
        with self._cursor() as cursor:
            rows = cursor.execute(
                """
                SELECT * FROM contacts
                WHERE first_name LIKE ? ESCAPE '\\' OR last_name LIKE ? ESCAPE '\\'
                ORDER BY id ASC
                LIMIT ? OFFSET ?
                """,
                (pattern, pattern, limit, offset),
            ).fetchall()
        return [self._row_to_contact(row) for row in rows]

    def count(self, term: Optional[str] = None) -> int:
        """Number of contacts ``list`` (or ``search`` with ``term``) pages over."""
        with self._cursor() as cursor:
            if term is None:
                row = cursor.execute("SELECT COUNT(*) AS count FROM contacts").fetchone()
            else:
                pattern = like_pattern(term)
                row = cursor.execute(
                    """
                    SELECT COUNT(*) AS count FROM contacts
                    WHERE first_name LIKE ? ESCAPE '\\' OR last_name LIKE ? ESCAPE '\\'
                    """,
                    (pattern, pattern),
                ).fetchone()
        return row["count"]

    def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        return self._exists("email", email, exclude_id)

    def phone_exists(self, phone: str, exclude_id: Optional[int] = None) -> bool:
        return self._exists("phone_number", phone, exclude_id)

    def _exists(self, column: str, value: str, exclude_id: Optional[int]) -> bool:
        # ``column`` only ever comes from UNIQUE_FIELDS, never from input.
        if column not in UNIQUE_FIELDS:
            raise ValueError(f"Unsupported column {column!r}")
        query = f"SELECT 1 FROM contacts WHERE {column} = ?"
        params: Tuple = (value,)
        if exclude_id is not None and storable_id(exclude_id):
            query += " AND id <> ?"
            params += (exclude_id,)
        with self._cursor() as cursor:
            row = cursor.execute(query + " LIMIT 1", params).fetchone()
        return row is not None

    @staticmethod
    def _row_to_contact(row: sqlite3.Row) -> Contact:
        """Convert a database row to a ``Contact``."""
        return Contact(
            id=row["id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            phone_number=row["phone_number"],
            email=row["email"],
            created_at=row["created_at"],
        )
