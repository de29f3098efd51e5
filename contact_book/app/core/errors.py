"""
Error types raised by the service layer.

``NotFoundError`` means there is nothing to show; ``StoreError`` means
something broke in SQLite.  ``ConflictError`` is the ``StoreError`` raised
when a unique index rejects a write, so callers that only care about
"the write failed" can keep catching ``StoreError``.
"""

from typing import Optional, Sequence, Tuple


class ContactBookError(Exception):
    """Base class for all application errors."""


class NotFoundError(ContactBookError):
    """The requested contact does not exist."""

    def __init__(self, contact_id: int) -> None:
        super().__init__(f"Contact {contact_id} not found")
        self.contact_id = contact_id


class StoreError(ContactBookError):
    """A storage-level failure (connectivity, constraint, I/O)."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConflictError(StoreError):
    """A write was rejected because email and/or phone number is already taken."""

    def __init__(self, fields: Sequence[str], cause: Optional[BaseException] = None) -> None:
        self.fields: Tuple[str, ...] = tuple(fields)
        names = " and ".join(self.fields) or "unique field"
        super().__init__(f"Duplicate {names}", cause)
