"""
Email/phone uniqueness check run before a contact is created or edited.

Both lookups always run when both values are given.  Checking them
together means fixing one field cannot re-enable the submit button while
the other field is still taken.

The check and the following write are two separate round-trips, so a
concurrent request can still win the race; the unique indexes on the
table turn that case into a ``ConflictError`` from the store.
"""

import logging
from typing import Dict, Optional, Tuple

from contact_book.app.schemas.validation import ConflictKind, ValidationResult
from contact_book.app.services.contact_store import ContactStore

logger = logging.getLogger(__name__)

# (email_exists, phone_exists) -> (kind, message)
DECISIONS: Dict[Tuple[bool, bool], Tuple[ConflictKind, str]] = {
    (True, True): (ConflictKind.BOTH, "Email and phone number already exist in your contacts"),
    (True, False): (ConflictKind.EMAIL, "This email already exists in your contacts"),
    (False, True): (ConflictKind.PHONE, "This phone number already exists in your contacts"),
    (False, False): (ConflictKind.NONE, ""),
}


def decide(email_exists: bool, phone_exists: bool) -> ValidationResult:
    """Map the two existence flags to a ``ValidationResult``."""
    kind, message = DECISIONS[(bool(email_exists), bool(phone_exists))]
    return ValidationResult(kind=kind, message=message, allowed=kind is ConflictKind.NONE)


def _provided(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ContactValidator:
    """Checks candidate email/phone values against the contact store."""

    def __init__(self, store: ContactStore) -> None:
        self.store = store

    def validate(
        self,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> ValidationResult:
        """Return whether ``email`` and ``phone`` may be saved.

        Empty or missing values are treated as not provided and never
        conflict.  ``exclude_id`` skips the contact being edited so that
        keeping its own email or phone is not reported as a duplicate.
        """
        email = _provided(email)
        phone = _provided(phone)
        email_exists = self.store.email_exists(email, exclude_id) if email else False
        phone_exists = self.store.phone_exists(phone, exclude_id) if phone else False
        result = decide(email_exists, phone_exists)
        if not result.allowed:
            logger.debug("Validation rejected email=%r phone=%r: %s", email, phone, result.kind.value)
        return result
