"""
Result of the email/phone uniqueness check.
"""

from enum import Enum

from pydantic import BaseModel


class ConflictKind(str, Enum):
    NONE = "none"
    EMAIL = "email"
    PHONE = "phone"
    BOTH = "both"


class ValidationResult(BaseModel):
    """Outcome of validating a prospective create or edit.

    ``allowed`` is ``True`` only when neither the email nor the phone
    number belongs to another contact.
    """

    kind: ConflictKind
    message: str
    allowed: bool
