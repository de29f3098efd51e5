"""
Pydantic schemas for contacts.

``NewContact`` is what a create or edit form submits; it is never stored
as such.  ``Contact`` is a row of the ``contacts`` table, with the ``id``
and ``created_at`` the store assigned.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

REQUIRED_MESSAGE = "This field is required"

FORM_FIELDS = ("first_name", "last_name", "phone_number", "email")


class NewContactErrors(BaseModel):
    """Per-field error messages shown when a form is re-rendered."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None

    def has_errors(self) -> bool:
        return any(getattr(self, name) for name in FORM_FIELDS)


class NewContact(BaseModel):
    """Schema for creating a contact or submitting an edit."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    errors: Optional[NewContactErrors] = None

    @field_validator("first_name", "last_name", "phone_number", "email", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @classmethod
    def from_form(
        cls,
        first_name: str = "",
        last_name: str = "",
        phone_number: str = "",
        email: str = "",
    ) -> "NewContact":
        """Build a ``NewContact`` from raw form values.

        Never raises: when a field fails validation the submitted values
        are kept as typed and ``errors`` says which fields to fix.
        """
        raw = {
            "first_name": first_name,
            "last_name": last_name,
            "phone_number": phone_number,
            "email": email,
        }
        try:
            return cls(**raw)
        except ValidationError as exc:
            messages: Dict[str, str] = {}
            for error in exc.errors():
                field = str(error["loc"][0]) if error["loc"] else ""
                if field in FORM_FIELDS:
                    messages.setdefault(field, REQUIRED_MESSAGE)
            return cls.model_construct(
                **{name: (value or "").strip() for name, value in raw.items()},
                errors=NewContactErrors(**messages),
            )

    def is_valid(self) -> bool:
        return self.errors is None or not self.errors.has_errors()


class Contact(BaseModel):
    """Schema for a stored contact."""

    id: int
    first_name: str
    last_name: str
    phone_number: str
    email: str
    created_at: str

    model_config = {
        "from_attributes": True,
    }

    def with_changes(self, new: NewContact) -> "Contact":
        """Return a copy carrying the editable fields of ``new``.

        ``id`` and ``created_at`` are kept from this contact.
        """
        return self.model_copy(
            update={
                "first_name": new.first_name,
                "last_name": new.last_name,
                "phone_number": new.phone_number,
                "email": new.email,
            }
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
