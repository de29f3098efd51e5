"""
Contact pages.

Server-rendered HTML for listing, searching, creating, viewing, editing
and deleting contacts, plus the ``/contacts/validate`` fragment used by
the forms for live email/phone checks.  The create form is posted with
htmx and answered with a fragment; the edit form is a regular post that
redirects back to the list on success.

Missing contacts raise ``NotFoundError`` and storage failures raise
``StoreError``; both are turned into error pages by the handlers
registered in ``main.py``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Query, status
from fastapi.responses import HTMLResponse, RedirectResponse

from contact_book.app.api.dependencies import get_settings, get_store, get_validator
from contact_book.app.core.config import Settings
from contact_book.app.core.errors import ConflictError
from contact_book.app.schemas.contact import FORM_FIELDS, NewContact
from contact_book.app.services.contact_store import ContactStore
from contact_book.app.services.validation_service import ContactValidator
from contact_book.app import templates

router = APIRouter()

NOT_SAVED_MESSAGE = "Email and/or phone number is already in use. Contact NOT SAVED"
CREATED_MESSAGE = "Contact successfully created. Redirecting"

FIELD_LABELS = {
    "first_name": "first name",
    "last_name": "last name",
    "phone_number": "phone number",
    "email": "email",
}


def _missing_fields_message(new_contact: NewContact) -> str:
    missing: List[str] = [
        FIELD_LABELS[name]
        for name in FORM_FIELDS
        if new_contact.errors is not None and getattr(new_contact.errors, name)
    ]
    return "Please fill in: " + ", ".join(missing)


@router.get("/")
def index() -> RedirectResponse:
    return RedirectResponse("/contacts", status_code=status.HTTP_308_PERMANENT_REDIRECT)


@router.get("/contacts", response_class=HTMLResponse)
def list_contacts(
    q: Optional[str] = Query(None),
    page: int = Query(1),
    store: ContactStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> HTMLResponse:
    """Render one page of contacts, filtered by ``q`` when it is given."""
    page = max(1, page)
    per_page = settings.per_page
    if q is not None:
        contacts = store.search(q, page, per_page)
        total = store.count(q)
    else:
        contacts = store.list(page, per_page)
        total = store.count()
    return HTMLResponse(templates.render_index(contacts, q or "", page, per_page, total))


@router.get("/contacts/new", response_class=HTMLResponse)
def new_contact_form() -> HTMLResponse:
    return HTMLResponse(templates.render_new_contact())


@router.post("/contacts/new", response_class=HTMLResponse)
def create_contact(
    first_name: str = Form(""),
    last_name: str = Form(""),
    phone_number: str = Form(""),
    email: str = Form(""),
    store: ContactStore = Depends(get_store),
    validator: ContactValidator = Depends(get_validator),
) -> HTMLResponse:
    """Create a contact unless its email or phone number is already taken.

    Always answers with a fragment for ``#form-result``: an error message
    or a success notice that redirects to the list.
    """
    new_contact = NewContact.from_form(first_name, last_name, phone_number, email)
    if not new_contact.is_valid():
        return HTMLResponse(templates.render_error_message(_missing_fields_message(new_contact)))

    result = validator.validate(email=new_contact.email, phone=new_contact.phone_number)
    if not result.allowed:
        return HTMLResponse(templates.render_error_message(NOT_SAVED_MESSAGE))

    try:
        store.create(new_contact)
    except ConflictError:
        # Another request saved the same email/phone since validation ran.
        return HTMLResponse(templates.render_error_message(NOT_SAVED_MESSAGE))
    return HTMLResponse(templates.render_success_redirect(CREATED_MESSAGE))


@router.get("/contacts/validate", response_class=HTMLResponse)
def validate_input(
    email: Optional[str] = Query(None),
    phone_number: Optional[str] = Query(None),
    exclude_id: Optional[int] = Query(None),
    validator: ContactValidator = Depends(get_validator),
) -> HTMLResponse:
    """Check email and phone together and return the out-of-band fragment.

    The response replaces ``#form-errors`` and the submit button, which
    is disabled while either value belongs to another contact.
    """
    result = validator.validate(email=email, phone=phone_number, exclude_id=exclude_id)
    return HTMLResponse(templates.render_validation(result))


@router.get("/contacts/{contact_id}", response_class=HTMLResponse)
def show_contact(contact_id: int, store: ContactStore = Depends(get_store)) -> HTMLResponse:
    contact = store.find_by_id(contact_id)
    return HTMLResponse(templates.render_show(contact))


@router.delete("/contacts/{contact_id}")
def delete_contact(contact_id: int, store: ContactStore = Depends(get_store)) -> RedirectResponse:
    """Delete a contact and send the client back to the list.

    Deleting an id that does not exist still redirects.
    """
    store.delete(contact_id)
    return RedirectResponse("/contacts", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/contacts/{contact_id}/edit", response_class=HTMLResponse)
def edit_contact_form(contact_id: int, store: ContactStore = Depends(get_store)) -> HTMLResponse:
    contact = store.find_by_id(contact_id)
    return HTMLResponse(templates.render_edit(contact))


@router.post("/contacts/{contact_id}/edit")
def update_contact(
    contact_id: int,
    first_name: str = Form(""),
    last_name: str = Form(""),
    phone_number: str = Form(""),
    email: str = Form(""),
    store: ContactStore = Depends(get_store),
    validator: ContactValidator = Depends(get_validator),
):
    """Save an edited contact, or re-render the form with what went wrong."""
    contact = store.find_by_id(contact_id)
    submitted = NewContact.from_form(first_name, last_name, phone_number, email)
    if not submitted.is_valid():
        return HTMLResponse(
            templates.render_edit(contact, submitted, _missing_fields_message(submitted))
        )

    result = validator.validate(
        email=submitted.email, phone=submitted.phone_number, exclude_id=contact.id
    )
    if not result.allowed:
        return HTMLResponse(templates.render_edit(contact, submitted, result.message))

    try:
        store.update(contact.with_changes(submitted))
    except ConflictError:
        return HTMLResponse(templates.render_edit(contact, submitted, NOT_SAVED_MESSAGE))
    return RedirectResponse("/contacts", status_code=status.HTTP_303_SEE_OTHER)
