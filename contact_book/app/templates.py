"""
HTML rendering for the contact book.

Pages are built from small string templates; every value that came
from a user or from the database goes through ``html.escape`` first.
Fragments (``render_error_message``, ``render_success_redirect``,
``render_validation``) are meant to be swapped into an existing page by
htmx rather than served on their own.
"""

import html
from typing import List, Optional
from urllib.parse import urlencode

from contact_book.app.schemas.contact import Contact, NewContact, NewContactErrors
from contact_book.app.schemas.validation import ValidationResult

HTMX_SRC = "https://unpkg.com/htmx.org@1.9.12"

def escape(value) -> str:
    return html.escape("" if value is None else str(value))


def submit_button(allowed: bool = True, oob: bool = False) -> str:
    """The form's submit button; ``oob`` marks it for an htmx out-of-band swap."""
    oob_attr = ' hx-swap-oob="true"' if oob else ""
    if allowed:
        return f'<button id="submit-btn" type="submit"{oob_attr}>Save</button>'
    return (
        f'<button id="submit-btn" type="submit"{oob_attr} disabled '
        f'class="btn-disabled">Cannot save</button>'
    )


def form_errors(message: str = "", oob: bool = False) -> str:
    """The ``#form-errors`` span shown above the submit button."""
    oob_attr = ' hx-swap-oob="true"' if oob else ""
    text = f"⛔ {escape(message)}" if message else ""
    return f'<span{oob_attr} id="form-errors" class="form-errors">{text}</span>'


def render_layout(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{escape(title)}</title>
  <link rel="stylesheet" href="/static/style.css">
  <script src="{HTMX_SRC}"></script>
</head>
<body hx-boost="true">
  <main>
    <h1><a href="/contacts">Contacts</a></h1>
    {body}
  </main>
</body>
</html>"""


def _page_link(label: str, q: str, page: int) -> str:
    params = {"page": page}
    if q:
        params = {"q": q, "page": page}
    return f'<a href="/contacts?{escape(urlencode(params))}">{escape(label)}</a>'


def render_index(
    contacts: List[Contact],
    q: str = "",
    page: int = 1,
    per_page: int = 10,
    total: int = 0,
) -> str:
    """Render the contact list with the search box and pagination links."""
    rows = "\n".join(
        f"""      <tr>
        <td>{escape(c.first_name)}</td>
        <td>{escape(c.last_name)}</td>
        <td>{escape(c.phone_number)}</td>
        <td>{escape(c.email)}</td>
        <td><a href="/contacts/{c.id}">View</a> <a href="/contacts/{c.id}/edit">Edit</a></td>
      </tr>"""
        for c in contacts
    )
    if not contacts:
        rows = '      <tr><td colspan="5">No contacts found.</td></tr>'

    pages = max(1, -(-total // per_page)) if per_page > 0 else 1
    links = []
    if page > pages:
        # Past the end: point back to the last page instead of "Page 5 of 2".
        rows = f'      <tr><td colspan="5">No contacts on page {page}.</td></tr>'
        links.append(_page_link("Last page", q, pages))
        links.append(f"<span>{pages} page{'s' if pages != 1 else ''} in total</span>")
    else:
        if page > 1:
            links.append(_page_link("Previous", q, page - 1))
        links.append(f"<span>Page {page} of {pages}</span>")
        if page * per_page < total:
            links.append(_page_link("Next", q, page + 1))

    body = f"""<form action="/contacts" method="get" class="search">
      <label for="search">Search</label>
      <input id="search" type="search" name="q" value="{escape(q)}"
             hx-get="/contacts" hx-trigger="search, keyup delay:300ms changed"
             hx-target="body" hx-push-url="true">
      <button type="submit">Search</button>
    </form>
    <table>
      <thead>
        <tr><th>First</th><th>Last</th><th>Phone</th><th>Email</th><th></th></tr>
      </thead>
      <tbody>
{rows}
      </tbody>
    </table>
    <nav class="pagination">{" ".join(links)}</nav>
    <p><a href="/contacts/new">Add Contact</a></p>"""
    return render_layout("Contacts", body)


def _field(name: str, label: str, value: str, error: Optional[str], input_type: str = "text", extra: str = "") -> str:
    error_html = f'<span class="field-error">{escape(error)}</span>' if error else ""
    return f"""<p>
        <label for="{name}">{escape(label)}</label>
        <input id="{name}" name="{name}" type="{input_type}" value="{escape(value)}" required {extra}>
        {error_html}
      </p>"""


def _contact_form(
    action: str,
    values: NewContact,
    legend: str,
    exclude_id: Optional[int] = None,
    form_attrs: str = "",
    error_message: str = "",
) -> str:
    """Shared create/edit form.

    ``form_attrs`` is appended to the ``<form>`` tag (e.g. htmx posting
    attributes); ``error_message`` fills ``#form-errors``.
    """
    errors = values.errors or NewContactErrors()
    include = "[name='email'],[name='phone_number']"
    hidden = ""
    if exclude_id is not None:
        include += ",[name='exclude_id']"
        hidden = f'<input type="hidden" name="exclude_id" value="{exclude_id}">'
    live = (
        f'hx-get="/contacts/validate" hx-trigger="change, keyup delay:300ms changed" '
        f'hx-include="{include}" hx-swap="none"'
    )
    attrs = f" {form_attrs}" if form_attrs else ""
    return f"""<form action="{escape(action)}" method="post"{attrs}>
      <fieldset>
        <legend>{escape(legend)}</legend>
        {hidden}
        {_field("first_name", "First Name", values.first_name, errors.first_name)}
        {_field("last_name", "Last Name", values.last_name, errors.last_name)}
        {_field("phone_number", "Phone", values.phone_number, errors.phone_number, "tel", live)}
        {_field("email", "Email", values.email, errors.email, "email", live)}
        {form_errors(error_message)}
        {submit_button()}
      </fieldset>
    </form>"""


def _empty_new_contact() -> NewContact:
    return NewContact.model_construct(first_name="", last_name="", phone_number="", email="", errors=None)


def render_new_contact(contact: Optional[NewContact] = None) -> str:
    """Render the new-contact form, optionally refilled after a failed post."""
    values = contact or _empty_new_contact()
    # The form is posted by htmx; the result fragment lands in #form-result.
    form = _contact_form(
        "/contacts/new",
        values,
        "Contact Values",
        form_attrs='hx-post="/contacts/new" hx-target="#form-result" hx-swap="innerHTML"',
    )
    body = f"""{form}
    <div id="form-result"></div>
    <p><a href="/contacts">Back</a></p>"""
    return render_layout("New Contact", body)


def render_show(contact: Contact) -> str:
    body = f"""<h2>{escape(contact.full_name)}</h2>
    <div>
      <div>Phone: {escape(contact.phone_number)}</div>
      <div>Email: {escape(contact.email)}</div>
      <div>Added: {escape(contact.created_at)}</div>
    </div>
    <p>
      <a href="/contacts/{contact.id}/edit">Edit</a>
      <a href="/contacts">Back</a>
    </p>"""
    return render_layout(contact.full_name, body)


def render_edit(contact: Contact, submitted: Optional[NewContact] = None, error_message: str = "") -> str:
    """Render the edit form.

    ``submitted`` refills the form with what the user typed when a post
    failed; otherwise the stored values are shown.
    """
    values = submitted or NewContact.model_construct(
        first_name=contact.first_name,
        last_name=contact.last_name,
        phone_number=contact.phone_number,
        email=contact.email,
        errors=None,
    )
    form = _contact_form(
        f"/contacts/{contact.id}/edit",
        values,
        "Contact Values",
        exclude_id=contact.id,
        error_message=error_message,
    )
    body = f"""{form}
    <button hx-delete="/contacts/{contact.id}" hx-target="body" hx-push-url="true"
            hx-confirm="Are you sure you want to delete this contact?">Delete Contact</button>
    <p><a href="/contacts">Back</a></p>"""
    return render_layout(f"Edit {contact.full_name}", body)


def render_error_page(error: str, status_code: int = 500) -> str:
    body = f"""<h2>Error {status_code}</h2>
    <p class="error">{escape(error)}</p>
    <p><a href="/contacts">Back to contacts</a></p>"""
    return render_layout("Error", body)


def render_success_redirect(success_message: str, location: str = "/contacts") -> str:
    """Fragment: success notice that sends the browser to ``location`` shortly after."""
    return f"""<div class="success">{escape(success_message)}</div>
<script>setTimeout(function () {{ window.location.href = "{escape(location)}"; }}, 1500);</script>"""


def render_error_message(error_message: str) -> str:
    return f'<div class="error">{escape(error_message)}</div>'


def render_validation(result: ValidationResult) -> str:
    """Fragment: out-of-band submit button plus the ``#form-errors`` span."""
    return submit_button(result.allowed, oob=True) + form_errors(result.message, oob=True)
