"""HTTP-level tests for the contact pages."""
from contact_book.app.core.errors import ConflictError, StoreError
from contact_book.app.schemas.contact import NewContact

JANE = {
    "first_name": "Jane",
    "last_name": "Doe",
    "phone_number": "555-0100",
    "email": "jane@x.com",
}


def test_root_redirects_to_contacts(client):
    resp = client.get("/", follow_redirects=False)
    assert resp.status_code == 308
    assert resp.headers["location"] == "/contacts"


def test_empty_index(client):
    resp = client.get("/contacts")
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert "No contacts found." in resp.text
    assert "Page 1 of 1" in resp.text


def test_new_contact_form(client):
    resp = client.get("/contacts/new")
    assert resp.status_code == 200
    assert 'name="first_name"' in resp.text
    assert 'hx-get="/contacts/validate"' in resp.text


def test_create_contact_success(client, store):
    resp = client.post("/contacts/new", data=JANE)

    assert resp.status_code == 200
    assert "Contact successfully created" in resp.text
    assert store.email_exists("jane@x.com")


def test_create_contact_conflict_not_saved(client, store):
    client.post("/contacts/new", data=JANE)

    resp = client.post("/contacts/new", data={**JANE, "first_name": "Other", "phone_number": "555-0199"})

    assert resp.status_code == 200
    assert "Contact NOT SAVED" in resp.text
    assert store.count() == 1


def test_create_contact_missing_fields(client, store):
    resp = client.post("/contacts/new", data={"first_name": "Jane"})

    assert resp.status_code == 200
    assert "Please fill in: last name, phone number, email" in resp.text
    assert store.count() == 0


def test_index_lists_and_searches(client, store, new_contact):
    store.create(NewContact(**JANE))
    store.create(new_contact(2, first_name="John", last_name="Smith"))

    listing = client.get("/contacts")
    search = client.get("/contacts", params={"q": "jane"})

    assert "Jane" in listing.text and "John" in listing.text
    assert "Jane" in search.text
    assert "John" not in search.text
    assert 'value="jane"' in search.text


def test_index_paginates(client, store, new_contact):
    for n in range(12):
        store.create(new_contact(n))

    first = client.get("/contacts")
    second = client.get("/contacts", params={"page": 2})

    assert "First9<" in first.text
    assert "First10<" not in first.text
    assert "Page 1 of 2" in first.text
    assert "page=2" in first.text
    assert "First10<" in second.text and "First11<" in second.text
    assert "Page 2 of 2" in second.text


def test_index_page_zero_is_first_page(client, store, new_contact):
    store.create(new_contact(1))
    resp = client.get("/contacts", params={"page": 0})
    assert resp.status_code == 200
    assert "First1<" in resp.text
    assert "Page 1 of 1" in resp.text


def test_index_escapes_html(client, store, new_contact):
    store.create(new_contact(1, first_name="<script>alert(1)</script>"))
    resp = client.get("/contacts")
    assert "<script>alert(1)</script>" not in resp.text
    assert "&lt;script&gt;" in resp.text


def test_show_contact(client, store):
    contact = store.create(NewContact(**JANE))

    resp = client.get(f"/contacts/{contact.id}")

    assert resp.status_code == 200
    assert "Jane Doe" in resp.text
    assert "jane@x.com" in resp.text


def test_show_missing_contact_is_404_page(client):
    resp = client.get("/contacts/999")
    assert resp.status_code == 404
    assert "Contact 999 not found" in resp.text


def test_edit_form_prefilled(client, store):
    contact = store.create(NewContact(**JANE))

    resp = client.get(f"/contacts/{contact.id}/edit")

    assert resp.status_code == 200
    assert 'value="555-0100"' in resp.text
    assert f'name="exclude_id" value="{contact.id}"' in resp.text


def test_edit_contact_updates_and_redirects(client, store):
    contact = store.create(NewContact(**JANE))

    resp = client.post(
        f"/contacts/{contact.id}/edit",
        data={**JANE, "first_name": "Janet"},
        follow_redirects=False,
    )

    assert resp.status_code == 303
    assert resp.headers["location"] == "/contacts"
    updated = store.find_by_id(contact.id)
    assert updated.first_name == "Janet"
    assert updated.created_at == contact.created_at


def test_edit_contact_conflict_rerenders_form(client, store, new_contact):
    store.create(NewContact(**JANE))
    other = store.create(new_contact(2))

    resp = client.post(
        f"/contacts/{other.id}/edit",
        data={"first_name": "Other", "last_name": "Person", "phone_number": "555-0002", "email": "jane@x.com"},
    )

    assert resp.status_code == 200
    assert "This email already exists in your contacts" in resp.text
    assert store.find_by_id(other.id).email == "person2@example.com"


def test_edit_missing_contact_is_404(client):
    resp = client.post("/contacts/42/edit", data=JANE)
    assert resp.status_code == 404


def test_delete_contact_redirects(client, store):
    contact = store.create(NewContact(**JANE))

    resp = client.delete(f"/contacts/{contact.id}", follow_redirects=False)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/contacts"
    assert store.count() == 0


def test_delete_missing_contact_still_redirects(client):
    resp = client.delete("/contacts/777", follow_redirects=False)
    assert resp.status_code == 303


def test_validate_endpoint_no_conflict(client):
    resp = client.get("/contacts/validate", params={"email": "new@x.com"})

    assert resp.status_code == 200
    assert 'id="submit-btn"' in resp.text
    assert "disabled" not in resp.text
    assert 'id="form-errors"' in resp.text


def test_validate_endpoint_both_conflict(client, store):
    store.create(NewContact(**JANE))

    resp = client.get("/contacts/validate", params={"email": "jane@x.com", "phone_number": "555-0100"})

    assert "disabled" in resp.text
    assert "Email and phone number already exist in your contacts" in resp.text


def test_validate_endpoint_excludes_edited_contact(client, store):
    contact = store.create(NewContact(**JANE))

    resp = client.get(
        "/contacts/validate",
        params={"email": "jane@x.com", "phone_number": "555-0100", "exclude_id": contact.id},
    )

    assert "disabled" not in resp.text


def test_store_error_renders_500_page(client, monkeypatch):
    def broken(*args, **kwargs):
        raise StoreError("Database error: disk I/O error")

    monkeypatch.setattr(client.app.state.store, "list", broken)

    resp = client.get("/contacts")

    assert resp.status_code == 500
    assert "disk I/O error" in resp.text


def test_static_stylesheet_served(client):
    resp = client.get("/static/style.css")
    assert resp.status_code == 200


def test_end_to_end_scenario(client, store):
    client.post("/contacts/new", data=JANE)
    contact = store.search("Jane", page=1, per_page=10)[0]

    listing = store.list(page=1, per_page=10)
    assert listing[-1].id == contact.id

    found = store.search("Jane", page=1, per_page=10)
    assert [c.id for c in found] == [contact.id]

    resp = client.get("/contacts/validate", params={"email": "jane@x.com"})
    assert "This email already exists in your contacts" in resp.text
    assert "disabled" in resp.text

    client.delete(f"/contacts/{contact.id}", follow_redirects=False)
    assert client.get(f"/contacts/{contact.id}").status_code == 404


# =============================================================================
# Writes rejected by the unique indexes after validation passed
# =============================================================================

def _duplicate_email(*args, **kwargs):
    raise ConflictError(("email",))


def test_create_contact_conflict_at_insert_not_saved(client, monkeypatch):
    monkeypatch.setattr(client.app.state.store, "create", _duplicate_email)

    resp = client.post("/contacts/new", data=JANE)

    assert resp.status_code == 200
    assert "Contact NOT SAVED" in resp.text
    assert "successfully created" not in resp.text


def test_edit_contact_conflict_at_update_rerenders_form(client, store, monkeypatch):
    contact = store.create(NewContact(**JANE))
    monkeypatch.setattr(client.app.state.store, "update", _duplicate_email)

    resp = client.post(
        f"/contacts/{contact.id}/edit",
        data={**JANE, "first_name": "Janet"},
        follow_redirects=False,
    )

    assert resp.status_code == 200
    assert "Contact NOT SAVED" in resp.text
    assert 'name="first_name"' in resp.text
    assert 'value="Janet"' in resp.text
    assert store.find_by_id(contact.id).first_name == "Jane"


def test_unhandled_conflict_renders_409_page(client, monkeypatch):
    monkeypatch.setattr(client.app.state.store, "delete", _duplicate_email)

    resp = client.delete("/contacts/1", follow_redirects=False)

    assert resp.status_code == 409
    assert "text/html" in resp.headers["content-type"]
    assert "Duplicate email" in resp.text


# =============================================================================
# Out-of-range ids and pages
# =============================================================================

def test_index_huge_page_renders(client, store, new_contact):
    store.create(new_contact(1))

    resp = client.get("/contacts", params={"page": 10 ** 19})

    assert resp.status_code == 200
    assert "No contacts on page" in resp.text


def test_show_huge_id_is_404_page(client):
    resp = client.get("/contacts/99999999999999999999")

    assert resp.status_code == 404
    assert "text/html" in resp.headers["content-type"]
    assert "Contact 99999999999999999999 not found" in resp.text


def test_edit_and_delete_huge_id(client):
    huge = "/contacts/99999999999999999999"

    assert client.get(f"{huge}/edit").status_code == 404
    assert client.post(f"{huge}/edit", data=JANE).status_code == 404
    assert client.delete(huge, follow_redirects=False).status_code == 303


def test_validate_with_huge_exclude_id(client, store):
    store.create(NewContact(**JANE))

    resp = client.get(
        "/contacts/validate",
        params={"email": "jane@x.com", "exclude_id": 10 ** 20},
    )

    assert resp.status_code == 200
    assert "disabled" in resp.text


def test_index_page_past_end_points_to_last_page(client, store, new_contact):
    for n in range(12):
        store.create(new_contact(n))

    resp = client.get("/contacts", params={"page": 5})

    assert resp.status_code == 200
    assert "Page 5 of 2" not in resp.text
    assert "No contacts on page 5." in resp.text
    assert 'href="/contacts?page=2">Last page</a>' in resp.text
    assert "2 pages in total" in resp.text
