import pytest
from fastapi.testclient import TestClient

from contact_book.app.core.db import init_db
from contact_book.app.main import create_app
from contact_book.app.schemas.contact import NewContact
from contact_book.app.services.contact_store import ContactStore
from contact_book.app.services.validation_service import ContactValidator


@pytest.fixture
def db_path(tmp_path):
    """Path to a freshly migrated SQLite database."""
    path = str(tmp_path / "contacts.db")
    init_db(path)
    return path


@pytest.fixture
def store(db_path):
    return ContactStore(db_path)


@pytest.fixture
def validator(store):
    return ContactValidator(store)


@pytest.fixture
def client(db_path):
    app = create_app(database_path=db_path)
    with TestClient(app) as test_client:
        yield test_client


def make_contact(n: int, **overrides) -> NewContact:
    """Contact number ``n`` with unique phone and email."""
    values = {
        "first_name": f"First{n}",
        "last_name": f"Last{n}",
        "phone_number": f"555-{n:04d}",
        "email": f"person{n}@example.com",
    }
    values.update(overrides)
    return NewContact(**values)


@pytest.fixture
def new_contact():
    return make_contact
