"""
FastAPI dependencies.

The store and settings are created once in ``create_app`` and kept on
``app.state``; routes receive them through ``Depends`` so tests can build
an application around a temporary database.
"""

from fastapi import Depends, Request

from contact_book.app.core.config import Settings
from contact_book.app.services.contact_store import ContactStore
from contact_book.app.services.validation_service import ContactValidator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> ContactStore:
    return request.app.state.store


def get_validator(store: ContactStore = Depends(get_store)) -> ContactValidator:
    return ContactValidator(store)
