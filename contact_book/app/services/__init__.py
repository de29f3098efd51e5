"""
Service layer.

``ContactStore`` owns the ``contacts`` table; ``ContactValidator`` decides
whether an email/phone pair may be saved.  Routes receive both through
FastAPI dependencies rather than module globals.
"""

from .contact_store import ContactStore  # noqa: F401
from .validation_service import ContactValidator  # noqa: F401
