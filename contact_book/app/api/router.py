"""
Top‑level router.

Aggregates the endpoint routers.  When a new group of pages is added,
include its router here.
"""

from fastapi import APIRouter

from .endpoints import contacts

router = APIRouter()

# The contacts router defines its own "/contacts" paths (plus the "/"
# redirect), so it is included without a prefix.
router.include_router(contacts.router, tags=["contacts"])
