"""
Top‑level package for the Contact Book web application.

All functionality lives in submodules under ``app``; import the ASGI
application as ``contact_book.app.main:app`` or build a fresh one with
``contact_book.app.main.create_app``.
"""

__all__ = []
