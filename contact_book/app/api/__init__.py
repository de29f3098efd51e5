"""
HTTP routes.

``router.py`` aggregates the routers defined in ``endpoints``; the
application includes it without a prefix so pages live at ``/contacts``.
"""
