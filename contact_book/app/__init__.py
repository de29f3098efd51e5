"""
Application package initializer.

The application is split into a few small pieces:

* ``core`` – configuration, logging, database bootstrap and errors;
* ``schemas`` – pydantic models for contacts and validation results;
* ``services`` – the contact store and the uniqueness validator;
* ``api`` – FastAPI routes that glue the services to HTML rendering;
* ``templates`` – HTML pages and htmx fragments.
"""
