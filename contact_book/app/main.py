"""
Main entrypoint for the Contact Book.

This module assembles the FastAPI application: it sets up logging,
creates the contact store, includes the routes, mounts static files and
registers the handlers that render errors as HTML.  ``create_app`` builds
a fresh application; ``app`` is instantiated at import time so it can be
served directly, e.g.::

    uvicorn contact_book.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from .api.router import router
from .core.config import settings
from .core.db import get_database_path, init_db, resolve_path
from .core.errors import ConflictError, NotFoundError, StoreError
from .core.logging_config import setup_logging
from .services.contact_store import ContactStore
from . import templates

logger = logging.getLogger(__name__)


def create_app(database_path: Optional[str] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    database_path : Optional[str]
        SQLite file to use instead of ``settings.database_url``.

    Returns
    -------
    FastAPI
        A configured application.  Migrations are applied when it starts.
    """
    # Initialise logging before anything else so that startup can log.
    setup_logging(settings)

    db_path = get_database_path(database_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(db_path)
        logger.info("Contact book ready, database at %s", db_path)
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = ContactStore(db_path)

    app.include_router(router)
    app.mount(
        "/static",
        StaticFiles(directory=resolve_path(settings.static_dir), check_dir=False),
        name="static",
    )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> HTMLResponse:
        logger.info("%s %s: %s", request.method, request.url.path, exc)
        return HTMLResponse(
            templates.render_error_page(str(exc), status.HTTP_404_NOT_FOUND),
            status_code=status.HTTP_404_NOT_FOUND,
        )

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError) -> HTMLResponse:
        logger.warning("%s %s: %s", request.method, request.url.path, exc)
        return HTMLResponse(
            templates.render_error_page(str(exc), status.HTTP_409_CONFLICT),
            status_code=status.HTTP_409_CONFLICT,
        )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> HTMLResponse:
        logger.error("Internal Application Error: %s", exc)
        return HTMLResponse(
            templates.render_error_page(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
