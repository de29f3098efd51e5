"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables; defaults are provided for all fields so the application can
be started without any setup.  Override them via the environment (for
example ``DATABASE_URL=/var/lib/contacts.db``) before importing this
module.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Contact Book")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "contacts.db")

    # Number of contacts shown per page on the index.
    per_page: int = int(os.getenv("PER_PAGE", "10"))

    # Directory served under ``/static``.  Resolved like ``database_url``.
    static_dir: str = os.getenv("STATIC_DIR", "static")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "2911"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
