"""
Logging setup for the contact book.

Everything, including uvicorn's own ``uvicorn.error`` and
``uvicorn.access`` records, goes through the root logger so a single
format and a single set of handlers apply.  ``run.py`` starts uvicorn
with ``log_config=None`` for that reason; handlers are added here only.

Level and optional log file come from ``Settings`` (``LOG_LEVEL`` and
``LOG_FILE``); ``DEBUG=true`` forces the DEBUG level.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# Handlers this module attached to the root logger, so a second call
# (another create_app() in the same process) does not duplicate output.
_installed: List[logging.Handler] = []


def resolve_level(config: Settings) -> int:
    """Numeric level for ``config``; unknown names fall back to INFO."""
    if config.debug:
        return logging.DEBUG
    level = logging.getLevelName(config.log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def build_handlers(logfile: Optional[str]) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(config: Settings) -> None:
    """Configure the root logger from ``config`` and route uvicorn through it.

    The level is re-applied on every call; handlers are installed once.
    """
    level = resolve_level(config)
    root = logging.getLogger()
    root.setLevel(level)

    if not _installed:
        for handler in build_handlers(config.log_file):
            root.addHandler(handler)
            _installed.append(handler)

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
        uvicorn_logger.setLevel(level)
