"""
Logging for the interview engine.

LOG_FORMAT=console (default) renders through Rich on stderr;
LOG_FORMAT=json emits one JSON object per record on stdout.
"""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import Optional

from pythonjsonlogger import jsonlogger
from rich.console import Console
from rich.logging import RichHandler

from config import Settings, get_settings

SERVICE_NAME = "interview-engine"

# Chatty client libraries stay at WARNING unless the app runs at DEBUG
QUIET_LOGGERS = ("httpx", "httpcore", "groq", "redis")
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _rich_handler() -> logging.Handler:
    return RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )


def _json_handler() -> logging.Handler:
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
        static_fields={"service": SERVICE_NAME},
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    return handler


HANDLERS = {
    "console": _rich_handler,
    "json": _json_handler,
}


def setup_logging(settings: Optional[Settings] = None, force: bool = False) -> None:
    """
    Install the configured handler on the root logger and share it with
    uvicorn. A no-op once configured, unless force=True.
    """
    root = logging.getLogger()
    if root.handlers and not force:
        return

    settings = settings or get_settings()
    level = (settings.log_level or "INFO").upper()
    handler = HANDLERS.get(settings.log_format.lower(), _rich_handler)()

    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = [handler]
        server_logger.propagate = False
        server_logger.setLevel(level)

    quiet_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


@lru_cache()
def get_logger(name: str | None = None) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name or SERVICE_NAME)
