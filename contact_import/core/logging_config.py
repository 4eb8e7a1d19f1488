"""
Logging setup for the contact import service.

Every module logs through ``logging.getLogger(__name__)``; this module wires
those loggers to a single console handler the first time the API (or a test)
asks for it.
"""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Iterable, Optional


# Third-party loggers that are chatty at INFO during uploads and HTTP submissions.
NOISY_LOGGERS = ("urllib3", "python_multipart", "multipart")

_is_configured = False


def configure_logging(level: Optional[str] = None, quiet: Iterable[str] = NOISY_LOGGERS) -> None:
    """
    Configure the console handler once per process.

    Args:
        level: Log level for the root and ``contact_import`` loggers (default "INFO").
        quiet: Logger names capped at WARNING regardless of ``level``.
    """
    global _is_configured

    if _is_configured:
        return

    log_level = (level or "INFO").upper()

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "level": log_level,
                }
            },
            "root": {
                "handlers": ["console"],
                "level": log_level,
            },
            "loggers": {
                name: {"level": "WARNING"} for name in quiet
            },
        }
    )

    logging.getLogger("contact_import").setLevel(log_level)

    _is_configured = True


def is_logging_configured() -> bool:
    return _is_configured
