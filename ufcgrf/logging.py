"""Centralized logging configuration for the ufcgrf package.

All package loggers hang below the ``ufcgrf`` logger, which carries the
level from ``UFCGRF_LOG_LEVEL`` and a ``NullHandler``. Module loggers only
inherit from it, so one ``logging.getLogger("ufcgrf").setLevel(...)`` call
adjusts the whole package.
"""

from __future__ import annotations

import logging
import os
from typing import Final

PACKAGE_LOGGER: Final[str] = "ufcgrf"

# Allow environment override without touching handlers
_LEVEL_NAME: Final[str] = os.getenv("UFCGRF_LOG_LEVEL", "INFO").upper()
_PACKAGE_LOGGER_LEVEL: Final[int] = getattr(logging, _LEVEL_NAME, logging.INFO)

_package_logger = logging.getLogger(PACKAGE_LOGGER)
_package_logger.setLevel(_PACKAGE_LOGGER_LEVEL)
# Records are dropped quietly until an application attaches a real handler
_package_logger.addHandler(logging.NullHandler())


def _in_package(name: str) -> bool:
    return name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + ".")


def get_logger(name: str) -> logging.Logger:
    """Return a module-level logger without altering global handlers.

    Package modules inherit the ``ufcgrf`` level. Loggers outside the
    package (scripts, ``__main__``) get the same level set directly.
    Applications configure output themselves (see
    ``ufcgrf.logging_handlers.attach_structured_handler``).
    """
    logger = logging.getLogger(name)
    if not _in_package(name):
        logger.setLevel(_PACKAGE_LOGGER_LEVEL)
    return logger
