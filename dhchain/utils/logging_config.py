"""Logging setup for dhchain entry points.

Handlers are attached to the ``dhchain`` package logger, not the root
logger, so an application embedding the library keeps its own logging
configuration. Records still propagate to the root logger.

Usage:
    from dhchain.utils.logging_config import setup_logging
    setup_logging()             # level from DHCHAIN_LOG_LEVEL, else WARNING
    setup_logging("debug", log_file="dhchain.log")
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Union

LOG_LEVEL_ENV_VAR = "DHCHAIN_LOG_LEVEL"
PACKAGE_LOGGER = "dhchain"

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_LEVEL = logging.WARNING

# Log rotation defaults
MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3

_OWNED = "_dhchain_handler"


def resolve_level(level: Union[int, str, None] = None) -> int:
    """Turn *level* (int, name such as ``"debug"``, or None) into a logging level.

    None falls back to ``DHCHAIN_LOG_LEVEL`` and then to WARNING.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR) or DEFAULT_LEVEL
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level {level!r}")
    return value


def setup_logging(
    level: Union[int, str, None] = None,
    log_file: str | None = None,
    fmt: str = DEFAULT_FORMAT,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
) -> logging.Logger:
    """Configure the ``dhchain`` logger and return it.

    Adds a stderr handler and, when *log_file* is given, a
    RotatingFileHandler capped at *max_bytes* with *backup_count* backups.
    Handlers installed by an earlier call are closed and replaced, so
    calling this again changes the level or file instead of duplicating
    output.
    """
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_logger.setLevel(resolve_level(level))

    for handler in [h for h in pkg_logger.handlers if getattr(h, _OWNED, False)]:
        pkg_logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        )
    formatter = logging.Formatter(fmt)
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _OWNED, True)
        pkg_logger.addHandler(handler)
    return pkg_logger
