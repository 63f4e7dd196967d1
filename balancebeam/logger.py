"""Logging setup for the BalanceBeam package."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import LOG_DIR, LOG_LEVEL

PACKAGE_LOGGER = "balancebeam"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def configure_logging(level: Optional[str] = None, log_dir: Optional[Path] = None) -> logging.Logger:
    """Attach console and rotating file handlers to the package logger.

    Calling this more than once is harmless; handlers are only installed
    on the first call. When the log directory cannot be created the file
    handler is skipped and console logging still works.
    """
    global _configured
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO))
    if _configured:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    target_dir = log_dir or LOG_DIR
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            target_dir / "balancebeam.log",
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=5,
            encoding="utf-8",
        )
    except OSError as exc:
        logger.warning("File logging disabled: %s", exc)
    else:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _configured = True
    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Return a logger inside the package hierarchy."""
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
