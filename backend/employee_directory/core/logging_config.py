"""Process-wide logging setup.

Console output always; production additionally writes a rotating
``app.log`` under ``LOG_DIR``.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from employee_directory.core.config import Settings

LOG_FILENAME = "app.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5

_HANDLER_MARKER = "_employee_directory_handler"


def resolve_level(settings: Settings) -> int:
    if settings.LOG_LEVEL:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if isinstance(level, int):
            return level
    return logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG


def configure_logging(settings: Settings) -> logging.Logger:
    root = logging.getLogger()
    root.setLevel(resolve_level(settings))

    # Re-running (tests, reloads) must not stack handlers.
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    setattr(console, _HANDLER_MARKER, True)
    root.addHandler(console)

    if settings.ENVIRONMENT == "production":
        log_dir = Path(settings.LOG_DIR)
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(f"Could not create log directory {log_dir}: {e}", file=sys.stderr)
        else:
            file_handler = RotatingFileHandler(
                log_dir / LOG_FILENAME,
                maxBytes=MAX_BYTES,
                backupCount=BACKUP_COUNT,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            setattr(file_handler, _HANDLER_MARKER, True)
            root.addHandler(file_handler)

    # aiohttp and azure are chatty at DEBUG
    logging.getLogger("azure").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    return root
