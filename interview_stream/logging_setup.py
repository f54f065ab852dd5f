"""Logging initialization helpers."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from interview_stream.config import Settings

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(settings: Settings) -> None:
    """Configure the `interview_stream` logger (and children) from Settings.

    Framework loggers (uvicorn, fastapi) are left alone. Safe to call twice.
    """
    logger = logging.getLogger("interview_stream")
    if getattr(logger, "_interview_stream_configured", False):
        return

    level = getattr(logging, str(settings.LOG_LEVEL or "INFO").upper(), logging.INFO)
    formatter = logging.Formatter(fmt=_FORMAT)

    stream = logging.StreamHandler()
    stream.setLevel(level)
    stream.setFormatter(formatter)
    handlers: list[logging.Handler] = [stream]

    if settings.LOG_FILE:
        file_path = Path(settings.LOG_FILE)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            file_path,
            maxBytes=int(settings.LOG_MAX_BYTES),
            backupCount=int(settings.LOG_BACKUP_COUNT),
            encoding="utf-8",
        )
        fh.setLevel(level)
        fh.setFormatter(formatter)
        handlers.append(fh)

    logger.setLevel(level)
    logger.handlers = handlers
    logger.propagate = False
    setattr(logger, "_interview_stream_configured", True)
