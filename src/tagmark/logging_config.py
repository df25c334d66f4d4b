"""Logging setup for the tagmark CLI."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from tagmark.config.models import LoggingSettings

_HANDLER_NAME = "tagmark-file"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: LoggingSettings, directory: Path) -> Path:
    """Attach a rotating file handler to the ``tagmark`` logger.

    Calling this again replaces the handler installed by a previous call.

    Args:
        settings: Logging configuration section.
        directory: Directory that receives the log file.

    Returns:
        Path: Location of the log file.
    """
    logger = logging.getLogger("tagmark")
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)
            handler.close()

    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / settings.file_name
    handler = RotatingFileHandler(
        log_path,
        maxBytes=settings.max_size_mb * 1024 * 1024,
        backupCount=settings.backup_count,
        encoding="utf-8",
    )
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(settings.level)
    return log_path


__all__ = ["configure_logging"]
