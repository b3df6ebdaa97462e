"""Logging for treedocs runs.

Every module logs under the ``treedocs`` hierarchy (``treedocs.discovery``,
``treedocs.pages`` and so on). Files the parser rejects and headers that fail
to render as markdown are reported as warnings, so a default run prints one
line per skipped file and nothing else. ``--verbose`` adds the debug trail and
tags each line with the component that emitted it.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "treedocs"
_STREAM_FORMAT = "[treedocs] %(levelname)s %(message)s"
_VERBOSE_STREAM_FORMAT = "[treedocs:%(component)s] %(levelname)s %(message)s"
# Parsing, page rendering and index writing run on worker threads.
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s"


class _ComponentFormatter(logging.Formatter):
    """Exposes the logger name relative to ``treedocs`` as ``%(component)s``."""

    def format(self, record: logging.LogRecord) -> str:
        prefix = f"{_LOGGER_NAME}."
        if record.name.startswith(prefix):
            record.component = record.name[len(prefix):]
        else:
            record.component = "main"
        return super().format(record)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the treedocs hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send treedocs records to stderr, and to ``log_file`` when one is given."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one process must not duplicate output or leak files.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(
        _ComponentFormatter(_VERBOSE_STREAM_FORMAT if verbose else _STREAM_FORMAT)
    )
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
