"""Package loggers and the handler setup used by the CLI."""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "snippet_extractor"

CONSOLE_FORMAT = "[snippets] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``snippet_extractor.<name>``, or the package logger itself."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Send package logs to stderr, and to ``log_file`` when one is given.

    Calling this again replaces the handlers installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    for stale in list(logger.handlers):
        stale.close()
        logger.removeHandler(stale)

    logger.addHandler(_handler(logging.StreamHandler(), level, CONSOLE_FORMAT))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_handler(logging.FileHandler(log_file, encoding="utf-8"), level, FILE_FORMAT))

    return logger


__all__ = ["configure_logging", "get_logger"]
