"""Logging helpers shared by the pipeline components."""

from __future__ import annotations

import logging
from pathlib import Path

_ROOT = "hugo_preproc"

CONSOLE_FORMAT = "[hugo-preproc] %(levelname)s %(message)s"
DEBUG_CONSOLE_FORMAT = "[hugo-preproc] %(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``hugo_preproc.<name>``, or the package logger itself."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def _attach(logger: logging.Logger, handler: logging.Handler, fmt: str) -> None:
    handler.setLevel(logger.level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send package records to stderr and, optionally, to ``log_file``.

    Verbose runs log at DEBUG and prefix each console line with the emitting
    component; otherwise only INFO and above are shown. Calling this again
    replaces the handlers installed by the previous call.
    """
    logger = get_logger()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach(logger, logging.StreamHandler(), DEBUG_CONSOLE_FORMAT if verbose else CONSOLE_FORMAT)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _attach(logger, logging.FileHandler(log_file, encoding="utf-8"), FILE_FORMAT)

    return logger


__all__ = ["configure_logging", "get_logger"]
