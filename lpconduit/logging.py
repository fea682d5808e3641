"""Logging utilities for lpconduit.

All solver modules log through children of a single ``lpconduit`` logger.
The package logger owns one stderr handler; children propagate to it, so
changing the level in one place re-levels every solver.

Levels used by the solvers:

* DEBUG   - every pivot and every tableau expansion
* INFO    - solve outcomes, branching decisions, cuts
* WARNING - an iteration, depth or cut cap was hit
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO

_ROOT_NAME = "lpconduit"
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
_DEFAULT_LEVEL = logging.WARNING

# Module-level logger cache
_loggers: dict[str, logging.Logger] = {}


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def _package_logger() -> logging.Logger:
    root = logging.getLogger(_ROOT_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        root.addHandler(handler)
        root.setLevel(_DEFAULT_LEVEL)
        root.propagate = False
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get or create a logger below the ``lpconduit`` namespace.

    Args:
        name: Logger name (typically ``__name__``). ``None`` returns the
            package logger.

    Returns:
        Cached logger instance.

    Example:
        >>> from lpconduit.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("Pivot on row 2, column 1")
    """
    root = _package_logger()
    if name is None or name == _ROOT_NAME:
        return root

    logger_name = name if name.startswith(_ROOT_NAME + ".") else f"{_ROOT_NAME}.{name}"
    if logger_name not in _loggers:
        _loggers[logger_name] = logging.getLogger(logger_name)
    return _loggers[logger_name]


def set_log_level(level: int | str) -> None:
    """Set the level of the package logger and its handlers.

    Args:
        level: Logging level (``logging.DEBUG`` ...) or its name.
    """
    level = _coerce_level(level)
    root = _package_logger()
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Replace the package handler.

    Typically called once at application startup.

    Args:
        level: Logging level (default: WARNING).
        format_string: Custom format string; defaults to
            ``[LEVEL] name: message``.
        stream: Output stream (default: ``sys.stderr``).
    """
    level = _coerce_level(level)
    root = _package_logger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string or _DEFAULT_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)


@contextmanager
def log_level(level: int | str) -> Iterator[None]:
    """Temporarily change the package log level."""
    root = _package_logger()
    previous = root.level
    handler_levels = [handler.level for handler in root.handlers]
    set_log_level(level)
    try:
        yield
    finally:
        root.setLevel(previous)
        for handler, old in zip(root.handlers, handler_levels):
            handler.setLevel(old)


__all__ = ["get_logger", "set_log_level", "configure_logging", "log_level"]
