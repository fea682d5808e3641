"""Debug mode switch for lpconduit.

With debug mode on, every pivot re-checks the unit-column postcondition and
the dual simplex asserts its phase invariants after each phase. The checks
cost a full pass over the tableau per pivot, so they are off by default.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

_DEBUG_ENV_VAR = "LPCONDUIT_DEBUG"
_TRUTHY = ("1", "true", "yes", "on")

_debug_enabled: bool = os.getenv(_DEBUG_ENV_VAR, "0").strip().lower() in _TRUTHY


def is_debug_enabled() -> bool:
    """
    Return whether invariant checking is currently enabled.

    Toggled via :func:`set_debug_enabled`, :func:`debug_context` or the
    ``LPCONDUIT_DEBUG`` environment variable.
    """
    return _debug_enabled


def set_debug_enabled(enabled: bool) -> None:
    """Globally enable or disable invariant checking."""
    global _debug_enabled
    _debug_enabled = bool(enabled)


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """
    Temporarily enable or disable invariant checking.

    Example
    -------
    >>> with debug_context(True):
    ...     pass  # pivots inside the block verify their postconditions
    """
    global _debug_enabled
    prev = _debug_enabled
    _debug_enabled = bool(enabled)
    try:
        yield
    finally:
        _debug_enabled = prev
