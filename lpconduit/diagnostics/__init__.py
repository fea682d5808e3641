"""Diagnostics and debugging utilities for lpconduit."""

from .core import (
    SolutionCheck,
    assert_dual_feasible,
    assert_primal_feasible,
    assert_unit_column,
    check_solution,
)
from .debug_mode import (
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)

__all__ = [
    "assert_unit_column",
    "assert_primal_feasible",
    "assert_dual_feasible",
    "SolutionCheck",
    "check_solution",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
]
