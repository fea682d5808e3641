"""Tableau primitives: pivoting, selection rules and formatting."""

from .core import (
    DEFAULT_TOL,
    basic_row,
    basic_rows,
    dual_pivot_column,
    dual_pivot_row,
    entering_column,
    expand,
    has_negative_rhs,
    is_optimal,
    leaving_row,
    pivot,
)
from .format import column_headers, format_tableau
from .linalg import gauss_jordan_inverse

__all__ = [
    "DEFAULT_TOL",
    "pivot",
    "is_optimal",
    "entering_column",
    "leaving_row",
    "has_negative_rhs",
    "dual_pivot_row",
    "dual_pivot_column",
    "basic_row",
    "basic_rows",
    "expand",
    "gauss_jordan_inverse",
    "column_headers",
    "format_tableau",
]
