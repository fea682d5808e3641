"""
Dense tableau primitives shared by every simplex variant.

Layout: row 0 is the objective (reduced-cost) row, rows ``1..m`` are
constraint rows; columns are decision variables, then one auxiliary column
per constraint, then the right-hand side. The RHS entry of row 0 holds the
current objective value in the tableau's maximisation convention.

A column is basic when exactly one constraint row holds ~1 in it and every
other constraint row holds ~0; that row's RHS is the variable's value.

All selection rules scan left to right (columns) or top to bottom (rows) and
keep the first candidate on ties, which ``np.argmin`` does for us.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

import numpy as np

from ..core.errors import NumericalDegeneracy
from ..diagnostics.core import assert_unit_column
from ..diagnostics.debug_mode import is_debug_enabled

DEFAULT_TOL = 1e-6


def pivot(tableau: np.ndarray, row: int, col: int, tol: float = DEFAULT_TOL) -> np.ndarray:
    """
    Gauss-Jordan pivot on ``tableau[row, col]`` in place.

    Row ``row`` is divided by the pivot value, then ``tableau[i, col]`` times
    the normalised row is subtracted from every other row ``i``.

    Args:
        tableau: Float tableau, modified in place.
        row: Pivot row (constraint rows start at 1).
        col: Pivot column.
        tol: Smallest admissible pivot magnitude.

    Returns:
        The same ``tableau`` object.

    Raises:
        NumericalDegeneracy: If ``|tableau[row, col]| <= tol``.
    """
    value = tableau[row, col]
    if not abs(value) > tol:
        raise NumericalDegeneracy(
            f"Pivot element {value:.3e} at ({row}, {col}) is below tolerance {tol:.1e}"
        )
    tableau[row, :] /= value
    factors = tableau[:, col].copy()
    factors[row] = 0.0
    tableau -= np.outer(factors, tableau[row, :])

    if is_debug_enabled():
        assert_unit_column(tableau, row, col, tol)

    return tableau


def is_optimal(tableau: np.ndarray, tol: float = DEFAULT_TOL) -> bool:
    """True when no objective-row entry (RHS excluded) is below ``-tol``."""
    reduced = tableau[0, :-1]
    return reduced.size == 0 or bool(np.min(reduced) >= -tol)


def entering_column(tableau: np.ndarray, tol: float = DEFAULT_TOL) -> Optional[int]:
    """Dantzig rule: most negative reduced cost, leftmost on ties."""
    if is_optimal(tableau, tol):
        return None
    return int(np.argmin(tableau[0, :-1]))


def leaving_row(tableau: np.ndarray, col: int, tol: float = DEFAULT_TOL) -> Optional[int]:
    """
    Minimum-ratio test on column ``col``.

    Only rows whose entry exceeds ``tol`` compete. Returns ``None`` when no
    row qualifies, i.e. the column is an unbounded direction.
    """
    entries = tableau[1:, col]
    eligible = entries > tol
    if not np.any(eligible):
        return None
    ratios = np.full(entries.shape, np.inf)
    ratios[eligible] = tableau[1:, -1][eligible] / entries[eligible]
    return int(np.argmin(ratios)) + 1


def has_negative_rhs(tableau: np.ndarray, tol: float = DEFAULT_TOL) -> bool:
    rhs = tableau[1:, -1]
    return rhs.size > 0 and bool(np.min(rhs) < -tol)


def dual_pivot_row(tableau: np.ndarray, tol: float = DEFAULT_TOL) -> Optional[int]:
    """Row with the most negative RHS (first on ties), or ``None``."""
    if not has_negative_rhs(tableau, tol):
        return None
    return int(np.argmin(tableau[1:, -1])) + 1


def dual_pivot_column(tableau: np.ndarray, row: int, tol: float = DEFAULT_TOL) -> Optional[int]:
    """
    Dual ratio test on ``row``.

    Among columns whose entry is below ``-tol`` pick the one minimising
    ``|objective / entry|``. ``None`` means the row proves infeasibility.
    """
    entries = tableau[row, :-1]
    eligible = entries < -tol
    if not np.any(eligible):
        return None
    ratios = np.full(entries.shape, np.inf)
    ratios[eligible] = np.abs(tableau[0, :-1][eligible] / entries[eligible])
    return int(np.argmin(ratios))


def basic_row(
    tableau: np.ndarray,
    col: int,
    tol: float = DEFAULT_TOL,
    include_objective: bool = False,
    allow_negative: bool = False,
) -> Optional[int]:
    """
    Row in which ``col`` is basic, or ``None``.

    Args:
        include_objective: Also require the objective-row entry to be ~0.
        allow_negative: Accept a single ~-1 entry as well; used for excess
            columns that can show up sign-flipped after a row negation.
    """
    column = tableau[1:, col]
    nonzero = np.flatnonzero(np.abs(column) > tol)
    if nonzero.size != 1:
        return None
    idx = int(nonzero[0])
    value = column[idx]
    if abs(value - 1.0) > tol and not (allow_negative and abs(value + 1.0) <= tol):
        return None
    if include_objective and abs(tableau[0, col]) > tol:
        return None
    return idx + 1


def basic_rows(
    tableau: np.ndarray,
    columns: Iterable[int],
    tol: float = DEFAULT_TOL,
    include_objective: bool = False,
) -> Dict[int, int]:
    """
    Map each basic column in ``columns`` to its row.

    A row is claimed by at most one column (the first scanned), so duplicate
    unit columns in a degenerate tableau do not both read the same RHS. Pass
    ``include_objective=True`` when reading values so that a non-basic column
    with a unit constraint part but a non-zero reduced cost is skipped.
    """
    claimed: Dict[int, int] = {}
    taken = set()
    for col in columns:
        row = basic_row(tableau, col, tol, include_objective=include_objective)
        if row is not None and row not in taken:
            claimed[col] = row
            taken.add(row)
    return claimed


def expand(tableau: np.ndarray) -> np.ndarray:
    """
    Return a copy with one extra zero row and one extra zero column.

    The new column is inserted just before the RHS column so it becomes the
    last auxiliary column.
    """
    rows, cols = tableau.shape
    grown = np.zeros((rows + 1, cols + 1))
    grown[:rows, : cols - 1] = tableau[:, :-1]
    grown[:rows, -1] = tableau[:, -1]
    return grown


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
]
