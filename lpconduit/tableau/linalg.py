"""Basis-matrix helpers for the revised simplex."""

from __future__ import annotations

import numpy as np

from ..core.errors import NumericalDegeneracy
from .core import DEFAULT_TOL, pivot


def gauss_jordan_inverse(matrix: np.ndarray, tol: float = DEFAULT_TOL) -> np.ndarray:
    """
    Invert a square matrix by Gauss-Jordan elimination on ``[B | I]``.

    Each column is pivoted with the same primitive the tableau solvers use,
    after swapping in the row with the largest remaining entry (partial
    pivoting).

    Raises:
        NumericalDegeneracy: If the matrix is singular to within ``tol``.
    """
    matrix = np.asarray(matrix, dtype=float)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {matrix.shape}")
    n = matrix.shape[0]
    work = np.hstack([matrix, np.eye(n)])

    for col in range(n):
        candidate = col + int(np.argmax(np.abs(work[col:, col])))
        if abs(work[candidate, col]) <= tol:
            raise NumericalDegeneracy(f"Basis matrix is singular (column {col})")
        if candidate != col:
            work[[col, candidate]] = work[[candidate, col]]
        pivot(work, col, col, tol)

    return work[:, n:]


__all__ = ["gauss_jordan_inverse"]
