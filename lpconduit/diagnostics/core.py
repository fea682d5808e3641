"""Invariant checks for tableaux and solutions."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..core.problem import Problem
from ..core.solution import Solution


def assert_unit_column(tableau: np.ndarray, row: int, col: int, tol: float = 1e-6) -> None:
    """
    Assert that ``col`` is the unit vector for ``row`` after a pivot.

    Parameters
    ----------
    tableau:
        Dense tableau, objective row first.
    row, col:
        Pivot position.
    tol:
        Absolute tolerance.

    Raises
    ------
    ValueError
        If ``tableau[row, col]`` is not ~1 or another entry of the column
        is not ~0.
    """
    column = tableau[:, col]
    if abs(column[row] - 1.0) > tol:
        raise ValueError(
            f"Pivot postcondition violated: tableau[{row}, {col}] = {column[row]:.6g}, expected 1."
        )
    others = np.delete(column, row)
    worst = float(np.max(np.abs(others))) if others.size else 0.0
    if worst > tol:
        raise ValueError(
            f"Pivot postcondition violated: column {col} has off-pivot entry {worst:.6g}."
        )


def assert_primal_feasible(tableau: np.ndarray, tol: float = 1e-6) -> None:
    """Assert that every constraint RHS is >= -tol."""
    rhs = tableau[1:, -1]
    if rhs.size and float(np.min(rhs)) < -tol:
        raise ValueError(f"Negative right-hand side {float(np.min(rhs)):.6g} after phase 1.")


def assert_dual_feasible(tableau: np.ndarray, tol: float = 1e-6) -> None:
    """Assert that every objective-row entry except the RHS is >= -tol."""
    row = tableau[0, :-1]
    if row.size and float(np.min(row)) < -tol:
        raise ValueError(f"Negative reduced cost {float(np.min(row)):.6g} at optimality.")


@dataclass
class SolutionCheck:
    """
    Result of substituting a solution back into its problem.

    Attributes:
        max_violation: Largest constraint or sign-restriction violation.
        objective_residual: ``|c·x - optimal_value|``.
        ok: Both quantities are within tolerance.
    """

    max_violation: float
    objective_residual: float
    ok: bool


def check_solution(problem: Problem, solution: Solution, tol: float = 1e-6) -> SolutionCheck:
    """
    Substitute ``solution``'s decision values into ``problem``.

    The objective residual is ``inf`` when the solution carries no optimal
    value.
    """
    x = solution.decision_values(problem.n_variables)
    violations = problem.constraint_violations(x)
    max_violation = float(np.max(violations)) if violations.size else 0.0
    if solution.optimal_value is None:
        residual = float("inf")
    else:
        residual = abs(problem.objective_value(x) - solution.optimal_value)
    scale = max(1.0, abs(solution.optimal_value or 0.0))
    ok = max_violation <= tol and residual <= tol * scale
    return SolutionCheck(max_violation=max_violation, objective_residual=residual, ok=ok)


__all__ = [
    "assert_unit_column",
    "assert_primal_feasible",
    "assert_dual_feasible",
    "SolutionCheck",
    "check_solution",
]
