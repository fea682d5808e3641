"""
One-phase primal simplex for problems that start feasible at the slack basis.

Every constraint must be expressible as ``a·x <= b`` with ``b >= 0`` once the
problem is in standard form. A ``>=`` row with a non-positive RHS qualifies
after negation; anything else needs the dual simplex.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from ..core.config import SolverConfig
from ..core.errors import InvalidOperation
from ..core.problem import Problem, Relation, StandardForm
from ..core.solution import Solution, Status
from ..logging import get_logger
from ..tableau.core import basic_rows, entering_column, leaving_row, pivot
from ..tableau.format import column_headers, format_tableau
from .base import Solver

logger = get_logger(__name__)


def slack_form(problem: Problem, tol: float) -> Tuple[StandardForm, np.ndarray, np.ndarray]:
    """
    Rewrite ``problem`` as ``A z <= b`` with ``b >= 0`` over standard columns.

    Returns:
        ``(standard_form, A, b)``.

    Raises:
        InvalidOperation: If a row is an equality or keeps a negative RHS.
    """
    standard = problem.standard_form()
    rows, rhs = [], []
    for i, con in enumerate(standard.problem.constraints, start=1):
        coeffs, b = con.coefficients, con.rhs
        if con.relation is Relation.EQ:
            raise InvalidOperation(
                f"Constraint {i} is an equality; use DualSimplex for '=' constraints"
            )
        if con.relation is Relation.GE:
            if b > tol:
                raise InvalidOperation(
                    f"Constraint {i} is '>=' with positive RHS; use DualSimplex"
                )
            coeffs, b = -coeffs, -b
        if b < -tol:
            raise InvalidOperation(
                f"Constraint {i} has negative RHS {b:g}; the slack basis is infeasible"
            )
        rows.append(coeffs)
        rhs.append(max(b, 0.0))
    n = standard.problem.n_variables
    a_mat = np.vstack(rows) if rows else np.zeros((0, n))
    return standard, a_mat, np.array(rhs, dtype=float)


class PrimalSimplex(Solver):
    """
    Textbook tableau simplex with the Dantzig entering rule.

    Example:
        >>> from lpconduit import Problem
        >>> p = Problem.from_arrays([3, 5], [[1, 0], [0, 2], [3, 2]],
        ...                         ["<=", "<=", "<="], [4, 12, 18])
        >>> PrimalSimplex().solve(p).variable_values["x2"]
        6.0
    """

    name = "primal_simplex"

    def __init__(self, config: Optional[SolverConfig] = None):
        super().__init__(config)

    def solve(self, problem: Problem) -> Solution:
        tol = self.config.tol
        standard, a_mat, b_vec = slack_form(problem, tol)
        std = standard.problem
        m, n = a_mat.shape

        t = np.zeros((m + 1, n + m + 1))
        t[0, :n] = -std.c if std.maximize else std.c
        t[1:, :n] = a_mat
        t[1:, n : n + m] = np.eye(m)
        t[1:, -1] = b_vec

        aux_names = standard.slack_names(range(m))
        headers = column_headers(standard.names, aux_names)
        solution = Solution(
            variable_count=n, slack_count=m, aux_names=list(aux_names)
        )
        if not problem.maximize:
            solution.add_message("Converted minimization problem to maximization by negating objective")
        if self.config.record_steps:
            solution.add_step("Initial Tableau:", format_tableau(t, headers), t)

        deadline = self.config.deadline()
        status = None
        iteration = 0
        while status is None:
            col = entering_column(t, tol)
            if col is None:
                status = Status.OPTIMAL
                break
            if deadline.expired():
                solution.add_message(f"Solve interrupted: {deadline.reason}")
                status = Status.INTERRUPTED
                break
            if iteration >= self.config.max_iterations:
                solution.add_message(f"Iteration limit ({self.config.max_iterations}) reached")
                logger.warning("Primal simplex iteration limit reached")
                status = Status.LIMIT_EXCEEDED
                break
            row = leaving_row(t, col, tol)
            if row is None:
                solution.add_message(f"Problem is unbounded (column {headers[col]} has no leaving row)")
                status = Status.UNBOUNDED
                break

            pivot(t, row, col, tol)
            iteration += 1
            logger.debug("Pivot on row %d, column %s", row, headers[col])
            if self.config.record_steps:
                solution.add_step(
                    f"Iteration {iteration}: Pivot on constraint {row}, column {headers[col]}",
                    format_tableau(t, headers),
                    t,
                )

        solution.status = status
        solution.iterations = iteration
        solution.final_tableau = t.copy()
        if status is Status.OPTIMAL:
            basis = basic_rows(t, range(n + m), tol, include_objective=True)
            z = np.array([t[basis[j], -1] if j in basis else 0.0 for j in range(n)])
            x = standard.to_original(z)
            solution.variable_values = {f"x{i}": float(v) for i, v in enumerate(x, start=1)}
            for k, name in enumerate(aux_names):
                col = n + k
                solution.variable_values[name] = float(t[basis[col], -1]) if col in basis else 0.0
            value = t[0, -1]
            solution.optimal_value = float(value if problem.maximize else -value)
            solution.objective_trace.append(solution.optimal_value)
        logger.info("Primal simplex finished: %s after %d pivots", status.value, iteration)
        return solution


__all__ = ["PrimalSimplex", "slack_form"]
