"""
Revised simplex: explicit basis and basis inverse instead of a full tableau.

The solver always maximises internally, using ``c`` for a maximise problem
and ``-c`` for a minimise problem, and negates the value back at the end.
Entering column is the largest positive reduced cost over every non-basic
column (decision and slack); the leaving row comes from the ratio test on
``d = B^-1 A_j``. ``B^-1`` is recomputed from scratch after each basis change.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from ..core.config import SolverConfig
from ..core.problem import Problem
from ..core.solution import Solution, Status
from ..logging import get_logger
from ..tableau.linalg import gauss_jordan_inverse
from .base import Solver
from .primal import slack_form

logger = get_logger(__name__)


def _format_vector(values: np.ndarray) -> str:
    return "[" + ", ".join(f"{v:.3f}" for v in values) + "]"


class RevisedSimplex(Solver):
    """
    Basis-inverse simplex for problems feasible at the slack basis.

    Preconditions are the same as :class:`PrimalSimplex`.
    """

    name = "revised_simplex"

    def __init__(self, config: Optional[SolverConfig] = None):
        super().__init__(config)

    def solve(self, problem: Problem) -> Solution:
        tol = self.config.tol
        standard, a_mat, b_vec = slack_form(problem, tol)
        std = standard.problem
        m, n = a_mat.shape

        a_full = np.hstack([a_mat, np.eye(m)])
        costs = np.concatenate([std.c if std.maximize else -std.c, np.zeros(m)])
        names = list(standard.names) + standard.slack_names(range(m))
        basis: List[int] = list(range(n, n + m))

        solution = Solution(
            variable_count=n, slack_count=m, aux_names=names[n:]
        )
        if not problem.maximize:
            solution.add_message("Converted minimization problem to maximization by negating objective")

        deadline = self.config.deadline()
        status = None
        iteration = 0
        b_inv = np.eye(m)
        x_b = b_vec.copy()
        while status is None:
            b_inv = gauss_jordan_inverse(a_full[:, basis], tol)
            x_b = b_inv @ b_vec
            prices = costs[basis] @ b_inv
            reduced = costs - prices @ a_full
            reduced[basis] = 0.0

            if self.config.record_steps:
                solution.add_step(
                    f"Iteration {iteration}:",
                    "\n".join(
                        [
                            "Basis: " + ", ".join(names[j] for j in basis),
                            "xB = " + _format_vector(x_b),
                            "y = " + _format_vector(prices),
                            "Reduced costs = " + _format_vector(reduced),
                            f"Objective = {float(costs[basis] @ x_b):.3f}",
                        ]
                    ),
                )

            entering = int(np.argmax(reduced)) if reduced.size else 0
            if reduced.size == 0 or reduced[entering] <= tol:
                status = Status.OPTIMAL
                break
            if deadline.expired():
                solution.add_message(f"Solve interrupted: {deadline.reason}")
                status = Status.INTERRUPTED
                break
            if iteration >= self.config.max_iterations:
                solution.add_message(f"Iteration limit ({self.config.max_iterations}) reached")
                logger.warning("Revised simplex iteration limit reached")
                status = Status.LIMIT_EXCEEDED
                break

            direction = b_inv @ a_full[:, entering]
            eligible = direction > tol
            if not np.any(eligible):
                solution.add_message(f"Problem is unbounded (column {names[entering]} has no leaving row)")
                status = Status.UNBOUNDED
                break
            ratios = np.full(m, np.inf)
            ratios[eligible] = x_b[eligible] / direction[eligible]
            leaving = int(np.argmin(ratios))

            logger.debug("%s enters, %s leaves", names[entering], names[basis[leaving]])
            solution.add_message(
                f"Iteration {iteration + 1}: {names[entering]} enters, {names[basis[leaving]]} leaves"
            )
            basis[leaving] = entering
            iteration += 1

        solution.status = status
        solution.iterations = iteration
        if status is Status.OPTIMAL:
            z = np.zeros(n + m)
            z[basis] = x_b
            x = standard.to_original(z[:n])
            solution.variable_values = {f"x{i}": float(v) for i, v in enumerate(x, start=1)}
            for k in range(m):
                solution.variable_values[f"s{k + 1}"] = float(z[n + k])
            value = float(costs[basis] @ x_b)
            solution.optimal_value = value if problem.maximize else -value
            solution.objective_trace.append(solution.optimal_value)
            objective_row = np.append(-reduced, value)
            body = np.hstack([b_inv @ a_full, x_b.reshape(-1, 1)])
            solution.final_tableau = np.vstack([objective_row, body])
        logger.info("Revised simplex finished: %s after %d iterations", status.value, iteration)
        return solution


__all__ = ["RevisedSimplex"]
