"""
Gomory fractional cutting planes on a single evolving dual simplex tableau.

After the relaxation is optimal, the basic integer column whose value is
closest to a half-integer supplies a source row. Splitting that row into
integer and fractional parts gives the cut

    -sum(f_j * x_j) + s = -f_0

which the current vertex violates (its RHS is negative), so the dual phase
has to pivot before the primal phase can continue. The cut is built from the
source row itself, so it has zeros in every basic column already and needs
no repair when it is appended.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..core.config import SolverConfig
from ..core.problem import Problem, Relation
from ..core.solution import Solution, Status
from ..logging import get_logger
from ..tableau.core import basic_row
from .base import Solver
from .branch_and_bound import most_fractional
from .dual import DualSimplex, DualSimplexState

logger = get_logger(__name__)


def split_fraction(values: np.ndarray, tol: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split ``values`` into integer and fractional parts with fractions in ``[0, 1)``.

    Fractions within ``tol`` of 0 or 1 are snapped to 0, moving the integer
    part up by one in the latter case.
    """
    values = np.asarray(values, dtype=float)
    integer = np.trunc(values)
    fraction = values - integer
    negative = fraction < 0
    fraction[negative] += 1.0
    integer[negative] -= 1.0
    near_one = fraction > 1.0 - tol
    integer[near_one] += 1.0
    fraction[near_one] = 0.0
    fraction[fraction < tol] = 0.0
    return integer, fraction


@dataclass(frozen=True)
class GomoryCut:
    """Decomposition of one source row and the cut derived from it."""

    source_row: int
    coefficients: np.ndarray
    integer_parts: np.ndarray
    fractional_parts: np.ndarray
    rhs: float
    rhs_integer: float
    rhs_fraction: float
    cut_coefficients: np.ndarray
    cut_rhs: float

    @classmethod
    def from_row(cls, tableau: np.ndarray, row: int, tol: float) -> "GomoryCut":
        coefficients = tableau[row, :-1].copy()
        rhs = float(tableau[row, -1])
        integer_parts, fractional_parts = split_fraction(coefficients, tol)
        rhs_integer, rhs_fraction = split_fraction(np.array([rhs]), tol)
        return cls(
            source_row=row,
            coefficients=coefficients,
            integer_parts=integer_parts,
            fractional_parts=fractional_parts,
            rhs=rhs,
            rhs_integer=float(rhs_integer[0]),
            rhs_fraction=float(rhs_fraction[0]),
            cut_coefficients=-fractional_parts,
            cut_rhs=-float(rhs_fraction[0]),
        )

    def describe(self, headers: List[str]) -> str:
        def terms(coeffs: np.ndarray) -> str:
            parts = [f"{c:.4f}*{h}" for c, h in zip(coeffs, headers) if abs(c) > 1e-9]
            return " + ".join(parts) or "0"

        return "\n".join(
            [
                f"Source row {self.source_row}: {terms(self.coefficients)} = {self.rhs:.4f}",
                f"Fractional parts: {terms(self.fractional_parts)} >= {self.rhs_fraction:.4f}",
                f"Cut: {terms(self.cut_coefficients)} + s = {self.cut_rhs:.4f}",
            ]
        )


class CuttingPlane(Solver):
    """
    Pure Gomory cutting-plane solver for integer programs.

    The integer columns are the standard-form columns of variables declared
    ``int`` or ``bin``; with none declared every decision column is integer.
    At most ``config.max_cuts`` cuts are added.

    A source row is used only if each of its fractional coefficients sits on
    a column that is integer at every integer-feasible point. Mixed-integer
    problems whose fractional rows all touch continuous columns end with
    ``LIMIT_EXCEEDED``; use :class:`BranchAndBound` for those.
    """

    name = "cutting_plane"

    def __init__(self, config: Optional[SolverConfig] = None):
        super().__init__(config)

    def _integer_columns(self, state: DualSimplexState) -> List[int]:
        std = state.standard.problem
        return std.integer_indices() or list(range(std.n_variables))

    def _integral_columns(self, state: DualSimplexState, columns: List[int]) -> np.ndarray:
        """
        Flag the tableau columns that are integer at every integer-feasible point.

        A slack or excess column qualifies when its row has integer data and
        touches only integer columns. Artificial columns are zero whenever the
        problem is feasible.
        """
        tol = self.config.tol
        std = state.standard.problem
        integer = np.zeros(std.n_variables, dtype=bool)
        integer[columns] = True
        flags = list(integer)
        for relation in (Relation.LE, Relation.GE, Relation.EQ):
            for con in std.constraints:
                if con.relation is not relation:
                    continue
                if relation is Relation.EQ:
                    flags.append(True)
                    continue
                coeffs = con.coefficients
                whole = np.abs(coeffs - np.round(coeffs)) <= tol
                allowed = integer | (np.abs(coeffs) <= tol)
                flags.append(bool(np.all(whole & allowed)) and abs(con.rhs - round(con.rhs)) <= tol)
        return np.array(flags, dtype=bool)

    def _fractional_rows(self, state: DualSimplexState, columns: List[int]) -> Tuple[Dict[int, int], np.ndarray]:
        """Basic integer columns with a fractional value, mapped to their rows."""
        tol = self.config.tol
        t = state.tableau
        rows: Dict[int, int] = {}
        values = np.zeros(state.n_decision)
        for j in columns:
            row = basic_row(t, j, tol, include_objective=True)
            if row is None:
                continue
            values[j] = t[row, -1]
            if abs(values[j] - round(values[j])) > tol:
                rows[j] = row
        return rows, values

    def _cut_is_valid(self, tableau: np.ndarray, row: int, integral: np.ndarray) -> bool:
        _, fraction = split_fraction(tableau[row, :-1], self.config.tol)
        return not np.any((fraction > 0) & ~integral)

    def solve(self, problem: Problem) -> Solution:
        config = self.config
        solver = DualSimplex(config)
        relaxation = solver.solve(problem)
        state = solver.state

        result = Solution()
        result.add_message("Starting Cutting Plane Algorithm")
        if relaxation.status is not Status.OPTIMAL:
            result.status = relaxation.status
            result.add_message(f"LP relaxation is {relaxation.status.value}")
            result.messages.extend(relaxation.messages)
            return result

        result.add_message(f"LP relaxation optimal value: {relaxation.optimal_value:.4f}")
        result.objective_trace.append(relaxation.optimal_value)
        columns = self._integer_columns(state)
        integral = self._integral_columns(state, columns)
        current = relaxation
        deadline = config.deadline()
        cuts = 0
        status = None

        while status is None:
            rows, values = self._fractional_rows(state, columns)
            if not rows:
                result.add_message("Integer optimal solution found")
                status = Status.OPTIMAL
                break
            if deadline.expired():
                result.add_message(f"Solve interrupted: {deadline.reason}")
                status = Status.INTERRUPTED
                break
            if cuts >= config.max_cuts:
                result.add_message(f"Maximum cuts reached ({config.max_cuts})")
                logger.warning("Cut limit of %d reached", config.max_cuts)
                status = Status.LIMIT_EXCEEDED
                break

            valid = [j for j in rows if self._cut_is_valid(state.tableau, rows[j], integral)]
            if not valid:
                names = ", ".join(state.standard.names[j] for j in sorted(rows))
                result.add_message(
                    f"No valid Gomory cut: every fractional row ({names}) has a fractional "
                    f"coefficient on a column that need not be integer"
                )
                logger.warning("No valid Gomory cut for fractional columns %s", names)
                status = Status.LIMIT_EXCEEDED
                break

            j, value = most_fractional(values, valid, config.tol)
            row = rows[j]
            cuts += 1
            cut = GomoryCut.from_row(state.tableau, row, config.tol)
            headers = state.headers[:-1]
            slack = state.append_cut(cut.cut_coefficients, cut.cut_rhs)
            integral = np.append(integral, True)
            result.add_message(
                f"Cut {cuts}: {state.standard.names[j]} = {value:.4f} in row {row}, new slack {slack}"
            )
            if config.record_steps:
                result.add_step(f"Gomory Cut {cuts}:", cut.describe(headers))
            logger.info("Cut %d from row %d (%s = %.6g)", cuts, row, state.standard.names[j], value)

            current = state.reoptimize()
            if config.record_steps:
                result.steps.extend(current.steps)
            if current.status is not Status.OPTIMAL:
                result.add_message(f"Re-optimisation after cut {cuts} is {current.status.value}")
                result.messages.extend(current.messages)
                status = current.status
                break
            result.objective_trace.append(current.optimal_value)

        result.status = status
        result.iterations = state.iterations
        result.final_tableau = state.tableau.copy()
        result.variable_count = state.n_decision
        result.slack_count = state.slack_count
        result.excess_count = state.excess_count
        result.artificial_count = state.artificial_count
        result.aux_names = list(state.aux_names)
        if current.status is Status.OPTIMAL:
            result.optimal_value = current.optimal_value
            result.variable_values = dict(current.variable_values)
        logger.info("Cutting plane finished: %s after %d cuts", status.value, cuts)
        return result


__all__ = ["CuttingPlane", "GomoryCut", "split_fraction"]
