"""
Two-phase dual simplex with incremental re-optimisation.

The tableau is built from the standard form of the problem:

* ``<=`` rows get a ``+1`` slack column (named ``u<k>`` for the ``x <= 1``
  rows of binary variables, ``s<k>`` otherwise),
* ``>=`` rows are negated and get a ``+1`` excess column, so the row starts
  basic with a (possibly negative) RHS that the dual phase repairs,
* ``=`` rows are sign-normalised to a non-negative RHS and get a ``+1``
  artificial column whose cost carries a Big-M penalty; the objective row is
  priced out so the artificial starts basic.

Phase 1 (dual feasibility repair) pivots while any RHS is negative: the row
with the most negative RHS leaves, and the column minimising
``|objective / entry|`` over negative entries enters. A row without a
negative entry proves infeasibility. Phase 2 is the ordinary primal loop.

:class:`DualSimplexState` keeps the optimal tableau so that integer
algorithms can append a constraint and re-optimise from the previous basis
instead of starting over. States are cloned before each branch; a clone
shares no mutable array or problem with its parent.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import numpy as np

from ..core.config import Deadline, SolverConfig
from ..core.errors import InvalidOperation
from ..core.problem import Constraint, Problem, Relation, VariableType
from ..core.solution import Solution, Status
from ..diagnostics.core import assert_dual_feasible, assert_primal_feasible
from ..diagnostics.debug_mode import is_debug_enabled
from ..logging import get_logger
from ..tableau.core import (
    basic_row,
    dual_pivot_column,
    dual_pivot_row,
    entering_column,
    expand,
    has_negative_rhs,
    is_optimal,
    leaving_row,
    pivot,
)
from ..tableau.format import column_headers, format_tableau
from .base import IncrementalSolver, Solver

logger = get_logger(__name__)

_AUX_PREFIX = {Relation.LE: "s", Relation.GE: "e", Relation.EQ: "a"}


class DualSimplexState(IncrementalSolver):
    """
    Warm-startable dual simplex tableau for one problem.

    Attributes:
        problem: The problem over the caller's variables, including every
            constraint added since the initial solve.
        standard: Its non-negative standard form.
        tableau: Current tableau (objective row first, RHS last).
        aux_names: Auxiliary column names in tableau order.
        solution: Result of the latest solve or re-optimisation.
    """

    def __init__(self, problem: Problem, config: SolverConfig):
        self.config = config
        self.problem = problem.copy()
        self.standard = self.problem.standard_form()
        self.tableau = np.zeros((1, 1))
        self.aux_names: List[str] = []
        self.slack_count = 0
        self.excess_count = 0
        self.artificial_count = 0
        self.iterations = 0
        self.solution: Optional[Solution] = None
        self._build()

    @property
    def n_decision(self) -> int:
        return self.standard.problem.n_variables

    @property
    def headers(self) -> List[str]:
        return column_headers(self.standard.names, self.aux_names)

    def _build(self) -> None:
        std = self.standard.problem
        n, m = std.n_variables, std.n_constraints
        tol = self.config.tol

        by_kind = {rel: [i for i, con in enumerate(std.constraints) if con.relation is rel] for rel in Relation}
        self.slack_count = len(by_kind[Relation.LE])
        self.excess_count = len(by_kind[Relation.GE])
        self.artificial_count = len(by_kind[Relation.EQ])
        self.aux_names = (
            self.standard.slack_names(by_kind[Relation.LE])
            + [f"e{k}" for k in range(1, self.excess_count + 1)]
            + [f"a{k}" for k in range(1, self.artificial_count + 1)]
        )

        aux_column: Dict[int, int] = {}
        offset = n
        for rel in (Relation.LE, Relation.GE, Relation.EQ):
            for k, i in enumerate(by_kind[rel]):
                aux_column[i] = offset + k
            offset += len(by_kind[rel])

        t = np.zeros((m + 1, n + m + 1))
        t[0, :n] = -std.c if std.maximize else std.c
        for i, con in enumerate(std.constraints):
            row, rhs = con.coefficients, con.rhs
            if con.relation is Relation.GE:
                row, rhs = -row, -rhs
            elif con.relation is Relation.EQ and rhs < -tol:
                row, rhs = -row, -rhs
            t[i + 1, :n] = row
            t[i + 1, aux_column[i]] = 1.0
            t[i + 1, -1] = rhs

        for i in by_kind[Relation.EQ]:
            self._price_out_artificial(t, i + 1, aux_column[i])

        self.tableau = t
        self.iterations = 0
        self.solution = None

    def _price_out_artificial(self, t: np.ndarray, row: int, col: int) -> None:
        t[0, col] = self.config.big_m
        t[0, :] -= self.config.big_m * t[row, :]

    def solve(self) -> Solution:
        """Build the tableau from ``problem`` and run both phases."""
        self._build()
        solution = Solution()
        problem = self.problem
        if not problem.maximize:
            solution.add_message("Converted minimization problem to maximization by negating objective")
        if any(v.type is VariableType.BINARY for v in problem.variables):
            solution.add_message(
                "Binary variables detected: solving the continuous relaxation with x <= 1 bounds. "
                "Use BranchAndBound for integer solutions."
            )
        self._record(solution, "Initial Tableau:")
        return self.reoptimize(solution)

    def reoptimize(self, solution: Optional[Solution] = None) -> Solution:
        """
        Run phase 1 (if any RHS is negative) then phase 2 on the current tableau.

        Always records the final tableau and structural counts, whatever the
        outcome, so that callers can inspect or resume from it.
        """
        solution = solution if solution is not None else Solution()
        deadline = self.config.deadline()

        status = self._phase_one(solution, deadline)
        if status is None:
            if is_debug_enabled():
                assert_primal_feasible(self.tableau, self.config.tol)
            status = self._phase_two(solution, deadline)
        if status is None:
            if is_debug_enabled():
                assert_dual_feasible(self.tableau, self.config.tol)
            status = self._finish(solution)

        solution.status = status
        solution.iterations = self.iterations
        solution.final_tableau = self.tableau.copy()
        solution.variable_count = self.n_decision
        solution.slack_count = self.slack_count
        solution.excess_count = self.excess_count
        solution.artificial_count = self.artificial_count
        solution.aux_names = list(self.aux_names)
        if status is Status.OPTIMAL:
            solution.objective_trace.append(solution.optimal_value)
        self.solution = solution
        logger.info("Dual simplex finished: %s after %d pivots", status.value, self.iterations)
        return solution

    def _phase_one(self, solution: Solution, deadline: Deadline) -> Optional[Status]:
        tol = self.config.tol
        pivots = 0
        while has_negative_rhs(self.tableau, tol):
            if deadline.expired():
                solution.add_message(f"Solve interrupted: {deadline.reason}")
                return Status.INTERRUPTED
            if pivots >= self.config.max_dual_iterations:
                solution.add_message(
                    f"Dual phase iteration limit ({self.config.max_dual_iterations}) reached"
                )
                logger.warning("Dual phase iteration limit reached")
                return Status.LIMIT_EXCEEDED

            row = dual_pivot_row(self.tableau, tol)
            col = dual_pivot_column(self.tableau, row, tol)
            if col is None:
                solution.add_message(
                    f"Problem is infeasible (no valid dual pivot column in constraint {row})"
                )
                return Status.INFEASIBLE

            pivot(self.tableau, row, col, tol)
            pivots += 1
            self.iterations += 1
            logger.debug("Dual pivot on row %d, column %s", row, self.headers[col])
            self._record(
                solution,
                f"Dual Iteration {self.iterations}: Pivot on constraint {row}, column {self.headers[col]}",
            )

        if pivots:
            solution.add_message("Feasible solution found, switching to Primal Simplex")
        return None

    def _phase_two(self, solution: Solution, deadline: Deadline) -> Optional[Status]:
        tol = self.config.tol
        pivots = 0
        while not is_optimal(self.tableau, tol):
            if deadline.expired():
                solution.add_message(f"Solve interrupted: {deadline.reason}")
                return Status.INTERRUPTED
            if pivots >= self.config.max_iterations:
                solution.add_message(
                    f"Primal phase iteration limit ({self.config.max_iterations}) reached"
                )
                logger.warning("Primal phase iteration limit reached")
                return Status.LIMIT_EXCEEDED

            col = entering_column(self.tableau, tol)
            row = leaving_row(self.tableau, col, tol)
            if row is None:
                solution.add_message(
                    f"Problem is unbounded (no leaving row for column {self.headers[col]})"
                )
                return Status.UNBOUNDED

            pivot(self.tableau, row, col, tol)
            pivots += 1
            self.iterations += 1
            logger.debug("Primal pivot on row %d, column %s", row, self.headers[col])
            self._record(
                solution,
                f"Primal Iteration {self.iterations}: Pivot on constraint {row}, column {self.headers[col]}",
            )
        return None

    def _finish(self, solution: Solution) -> Status:
        values = self.extract_values()
        tol = self.config.tol
        for name, value in values.items():
            if name.startswith("a") and value > tol:
                solution.add_message(
                    f"Problem is infeasible (artificial variable {name} remains basic at {value:.3f})"
                )
                return Status.INFEASIBLE

        value = self.tableau[0, -1]
        solution.optimal_value = float(value if self.problem.maximize else -value)
        solution.variable_values = values
        self._record(solution, "Final Tableau:")
        return Status.OPTIMAL

    def extract_values(self) -> Dict[str, float]:
        """
        Read variable values off the current tableau.

        Basic columns take their row's RHS, non-basic columns are 0. An
        excess column may appear as ``-1`` after a row negation; it then
        reads the negated RHS. Decision values are mapped back through the
        standard-form transform.
        """
        t, tol, n = self.tableau, self.config.tol, self.n_decision
        taken = set()

        def read(col: int, allow_negative: bool = False) -> float:
            row = basic_row(t, col, tol, include_objective=True, allow_negative=allow_negative)
            if row is None or row in taken:
                return 0.0
            taken.add(row)
            return float(t[row, -1] if t[row, col] > 0 else -t[row, -1])

        z = np.array([read(j) for j in range(n)])
        x = self.standard.to_original(z)
        values = {f"x{i}": float(v) for i, v in enumerate(x, start=1)}
        for k, name in enumerate(self.aux_names):
            values[name] = read(n + k, allow_negative=name.startswith("e"))
        return values

    def add_constraint_and_resolve(self, constraint: Constraint) -> Solution:
        """
        Append ``constraint`` (over the caller's variables) and re-optimise.

        The tableau grows by one row and one auxiliary column. The new row is
        inserted in dual-simplex-ready form, every basic column it touches is
        re-zeroed by subtracting the matching multiple of that column's basic
        row, and the row is negated if its auxiliary coefficient ends up
        negative. Phase 1 and phase 2 then restore optimality.

        Raises:
            InvalidOperation: If called before :meth:`solve`.
        """
        if self.solution is None:
            raise InvalidOperation("add_constraint_and_resolve requires a prior solve()")

        tol = self.config.tol
        original = self.problem.add_constraint(constraint)
        std_con = self.standard.map_constraint(original)
        self.standard.problem.add_constraint(std_con)

        name = self._next_aux_name(std_con.relation)
        previous = self.tableau
        t = expand(previous)
        new_row = t.shape[0] - 1
        aux_col = t.shape[1] - 2
        n = self.n_decision

        coeffs, rhs = std_con.coefficients, std_con.rhs
        if std_con.relation is Relation.GE:
            coeffs, rhs = -coeffs, -rhs
        t[new_row, :n] = coeffs
        t[new_row, aux_col] = 1.0
        t[new_row, -1] = rhs

        solution = Solution()
        solution.add_message(f"Added constraint {self._describe(original)} with {name}")

        for col in range(aux_col):
            row = basic_row(previous, col, tol, include_objective=True)
            coeff = t[new_row, col]
            if row is None or abs(coeff) <= tol:
                continue
            t[new_row, :] -= coeff * t[row, :]
            t[new_row, col] = 0.0
            solution.add_message(
                f"Column {self.headers[col]} is basic in constraint {row}; "
                f"eliminated it from the new constraint"
            )

        if t[new_row, aux_col] < -tol:
            t[new_row, :] *= -1.0
            solution.add_message(f"Negated the new constraint so that {name} has coefficient +1")

        if std_con.relation is Relation.EQ:
            self._price_out_artificial(t, new_row, aux_col)

        self.tableau = t
        self.aux_names.append(name)
        logger.debug("Added constraint row %d with auxiliary %s", new_row, name)
        self._record(solution, "Tableau after adding constraint:")
        return self.reoptimize(solution)

    def append_cut(self, coefficients: np.ndarray, rhs: float) -> str:
        """
        Append a cut row over the current tableau columns with a new slack.

        ``coefficients`` covers every non-RHS column of the current tableau.
        No basic-column repair is applied: a cut derived from a tableau row
        has zeros in the basic columns already.

        Returns:
            The name of the new slack column.
        """
        coefficients = np.asarray(coefficients, dtype=float).reshape(-1)
        if coefficients.shape[0] != self.tableau.shape[1] - 1:
            raise ValueError(
                f"Cut has {coefficients.shape[0]} coefficients, tableau has "
                f"{self.tableau.shape[1] - 1} columns"
            )
        t = expand(self.tableau)
        t[-1, : coefficients.shape[0]] = coefficients
        t[-1, -2] = 1.0
        t[-1, -1] = rhs
        name = self._next_aux_name(Relation.LE)
        self.tableau = t
        self.aux_names.append(name)
        return name

    def _next_aux_name(self, relation: Relation) -> str:
        if relation is Relation.LE:
            self.slack_count += 1
            count = self.slack_count - self.standard.bound_rows
        elif relation is Relation.GE:
            self.excess_count += 1
            count = self.excess_count
        else:
            self.artificial_count += 1
            count = self.artificial_count
        return f"{_AUX_PREFIX[relation]}{count}"

    def _describe(self, constraint: Constraint) -> str:
        terms = " + ".join(
            f"{coeff:g}x{j}" for j, coeff in enumerate(constraint.coefficients, start=1) if coeff != 0
        )
        return f"{terms or '0'} {constraint.relation.value} {constraint.rhs:g}"

    def _record(self, solution: Solution, title: str) -> None:
        if self.config.record_steps:
            solution.add_step(title, format_tableau(self.tableau, self.headers), self.tableau)

    def clone(self) -> "DualSimplexState":
        """Independent copy of matrix, auxiliary names, counts and problem."""
        twin = DualSimplexState.__new__(DualSimplexState)
        twin.config = self.config
        twin.problem = self.problem.copy()
        twin.standard = self.standard.copy()
        twin.tableau = self.tableau.copy()
        twin.aux_names = list(self.aux_names)
        twin.slack_count = self.slack_count
        twin.excess_count = self.excess_count
        twin.artificial_count = self.artificial_count
        twin.iterations = self.iterations
        twin.solution = self.solution
        return twin


class DualSimplex(Solver, IncrementalSolver):
    """
    Two-phase dual simplex solver.

    ``solve`` keeps the resulting :class:`DualSimplexState`, so the same
    solver object can then be asked to ``add_constraint_and_resolve`` or be
    ``clone``-d for a sibling branch.

    Example:
        >>> from lpconduit import Problem
        >>> p = Problem.from_arrays([3, 5], [[1, 0], [0, 2], [3, 2]],
        ...                         ["<=", "<=", "<="], [4, 12, 18])
        >>> DualSimplex().solve(p).optimal_value
        36.0
    """

    name = "dual_simplex"

    def __init__(self, config: Optional[SolverConfig] = None):
        super().__init__(config)
        self.state: Optional[DualSimplexState] = None

    def start(self, problem: Problem) -> DualSimplexState:
        """Build a fresh state for ``problem`` without solving it."""
        return DualSimplexState(problem, self.config)

    def solve(self, problem: Problem) -> Solution:
        self.state = self.start(problem)
        return self.state.solve()

    def add_constraint_and_resolve(self, constraint: Constraint) -> Solution:
        if self.state is None:
            raise InvalidOperation("add_constraint_and_resolve requires a prior solve()")
        return self.state.add_constraint_and_resolve(constraint)

    def clone(self) -> "DualSimplex":
        twin = DualSimplex(self.config)
        twin.state = None if self.state is None else self.state.clone()
        return twin


__all__ = ["DualSimplex", "DualSimplexState"]
