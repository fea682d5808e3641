"""
Depth-first branch-and-bound over warm-started dual simplex states.

Each node owns a cloned :class:`DualSimplexState` that already holds the
optimal tableau of its relaxation. Branching clones the state twice and adds
``x_j <= floor(v)`` to one copy and ``x_j >= ceil(v)`` to the other, so a
child only pays for the few pivots needed to absorb its new row.

Nodes are labelled by their path: the root is ``"0"``, its children ``"1"``
and ``"2"``, their children ``"1.1"``, ``"1.2"`` and so on. The floor child
is pushed last and therefore explored first.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core.config import SolverConfig
from ..core.problem import Constraint, Problem, Relation
from ..core.solution import Solution, Status
from ..logging import get_logger
from ..tableau.format import format_tableau
from .base import Solver
from .dual import DualSimplex, DualSimplexState

logger = get_logger(__name__)


def most_fractional(
    values: Sequence[float], candidates: Sequence[int], tol: float
) -> Optional[Tuple[int, float]]:
    """
    Pick the candidate whose fractional part is closest to 0.5.

    Values within ``tol`` of an integer are treated as integral. Ties go to
    the lowest index.

    Returns:
        ``(index, value)`` or ``None`` when every candidate is integral.
    """
    best: Optional[Tuple[int, float]] = None
    best_distance = math.inf
    for j in sorted(candidates):
        value = float(values[j])
        if abs(value - round(value)) <= tol:
            continue
        distance = abs(value - math.floor(value) - 0.5)
        if distance < best_distance - tol:
            best, best_distance = (j, value), distance
    return best


@dataclass
class SubProblem:
    """Search-stack frame: a solved state, its solution, its label and depth."""

    state: DualSimplexState
    solution: Solution
    path: str
    depth: int

    def child_path(self, branch: int) -> str:
        return str(branch) if self.depth == 0 else f"{self.path}.{branch}"


class BranchAndBound(Solver):
    """
    Mixed-integer solver.

    Variables declared ``int`` or ``bin`` are branched on. A problem with no
    integer variables at all is treated as a pure integer program.

    Example:
        >>> from lpconduit import Problem
        >>> p = Problem.from_arrays([1], [[2]], ["<="], [3], types=["int"])
        >>> BranchAndBound().solve(p).optimal_value
        1.0
    """

    name = "branch_and_bound"

    def __init__(self, config: Optional[SolverConfig] = None):
        super().__init__(config)

    def solve(self, problem: Problem) -> Solution:
        config = self.config
        tol = config.tol
        maximize = problem.maximize
        candidates = problem.integer_indices() or list(range(problem.n_variables))

        result = Solution()
        result.add_message("Running Branch and Bound algorithm...")
        root_solver = DualSimplex(config)
        root_solution = root_solver.solve(problem)
        root_state = root_solver.state

        if root_solution.status is not Status.OPTIMAL:
            result.status = root_solution.status
            result.add_message(
                f"Initial relaxation is {root_solution.status.value}; branching not possible."
            )
            result.messages.extend(root_solution.messages)
            logger.info("Root relaxation %s", root_solution.status.value)
            return result

        incumbent: Optional[Solution] = None
        abandoned = 0
        deadline = config.deadline()
        stack: List[SubProblem] = [SubProblem(root_state, root_solution, "0", 0)]

        while stack:
            if deadline.expired():
                result.add_message(f"Search interrupted: {deadline.reason}")
                result.status = Status.INTERRUPTED
                break
            node = stack.pop()
            result.iterations += 1

            if node.depth > config.max_depth:
                result.add_message(
                    f"Maximum branching depth ({config.max_depth}) reached for sub-problem "
                    f"{node.path}. Terminating branch."
                )
                logger.warning("Depth cap reached at sub-problem %s", node.path)
                abandoned += 1
                continue

            lines = [f"Sub-problem {node.path}:"]
            solution = node.solution
            if solution.status is not Status.OPTIMAL:
                lines.append(f"Sub-problem {node.path} is {solution.status.value}. Pruning this branch.")
                if solution.status is Status.LIMIT_EXCEEDED:
                    abandoned += 1
                self._record(result, node, lines)
                continue

            if solution.final_tableau is not None and config.record_steps:
                lines.append(format_tableau(solution.final_tableau, node.state.headers))
            lines.append(f"Objective value = {solution.optimal_value:.3f}")

            if incumbent is not None and self._cannot_improve(
                solution.optimal_value, incumbent.optimal_value, maximize
            ):
                lines.append(
                    f"Pruned by bound: {solution.optimal_value:.3f} is not better than "
                    f"best known {incumbent.optimal_value:.3f}"
                )
                self._record(result, node, lines)
                continue

            values = solution.decision_values(problem.n_variables)
            choice = most_fractional(values, candidates, tol)
            if choice is None:
                if incumbent is None or self._improves(
                    solution.optimal_value, incumbent.optimal_value, maximize
                ):
                    incumbent = solution
                    lines.append(f"New best integer solution with value {solution.optimal_value:.3f}")
                    logger.info(
                        "Incumbent %.6g found at sub-problem %s", solution.optimal_value, node.path
                    )
                else:
                    lines.append("Integer solution is not better than the current best")
                self._record(result, node, lines)
                continue

            j, value = choice
            lines.append(f"Branching on x{j + 1} = {value:.3f}")
            self._record(result, node, lines)
            logger.info("Sub-problem %s branches on x%d = %.6g", node.path, j + 1, value)

            children = [
                self._child(node, problem, j, Relation.LE, math.floor(value), 1),
                self._child(node, problem, j, Relation.GE, math.ceil(value), 2),
            ]
            stack.extend(reversed(children))

        if incumbent is not None:
            result.optimal_value = incumbent.optimal_value
            result.variable_values = dict(incumbent.variable_values)
            result.final_tableau = incumbent.final_tableau
            result.variable_count = incumbent.variable_count
            result.slack_count = incumbent.slack_count
            result.excess_count = incumbent.excess_count
            result.artificial_count = incumbent.artificial_count
            result.aux_names = list(incumbent.aux_names)
            result.add_message(f"Best integer solution found with value: {incumbent.optimal_value:.3f}")
            unexplored = abandoned + len(stack)
            if unexplored:
                result.add_message(
                    f"Search incomplete: {unexplored} sub-problem(s) left unexplored; "
                    f"the best value found is not proven optimal."
                )
        else:
            result.add_message("No feasible integer solution found.")

        if result.status is not Status.INTERRUPTED:
            if incumbent is not None:
                result.status = Status.OPTIMAL
            elif abandoned:
                result.status = Status.LIMIT_EXCEEDED
            else:
                result.status = Status.INFEASIBLE
        logger.info("Branch and bound finished: %s after %d nodes", result.status.value, result.iterations)
        return result

    def _child(
        self, node: SubProblem, problem: Problem, j: int, relation: Relation, bound: float, branch: int
    ) -> SubProblem:
        coefficients = np.zeros(problem.n_variables)
        coefficients[j] = 1.0
        state = node.state.clone()
        solution = state.add_constraint_and_resolve(Constraint(coefficients, relation, bound))
        return SubProblem(state, solution, node.child_path(branch), node.depth + 1)

    def _cannot_improve(self, value: float, best: float, maximize: bool) -> bool:
        tol = self.config.tol
        return value <= best + tol if maximize else value >= best - tol

    def _improves(self, value: float, best: float, maximize: bool) -> bool:
        return value > best if maximize else value < best

    def _record(self, result: Solution, node: SubProblem, lines: List[str]) -> None:
        result.add_step(f"Sub-problem {node.path}", "\n".join(lines))


__all__ = ["BranchAndBound", "SubProblem", "most_fractional"]
