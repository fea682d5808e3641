"""
Breadth-first bound-and-branch search for the 0/1 knapsack problem.

Items are ranked by value/weight ratio. A node's relaxation fixes its 0/1
decisions and fills the remaining capacity greedily in ratio order; the first
undecided item that does not fit contributes a fractional share and becomes
the branching item. A node without a fractional item is a complete candidate.

By default every candidate is enumerated and the best one is chosen, which is
exponential in the worst case. ``prune=True`` drops nodes whose relaxation
bound cannot beat the best candidate seen so far.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Tuple

import numpy as np

from ..core.config import SolverConfig
from ..core.errors import InvalidOperation
from ..core.problem import Problem
from ..core.solution import Solution, Status
from ..logging import get_logger
from .base import Solver

logger = get_logger(__name__)


@dataclass
class Item:
    index: int
    value: float
    weight: float

    @property
    def ratio(self) -> float:
        return self.value / self.weight if self.weight > 0 else float("inf")

    @property
    def name(self) -> str:
        return f"x{self.index + 1}"


@dataclass
class Relaxation:
    """Greedy fractional fill of the capacity left at a node."""

    taken: List[Item]
    added_value: float
    fractional: Optional[Item] = None
    fraction: float = 0.0

    @property
    def has_fraction(self) -> bool:
        return self.fractional is not None


@dataclass
class KnapsackNode:
    """Queue entry: fixed decisions keyed by item index."""

    label: str
    decisions: Dict[int, bool] = field(default_factory=dict)
    weight: float = 0.0
    value: float = 0.0
    depth: int = 0

    def child(self, item: Item, take: bool, branch: int) -> "KnapsackNode":
        decisions = dict(self.decisions)
        decisions[item.index] = take
        return KnapsackNode(
            label=str(branch) if self.depth == 0 else f"{self.label}.{branch}",
            decisions=decisions,
            weight=self.weight + (item.weight if take else 0.0),
            value=self.value + (item.value if take else 0.0),
            depth=self.depth + 1,
        )

    def describe(self) -> str:
        return " ".join(f"x{j + 1} = {int(take)}" for j, take in self.decisions.items())


def _candidate_label(k: int) -> str:
    label = ""
    k += 1
    while k:
        k, rem = divmod(k - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


class KnapsackSearch(Solver):
    """
    0/1 knapsack solver for a maximise problem with a single ``<=`` row.

    Args:
        config: Shared solver configuration.
        prune: Skip nodes whose bound does not exceed the incumbent.

    Example:
        >>> from lpconduit import Problem
        >>> p = Problem.from_arrays([60, 100, 120], [[10, 20, 30]], ["<="], [50])
        >>> KnapsackSearch().solve(p).optimal_value
        220.0
    """

    name = "knapsack"

    def __init__(self, config: Optional[SolverConfig] = None, prune: bool = False):
        super().__init__(config)
        self.prune = prune

    def _relax(self, ranked: List[Item], node: KnapsackNode, capacity: float) -> Relaxation:
        remaining = capacity - node.weight
        taken: List[Item] = []
        added = 0.0
        for item in ranked:
            if item.index in node.decisions:
                continue
            if item.weight <= remaining + self.config.tol:
                taken.append(item)
                added += item.value
                remaining -= item.weight
            else:
                fraction = max(remaining, 0.0) / item.weight
                return Relaxation(taken, added + fraction * item.value, item, fraction)
        return Relaxation(taken, added)

    def solve(self, problem: Problem) -> Solution:
        if not problem.is_knapsack():
            raise InvalidOperation(
                "KnapsackSearch needs a maximise problem with exactly one '<=' row "
                "and non-negative values and weights"
            )
        tol = self.config.tol
        row = problem.constraints[0]
        capacity = row.rhs
        items = [
            Item(j, float(v), float(w)) for j, (v, w) in enumerate(zip(problem.c, row.coefficients))
        ]
        ranked = sorted(items, key=lambda it: it.ratio, reverse=True)

        solution = Solution(variable_count=len(items))
        ratio_lines = [
            f"{it.name} {it.value:g}/{it.weight:g} = {it.ratio:.3f}  Rank {rank}"
            for rank, it in enumerate(ranked, start=1)
        ]
        solution.add_step("Ratio Test", "\n".join(ratio_lines))

        candidates: List[Tuple[str, float, Dict[int, bool]]] = []
        best_value = -np.inf
        best_decisions: Dict[int, bool] = {}
        deadline = self.config.deadline()
        queue: Deque[KnapsackNode] = deque([KnapsackNode("0")])
        status = Status.OPTIMAL

        while queue:
            if deadline.expired():
                solution.add_message(f"Search interrupted: {deadline.reason}")
                status = Status.INTERRUPTED
                break
            node = queue.popleft()
            solution.iterations += 1
            title = f"Sub-problem {node.label}"
            if node.decisions:
                title += f": {node.describe()}"

            if node.weight > capacity + tol:
                solution.add_step(title, "Infeasible")
                continue

            relaxation = self._relax(ranked, node, capacity)
            bound = node.value + relaxation.added_value
            lines = [f"Fixed weight {node.weight:g}, fixed value {node.value:g}, bound {bound:.3f}"]
            for item in relaxation.taken:
                lines.append(f"{item.name} = 1")
            if relaxation.has_fraction:
                lines.append(f"{relaxation.fractional.name} = {relaxation.fraction:.3f}")

            if not relaxation.has_fraction:
                decisions = dict(node.decisions)
                for item in relaxation.taken:
                    decisions[item.index] = True
                total = node.value + sum(item.value for item in relaxation.taken)
                label = _candidate_label(len(candidates))
                candidates.append((label, total, decisions))
                lines.append(f"Candidate {label}: z = {total:g}")
                if total > best_value:
                    best_value, best_decisions = total, decisions
                solution.add_step(title, "\n".join(lines))
                continue

            if self.prune and candidates and bound <= best_value + tol:
                lines.append(f"Pruned: bound {bound:.3f} cannot beat {best_value:g}")
                solution.add_step(title, "\n".join(lines))
                continue

            if node.depth >= len(items):
                solution.add_step(title, "\n".join(lines))
                continue

            item = relaxation.fractional
            skip, take = node.child(item, False, 1), node.child(item, True, 2)
            lines.append(
                f"Branch on {item.name} = 0 (Sub-problem {skip.label}) "
                f"and {item.name} = 1 (Sub-problem {take.label})"
            )
            solution.add_step(title, "\n".join(lines))
            logger.debug("Sub-problem %s branches on %s", node.label, item.name)
            queue.append(skip)
            queue.append(take)

        comparison = [f"Candidate {label}: z = {value:g}" for label, value, _ in candidates]
        if candidates:
            winner = max(candidates, key=lambda cand: cand[1])
            comparison.append(f"Candidate {winner[0]} is the best candidate")
            solution.optimal_value = float(best_value)
            solution.variable_values = {
                item.name: 1.0 if best_decisions.get(item.index) else 0.0 for item in items
            }
        elif status is Status.OPTIMAL:
            status = Status.INFEASIBLE
        solution.add_step("Comparison of Candidates", "\n".join(comparison))
        solution.status = status
        logger.info(
            "Knapsack search finished: %s with %d candidates", status.value, len(candidates)
        )
        return solution


__all__ = ["KnapsackSearch", "Item", "KnapsackNode", "Relaxation"]
