"""
Solution container shared across all solvers.

Besides the optimum itself a :class:`Solution` carries an audit trail of
tableau snapshots and messages, and the final tableau with its structural
counts so that a later algorithm (cut generation, branch continuation) can
resume from it without rebuilding the column layout.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import numpy as np


class Status(Enum):
    """Solution status for every solver."""

    NOT_SOLVED = "not_solved"
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    LIMIT_EXCEEDED = "limit_exceeded"
    INTERRUPTED = "interrupted"


@dataclass
class Step:
    """One labelled entry of the audit trail."""

    title: str
    text: str
    tableau: Optional[np.ndarray] = None

    def __str__(self) -> str:
        return f"{self.title}\n{self.text}"


@dataclass
class Solution:
    """
    Result of a solve.

    Attributes:
        status: Terminal status of the solve.
        optimal_value: Objective value in the problem's own sense, set only
            when ``status`` is OPTIMAL (or a best-so-far result survived an
            interrupted or limited search).
        variable_values: Values keyed ``x<i>`` (decision), ``s<i>`` (slack),
            ``e<i>`` (excess) and ``a<i>`` (artificial).
        steps: Ordered audit trail.
        messages: Ordered diagnostic messages.
        final_tableau: Last tableau, including objective row and RHS column.
        variable_count: Number of decision columns in ``final_tableau``.
        slack_count: Number of slack columns.
        excess_count: Number of excess columns.
        artificial_count: Number of artificial columns.
        aux_names: Names of the auxiliary columns in tableau order.
        iterations: Pivots (simplex) or processed nodes (searches).
        objective_trace: Objective after each re-optimisation.
    """

    status: Status = Status.NOT_SOLVED
    optimal_value: Optional[float] = None
    variable_values: Dict[str, float] = field(default_factory=dict)
    steps: List[Step] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    final_tableau: Optional[np.ndarray] = None
    variable_count: int = 0
    slack_count: int = 0
    excess_count: int = 0
    artificial_count: int = 0
    aux_names: List[str] = field(default_factory=list)
    iterations: int = 0
    objective_trace: List[float] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status is Status.OPTIMAL and self.optimal_value is not None

    def add_step(self, title: str, text: str, tableau: Optional[np.ndarray] = None) -> None:
        snapshot = None if tableau is None else np.array(tableau, dtype=float, copy=True)
        self.steps.append(Step(title, text, snapshot))

    def add_message(self, message: str) -> None:
        self.messages.append(message)

    def decision_values(self, n: Optional[int] = None) -> np.ndarray:
        """Decision values ``x1..xn`` as a vector (missing entries are 0)."""
        if n is None:
            n = sum(1 for name in self.variable_values if name.startswith("x"))
        return np.array([self.variable_values.get(f"x{i}", 0.0) for i in range(1, n + 1)])

    def copy(self) -> "Solution":
        return copy.deepcopy(self)

    def __str__(self) -> str:
        lines = [f"Status: {self.status.value}"]
        lines.extend(self.messages)
        for name, value in self.variable_values.items():
            lines.append(f"{name} = {value:.3f}")
        if self.optimal_value is not None:
            lines.append(f"Optimal value: {self.optimal_value:.3f}")
        return "\n".join(lines)


__all__ = ["Status", "Step", "Solution"]
