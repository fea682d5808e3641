"""Solver contracts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..core.config import DEFAULT_CONFIG, SolverConfig
from ..core.problem import Constraint, Problem
from ..core.solution import Solution


class Solver(ABC):
    """Every algorithm exposes a single blocking ``solve``."""

    name = "solver"

    def __init__(self, config: Optional[SolverConfig] = None):
        self.config = config if config is not None else DEFAULT_CONFIG

    @abstractmethod
    def solve(self, problem: Problem) -> Solution:
        """Solve ``problem`` and return its solution."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(tol={self.config.tol})"


class IncrementalSolver(ABC):
    """Re-optimisation after adding a constraint, plus independent copies."""

    @abstractmethod
    def add_constraint_and_resolve(self, constraint: Constraint) -> Solution:
        """Append ``constraint`` to the solved problem and re-optimise."""

    @abstractmethod
    def clone(self) -> "IncrementalSolver":
        """Deep copy sharing no mutable state with ``self``."""


__all__ = ["Solver", "IncrementalSolver"]
