"""Solver configuration shared by every algorithm in the package."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass
class SolverConfig:
    """
    Numerical tolerances, caps and cancellation hooks for a solve.

    Attributes:
        tol: Absolute tolerance used for every sign, ratio and integrality test.
        big_m: Penalty placed on artificial columns of equality rows.
        max_iterations: Pivot cap for each primal phase.
        max_dual_iterations: Pivot cap for each dual feasibility-repair phase.
        max_depth: Deepest branch-and-bound node that is still expanded.
        max_cuts: Number of Gomory cuts added before giving up.
        record_steps: Keep tableau snapshots in ``Solution.steps``.
        time_limit: Wall-clock limit in seconds, or ``None``.
        should_stop: Optional callable polled once per pivot and per
            branch pop; returning ``True`` cancels the solve.

    The Big-M value is not scaled to the problem. Objectives whose
    coefficients approach ``big_m`` in magnitude can leave an artificial
    basic at optimum, which the dual simplex then reports as infeasible.
    """

    tol: float = 1e-6
    big_m: float = 1000.0
    max_iterations: int = 1000
    max_dual_iterations: int = 100
    max_depth: int = 30
    max_cuts: int = 50
    record_steps: bool = True
    time_limit: Optional[float] = None
    should_stop: Optional[Callable[[], bool]] = None

    def __post_init__(self) -> None:
        """Validate SolverConfig invariants."""
        if not self.tol > 0:
            raise ValueError(f"tol must be positive, got {self.tol}.")
        if not self.big_m > 0:
            raise ValueError(f"big_m must be positive, got {self.big_m}.")
        for name in ("max_iterations", "max_dual_iterations", "max_cuts"):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}.")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}.")
        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError(f"time_limit must be positive, got {self.time_limit}.")

    def deadline(self) -> "Deadline":
        """Start the clock for one solve."""
        return Deadline(self.time_limit, self.should_stop)


class Deadline:
    """Cancellation check evaluated once per pivot or branch pop."""

    def __init__(
        self,
        time_limit: Optional[float] = None,
        should_stop: Optional[Callable[[], bool]] = None,
    ):
        self._expires_at = None if time_limit is None else time.monotonic() + time_limit
        self._should_stop = should_stop
        self.reason: Optional[str] = None

    def expired(self) -> bool:
        if self.reason is not None:
            return True
        if self._expires_at is not None and time.monotonic() >= self._expires_at:
            self.reason = "time limit reached"
        elif self._should_stop is not None and self._should_stop():
            self.reason = "cancelled by caller"
        return self.reason is not None


DEFAULT_CONFIG = SolverConfig()


__all__ = ["SolverConfig", "Deadline", "DEFAULT_CONFIG"]
