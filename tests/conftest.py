"""Pytest configuration and shared fixtures for lpconduit tests.

This module provides:
- A deterministic numpy RNG fixture
- Canonical LP / MILP / knapsack problems used across test modules
- A brute-force vertex enumerator for checking small random LPs
"""

import itertools
import os
from typing import Optional, Tuple

import numpy as np
import pytest

from lpconduit import Problem
from lpconduit.diagnostics import set_debug_enabled


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function", autouse=True)
def debug_checks():
    """Run every test with pivot postconditions checked."""
    set_debug_enabled(True)
    yield
    set_debug_enabled(False)


@pytest.fixture
def production_lp() -> Problem:
    """max 3x1 + 5x2 s.t. x1 <= 4, 2x2 <= 12, 3x1 + 2x2 <= 18 (z* = 36)."""
    return Problem.from_arrays(
        [3, 5], [[1, 0], [0, 2], [3, 2]], ["<=", "<=", "<="], [4, 12, 18]
    )


@pytest.fixture
def diet_lp() -> Problem:
    """min 2x1 + 3x2 s.t. x1 + x2 >= 4, x1 + 3x2 >= 6 (z* = 9 at (3, 1))."""
    return Problem.from_arrays(
        [2, 3], [[1, 1], [1, 3]], [">=", ">="], [4, 6], sense="min"
    )


@pytest.fixture
def half_integer_milp() -> Problem:
    """max x1 + x2 s.t. 2x1 <= 3, x2 <= 2, x1 integer; relaxation has x1 = 1.5."""
    return Problem.from_arrays(
        [1, 1], [[2, 0], [0, 1]], ["<=", "<="], [3, 2], types=["int", "+"]
    )


@pytest.fixture
def classic_knapsack() -> Problem:
    """Values 60/100/120, weights 10/20/30, capacity 50 (z* = 220)."""
    return Problem.from_arrays(
        [60, 100, 120], [[10, 20, 30]], ["<="], [50], types=["bin", "bin", "bin"]
    )


def brute_force_lp(problem: Problem, tol: float = 1e-9) -> Tuple[Optional[float], Optional[np.ndarray]]:
    """Best objective over all vertices of ``A x <= b, x >= 0`` (maximise only).

    Only suitable for a handful of variables and constraints.
    """
    n = problem.n_variables
    rows = [con.coefficients for con in problem.constraints]
    rhs = [con.rhs for con in problem.constraints]
    for j in range(n):
        unit = np.zeros(n)
        unit[j] = -1.0
        rows.append(unit)
        rhs.append(0.0)
    a_mat, b_vec = np.array(rows), np.array(rhs)

    best_value, best_x = None, None
    for subset in itertools.combinations(range(len(rows)), n):
        sub_a = a_mat[list(subset)]
        if abs(np.linalg.det(sub_a)) < 1e-10:
            continue
        x = np.linalg.solve(sub_a, b_vec[list(subset)])
        if np.all(a_mat @ x <= b_vec + 1e-7):
            value = float(problem.c @ x)
            if best_value is None or value > best_value + tol:
                best_value, best_x = value, x
    return best_value, best_x


def brute_force_integer(problem: Problem, upper: int) -> Optional[float]:
    """Best objective over integer points in ``[0, upper]^n`` satisfying every row."""
    best = None
    for point in itertools.product(range(upper + 1), repeat=problem.n_variables):
        x = np.array(point, dtype=float)
        if np.all(problem.constraint_violations(x) <= 1e-9):
            value = problem.objective_value(x)
            if best is None or (value > best if problem.maximize else value < best):
                best = value
    return best


@pytest.fixture
def vertex_optimum():
    """Fixture wrapper around :func:`brute_force_lp`."""
    return brute_force_lp


@pytest.fixture
def integer_optimum():
    """Fixture wrapper around :func:`brute_force_integer`."""
    return brute_force_integer
