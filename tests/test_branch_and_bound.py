"""Tests for depth-first branch-and-bound."""

import pytest

from lpconduit import BranchAndBound, DualSimplex, Problem, SolverConfig, Status, check_solution
from lpconduit.solvers import most_fractional


def test_most_fractional_prefers_half_and_lowest_index():
    assert most_fractional([1.5, 2.5, 0.2], [0, 1, 2], 1e-6) == (0, 1.5)
    assert most_fractional([1.0, 2.3, 0.6], [0, 1, 2], 1e-6) == (2, 0.6)
    assert most_fractional([1.0, 2.0000000001], [0, 1], 1e-6) is None
    assert most_fractional([0.5, 0.5], [1], 1e-6) == (1, 0.5)


def test_half_integer_relaxation_branches(half_integer_milp):
    relaxation = DualSimplex().solve(half_integer_milp)
    assert pytest.approx(1.5, abs=1e-9) == relaxation.variable_values["x1"]

    result = BranchAndBound().solve(half_integer_milp)
    assert result.status is Status.OPTIMAL
    assert pytest.approx(3.0, abs=1e-9) == result.optimal_value
    assert pytest.approx(1.0, abs=1e-9) == result.variable_values["x1"]

    titles = [step.title for step in result.steps]
    assert titles[:3] == ["Sub-problem 0", "Sub-problem 1", "Sub-problem 2"]

    floor_branch = half_integer_milp.copy()
    floor_branch.add_constraint([1.0, 0.0], "<=", 1.0)
    ceil_branch = half_integer_milp.copy()
    ceil_branch.add_constraint([1.0, 0.0], ">=", 2.0)
    children = [DualSimplex().solve(floor_branch), DualSimplex().solve(ceil_branch)]
    best_child = max(c.optimal_value for c in children if c.status is Status.OPTIMAL)
    assert pytest.approx(best_child, abs=1e-9) == result.optimal_value


def test_pure_integer_problem_matches_enumeration(integer_optimum):
    p = Problem.from_arrays(
        [5, 4], [[6, 4], [1, 2]], ["<=", "<="], [24, 6], types=["int", "int"]
    )
    result = BranchAndBound().solve(p)
    assert result.status is Status.OPTIMAL
    assert pytest.approx(integer_optimum(p, 6), abs=1e-9) == result.optimal_value
    assert check_solution(p, result).ok


def test_minimisation_with_integers(integer_optimum):
    p = Problem.from_arrays(
        [3, 2], [[1, 1], [1, 3]], [">=", ">="], [3.5, 4.5], sense="min", types=["int", "int"]
    )
    result = BranchAndBound().solve(p)
    assert result.status is Status.OPTIMAL
    assert pytest.approx(integer_optimum(p, 6), abs=1e-9) == result.optimal_value


def test_binary_variables(integer_optimum):
    p = Problem.from_arrays(
        [5, 4, 3], [[2, 3, 1], [4, 1, 2]], ["<=", "<="], [5, 6], types=["bin", "bin", "bin"]
    )
    result = BranchAndBound().solve(p)
    assert result.status is Status.OPTIMAL
    assert pytest.approx(integer_optimum(p, 1), abs=1e-9) == result.optimal_value


def test_undeclared_types_are_treated_as_integer():
    p = Problem.from_arrays([1], [[2]], ["<="], [3])
    result = BranchAndBound().solve(p)
    assert pytest.approx(1.0, abs=1e-9) == result.optimal_value


def test_continuous_variables_are_not_branched():
    p = Problem.from_arrays([1, 1], [[2, 0], [0, 2]], ["<=", "<="], [3, 3], types=["int", "+"])
    result = BranchAndBound().solve(p)
    assert pytest.approx(2.5, abs=1e-9) == result.optimal_value
    assert pytest.approx(1.5, abs=1e-9) == result.variable_values["x2"]


def test_infeasible_root():
    p = Problem.from_arrays([1], [[1], [1]], [">=", "<="], [5, 2], types=["int"])
    result = BranchAndBound().solve(p)
    assert result.status is Status.INFEASIBLE
    assert result.optimal_value is None


def test_no_integer_point():
    p = Problem.from_arrays([1], [[1], [1]], [">=", "<="], [1.2, 1.8], types=["int"])
    result = BranchAndBound().solve(p)
    assert result.status is Status.INFEASIBLE
    assert any("No feasible integer solution" in m for m in result.messages)


def test_depth_cap_abandons_branches(half_integer_milp):
    result = BranchAndBound(SolverConfig(max_depth=0)).solve(half_integer_milp)
    assert result.status is Status.LIMIT_EXCEEDED
    assert any("Maximum branching depth" in m for m in result.messages)


def test_depth_cap_with_incumbent_reports_incomplete_search():
    p = Problem.from_arrays(
        [1, 1.5], [[1, 1], [0, 1]], ["<=", "<="], [3.5, 2], types=["int", "int"]
    )
    result = BranchAndBound(SolverConfig(max_depth=1)).solve(p)
    assert result.status is Status.OPTIMAL
    assert pytest.approx(4.0, abs=1e-9) == result.optimal_value
    assert "Search incomplete: 2 sub-problem(s) left unexplored; the best value found is not proven optimal." in result.messages


def test_complete_search_has_no_incomplete_message(half_integer_milp):
    result = BranchAndBound().solve(half_integer_milp)
    assert not any("Search incomplete" in m for m in result.messages)


def test_bound_pruning_never_loses_the_optimum(rng, integer_optimum):
    for _ in range(5):
        a_mat = rng.integers(1, 6, size=(2, 3)).astype(float)
        b_vec = rng.integers(5, 12, size=2).astype(float)
        c = rng.integers(1, 8, size=3).astype(float)
        p = Problem.from_arrays(c, a_mat, ["<=", "<="], b_vec, types=["int"] * 3)
        result = BranchAndBound().solve(p)
        assert result.status is Status.OPTIMAL
        assert pytest.approx(integer_optimum(p, 12), abs=1e-7) == result.optimal_value
