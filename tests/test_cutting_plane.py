"""Tests for the Gomory cutting-plane solver."""

import numpy as np
import pytest

from lpconduit import BranchAndBound, CuttingPlane, Problem, SolverConfig, Status, check_solution
from lpconduit.solvers import GomoryCut, split_fraction


def test_split_fraction_keeps_fractions_in_unit_interval():
    integer, fraction = split_fraction(np.array([1.25, -0.25, -2.0, 0.9999999]), 1e-6)
    assert np.allclose(integer, [1.0, -1.0, -2.0, 1.0])
    assert np.allclose(fraction, [0.25, 0.75, 0.0, 0.0])


def test_gomory_cut_from_row():
    t = np.array(
        [
            [0.0, 0.0, 0.5, 1.0, 3.5],
            [1.0, 0.0, 0.5, 0.0, 1.5],
            [0.0, 1.0, 0.0, 1.0, 2.0],
        ]
    )
    cut = GomoryCut.from_row(t, 1, 1e-6)
    assert cut.source_row == 1
    assert np.allclose(cut.fractional_parts, [0.0, 0.0, 0.5, 0.0])
    assert cut.rhs_integer == 1.0
    assert pytest.approx(0.5) == cut.rhs_fraction
    assert np.allclose(cut.cut_coefficients, [0.0, 0.0, -0.5, 0.0])
    assert pytest.approx(-0.5) == cut.cut_rhs


def test_single_cut_resolves_half_integer(half_integer_milp):
    result = CuttingPlane().solve(half_integer_milp)
    assert result.status is Status.OPTIMAL
    assert pytest.approx(3.0, abs=1e-9) == result.optimal_value
    assert pytest.approx(1.0, abs=1e-9) == result.variable_values["x1"]
    assert result.objective_trace == pytest.approx([3.5, 3.0])
    assert result.aux_names[-1] == "s3"


def test_textbook_example_and_monotone_trace(integer_optimum):
    p = Problem.from_arrays(
        [0, 1], [[3, 2], [-3, 2]], ["<=", "<="], [6, 0], types=["int", "int"]
    )
    result = CuttingPlane().solve(p)
    assert result.status is Status.OPTIMAL
    assert pytest.approx(integer_optimum(p, 3), abs=1e-7) == result.optimal_value
    trace = result.objective_trace
    assert len(trace) >= 2
    assert all(b <= a + 1e-9 for a, b in zip(trace, trace[1:]))
    assert check_solution(p, result).ok


def test_integral_relaxation_needs_no_cut(production_lp):
    result = CuttingPlane().solve(production_lp)
    assert result.status is Status.OPTIMAL
    assert result.objective_trace == pytest.approx([36.0])


def test_infeasible_relaxation_propagates():
    p = Problem.from_arrays([1], [[1], [1]], [">=", "<="], [5, 2], types=["int"])
    result = CuttingPlane().solve(p)
    assert result.status is Status.INFEASIBLE


def test_cut_limit():
    p = Problem.from_arrays(
        [0, 1], [[3, 2], [-3, 2]], ["<=", "<="], [6, 0], types=["int", "int"]
    )
    result = CuttingPlane(SolverConfig(max_cuts=1)).solve(p)
    assert result.status is Status.LIMIT_EXCEEDED
    assert any("Maximum cuts reached" in m for m in result.messages)
    assert result.objective_trace == pytest.approx([1.5, 1.0])


def test_continuous_column_in_every_source_row_stops_without_a_cut():
    p = Problem.from_arrays(
        [2, 2], [[3, 4], [5, 6]], ["<=", "<="], [4.3, 11.54], types=["int", "+"]
    )
    result = CuttingPlane().solve(p)
    assert result.status is Status.LIMIT_EXCEEDED
    assert any("No valid Gomory cut" in m for m in result.messages)
    assert result.objective_trace == pytest.approx([2.0 * 4.3 / 3.0])
    assert pytest.approx(2.65, abs=1e-7) == BranchAndBound().solve(p).optimal_value


def test_never_claims_a_worse_mixed_integer_optimum(rng):
    for _ in range(25):
        a_mat = rng.integers(1, 7, size=(2, 2)).astype(float)
        b_vec = np.round(rng.uniform(3.0, 12.0, size=2), 2)
        c = rng.integers(1, 5, size=2).astype(float)
        p = Problem.from_arrays(c, a_mat, ["<=", "<="], b_vec, types=["int", "+"])
        expected = BranchAndBound().solve(p)
        result = CuttingPlane().solve(p)
        assert result.status in (Status.OPTIMAL, Status.LIMIT_EXCEEDED)
        if result.status is Status.OPTIMAL:
            assert pytest.approx(expected.optimal_value, abs=1e-6) == result.optimal_value
