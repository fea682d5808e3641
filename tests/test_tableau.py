"""Tests for tableau primitives."""

import numpy as np
import pytest

from lpconduit.core.errors import NumericalDegeneracy
from lpconduit.tableau import (
    basic_row,
    basic_rows,
    column_headers,
    dual_pivot_column,
    dual_pivot_row,
    entering_column,
    expand,
    format_tableau,
    gauss_jordan_inverse,
    is_optimal,
    leaving_row,
    pivot,
)


def test_pivot_produces_unit_column(rng):
    for _ in range(20):
        t = rng.standard_normal((4, 6))
        r = int(rng.integers(1, 4))
        c = int(np.argmax(np.abs(t[r, :-1])))
        pivot(t, r, c)
        expected = np.zeros(4)
        expected[r] = 1.0
        assert np.allclose(t[:, c], expected, atol=1e-9)


def test_pivot_rejects_tiny_element():
    t = np.array([[1.0, 2.0, 0.0], [1e-9, 1.0, 3.0]])
    with pytest.raises(NumericalDegeneracy):
        pivot(t, 1, 0)


def test_entering_column_prefers_leftmost_on_ties():
    t = np.array([[-3.0, -3.0, 1.0, 0.0], [1.0, 1.0, 1.0, 4.0]])
    assert entering_column(t) == 0


def test_entering_column_none_when_optimal():
    t = np.array([[0.0, 1.0, 0.0, 5.0], [1.0, 1.0, 1.0, 4.0]])
    assert is_optimal(t)
    assert entering_column(t) is None


def test_leaving_row_minimum_ratio_first_on_ties():
    t = np.array(
        [
            [-1.0, 0.0, 0.0],
            [2.0, 1.0, 4.0],
            [1.0, 1.0, 2.0],
            [-1.0, 1.0, 1.0],
        ]
    )
    assert leaving_row(t, 0) == 1


def test_leaving_row_none_when_unbounded():
    t = np.array([[-1.0, 0.0, 0.0], [-1.0, 1.0, 1.0]])
    assert leaving_row(t, 0) is None


def test_dual_selection_rules():
    t = np.array(
        [
            [2.0, 3.0, 0.0, 0.0, 0.0],
            [-1.0, -1.0, 1.0, 0.0, -4.0],
            [-1.0, -3.0, 0.0, 1.0, -6.0],
        ]
    )
    row = dual_pivot_row(t)
    assert row == 2
    assert dual_pivot_column(t, row) == 1


def test_dual_pivot_column_none_proves_infeasible():
    t = np.array([[1.0, 0.0, 0.0], [1.0, 1.0, -2.0]])
    assert dual_pivot_column(t, 1) is None


def test_basic_row_detection():
    t = np.array(
        [
            [0.0, 0.0, 1.0, 9.0],
            [1.0, 0.0, 0.5, 2.0],
            [0.0, 1.0, -0.5, 3.0],
        ]
    )
    assert basic_row(t, 0) == 1
    assert basic_row(t, 1) == 2
    assert basic_row(t, 2) is None
    assert basic_rows(t, range(3)) == {0: 1, 1: 2}


def test_basic_row_negative_unit_only_when_allowed():
    t = np.array([[0.0, 0.0, 0.0], [-1.0, 1.0, 3.0]])
    assert basic_row(t, 0) is None
    assert basic_row(t, 0, allow_negative=True) == 1


def test_basic_rows_claims_each_row_once():
    t = np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 3.0]])
    assert basic_rows(t, [0, 1]) == {0: 1}


def test_basic_rows_can_require_zero_reduced_cost():
    t = np.array([[2.0, 0.0, 1.0, 4.0], [1.0, 1.0, 1.0, 4.0]])
    assert basic_rows(t, range(3)) == {0: 1}
    assert basic_rows(t, range(3), include_objective=True) == {1: 1}


def test_expand_inserts_column_before_rhs():
    t = np.arange(6, dtype=float).reshape(2, 3)
    grown = expand(t)
    assert grown.shape == (3, 4)
    assert np.array_equal(grown[:2, :2], t[:, :2])
    assert np.array_equal(grown[:2, 3], t[:, 2])
    assert np.all(grown[:, 2] == 0.0)
    assert np.all(grown[2] == 0.0)


def test_gauss_jordan_inverse_matches_numpy(rng):
    matrix = rng.standard_normal((4, 4)) + 4.0 * np.eye(4)
    assert np.allclose(gauss_jordan_inverse(matrix) @ matrix, np.eye(4), atol=1e-9)


def test_gauss_jordan_inverse_needs_row_swap():
    matrix = np.array([[0.0, 1.0], [1.0, 0.0]])
    assert np.allclose(gauss_jordan_inverse(matrix), matrix)


def test_gauss_jordan_inverse_singular():
    with pytest.raises(NumericalDegeneracy):
        gauss_jordan_inverse(np.array([[1.0, 2.0], [2.0, 4.0]]))


def test_format_tableau_headers_and_rows():
    t = np.array([[-3.0, -5.0, 0.0, 0.0], [1.0, 0.0, 1.0, 4.0]])
    text = format_tableau(t, column_headers(2, ["s1"]))
    lines = text.splitlines()
    assert "x1" in lines[0] and "s1" in lines[0] and "RHS" in lines[0]
    assert lines[1].startswith("z")
    assert lines[2].startswith("c1")
    assert "-5.000" in lines[1]


def test_format_tableau_header_mismatch():
    with pytest.raises(ValueError):
        format_tableau(np.zeros((2, 3)), ["a", "b"])
