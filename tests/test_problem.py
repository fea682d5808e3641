"""Tests for the problem model and solution container."""

import numpy as np
import pytest

from lpconduit import (
    Constraint,
    Problem,
    Relation,
    Sense,
    Solution,
    Status,
    VariableType,
)


def test_from_arrays_builds_problem(production_lp):
    assert production_lp.sense is Sense.MAXIMIZE
    assert production_lp.n_variables == 2
    assert production_lp.n_constraints == 3
    assert np.array_equal(production_lp.c, [3.0, 5.0])
    assert production_lp.a_matrix.shape == (3, 2)
    assert np.array_equal(production_lp.b_vector, [4.0, 12.0, 18.0])


def test_from_arrays_dimension_mismatch():
    with pytest.raises(ValueError):
        Problem.from_arrays([1, 2], [[1, 2, 3]], ["<="], [1])
    with pytest.raises(ValueError):
        Problem.from_arrays([1, 2], [[1, 2]], ["<=", "<="], [1])


def test_add_variable_pads_existing_constraints():
    p = Problem()
    p.add_variable(1.0)
    p.add_constraint([2.0], Relation.LE, 4.0)
    p.add_variable(3.0)
    assert p.constraints[0].coefficients.tolist() == [2.0, 0.0]


def test_add_short_constraint_is_padded():
    p = Problem.from_arrays([1, 1, 1], [], [], [])
    added = p.add_constraint(Constraint([1.0], ">=", 2.0))
    assert added.coefficients.tolist() == [1.0, 0.0, 0.0]
    assert added.relation is Relation.GE


def test_add_too_long_constraint_rejected():
    p = Problem.from_arrays([1], [], [], [])
    with pytest.raises(ValueError):
        p.add_constraint([1.0, 2.0], "<=", 1.0)


def test_copy_is_deep(production_lp):
    twin = production_lp.copy()
    twin.add_constraint([1.0, 1.0], "<=", 3.0)
    twin.constraints[0].coefficients[0] = 99.0
    assert production_lp.n_constraints == 3
    assert production_lp.constraints[0].coefficients[0] == 1.0


def test_token_parsing():
    assert Sense.from_token("MAX") is Sense.MAXIMIZE
    assert VariableType.from_token("URS") is VariableType.UNRESTRICTED
    assert VariableType.from_token("bin").is_integer
    assert Relation.from_token(">=") is Relation.GE
    with pytest.raises(ValueError):
        VariableType.from_token("cont")
    with pytest.raises(ValueError):
        Relation.from_token("<")


def test_constraint_violations_include_sign_and_binary_bounds():
    p = Problem.from_arrays(
        [1, 1, 1], [[1, 1, 1]], ["<="], [5], types=["+", "-", "bin"]
    )
    violations = p.constraint_violations(np.array([-1.0, 2.0, 3.0]))
    assert violations[0] == 0.0
    assert sorted(violations[1:].tolist()) == [0.0, 1.0, 2.0, 2.0]


def test_is_knapsack(classic_knapsack, diet_lp):
    assert classic_knapsack.is_knapsack()
    assert not diet_lp.is_knapsack()


def test_standard_form_negates_and_splits():
    p = Problem.from_arrays(
        [1, 2, 3], [[1, 1, 1]], ["<="], [4], types=["+", "-", "urs"]
    )
    std = p.standard_form()
    assert std.problem.n_variables == 4
    assert std.names == ["x1", "-x2", "x3+", "x3-"]
    assert np.array_equal(std.problem.c, [1.0, -2.0, 3.0, -3.0])
    assert np.allclose(std.to_original([1.0, 2.0, 0.0, 5.0]), [1.0, -2.0, -5.0])
    mapped = std.map_constraint(Constraint([0.0, 1.0, 1.0], "=", 1.0))
    assert mapped.coefficients.tolist() == [0.0, -1.0, 1.0, -1.0]


def test_standard_form_adds_binary_bounds():
    p = Problem.from_arrays([1, 1], [[1, 1]], ["<="], [3], types=["bin", "int"])
    std = p.standard_form()
    assert std.bound_rows == 1
    assert std.problem.n_constraints == 2
    last = std.problem.constraints[-1]
    assert last.coefficients.tolist() == [1.0, 0.0]
    assert last.relation is Relation.LE and last.rhs == 1.0
    assert std.problem.integer_indices() == [0, 1]


def test_problem_str_lists_constraints(production_lp):
    text = str(production_lp)
    assert text.startswith("Maximize")
    assert "<= 18" in text


def test_solution_helpers():
    solution = Solution(status=Status.OPTIMAL, optimal_value=4.0)
    solution.variable_values = {"x1": 1.0, "x2": 3.0, "s1": 0.0}
    assert solution.success
    assert solution.decision_values().tolist() == [1.0, 3.0]
    assert solution.decision_values(3).tolist() == [1.0, 3.0, 0.0]

    tableau = np.eye(2)
    solution.add_step("snap", "text", tableau)
    tableau[0, 0] = 7.0
    assert solution.steps[0].tableau[0, 0] == 1.0
    assert "Optimal value: 4.000" in str(solution)


def test_solution_without_value_is_not_success():
    assert not Solution(status=Status.INFEASIBLE).success


def test_slack_names_mark_binary_bound_rows():
    p = Problem.from_arrays([1, 1], [[1, 1], [1, 0]], ["<=", "<="], [3, 2], types=["bin", "int"])
    std = p.standard_form()
    assert std.first_bound_row == 2
    assert std.is_bound_row(2) and not std.is_bound_row(1)
    assert std.slack_names(range(std.problem.n_constraints)) == ["s1", "s2", "u1"]
    assert std.copy().first_bound_row == 2
