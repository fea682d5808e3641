"""Tests for the breadth-first 0/1 knapsack search."""

import pytest

from lpconduit import InvalidOperation, KnapsackSearch, Problem, SolverConfig, Status


def test_classic_instance(classic_knapsack):
    result = KnapsackSearch().solve(classic_knapsack)
    assert result.status is Status.OPTIMAL
    assert result.optimal_value == 220.0
    assert result.variable_values == {"x1": 0.0, "x2": 1.0, "x3": 1.0}


def test_ratio_ranking_and_candidates(classic_knapsack):
    result = KnapsackSearch().solve(classic_knapsack)
    ranking = result.steps[0].text.splitlines()
    assert ranking[0].startswith("x1") and ranking[0].endswith("Rank 1")
    assert ranking[2].startswith("x3")
    comparison = result.steps[-1].text
    assert "Candidate A: z = 160" in comparison
    assert "Candidate C is the best candidate" in comparison


def test_node_over_capacity_is_infeasible(classic_knapsack):
    result = KnapsackSearch().solve(classic_knapsack)
    assert any(step.text == "Infeasible" for step in result.steps)


def test_everything_fits_is_single_candidate():
    p = Problem.from_arrays([1, 2, 3], [[1, 1, 1]], ["<="], [10])
    result = KnapsackSearch().solve(p)
    assert result.optimal_value == 6.0
    assert "Candidate A is the best candidate" in result.steps[-1].text
    assert result.iterations == 1


def test_pruning_keeps_optimum_and_visits_fewer_nodes(classic_knapsack):
    full = KnapsackSearch().solve(classic_knapsack)
    pruned = KnapsackSearch(prune=True).solve(classic_knapsack)
    assert pruned.optimal_value == full.optimal_value
    assert pruned.iterations <= full.iterations


def test_matches_enumeration(rng, integer_optimum):
    for _ in range(8):
        values = rng.integers(1, 30, size=5)
        weights = rng.integers(1, 15, size=5)
        capacity = int(rng.integers(10, 40))
        p = Problem.from_arrays(values, [weights], ["<="], [capacity], types=["bin"] * 5)
        expected = integer_optimum(p, 1)
        assert KnapsackSearch().solve(p).optimal_value == pytest.approx(expected)
        assert KnapsackSearch(prune=True).solve(p).optimal_value == pytest.approx(expected)


def test_zero_weight_item_is_always_taken():
    p = Problem.from_arrays([5, 10], [[0, 20]], ["<="], [10])
    result = KnapsackSearch().solve(p)
    assert result.optimal_value == 5.0
    assert result.variable_values["x1"] == 1.0


@pytest.mark.parametrize(
    "problem",
    [
        Problem.from_arrays([1, 1], [[1, 1], [1, 0]], ["<=", "<="], [3, 1]),
        Problem.from_arrays([1, 1], [[1, 1]], [">="], [3]),
        Problem.from_arrays([1, 1], [[1, 1]], ["<="], [3], sense="min"),
    ],
)
def test_non_knapsack_rejected(problem):
    with pytest.raises(InvalidOperation):
        KnapsackSearch().solve(problem)


def test_cancellation(classic_knapsack):
    result = KnapsackSearch(SolverConfig(should_stop=lambda: True)).solve(classic_knapsack)
    assert result.status is Status.INTERRUPTED
