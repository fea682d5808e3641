"""Benchmark the integer solvers on random bounded problems."""

import time
from typing import Dict

import numpy as np

from lpconduit import BranchAndBound, CuttingPlane, KnapsackSearch, Problem, SolverConfig


def random_integer_program(n_vars: int, n_cons: int, rng: np.random.Generator) -> Problem:
    a_mat = rng.integers(1, 10, size=(n_cons, n_vars)).astype(float)
    b_vec = rng.integers(10, 40, size=n_cons).astype(float)
    c = rng.integers(1, 10, size=n_vars).astype(float)
    return Problem.from_arrays(c, a_mat, ["<="] * n_cons, b_vec, types=["int"] * n_vars)


def benchmark_integer_solvers(
    n_vars: int = 4,
    n_cons: int = 3,
    n_problems: int = 20,
    seed: int = 0,
) -> Dict[str, float]:
    """Time branch-and-bound and cutting planes on the same random problems.

    Args:
        n_vars: Number of integer variables.
        n_cons: Number of ``<=`` constraints.
        n_problems: Number of random problems.
        seed: RNG seed.

    Returns:
        Dictionary with timing results.
    """
    rng = np.random.default_rng(seed)
    problems = [random_integer_program(n_vars, n_cons, rng) for _ in range(n_problems)]
    config = SolverConfig(record_steps=False)
    results: Dict[str, float] = {"n_vars": n_vars, "n_cons": n_cons, "n_problems": n_problems}

    for solver in (BranchAndBound(config), CuttingPlane(config)):
        start = time.perf_counter()
        nodes = 0
        for problem in problems:
            nodes += solver.solve(problem).iterations
        elapsed = time.perf_counter() - start
        results[f"{solver.name}_time_per_problem_sec"] = elapsed / n_problems
        results[f"{solver.name}_iterations"] = nodes
    return results


def benchmark_knapsack(n_items: int = 12, seed: int = 0) -> Dict[str, float]:
    """Compare full enumeration against bound pruning on one instance."""
    rng = np.random.default_rng(seed)
    values = rng.integers(10, 100, size=n_items)
    weights = rng.integers(5, 40, size=n_items)
    problem = Problem.from_arrays(
        values, [weights], ["<="], [int(weights.sum() // 2)], types=["bin"] * n_items
    )
    results: Dict[str, float] = {"n_items": n_items}
    for label, solver in (("full", KnapsackSearch()), ("pruned", KnapsackSearch(prune=True))):
        start = time.perf_counter()
        solution = solver.solve(problem)
        results[f"{label}_time_sec"] = time.perf_counter() - start
        results[f"{label}_nodes"] = solution.iterations
        results[f"{label}_value"] = solution.optimal_value
    return results


if __name__ == "__main__":
    print("Benchmarking integer solvers...")
    results = benchmark_integer_solvers()
    for name in ("branch_and_bound", "cutting_plane"):
        print(f"{name}:")
        print(f"  Time per problem: {results[f'{name}_time_per_problem_sec']*1e3:.2f} ms")
        print(f"  Total pivots/nodes: {results[f'{name}_iterations']:.0f}")

    print("Benchmarking knapsack search...")
    knap = benchmark_knapsack()
    for label in ("full", "pruned"):
        print(
            f"  {label}: {knap[f'{label}_nodes']:.0f} nodes, "
            f"{knap[f'{label}_time_sec']*1e3:.2f} ms, value {knap[f'{label}_value']:.0f}"
        )
