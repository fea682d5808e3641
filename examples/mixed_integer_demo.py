"""
Example: Linear and integer programming with LP Conduit

This example solves a small production-planning LP with each simplex
variant, then solves integer versions of related problems with
branch-and-bound, Gomory cuts and the knapsack search.
"""

from lpconduit import (
    BranchAndBound,
    Constraint,
    CuttingPlane,
    DualSimplex,
    KnapsackSearch,
    PrimalSimplex,
    Relation,
    RevisedSimplex,
    Status,
    parse_problem_string,
)

PRODUCTION = """max +3 +5
+1 +0 <= 4
+0 +2 <= 12
+3 +2 <= 18
+ +
"""

KNAPSACK = """max +60 +100 +120
+10 +20 +30 <= 50
bin bin bin
"""


def example_linear_programming():
    """Example: Production planning with three simplex variants."""
    print("=" * 60)
    print("Example 1: Linear Programming - Production Planning")
    print("=" * 60)

    problem = parse_problem_string(PRODUCTION)
    for solver in (PrimalSimplex(), DualSimplex(), RevisedSimplex()):
        result = solver.solve(problem)
        print(f"{solver.name:>16}: {result.status.value}, z = {result.optimal_value:.3f}")
    print()


def example_incremental_reoptimisation():
    """Example: Add a constraint to a solved model and warm-start."""
    print("=" * 60)
    print("Example 2: Incremental Re-optimisation")
    print("=" * 60)

    problem = parse_problem_string(PRODUCTION)
    solver = DualSimplex()
    print(f"Before: z = {solver.solve(problem).optimal_value:.3f}")
    result = solver.add_constraint_and_resolve(Constraint([1.0, 0.0], Relation.GE, 3.0))
    print(f"After x1 >= 3: z = {result.optimal_value:.3f}")
    print(f"x = {result.decision_values(2)}")
    print()


def example_integer_programming():
    """Example: Integer solutions by branching and by cutting."""
    print("=" * 60)
    print("Example 3: Integer Programming")
    print("=" * 60)

    problem = parse_problem_string("max +0 +1\n+3 +2 <= 6\n-3 +2 <= 0\nint int\n")
    for solver in (BranchAndBound(), CuttingPlane()):
        result = solver.solve(problem)
        if result.status is Status.OPTIMAL:
            print(f"{solver.name:>16}: z = {result.optimal_value:.3f}, x = {result.decision_values(2)}")
    cuts = CuttingPlane().solve(problem)
    print(f"Cutting-plane objective trace: {[round(v, 3) for v in cuts.objective_trace]}")
    print()


def example_knapsack():
    """Example: 0/1 knapsack by breadth-first bound-and-branch."""
    print("=" * 60)
    print("Example 4: Knapsack")
    print("=" * 60)

    result = KnapsackSearch().solve(parse_problem_string(KNAPSACK))
    print(result.steps[-1].text)
    print(f"Best knapsack value: {result.optimal_value:.0f}")
    print()


if __name__ == "__main__":
    example_linear_programming()
    example_incremental_reoptimisation()
    example_integer_programming()
    example_knapsack()
