"""Performance benchmarks for LP Conduit.

This package contains timing scripts for the integer solvers (branch-and-bound,
Gomory cutting planes and the knapsack search).
"""
