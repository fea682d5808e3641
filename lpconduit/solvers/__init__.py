"""Simplex-family LP solvers and the integer searches built on them."""

from .base import IncrementalSolver, Solver
from .branch_and_bound import BranchAndBound, SubProblem, most_fractional
from .cutting_plane import CuttingPlane, GomoryCut, split_fraction
from .dual import DualSimplex, DualSimplexState
from .knapsack import KnapsackSearch
from .primal import PrimalSimplex
from .revised import RevisedSimplex

__all__ = [
    "Solver",
    "IncrementalSolver",
    "PrimalSimplex",
    "DualSimplex",
    "DualSimplexState",
    "RevisedSimplex",
    "BranchAndBound",
    "SubProblem",
    "most_fractional",
    "CuttingPlane",
    "GomoryCut",
    "split_fraction",
    "KnapsackSearch",
]
