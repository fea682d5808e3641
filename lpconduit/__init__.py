"""LP Conduit - tableau simplex solvers and integer search on numpy."""

__version__ = "0.1.0"

# Problem model, results and configuration
from .core import (
    DEFAULT_CONFIG,
    Constraint,
    Deadline,
    InvalidOperation,
    LPConduitError,
    NumericalDegeneracy,
    ParseError,
    Problem,
    Relation,
    Sense,
    Solution,
    SolverConfig,
    StandardForm,
    Status,
    Step,
    Variable,
    VariableType,
)

# Diagnostics
from .diagnostics import check_solution, debug_context, is_debug_enabled, set_debug_enabled

# I/O
from .io import (
    dump_json_solution,
    format_problem,
    json_to_problem,
    parse_problem_file,
    parse_problem_string,
    problem_to_json,
    solution_to_json,
)

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Solvers
from .solvers import (
    BranchAndBound,
    CuttingPlane,
    DualSimplex,
    DualSimplexState,
    IncrementalSolver,
    KnapsackSearch,
    PrimalSimplex,
    RevisedSimplex,
    Solver,
)

__all__ = [
    "__version__",
    # Model
    "Sense",
    "VariableType",
    "Relation",
    "Variable",
    "Constraint",
    "StandardForm",
    "Problem",
    "Status",
    "Step",
    "Solution",
    "SolverConfig",
    "Deadline",
    "DEFAULT_CONFIG",
    # Errors
    "LPConduitError",
    "ParseError",
    "NumericalDegeneracy",
    "InvalidOperation",
    # Solvers
    "Solver",
    "IncrementalSolver",
    "PrimalSimplex",
    "DualSimplex",
    "DualSimplexState",
    "RevisedSimplex",
    "BranchAndBound",
    "CuttingPlane",
    "KnapsackSearch",
    # I/O
    "parse_problem_string",
    "parse_problem_file",
    "format_problem",
    "problem_to_json",
    "json_to_problem",
    "solution_to_json",
    "dump_json_solution",
    # Diagnostics and logging
    "check_solution",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    "get_logger",
    "set_log_level",
    "configure_logging",
]
