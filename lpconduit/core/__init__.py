"""Core data model: problems, solutions, configuration and errors."""

from .config import DEFAULT_CONFIG, Deadline, SolverConfig
from .errors import InvalidOperation, LPConduitError, NumericalDegeneracy, ParseError
from .problem import (
    Constraint,
    Problem,
    Relation,
    Sense,
    StandardForm,
    Variable,
    VariableType,
)
from .solution import Solution, Status, Step

__all__ = [
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
    "LPConduitError",
    "ParseError",
    "NumericalDegeneracy",
    "InvalidOperation",
]
