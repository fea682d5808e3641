"""Exception hierarchy for lpconduit.

Only malformed input and API misuse raise. Infeasible, unbounded and
iteration-limit outcomes are reported through :class:`~lpconduit.core.solution.Status`
on the returned solution instead.
"""

from __future__ import annotations


class LPConduitError(Exception):
    """Base class for all lpconduit errors."""


class ParseError(LPConduitError, ValueError):
    """Raised when problem text or JSON cannot be parsed.

    Attributes:
        line: 1-based line number of the offending line, if known.
    """

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class NumericalDegeneracy(LPConduitError, ArithmeticError):
    """Raised when a pivot element or basis matrix is numerically singular."""


class InvalidOperation(LPConduitError, RuntimeError):
    """Raised when a solver is used outside its contract."""


__all__ = ["LPConduitError", "ParseError", "NumericalDegeneracy", "InvalidOperation"]
