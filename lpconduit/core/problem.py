"""
Problem model: objective, typed variables and linear constraints.

A :class:`Problem` is the single input type accepted by every solver. It is
cheap to deep-copy, which the integer algorithms rely on: each branch owns its
own copy and siblings never share constraint lists.

Constraints are dense. Every constraint's coefficient vector has exactly one
entry per declared variable; adding a variable pads all existing constraints
with a zero and adding a shorter constraint pads it to the current width.

The simplex solvers only understand non-negative columns. :meth:`Problem.standard_form`
rewrites sign restrictions into that shape and keeps a ``transform`` matrix so
that results can be mapped back onto the caller's variables, in the same way
the standard-form conversion of a textbook revised simplex shifts and splits
free variables.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np


class Sense(Enum):
    """Optimisation direction."""

    MAXIMIZE = "max"
    MINIMIZE = "min"

    @classmethod
    def from_token(cls, token: str) -> "Sense":
        try:
            return cls(token.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown objective sense {token!r}; expected 'max' or 'min'") from None


class VariableType(Enum):
    """Sign or integrality restriction of a decision variable."""

    NON_NEGATIVE = "+"
    NON_POSITIVE = "-"
    UNRESTRICTED = "urs"
    INTEGER = "int"
    BINARY = "bin"
    CONTINUOUS = "cont"

    @classmethod
    def from_token(cls, token: str) -> "VariableType":
        """Map a restriction token (``+ - urs int bin``) to a type.

        ``cont`` is not part of the text grammar, so it is rejected here.
        """
        key = token.strip().lower()
        if key == cls.CONTINUOUS.value:
            raise ValueError(f"Unknown variable restriction {token!r}")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown variable restriction {token!r}") from None

    @property
    def is_integer(self) -> bool:
        return self in (VariableType.INTEGER, VariableType.BINARY)


class Relation(Enum):
    """Constraint relation."""

    LE = "<="
    GE = ">="
    EQ = "="

    @classmethod
    def from_token(cls, token: str) -> "Relation":
        try:
            return cls(token.strip())
        except ValueError:
            raise ValueError(f"Unknown relation {token!r}; expected '<=', '>=' or '='") from None


@dataclass
class Variable:
    """Decision variable ``x<index>`` with its objective coefficient."""

    index: int
    coefficient: float
    type: VariableType = VariableType.CONTINUOUS

    @property
    def name(self) -> str:
        return f"x{self.index}"


@dataclass
class Constraint:
    """Linear constraint ``coefficients · x  (relation)  rhs``."""

    coefficients: np.ndarray
    relation: Relation
    rhs: float

    def __post_init__(self) -> None:
        self.coefficients = np.array(self.coefficients, dtype=float).reshape(-1)
        if not isinstance(self.relation, Relation):
            self.relation = Relation.from_token(str(self.relation))
        self.rhs = float(self.rhs)

    def padded(self, width: int) -> "Constraint":
        """Return a copy zero-padded to ``width`` coefficients."""
        size = self.coefficients.shape[0]
        if size > width:
            raise ValueError(f"Constraint has {size} coefficients but only {width} variables")
        coeffs = np.zeros(width)
        coeffs[:size] = self.coefficients
        return Constraint(coeffs, self.relation, self.rhs)

    def lhs(self, x: np.ndarray) -> float:
        return float(self.coefficients @ np.asarray(x, dtype=float))

    def violation(self, x: np.ndarray) -> float:
        """Amount by which ``x`` violates the constraint (0 when satisfied)."""
        gap = self.lhs(x) - self.rhs
        if self.relation is Relation.LE:
            return max(gap, 0.0)
        if self.relation is Relation.GE:
            return max(-gap, 0.0)
        return abs(gap)

    def copy(self) -> "Constraint":
        return Constraint(self.coefficients.copy(), self.relation, self.rhs)


@dataclass
class StandardForm:
    """
    Non-negative rewrite of a :class:`Problem`.

    Attributes:
        problem: Equivalent problem whose variables are all non-negative.
        transform: Matrix of shape ``(n_original, n_standard)`` with
            ``x = transform @ z``.
        bound_rows: Number of ``z <= 1`` rows appended for binary variables.
        first_bound_row: Index of the first of those rows in ``problem.constraints``.
        names: Display name of each standard column (``x2``, ``-x3``,
            ``x4+``/``x4-`` for a split variable).
    """

    problem: "Problem"
    transform: np.ndarray
    bound_rows: int = 0
    names: List[str] = field(default_factory=list)
    first_bound_row: int = 0

    def to_original(self, z: np.ndarray) -> np.ndarray:
        return self.transform @ np.asarray(z, dtype=float)

    def map_constraint(self, constraint: Constraint) -> Constraint:
        """Rewrite a constraint over original variables onto standard columns."""
        width = self.transform.shape[0]
        padded = constraint.padded(width)
        return Constraint(padded.coefficients @ self.transform, padded.relation, padded.rhs)

    def copy(self) -> "StandardForm":
        return StandardForm(
            self.problem.copy(),
            self.transform.copy(),
            self.bound_rows,
            list(self.names),
            self.first_bound_row,
        )

    def is_bound_row(self, i: int) -> bool:
        return self.first_bound_row <= i < self.first_bound_row + self.bound_rows

    def slack_names(self, rows: Iterable[int]) -> List[str]:
        """Slack names for ``rows``: ``u<k>`` for binary bound rows, ``s<k>`` for the rest."""
        names = []
        counts = {"s": 0, "u": 0}
        for i in rows:
            prefix = "u" if self.is_bound_row(i) else "s"
            counts[prefix] += 1
            names.append(f"{prefix}{counts[prefix]}")
        return names


ConstraintLike = Union[Constraint, Sequence[float], np.ndarray]


class Problem:
    """
    Linear or mixed-integer program.

    Example:
        >>> p = Problem(Sense.MAXIMIZE)
        >>> _ = p.add_variable(3.0)
        >>> _ = p.add_variable(5.0)
        >>> p.add_constraint([1.0, 0.0], Relation.LE, 4.0)
        >>> p.n_constraints
        1
    """

    def __init__(
        self,
        sense: Sense = Sense.MAXIMIZE,
        variables: Optional[Iterable[Variable]] = None,
        constraints: Optional[Iterable[Constraint]] = None,
    ):
        self.sense = sense if isinstance(sense, Sense) else Sense.from_token(str(sense))
        self.variables: List[Variable] = list(variables or [])
        self.constraints: List[Constraint] = []
        for constraint in constraints or []:
            self.add_constraint(constraint)

    @classmethod
    def from_arrays(
        cls,
        c: Sequence[float],
        a_mat: Sequence[Sequence[float]],
        relations: Sequence[Union[Relation, str]],
        b_vec: Sequence[float],
        sense: Union[Sense, str] = Sense.MAXIMIZE,
        types: Optional[Sequence[Union[VariableType, str]]] = None,
    ) -> "Problem":
        """Build a problem from dense arrays."""
        c_arr = np.asarray(c, dtype=float).reshape(-1)
        a_arr = np.asarray(a_mat, dtype=float)
        b_arr = np.asarray(b_vec, dtype=float).reshape(-1)
        if a_arr.size == 0:
            a_arr = np.zeros((0, c_arr.shape[0]))
        if a_arr.ndim != 2 or a_arr.shape[1] != c_arr.shape[0]:
            raise ValueError("Matrix dimension mismatch")
        if a_arr.shape[0] != b_arr.shape[0] or len(relations) != b_arr.shape[0]:
            raise ValueError("A, relations and b must have the same number of rows")
        if types is not None and len(types) != c_arr.shape[0]:
            raise ValueError("types must have one entry per variable")

        problem = cls(sense if isinstance(sense, Sense) else Sense.from_token(sense))
        for j, coeff in enumerate(c_arr):
            vtype = VariableType.CONTINUOUS
            if types is not None:
                vtype = types[j] if isinstance(types[j], VariableType) else VariableType.from_token(types[j])
            problem.add_variable(coeff, vtype)
        for row, rel, rhs in zip(a_arr, relations, b_arr):
            relation = rel if isinstance(rel, Relation) else Relation.from_token(rel)
            problem.add_constraint(row, relation, rhs)
        return problem

    @property
    def maximize(self) -> bool:
        return self.sense is Sense.MAXIMIZE

    @property
    def n_variables(self) -> int:
        return len(self.variables)

    @property
    def n_constraints(self) -> int:
        return len(self.constraints)

    @property
    def c(self) -> np.ndarray:
        return np.array([v.coefficient for v in self.variables], dtype=float)

    @property
    def a_matrix(self) -> np.ndarray:
        if not self.constraints:
            return np.zeros((0, self.n_variables))
        return np.vstack([con.coefficients for con in self.constraints])

    @property
    def b_vector(self) -> np.ndarray:
        return np.array([con.rhs for con in self.constraints], dtype=float)

    def add_variable(
        self, coefficient: float, vtype: VariableType = VariableType.CONTINUOUS
    ) -> Variable:
        """Append a variable and pad every constraint with a zero coefficient."""
        variable = Variable(self.n_variables + 1, float(coefficient), vtype)
        self.variables.append(variable)
        self.constraints = [con.padded(self.n_variables) for con in self.constraints]
        return variable

    def add_constraint(
        self,
        constraint: ConstraintLike,
        relation: Optional[Union[Relation, str]] = None,
        rhs: Optional[float] = None,
    ) -> Constraint:
        """
        Append a constraint, padding it to the current variable count.

        Accepts either a :class:`Constraint` or ``(coefficients, relation, rhs)``.
        """
        if not isinstance(constraint, Constraint):
            if relation is None or rhs is None:
                raise ValueError("relation and rhs are required with raw coefficients")
            constraint = Constraint(np.asarray(constraint, dtype=float), relation, rhs)
        padded = constraint.padded(self.n_variables)
        self.constraints.append(padded)
        return padded

    def copy(self) -> "Problem":
        return copy.deepcopy(self)

    def objective_value(self, x: np.ndarray) -> float:
        return float(self.c @ np.asarray(x, dtype=float))

    def constraint_violations(self, x: np.ndarray) -> np.ndarray:
        """Per-constraint violation amounts, including sign and integrality restrictions."""
        x = np.asarray(x, dtype=float)
        rows = [con.violation(x) for con in self.constraints]
        for var, value in zip(self.variables, x):
            if var.type is VariableType.NON_POSITIVE:
                rows.append(max(value, 0.0))
            elif var.type is not VariableType.UNRESTRICTED:
                rows.append(max(-value, 0.0))
            if var.type is VariableType.BINARY:
                rows.append(max(value - 1.0, 0.0))
        return np.array(rows, dtype=float)

    def integer_indices(self) -> List[int]:
        """0-based indices of variables restricted to integer values."""
        return [j for j, var in enumerate(self.variables) if var.type.is_integer]

    def is_knapsack(self) -> bool:
        """True for a maximise problem with one ``<=`` row and non-negative data."""
        if not self.maximize or self.n_constraints != 1:
            return False
        row = self.constraints[0]
        if row.relation is not Relation.LE or row.rhs < 0:
            return False
        return bool(np.all(row.coefficients >= 0) and np.all(self.c >= 0))

    def standard_form(self) -> StandardForm:
        """
        Rewrite the problem so that every column is non-negative.

        Non-positive variables are negated, unrestricted variables are split
        into the difference of two non-negative columns and binary variables
        get an explicit ``<= 1`` row appended after the original constraints.
        Integer restrictions carry over to the corresponding columns.
        """
        columns: List[np.ndarray] = []
        names: List[str] = []
        std_types: List[VariableType] = []
        binary_columns: List[int] = []
        n = self.n_variables
        for i, var in enumerate(self.variables):
            unit = np.zeros(n)
            unit[i] = 1.0
            std_type = VariableType.INTEGER if var.type.is_integer else VariableType.CONTINUOUS
            if var.type is VariableType.NON_POSITIVE:
                columns.append(-unit)
                names.append(f"-{var.name}")
                std_types.append(std_type)
            elif var.type is VariableType.UNRESTRICTED:
                columns.append(unit)
                columns.append(-unit)
                names.extend([f"{var.name}+", f"{var.name}-"])
                std_types.extend([std_type, std_type])
            else:
                if var.type is VariableType.BINARY:
                    binary_columns.append(len(columns))
                columns.append(unit)
                names.append(var.name)
                std_types.append(std_type)

        transform = np.column_stack(columns) if columns else np.zeros((n, 0))
        std = Problem(self.sense)
        for coeff, vtype in zip(transform.T @ self.c, std_types):
            std.add_variable(coeff, vtype)
        for con in self.constraints:
            std.add_constraint(con.coefficients @ transform, con.relation, con.rhs)
        first_bound_row = std.n_constraints
        for col in binary_columns:
            row = np.zeros(std.n_variables)
            row[col] = 1.0
            std.add_constraint(row, Relation.LE, 1.0)
        return StandardForm(std, transform, len(binary_columns), names, first_bound_row)

    def __repr__(self) -> str:
        return (
            f"Problem(sense={self.sense.value}, n_variables={self.n_variables}, "
            f"n_constraints={self.n_constraints})"
        )

    def __str__(self) -> str:
        terms = " + ".join(f"{v.coefficient:g}{v.name}" for v in self.variables)
        lines = [("Maximize" if self.maximize else "Minimize") + f": {terms}", "Subject to:"]
        for con in self.constraints:
            lhs = " + ".join(
                f"{coeff:g}{var.name}" for coeff, var in zip(con.coefficients, self.variables)
            )
            lines.append(f"  {lhs} {con.relation.value} {con.rhs:g}")
        lines.append(
            "With: " + ", ".join(f"{v.name} {v.type.name.lower()}" for v in self.variables)
        )
        return "\n".join(lines)


__all__ = [
    "Sense",
    "VariableType",
    "Relation",
    "Variable",
    "Constraint",
    "StandardForm",
    "Problem",
]
