"""Plain-text problem format.

Grammar, one statement per non-blank line::

    max +2 +3 +3 +5 +2 +4
    +11 +8 +6 +14 +10 +10 <= 40
    bin bin bin bin bin bin

* First line: ``max`` or ``min`` then one signed objective coefficient per
  variable.
* Middle lines: one signed coefficient per variable, a relation
  (``<=``, ``>=`` or ``=``) and the right-hand side.
* Last line: one restriction per variable from ``+ - urs int bin``.

A coefficient may be written ``+3`` or as the pair ``+ 3``. Keywords and
restriction tokens are case-insensitive.
"""

from __future__ import annotations

from typing import List, Tuple

from ..core.errors import ParseError
from ..core.problem import Problem, Relation, Sense, VariableType

_SIGNS = ("+", "-")


def _signed_numbers(tokens: List[str], line: int) -> List[float]:
    """Join bare ``+``/``-`` tokens with the number that follows them."""
    values = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token in _SIGNS:
            if i + 1 >= len(tokens):
                raise ParseError(f"Sign {token!r} is not followed by a value", line)
            token = token + tokens[i + 1]
            i += 1
        try:
            values.append(float(token))
        except ValueError:
            raise ParseError(f"Invalid number {token!r}", line) from None
        i += 1
    return values


def _content_lines(text: str) -> List[Tuple[int, str]]:
    return [(n, raw.strip()) for n, raw in enumerate(text.splitlines(), start=1) if raw.strip()]


def parse_problem_string(text: str) -> Problem:
    """
    Parse problem text into a :class:`Problem`.

    Raises:
        ParseError: With the 1-based line number of the offending line.
    """
    lines = _content_lines(text)
    if len(lines) < 2:
        raise ParseError("Expected an objective line and a restriction line")

    objective_no, objective = lines[0]
    tokens = objective.split()
    try:
        sense = Sense.from_token(tokens[0])
    except ValueError as e:
        raise ParseError(str(e), objective_no) from None
    coefficients = _signed_numbers(tokens[1:], objective_no)
    if not coefficients:
        raise ParseError("Objective has no coefficients", objective_no)
    n = len(coefficients)

    restriction_no, restriction = lines[-1]
    restriction_tokens = restriction.split()
    if len(restriction_tokens) != n:
        raise ParseError(
            f"Expected {n} restriction tokens, got {len(restriction_tokens)}", restriction_no
        )
    types = []
    for token in restriction_tokens:
        try:
            types.append(VariableType.from_token(token))
        except ValueError as e:
            raise ParseError(str(e), restriction_no) from None

    problem = Problem(sense)
    for coeff, vtype in zip(coefficients, types):
        problem.add_variable(coeff, vtype)

    for line_no, body in lines[1:-1]:
        tokens = body.split()
        relation_at = next(
            (i for i, tok in enumerate(tokens) if tok in ("<=", ">=", "=")), None
        )
        if relation_at is None:
            raise ParseError("Constraint has no relation ('<=', '>=' or '=')", line_no)
        row = _signed_numbers(tokens[:relation_at], line_no)
        if len(row) != n:
            raise ParseError(f"Expected {n} coefficients, got {len(row)}", line_no)
        rhs = _signed_numbers(tokens[relation_at + 1 :], line_no)
        if len(rhs) != 1:
            raise ParseError("Constraint needs exactly one right-hand side", line_no)
        problem.add_constraint(row, Relation.from_token(tokens[relation_at]), rhs[0])

    return problem


def parse_problem_file(path: str) -> Problem:
    """
    Parse a problem file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ParseError: If the content is malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Problem file not found: {path}")
    return parse_problem_string(content)


def _signed(value: float) -> str:
    return f"{value:+g}"


def format_problem(problem: Problem) -> str:
    """Write ``problem`` in the text grammar accepted by :func:`parse_problem_string`."""
    types = []
    for var in problem.variables:
        vtype = var.type
        if vtype is VariableType.CONTINUOUS:
            vtype = VariableType.NON_NEGATIVE
        types.append(vtype.value)

    lines = [" ".join([problem.sense.value] + [_signed(v.coefficient) for v in problem.variables])]
    for con in problem.constraints:
        lines.append(
            " ".join([_signed(c) for c in con.coefficients] + [con.relation.value, f"{con.rhs:g}"])
        )
    lines.append(" ".join(types))
    return "\n".join(lines) + "\n"


__all__ = ["parse_problem_string", "parse_problem_file", "format_problem"]
