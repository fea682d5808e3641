"""JSON interchange format for problems and solutions.

Problem schema::

    {
        "version": "lpconduit-json-1.0",
        "sense": "max" | "min",
        "variables": [{"coefficient": <float>, "type": "+"|"-"|"urs"|"int"|"bin"|"cont"}, ...],
        "constraints": [
            {"coefficients": [<float>, ...], "relation": "<="|">="|"=", "rhs": <float>},
            ...
        ],
        "metadata": {...}                       # optional
    }

Solutions are exported with their status, value, variable map, messages and
structural counts. The audit trail is omitted unless requested, since tableau
snapshots dominate the size of the document.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from ..core.errors import ParseError
from ..core.problem import Problem, Relation, Sense, VariableType
from ..core.solution import Solution

JSON_VERSION = "lpconduit-json-1.0"


def problem_to_json(problem: Problem, metadata: Optional[dict] = None) -> dict:
    """
    Convert a Problem to its JSON representation.

    Parameters
    ----------
    problem : Problem
        Problem to convert.
    metadata : dict, optional
        Extra JSON-serializable information stored under ``"metadata"``.
    """
    result: Dict[str, Any] = {
        "version": JSON_VERSION,
        "sense": problem.sense.value,
        "variables": [
            {"coefficient": float(v.coefficient), "type": v.type.value} for v in problem.variables
        ],
        "constraints": [
            {
                "coefficients": [float(c) for c in con.coefficients],
                "relation": con.relation.value,
                "rhs": float(con.rhs),
            }
            for con in problem.constraints
        ],
    }
    if metadata:
        result["metadata"] = metadata
    return result


def json_to_problem(obj: dict) -> Problem:
    """
    Rebuild a Problem from its JSON representation.

    Raises
    ------
    ParseError
        If a required field is missing or holds an invalid value.
    """
    if not isinstance(obj, dict):
        raise ParseError(f"Expected a JSON object, got {type(obj).__name__}")
    version = obj.get("version")
    if version != JSON_VERSION:
        raise ParseError(f"Unsupported version {version!r}; expected {JSON_VERSION!r}")
    for key in ("sense", "variables", "constraints"):
        if key not in obj:
            raise ParseError(f"Missing required field {key!r}")

    try:
        problem = Problem(Sense.from_token(obj["sense"]))
        for var in obj["variables"]:
            problem.add_variable(float(var["coefficient"]), VariableType(var.get("type", "cont")))
        for k, con in enumerate(obj["constraints"], start=1):
            coefficients = con["coefficients"]
            if len(coefficients) != problem.n_variables:
                raise ParseError(
                    f"Constraint {k} has {len(coefficients)} coefficients, "
                    f"expected {problem.n_variables}"
                )
            problem.add_constraint(coefficients, Relation.from_token(con["relation"]), float(con["rhs"]))
    except (KeyError, TypeError) as e:
        raise ParseError(f"Malformed problem object: {e}") from None
    except ParseError:
        raise
    except ValueError as e:
        raise ParseError(str(e)) from None
    return problem


def solution_to_json(solution: Solution, include_steps: bool = False) -> dict:
    """Convert a Solution to a JSON-serializable dict."""
    result: Dict[str, Any] = {
        "version": JSON_VERSION,
        "status": solution.status.value,
        "optimal_value": solution.optimal_value,
        "variable_values": {k: float(v) for k, v in solution.variable_values.items()},
        "messages": list(solution.messages),
        "iterations": solution.iterations,
        "counts": {
            "variables": solution.variable_count,
            "slack": solution.slack_count,
            "excess": solution.excess_count,
            "artificial": solution.artificial_count,
        },
        "aux_names": list(solution.aux_names),
        "objective_trace": [float(v) for v in solution.objective_trace],
    }
    if solution.final_tableau is not None:
        result["final_tableau"] = solution.final_tableau.tolist()
    if include_steps:
        result["steps"] = [{"title": step.title, "text": step.text} for step in solution.steps]
    return result


def dump_json_problem(problem: Problem, path: str) -> None:
    """Write a Problem to a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(problem_to_json(problem), f, indent=2, ensure_ascii=False)


def load_json_problem(path: str) -> Problem:
    """
    Load a Problem from a JSON file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ParseError
        If the file is not valid JSON or not a valid problem.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            obj = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"JSON problem file not found: {path}")
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in file {path}: {e.msg}", e.lineno) from None
    return json_to_problem(obj)


def dump_json_solution(solution: Solution, path: str, include_steps: bool = False) -> None:
    """Write a Solution to a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(solution_to_json(solution, include_steps), f, indent=2, ensure_ascii=False)


__all__ = [
    "JSON_VERSION",
    "problem_to_json",
    "json_to_problem",
    "solution_to_json",
    "dump_json_problem",
    "load_json_problem",
    "dump_json_solution",
]
