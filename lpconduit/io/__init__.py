"""I/O for the plain-text problem format and the JSON interchange format."""

from .json_ir import (
    JSON_VERSION,
    dump_json_problem,
    dump_json_solution,
    json_to_problem,
    load_json_problem,
    problem_to_json,
    solution_to_json,
)
from .text import format_problem, parse_problem_file, parse_problem_string

__all__ = [
    "parse_problem_string",
    "parse_problem_file",
    "format_problem",
    "JSON_VERSION",
    "problem_to_json",
    "json_to_problem",
    "solution_to_json",
    "dump_json_problem",
    "load_json_problem",
    "dump_json_solution",
]
