"""Plain-text rendering of tableaux for the audit trail."""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

import numpy as np

from .core import DEFAULT_TOL


def column_headers(
    decision: Union[int, Sequence[str]], aux_names: Sequence[str]
) -> List[str]:
    """Decision names (``x1..xn`` when given a count), auxiliary names, ``RHS``."""
    if isinstance(decision, int):
        decision = [f"x{j}" for j in range(1, decision + 1)]
    return list(decision) + list(aux_names) + ["RHS"]


def format_tableau(
    tableau: np.ndarray,
    headers: Optional[Sequence[str]] = None,
    precision: int = 3,
    tol: float = DEFAULT_TOL,
) -> str:
    """
    Render a tableau as an aligned text table.

    Entries within ``tol`` of zero print as ``0`` so that ``-0.000`` noise
    does not clutter the trail.
    """
    rows, cols = tableau.shape
    if headers is None:
        headers = [f"c{j}" for j in range(1, cols)] + ["RHS"]
    if len(headers) != cols:
        raise ValueError(f"Expected {cols} headers, got {len(headers)}")

    cells = np.where(np.abs(tableau) < tol, 0.0, tableau)
    body = [[f"{value:.{precision}f}" for value in row] for row in cells]
    labels = ["z"] + [f"c{i}" for i in range(1, rows)]
    width = max([len(h) for h in headers] + [len(v) for row in body for v in row])
    label_width = max(len(label) for label in labels)

    lines = [" " * label_width + "  " + " ".join(h.rjust(width) for h in headers)]
    for label, row in zip(labels, body):
        lines.append(label.ljust(label_width) + "  " + " ".join(v.rjust(width) for v in row))
    return "\n".join(lines)


__all__ = ["column_headers", "format_tableau"]
