from __future__ import annotations

from itertools import product
from typing import List, Tuple

from .network import Network


def _format_table(rows: List[List[str]]) -> str:
    widths: List[int] = []
    for row in rows:
        for i, cell in enumerate(row):
            if i >= len(widths):
                widths.append(len(cell))
            else:
                widths[i] = max(widths[i], len(cell))

    def horiz() -> str:
        parts = ["+" + "-" * (w + 2) for w in widths]
        return "".join(parts) + "+"

    def fmt_row(row: List[str]) -> str:
        cells = [f" {cell.ljust(w)} " for cell, w in zip(row, widths)]
        return "|" + "|".join(cells) + "|"

    out: List[str] = [horiz()]
    for r in rows:
        out.append(fmt_row(r))
        out.append(horiz())
    return "\n".join(out)


def cpd_to_ascii_table(network: Network, name: str, decimals: int = 4) -> str:
    """Boxed table of the CPT of `name`: one row per outcome, one column per parent assignment."""
    var = network.variable(name)
    factor = network.factor(name)
    parents = list(var.parents)

    rows: List[List[str]] = []

    if not parents:
        rows.append(["Node(Value)", "Probability"])
        for outcome in var.outcomes:
            rows.append([f"{name}({outcome})", f"{factor[(outcome,)]:.{decimals}f}"])
        return _format_table(rows)

    parent_assigns: List[Tuple[str, ...]] = list(product(*(network.outcomes(p) for p in parents)))

    # Header rows listing parent assignments as columns
    for i, p in enumerate(parents):
        rows.append([p] + [f"{p}({assign[i]})" for assign in parent_assigns])

    for outcome in var.outcomes:
        row = [f"{name}({outcome})"]
        for assign in parent_assigns:
            row.append(f"{factor[(outcome,) + assign]:.{decimals}f}")
        rows.append(row)

    return _format_table(rows)


__all__ = ["cpd_to_ascii_table"]
