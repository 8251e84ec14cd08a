"""
Stateless operations on factors: evidence instantiation, join, sum-out,
normalization, and the elimination-order heuristic.

Every operation returns a new Factor and leaves its inputs untouched. Join,
eliminate and normalize also return the number of elementary operations they
performed so the engines can report exact costs:

- join: one multiplication per row of the joined table
- eliminate: (group size - 1) additions per group of rows summed together
- normalize: one addition per row summed into the normalizing constant
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

from .exceptions import ZeroNormalization
from .factor import Assignment, Factor, cartesian_assignments
from .network import Network

logger = logging.getLogger(__name__)

HEURISTICS = ("weight", "alphabetical")


def instantiate(factor: Factor, var: str, value: str) -> Factor:
    """Reduce `factor` to the rows where `var == value` and drop `var` from the scope.

    Values are kept as they are (no renormalization).
    """
    pos = factor.position(var)
    if value not in factor.domain(var):
        raise KeyError(f"{value!r} is not an outcome of {var!r}")

    scope = factor.scope[:pos] + factor.scope[pos + 1:]
    domains = {v: factor.domain(v) for v in scope}
    rows = [
        (key[:pos] + key[pos + 1:], prob)
        for key, prob in factor.items()
        if key[pos] == value
    ]
    return Factor.from_rows(scope, domains, rows)


def join(f1: Factor, f2: Factor) -> Tuple[Factor, int]:
    """Pointwise product over the union scope.

    The union scope keeps f1's order and appends f2's remaining variables.
    Each joined row is seeded with the matching f1 entry and then multiplied by
    the matching f2 entry; that multiplication is the one counted.
    """
    scope = list(f1.scope) + [v for v in f2.scope if not f1.has_variable(v)]
    domains: Dict[str, Tuple[str, ...]] = f1.domains
    for v in f2.scope:
        if v in domains and domains[v] != f2.domain(v):
            raise ValueError(f"Outcome domains of {v!r} disagree: {domains[v]} vs {f2.domain(v)}")
        domains.setdefault(v, f2.domain(v))

    f1_positions = [scope.index(v) for v in f1.scope]
    f2_positions = [scope.index(v) for v in f2.scope]

    table: Dict[Assignment, float] = {}
    multiplications = 0
    for key in cartesian_assignments(scope, domains):
        seeded = f1[tuple(key[i] for i in f1_positions)]
        table[key] = seeded * f2[tuple(key[i] for i in f2_positions)]
        multiplications += 1

    logger.debug("join %s x %s -> %s (%d mults)", f1.scope, f2.scope, tuple(scope), multiplications)
    return Factor(scope, domains, table), multiplications


def eliminate(factor: Factor, var: str) -> Tuple[Factor, int]:
    """Sum `var` out of `factor`."""
    pos = factor.position(var)
    scope = factor.scope[:pos] + factor.scope[pos + 1:]
    domains = {v: factor.domain(v) for v in scope}

    groups: Dict[Assignment, List[float]] = {}
    for key, prob in factor.items():
        groups.setdefault(key[:pos] + key[pos + 1:], []).append(prob)

    table: Dict[Assignment, float] = {}
    additions = 0
    for key, probs in groups.items():
        total = probs[0]
        for prob in probs[1:]:
            total += prob
            additions += 1
        table[key] = total

    logger.debug("eliminate %s from %s (%d adds)", var, factor.scope, additions)
    return Factor(scope, domains, table), additions


def normalize(factor: Factor) -> Tuple[Factor, int]:
    """Scale `factor` so its values sum to 1. Returns the factor and the additions made."""
    total = 0.0
    additions = 0
    for prob in factor.values():
        total += prob
        additions += 1
    if total == 0.0:
        raise ZeroNormalization(f"Factor over {factor.scope} sums to zero; the evidence has no support")
    return Factor(factor.scope, factor.domains, {key: prob / total for key, prob in factor.items()}), additions


def is_trivial(factor: Factor) -> bool:
    """A single-row factor is a constant and cannot change a normalized answer."""
    return factor.size == 1


def discard_trivial(factors: List[Factor]) -> List[Factor]:
    return [f for f in factors if not is_trivial(f)]


def sort_by_weight(factors: Sequence[Factor]) -> List[Factor]:
    """Stable sort by (row count, character-code sum of the scope names)."""
    return sorted(factors, key=lambda f: f.weight)


def order_hidden_variables(hidden: Sequence[str], network: Network, heuristic: str = "weight") -> List[str]:
    """Order in which hidden variables are summed out.

    "weight": names sorted alphabetically, then stably by the weight of each
    variable's own CPT factor (row count, then character-code sum of its scope).
    "alphabetical": names sorted alphabetically.
    """
    if heuristic not in HEURISTICS:
        raise ValueError(f"Unknown elimination heuristic {heuristic!r}; use one of {HEURISTICS}")
    ordered = sorted(hidden)
    if heuristic == "weight":
        ordered.sort(key=lambda name: network.factor(name).weight)
    return ordered


def join_all(factors: Sequence[Factor]) -> Tuple[Factor, int]:
    """Join factors pairwise left to right; returns the product and total multiplications."""
    if not factors:
        raise ValueError("Nothing to join")
    result = factors[0]
    multiplications = 0
    for factor in factors[1:]:
        result, mults = join(result, factor)
        multiplications += mults
    return result, multiplications


__all__ = [
    "HEURISTICS",
    "instantiate",
    "join",
    "eliminate",
    "normalize",
    "is_trivial",
    "discard_trivial",
    "sort_by_weight",
    "order_hidden_variables",
    "join_all",
]
