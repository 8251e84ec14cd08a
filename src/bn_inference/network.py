"""
Discrete Bayesian network: variables, their CPTs and the master factors.

CPT layout
----------
A variable's CPT is a flat list of floats. Row i is decoded as a mixed-radix
counter over [variable] + parents where the variable's own outcome is the
fastest digit and the parents follow nested-loop order (first declared parent
slowest, last declared parent fastest). For B with parents [A, E], all binary:

    row 0: B=T A=T E=T      row 2: B=T A=T E=F      row 4: B=T A=F E=T ...
    row 1: B=F A=T E=T      row 3: B=F A=T E=F      row 5: B=F A=F E=T ...

This is the order the network files are written in; reading it any other way
corrupts every answer without raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import product
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import networkx as nx

from .exceptions import MalformedNetwork, UnknownVariable
from .factor import Assignment, Factor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Variable:
    name: str
    outcomes: Tuple[str, ...]
    parents: Tuple[str, ...]
    cpt: Tuple[float, ...]

    def __post_init__(self) -> None:
        name = self.name
        object.__setattr__(self, "outcomes", tuple(self.outcomes))
        object.__setattr__(self, "parents", tuple(self.parents))
        try:
            object.__setattr__(self, "cpt", tuple(float(p) for p in self.cpt))
        except (TypeError, ValueError) as e:
            raise MalformedNetwork(f"CPT of {name!r} is not numeric: {e}") from e

        if len(self.outcomes) < 2:
            raise MalformedNetwork(f"Variable {name!r} needs at least two outcomes, got {self.outcomes}")
        if len(set(self.outcomes)) != len(self.outcomes):
            raise MalformedNetwork(f"Variable {name!r} has duplicate outcomes {self.outcomes}")
        if len(set(self.parents)) != len(self.parents):
            raise MalformedNetwork(f"Variable {name!r} lists a parent twice: {self.parents}")
        if name in self.parents:
            raise MalformedNetwork(f"Variable {name!r} cannot be its own parent")

    @property
    def scope(self) -> Tuple[str, ...]:
        return (self.name,) + self.parents

    @property
    def outcome_count(self) -> int:
        return len(self.outcomes)


def cpt_assignments(variable: Variable, outcomes_by_name: Mapping[str, Sequence[str]]) -> List[Assignment]:
    """Assignments over variable.scope in CPT row order (own outcome fastest)."""
    parent_domains = [tuple(outcomes_by_name[p]) for p in variable.parents]
    rows: List[Assignment] = []
    for parent_values in product(*parent_domains):
        for outcome in variable.outcomes:
            rows.append((outcome,) + parent_values)
    return rows


def build_factor(variable: Variable, outcomes_by_name: Mapping[str, Sequence[str]]) -> Factor:
    """Build the factor of one variable from its flat CPT.

    Raises MalformedNetwork when a parent is unknown or the CPT length differs from
    the product of the outcome counts of the variable and its parents.
    """
    for p in variable.parents:
        if p not in outcomes_by_name:
            raise MalformedNetwork(f"Parent {p!r} of {variable.name!r} is not a network variable")

    expected = variable.outcome_count
    for p in variable.parents:
        expected *= len(outcomes_by_name[p])
    if len(variable.cpt) != expected:
        raise MalformedNetwork(
            f"CPT of {variable.name!r} has {len(variable.cpt)} values, "
            f"expected {expected} for scope {variable.scope}"
        )

    domains = {variable.name: variable.outcomes}
    domains.update({p: tuple(outcomes_by_name[p]) for p in variable.parents})
    rows = zip(cpt_assignments(variable, outcomes_by_name), variable.cpt)
    return Factor.from_rows(variable.scope, domains, rows)


class Network:
    """All variables of a Bayesian network plus one read-only master factor each.

    Queries must never modify the master factors; `working_copy` hands out clones.
    """

    def __init__(self, variables: Iterable[Variable]):
        self._variables: Dict[str, Variable] = {}
        for var in variables:
            if var.name in self._variables:
                raise MalformedNetwork(f"Variable {var.name!r} is defined twice")
            self._variables[var.name] = var

        outcomes_by_name = {name: var.outcomes for name, var in self._variables.items()}
        self._factors: Dict[str, Factor] = {
            name: build_factor(var, outcomes_by_name) for name, var in self._variables.items()
        }

        self._graph = nx.DiGraph()
        self._graph.add_nodes_from(self._variables)
        self._graph.add_edges_from((p, var.name) for var in self._variables.values() for p in var.parents)
        logger.debug(
            "Built network with %d variables and %d edges",
            self._graph.number_of_nodes(),
            self._graph.number_of_edges(),
        )

    # ------------------------------
    # Lookup
    # ------------------------------

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __len__(self) -> int:
        return len(self._variables)

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._variables.values())

    @property
    def names(self) -> List[str]:
        """Variable names in declaration order."""
        return list(self._variables)

    def variable(self, name: str) -> Variable:
        try:
            return self._variables[name]
        except KeyError:
            raise UnknownVariable(name) from None

    def outcomes(self, name: str) -> Tuple[str, ...]:
        return self.variable(name).outcomes

    def parents(self, name: str) -> Tuple[str, ...]:
        return self.variable(name).parents

    def factor(self, name: str) -> Factor:
        """The master factor of `name`. Read-only: clone it before changing anything."""
        self.variable(name)
        return self._factors[name]

    def working_copy(self, names: Optional[Iterable[str]] = None) -> List[Factor]:
        """Deep copies of the master factors of `names` (all variables if None), in declaration order."""
        wanted = set(self._variables) if names is None else {self.variable(n).name for n in names}
        return [self._factors[n].clone() for n in self._variables if n in wanted]

    @property
    def graph(self) -> nx.DiGraph:
        """Parent -> child graph (a copy)."""
        return self._graph.copy()

    def cpt_value(self, name: str, assignment: Mapping[str, str]) -> float:
        """CPT entry of `name` under a full or partial assignment covering its scope."""
        return self.factor(name).value(assignment)

    def __repr__(self) -> str:
        return f"Network({', '.join(self._variables)})"


__all__ = ["Variable", "Network", "build_factor", "cpt_assignments"]
