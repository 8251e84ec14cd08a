"""
Probability tables over an ordered scope of discrete variables.

A Factor maps every joint assignment of its scope to a float. Assignments are
plain tuples of outcome labels, one per scope variable and in scope order:

    >>> f = Factor(["A"], {"A": ["T", "F"]}, {("T",): 0.3, ("F",): 0.7})
    >>> f[("T",)]
    0.3
    >>> f.value({"A": "F"})
    0.7

Keys are checked against the scope on every read and write, so a key built in
another variable order fails loudly instead of silently returning a wrong row.
"""

from __future__ import annotations

from itertools import product
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple

Assignment = Tuple[str, ...]


def cartesian_assignments(scope: Sequence[str], domains: Mapping[str, Sequence[str]]) -> List[Assignment]:
    """Enumerate all assignments over `scope` in cartesian order.

    The first scope variable changes slowest and the last one fastest:
    scope [A, B] with binary domains gives (T,T), (T,F), (F,T), (F,F).
    """
    return list(product(*(tuple(domains[v]) for v in scope)))


def name_weight(names: Iterable[str]) -> int:
    """Sum of character codes over all names (tie-breaker of the ordering heuristic)."""
    return sum(ord(ch) for name in names for ch in name)


class Factor:
    """A table over `scope` whose key set is the full product of the scope domains."""

    def __init__(
        self,
        scope: Sequence[str],
        domains: Mapping[str, Sequence[str]],
        table: Mapping[Assignment, float],
    ):
        scope = tuple(scope)
        if len(set(scope)) != len(scope):
            raise ValueError(f"Duplicate variables in factor scope {scope}")
        missing = [v for v in scope if v not in domains]
        if missing:
            raise ValueError(f"No outcome domain given for {missing}")

        self._scope: Tuple[str, ...] = scope
        self._domains: Dict[str, Tuple[str, ...]] = {v: tuple(domains[v]) for v in scope}
        self._table: Dict[Assignment, float] = {}
        for key, prob in table.items():
            self._table[self.check_key(key)] = float(prob)

        expected = 1
        for v in scope:
            expected *= len(self._domains[v])
        if len(self._table) != expected:
            raise ValueError(
                f"Factor over {scope} has {len(self._table)} rows, expected {expected}"
            )

    # ------------------------------
    # Construction
    # ------------------------------

    @classmethod
    def from_rows(
        cls,
        scope: Sequence[str],
        domains: Mapping[str, Sequence[str]],
        rows: Iterable[Tuple[Sequence[str], float]],
    ) -> "Factor":
        """Build a factor from (assignment, value) pairs; assignments follow `scope` order."""
        table: Dict[Assignment, float] = {}
        for key, prob in rows:
            key = tuple(key)
            if key in table:
                raise ValueError(f"Assignment {key} given twice for scope {tuple(scope)}")
            table[key] = prob
        return cls(scope, domains, table)

    @classmethod
    def constant(cls, scope: Sequence[str], domains: Mapping[str, Sequence[str]], value: float = 1.0) -> "Factor":
        """A factor holding `value` on every assignment of `scope`."""
        return cls(scope, domains, {key: value for key in cartesian_assignments(scope, domains)})

    def clone(self) -> "Factor":
        """Deep copy: the clone shares no mutable state with this factor."""
        return Factor(self._scope, self._domains, self._table)

    # ------------------------------
    # Scope and keys
    # ------------------------------

    @property
    def scope(self) -> Tuple[str, ...]:
        return self._scope

    @property
    def domains(self) -> Dict[str, Tuple[str, ...]]:
        return dict(self._domains)

    def domain(self, var: str) -> Tuple[str, ...]:
        return self._domains[var]

    def has_variable(self, var: str) -> bool:
        return var in self._domains

    def position(self, var: str) -> int:
        try:
            return self._scope.index(var)
        except ValueError:
            raise KeyError(f"{var!r} is not in factor scope {self._scope}") from None

    def check_key(self, key: Sequence[str]) -> Assignment:
        """Validate that `key` is an assignment over this factor's scope, in scope order."""
        key = tuple(key)
        if len(key) != len(self._scope):
            raise KeyError(f"Assignment {key} does not match factor scope {self._scope}")
        for var, label in zip(self._scope, key):
            if label not in self._domains[var]:
                raise KeyError(f"{label!r} is not an outcome of {var!r} (scope {self._scope})")
        return key

    def key_for(self, assignment: Mapping[str, str]) -> Assignment:
        """Build the key for a name -> outcome mapping, ordered by this factor's scope.

        Extra names in `assignment` are ignored; missing scope variables raise KeyError.
        """
        try:
            key = tuple(assignment[v] for v in self._scope)
        except KeyError as e:
            raise KeyError(f"Assignment lacks {e.args[0]!r} required by scope {self._scope}") from None
        return self.check_key(key)

    # ------------------------------
    # Table access
    # ------------------------------

    def __getitem__(self, key: Sequence[str]) -> float:
        return self._table[self.check_key(key)]

    def __setitem__(self, key: Sequence[str], prob: float) -> None:
        self._table[self.check_key(key)] = float(prob)

    def value(self, assignment: Mapping[str, str]) -> float:
        return self._table[self.key_for(assignment)]

    def items(self) -> Iterator[Tuple[Assignment, float]]:
        return iter(list(self._table.items()))

    def keys(self) -> Iterator[Assignment]:
        return iter(list(self._table))

    def values(self) -> List[float]:
        return list(self._table.values())

    def total(self) -> float:
        return sum(self._table.values())

    def __len__(self) -> int:
        return len(self._table)

    @property
    def size(self) -> int:
        return len(self._table)

    @property
    def weight(self) -> Tuple[int, int]:
        """(row count, character-code sum of the scope names): cheaper factors sort first."""
        return len(self._table), name_weight(self._scope)

    def __repr__(self) -> str:
        lines = [f"Factor({', '.join(self._scope)}):"]
        for key, prob in self._table.items():
            assignment = ", ".join(f"{var}={val}" for var, val in zip(self._scope, key))
            lines.append(f"  f({assignment}) = {prob}")
        return "\n".join(lines)


__all__ = ["Assignment", "Factor", "cartesian_assignments", "name_weight"]
