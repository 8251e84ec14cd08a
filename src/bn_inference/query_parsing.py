"""
Parsing and formatting of probability queries.

    >>> parse_query("P(B=T|J=T,M=T)")
    (['B', 'J', 'M'], ['T', 'T', 'T'])
    >>> parse_query_line("P(B=T|J=T,M=T),2")
    (['B', 'J', 'M'], ['T', 'T', 'T'], 2)
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from .exceptions import QuerySyntaxError

_QUERY_RE = re.compile(r"^\s*P\s*\((?P<target>[^|()]*?)(?:\|(?P<evidence>[^()]*))?\)\s*$")
_PAIR_RE = re.compile(r"^\s*(?P<name>[^=,|\s][^=,|]*?)\s*=\s*(?P<value>[^=,|\s][^=,|]*?)\s*$")
_LINE_RE = re.compile(r"^(?P<query>.*\))\s*(?:,\s*(?P<algorithm>\d+))?\s*$")


def _parse_pair(text: str, query: str) -> Tuple[str, str]:
    match = _PAIR_RE.match(text)
    if not match:
        raise QuerySyntaxError(f"Expected name=value, got {text.strip()!r} in {query!r}")
    return match.group("name"), match.group("value")


def parse_query(query: str) -> Tuple[List[str], List[str]]:
    """Split "P(X=x|E1=e1,E2=e2)" into (names, values), target first."""
    match = _QUERY_RE.match(query)
    if not match:
        raise QuerySyntaxError(f"Not a probability query: {query!r}")

    pairs = [_parse_pair(match.group("target"), query)]
    evidence = match.group("evidence")
    if evidence is not None:
        if not evidence.strip():
            raise QuerySyntaxError(f"Empty evidence list in {query!r}")
        pairs.extend(_parse_pair(part, query) for part in evidence.split(","))

    names = [name for name, _ in pairs]
    values = [value for _, value in pairs]
    return names, values


def parse_query_line(line: str) -> Tuple[List[str], List[str], Optional[int]]:
    """Split a batch line "P(...),<algorithm>" into (names, values, algorithm).

    The algorithm is None when the line has no ",<algorithm>" suffix.
    """
    match = _LINE_RE.match(line.strip())
    if not match:
        raise QuerySyntaxError(f"Expected 'P(...),<algorithm>', got {line.strip()!r}")
    names, values = parse_query(match.group("query"))
    algorithm = match.group("algorithm")
    return names, values, int(algorithm) if algorithm is not None else None


def format_probability_query(variable: str, value: str, evidence: Optional[Dict[str, str]] = None) -> str:
    """Generate formatted query string like P(dysp=no|smoke=yes,asia=no)"""
    if evidence:
        evidence_str = ",".join(f"{k}={v}" for k, v in evidence.items())
        return f"P({variable}={value}|{evidence_str})"
    return f"P({variable}={value})"


__all__ = ["parse_query", "parse_query_line", "format_probability_query"]
