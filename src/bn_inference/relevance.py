"""
Relevance pruning for variable elimination.

Only ancestors of the query and evidence variables can influence
P(target | evidence); every other factor sums to one and is dropped before
elimination starts. Brute-force enumeration does not use this.
"""

from __future__ import annotations

from typing import List, Sequence

import networkx as nx

from .network import Network


def ancestors(network: Network, name: str) -> List[str]:
    """`name` and all its ancestors in reverse breadth-first order (name first)."""
    network.variable(name)
    return list(nx.bfs_tree(network.graph, name, reverse=True).nodes())


def relevant_variables(network: Network, names: Sequence[str]) -> List[str]:
    """Union of the ancestor sets of `names`, in network declaration order."""
    relevant = set()
    for name in names:
        relevant.update(ancestors(network, name))
    return [n for n in network.names if n in relevant]


__all__ = ["ancestors", "relevant_variables"]
