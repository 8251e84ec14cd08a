from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

from .network import Network
from .query_parsing import format_probability_query


@dataclass
class QuerySpec:
    # Query node with its chosen state label
    target: Tuple[str, str]
    # Evidence assignments as mapping node -> state label
    evidence: Dict[str, str]
    # Metadata about difficulty dimensions
    meta: Dict[str, Any]

    @property
    def names(self) -> List[str]:
        return [self.target[0]] + list(self.evidence)

    @property
    def values(self) -> List[str]:
        return [self.target[1]] + list(self.evidence.values())

    def as_text(self) -> str:
        return format_probability_query(self.target[0], self.target[1], self.evidence)


def _shortest_undirected_distance(G: nx.DiGraph, a: str, b: str) -> int:
    try:
        return nx.shortest_path_length(G.to_undirected(as_view=True), a, b)
    except nx.NetworkXNoPath:
        return 10**9


def _choose_states(rng: np.random.Generator, network: Network, nodes: Sequence[str]) -> Dict[str, str]:
    return {n: str(rng.choice(network.outcomes(n))) for n in nodes}


def generate_queries(
    network: Network,
    *,
    num_queries: int = 20,
    evidence_counts: Sequence[int] = (0, 1, 2, 3),
    # Distance buckets in undirected graph between target and evidence nodes
    distance_buckets: Sequence[Tuple[int, int]] = ((0, 1), (2, 3), (4, 99)),
    seed: Optional[int] = None,
) -> List[QuerySpec]:
    """Generate single-target queries with varying evidence size and distance.

    Each QuerySpec defines a target (node, state) and an evidence mapping over
    other nodes. Metadata records the evidence count and the minimum undirected
    distance between the target and any evidence node.
    """
    rng = np.random.default_rng(seed)
    G = network.graph
    nodes = network.names

    results: List[QuerySpec] = []
    bucket_cycle = list(distance_buckets) or [(0, 99)]

    for i in range(num_queries):
        ek = int(rng.choice(evidence_counts))
        dmin, dmax = bucket_cycle[i % len(bucket_cycle)]
        target = str(rng.choice(nodes))

        # Evidence selection: prefer nodes at the desired distance from the target
        e_nodes: List[str] = []
        pool = [n for n in nodes if n != target]
        for _ in range(5 * ek):
            if not pool or len(e_nodes) >= ek:
                break
            e = str(rng.choice(pool))
            if dmin <= _shortest_undirected_distance(G, target, e) <= dmax:
                e_nodes.append(e)
                pool.remove(e)
        # Fallback if we couldn't satisfy distance: pick random remaining
        while len(e_nodes) < ek and pool:
            e = str(rng.choice(pool))
            e_nodes.append(e)
            pool.remove(e)

        t_state = _choose_states(rng, network, [target])[target]
        evidence = _choose_states(rng, network, e_nodes)

        min_dist = min((_shortest_undirected_distance(G, target, e) for e in e_nodes), default=0)
        meta = {
            "num_evidence_nodes": len(e_nodes),
            "distance_bucket": (dmin, dmax),
            "min_target_evidence_distance": int(min_dist),
        }
        results.append(QuerySpec(target=(target, t_state), evidence=evidence, meta=meta))

    return results


__all__ = ["QuerySpec", "generate_queries"]
