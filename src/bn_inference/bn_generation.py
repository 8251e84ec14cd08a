"""
Random discrete Bayesian networks for equivalence sweeps between the engines.

Structure: a random topological order over V0..V{n-1}; each node draws up to
`max_parents` parents among the nodes before it. CPTs are sampled column by
column from Dirichlet(alpha):

- Variable arity strategy (fixed or ranged)
- CPT skewness via Dirichlet(alpha)
- Determinism fraction: proportion of CPT columns set to 0/1

Example:
    >>> net = generate_random_network(6, max_parents=2, arity={"type": "range", "min": 2, "max": 3}, seed=7)
    >>> len(net)
    6

CLI:
    python -m bn_inference.bn_generation --n-nodes 8 --max-parents 2 --out random.xml
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import networkx as nx
import numpy as np

from .network import Network, Variable
from .xml_network import network_to_xml


# ------------------------------
# Types and configuration models
# ------------------------------

@dataclass
class ArityStrategy:
    type: str  # "fixed" | "range"
    fixed: Optional[int] = None
    min: Optional[int] = None
    max: Optional[int] = None

    def draw_cardinalities(self, nodes: Sequence[str], rng: np.random.Generator) -> Dict[str, int]:
        if self.type == "fixed":
            if not self.fixed or self.fixed < 2:
                raise ValueError("fixed arity must be >= 2")
            return {n: int(self.fixed) for n in nodes}
        elif self.type == "range":
            if not self.min or not self.max or self.min < 2 or self.max < self.min:
                raise ValueError("range arity requires 2 <= min <= max")
            return {n: int(rng.integers(self.min, self.max + 1)) for n in nodes}
        else:
            raise ValueError("Unsupported arity strategy; use 'fixed' or 'range'")


# ------------------------------
# Core generation functions
# ------------------------------

def generate_random_dag(
    n_nodes: int,
    max_parents: int = 2,
    edge_probability: float = 0.5,
    rng: Optional[np.random.Generator] = None,
) -> nx.DiGraph:
    """Random DAG over V0..V{n-1}; node order in the graph is a topological order."""
    if n_nodes < 1:
        raise ValueError("n_nodes must be >= 1")
    if max_parents < 0:
        raise ValueError("max_parents must be >= 0")
    rng = rng or np.random.default_rng()

    names = [f"V{i}" for i in range(n_nodes)]
    order = [names[i] for i in rng.permutation(n_nodes)]

    dag = nx.DiGraph()
    dag.add_nodes_from(order)
    for idx, node in enumerate(order):
        candidates = order[:idx]
        if not candidates:
            continue
        k = int(rng.binomial(min(max_parents, len(candidates)), edge_probability))
        if k == 0:
            continue
        chosen = rng.choice(len(candidates), size=k, replace=False)
        dag.add_edges_from((candidates[int(c)], node) for c in sorted(chosen))
    return dag


def _sample_cpt_for_node(
    var_card: int,
    parent_cards: Sequence[int],
    dirichlet_alpha: float,
    determinism_fraction: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """Sample a CPT matrix of shape (var_card, product(parent_cards)).

    Column j is the distribution of the node under the j-th parent assignment in
    nested-loop order (first parent slowest). Root nodes get a single column.
    """
    num_cols = int(np.prod(parent_cards)) if len(parent_cards) else 1
    values = np.zeros((var_card, num_cols), dtype=float)

    deterministic_cols = set()
    if determinism_fraction > 0.0:
        num_deterministic = int(round(determinism_fraction * num_cols))
        if num_deterministic > 0:
            deterministic_cols = set(rng.choice(num_cols, size=num_deterministic, replace=False).tolist())

    for col in range(num_cols):
        if col in deterministic_cols:
            values[int(rng.integers(0, var_card)), col] = 1.0
        else:
            values[:, col] = rng.dirichlet([dirichlet_alpha] * var_card)

    return values


def network_from_dag(
    dag: nx.DiGraph,
    arity_strategy: Union[Dict[str, Any], ArityStrategy],
    dirichlet_alpha: float = 1.0,
    determinism_fraction: float = 0.0,
    rng: Optional[np.random.Generator] = None,
) -> Network:
    """Sample CPTs for every node of `dag` and build a Network in topological order."""
    if not nx.is_directed_acyclic_graph(dag):
        raise ValueError("Input graph must be a DAG")
    rng = rng or np.random.default_rng()
    strat = ArityStrategy(**arity_strategy) if isinstance(arity_strategy, dict) else arity_strategy

    order = list(nx.topological_sort(dag))
    cards = strat.draw_cardinalities(order, rng)

    variables: List[Variable] = []
    for node in order:
        parents = sorted(dag.predecessors(node), key=order.index)
        values = _sample_cpt_for_node(
            var_card=cards[node],
            parent_cards=[cards[p] for p in parents],
            dirichlet_alpha=dirichlet_alpha,
            determinism_fraction=determinism_fraction,
            rng=rng,
        )
        # Column-major flattening puts the node's own outcome fastest
        cpt = values.T.reshape(-1).tolist()
        outcomes = [f"s{i}" for i in range(cards[node])]
        variables.append(Variable(node, outcomes, parents, cpt))

    return Network(variables)


def generate_random_network(
    n_nodes: int,
    max_parents: int = 2,
    arity: Union[Dict[str, Any], ArityStrategy, int] = 2,
    dirichlet_alpha: float = 1.0,
    seed: Optional[int] = None,
    determinism_fraction: float = 0.0,
) -> Network:
    """Random DAG plus Dirichlet-sampled CPTs. An int `arity` means fixed arity."""
    rng = np.random.default_rng(seed)
    if isinstance(arity, int):
        arity = ArityStrategy(type="fixed", fixed=arity)
    dag = generate_random_dag(n_nodes, max_parents, rng=rng)
    return network_from_dag(dag, arity, dirichlet_alpha, determinism_fraction, rng=rng)


# ------------------------------
# CLI
# ------------------------------

def _parse_arity(arg: str) -> ArityStrategy:
    """Parse arity string like 'fixed:2' or 'range:2-4'."""
    if arg.startswith("fixed:"):
        return ArityStrategy(type="fixed", fixed=int(arg.split(":", 1)[1]))
    if arg.startswith("range:"):
        lo, hi = arg.split(":", 1)[1].split("-", 1)
        return ArityStrategy(type="range", min=int(lo), max=int(hi))
    raise argparse.ArgumentTypeError("Arity must be 'fixed:<k>' or 'range:<min>-<max>'")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a random discrete BN and write it as network XML")
    parser.add_argument("--n-nodes", type=int, default=8, help="Number of nodes")
    parser.add_argument("--max-parents", type=int, default=2, help="Maximum parents per node")
    parser.add_argument("--arity", type=_parse_arity, default=ArityStrategy(type="range", min=2, max=3), help="Variable arity strategy: fixed:k or range:min-max")
    parser.add_argument("--alpha", type=float, default=1.0, help="Dirichlet alpha for CPT sampling (<=1 skewed, 1 uniform, >1 flat)")
    parser.add_argument("--determinism", type=float, default=0.0, help="Deterministic fraction for CPT columns (0.0 recommended)")
    parser.add_argument("--seed", type=int, default=42, help="Seed for reproducibility")
    parser.add_argument("--out", type=Path, required=True, help="Output XML path")
    args = parser.parse_args(argv)

    network = generate_random_network(
        n_nodes=args.n_nodes,
        max_parents=args.max_parents,
        arity=args.arity,
        dirichlet_alpha=args.alpha,
        seed=args.seed,
        determinism_fraction=args.determinism,
    )
    args.out.write_text(network_to_xml(network), encoding="utf-8")

    n_edges = network.graph.number_of_edges()
    print(f"Generated network with {len(network)} nodes and {n_edges} edges -> {args.out}")
    for var in network:
        print(f"  {var.name}: {var.outcome_count} states, parents={list(var.parents)}")


if __name__ == "__main__":
    main()


__all__ = [
    "ArityStrategy",
    "generate_random_dag",
    "network_from_dag",
    "generate_random_network",
]
