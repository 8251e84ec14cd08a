"""
Conversion between Network and pgmpy's DiscreteBayesianNetwork.

pgmpy stores a CPD as a (variable_card, prod(evidence_card)) matrix whose
columns enumerate the evidence in nested-loop order, first evidence variable
slowest. Reading that matrix column by column gives the flat CPT layout used by
Network, so the conversion is a transpose and reshape.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import networkx as nx
import numpy as np
from pgmpy.factors.discrete import TabularCPD
from pgmpy.models import DiscreteBayesianNetwork

from .network import Network, Variable


def variable_to_cpd(network: Network, name: str) -> TabularCPD:
    var = network.variable(name)
    parents = list(var.parents)
    card = var.outcome_count
    values = np.array(var.cpt, dtype=float).reshape(-1, card).T
    state_names = {name: list(var.outcomes)}
    state_names.update({p: list(network.outcomes(p)) for p in parents})
    if parents:
        return TabularCPD(
            variable=name,
            variable_card=card,
            values=values,
            evidence=parents,
            evidence_card=[len(network.outcomes(p)) for p in parents],
            state_names=state_names,
        )
    return TabularCPD(variable=name, variable_card=card, values=values, state_names=state_names)


def to_pgmpy(network: Network) -> DiscreteBayesianNetwork:
    model = DiscreteBayesianNetwork()
    model.add_nodes_from(network.names)
    model.add_edges_from(network.graph.edges())
    model.add_cpds(*(variable_to_cpd(network, name) for name in network.names))
    model.check_model()
    return model


def from_pgmpy(model: DiscreteBayesianNetwork) -> Network:
    """Build a Network from a pgmpy model, variables in topological order."""
    variables: List[Variable] = []
    for node in nx.topological_sort(model):
        cpd = model.get_cpds(node)
        values = np.asarray(cpd.get_values(), dtype=float)
        cpt = values.T.reshape(-1).tolist()
        outcomes = [str(s) for s in cpd.state_names[node]]
        variables.append(Variable(str(node), outcomes, [str(p) for p in cpd.variables[1:]], cpt))
    return Network(variables)


def query_probability(inference_engine, variable, value, evidence: Optional[Dict[str, str]] = None):
    """Run inference and return specific probability value using state index lookup"""
    query = inference_engine.query(variables=[variable], evidence=evidence or None, show_progress=False)
    return float(query.values[query.state_names[variable].index(value)])


__all__ = ["to_pgmpy", "from_pgmpy", "variable_to_cpd", "query_probability"]
