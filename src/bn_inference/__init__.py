"""Exact inference on discrete Bayesian networks with operation counting."""

from .exceptions import (
    EmptyFactorSet,
    InferenceError,
    InvalidQuery,
    MalformedNetwork,
    QuerySyntaxError,
    UnknownVariable,
    ZeroNormalization,
)
from .factor import Factor
from .inference_discrete import QueryResult, brute_force, direct_lookup, run_query, variable_elimination
from .network import Network, Variable
from .query_parsing import parse_query, parse_query_line
from .xml_network import load_network, parse_network

__version__ = "0.1.0"

__all__ = [
    "Factor",
    "Network",
    "Variable",
    "QueryResult",
    "brute_force",
    "variable_elimination",
    "direct_lookup",
    "run_query",
    "parse_query",
    "parse_query_line",
    "load_network",
    "parse_network",
    "InferenceError",
    "MalformedNetwork",
    "UnknownVariable",
    "InvalidQuery",
    "QuerySyntaxError",
    "EmptyFactorSet",
    "ZeroNormalization",
]
