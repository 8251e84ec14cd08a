"""Errors raised while building networks and answering queries."""

from __future__ import annotations


class InferenceError(Exception):
    """Base class for every error raised by bn_inference."""


class MalformedNetwork(InferenceError, ValueError):
    """The network definition is inconsistent (bad CPT length, unknown parent, ...)."""


class UnknownVariable(InferenceError, LookupError):
    """A query or a parent list names a variable the network does not have."""

    def __init__(self, name: str):
        super().__init__(f"Unknown variable: {name!r}")
        self.name = name


class InvalidQuery(InferenceError, ValueError):
    """The query is well formed text but cannot be answered against this network."""


class QuerySyntaxError(InferenceError, ValueError):
    """The query text could not be parsed."""


class EmptyFactorSet(InferenceError, RuntimeError):
    """No factor mentioning the target was left after elimination."""


class ZeroNormalization(InferenceError, ZeroDivisionError):
    """All probability mass is incompatible with the evidence."""


__all__ = [
    "InferenceError",
    "MalformedNetwork",
    "UnknownVariable",
    "InvalidQuery",
    "QuerySyntaxError",
    "EmptyFactorSet",
    "ZeroNormalization",
]
