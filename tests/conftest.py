"""
Shared fixtures: small networks with hand-checkable answers.
"""

import pytest

from bn_inference.network import Network, Variable
from bn_inference.xml_network import network_to_xml

ALARM_VARIABLES = [
    ("B", ["T", "F"], [], [0.001, 0.999]),
    ("E", ["T", "F"], [], [0.002, 0.998]),
    ("A", ["T", "F"], ["B", "E"], [0.95, 0.05, 0.94, 0.06, 0.29, 0.71, 0.001, 0.999]),
    ("J", ["T", "F"], ["A"], [0.9, 0.1, 0.05, 0.95]),
    ("M", ["T", "F"], ["A"], [0.7, 0.3, 0.01, 0.99]),
]


def _network(spec):
    return Network(Variable(name, outcomes, parents, cpt) for name, outcomes, parents, cpt in spec)


@pytest.fixture
def alarm():
    """Burglary / earthquake / alarm network with JohnCalls and MaryCalls."""
    return _network(ALARM_VARIABLES)


@pytest.fixture
def alarm_xml(alarm):
    return network_to_xml(alarm)


@pytest.fixture
def chain():
    """X -> Y -> Z, all binary."""
    return _network([
        ("X", ["x1", "x2"], [], [0.6, 0.4]),
        ("Y", ["y1", "y2"], ["X"], [0.7, 0.3, 0.2, 0.8]),
        ("Z", ["z1", "z2"], ["Y"], [0.9, 0.1, 0.4, 0.6]),
    ])


@pytest.fixture
def weather():
    """Three-valued root with a binary child."""
    return _network([
        ("Weather", ["sun", "rain", "snow"], [], [0.5, 0.3, 0.2]),
        ("Traffic", ["low", "high"], ["Weather"], [0.8, 0.2, 0.4, 0.6, 0.1, 0.9]),
    ])


@pytest.fixture
def two_parent():
    """C depends on a binary P and a three-valued Q; CPT rows are all distinct."""
    return _network([
        ("P", ["p0", "p1"], [], [0.3, 0.7]),
        ("Q", ["q0", "q1", "q2"], [], [0.2, 0.5, 0.3]),
        (
            "C",
            ["c0", "c1"],
            ["P", "Q"],
            # (P=p0,Q=q0) (p0,q1) (p0,q2) (p1,q0) (p1,q1) (p1,q2)
            [0.1, 0.9, 0.2, 0.8, 0.3, 0.7, 0.4, 0.6, 0.5, 0.5, 0.6, 0.4],
        ),
    ])
