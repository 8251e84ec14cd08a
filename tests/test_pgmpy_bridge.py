"""
Tests for pgmpy_bridge.py - conversion to pgmpy and cross-checks against its exact inference.
"""

import pytest
from pgmpy.inference import VariableElimination

from bn_inference.bn_generation import generate_random_network
from bn_inference.inference_discrete import run_query
from bn_inference.pgmpy_bridge import from_pgmpy, query_probability, to_pgmpy
from bn_inference.query_generation import generate_queries


class TestConversion:
    def test_cpd_layout(self, two_parent):
        model = to_pgmpy(two_parent)
        cpd = model.get_cpds("C")
        assert cpd.get_values().shape == (2, 6)
        # column (P=p1, Q=q0)
        assert cpd.get_values()[0, 3] == pytest.approx(0.4)

    def test_round_trip(self, alarm):
        back = from_pgmpy(to_pgmpy(alarm))
        for var in alarm:
            other = back.variable(var.name)
            assert other.parents == var.parents
            assert other.outcomes == var.outcomes
            assert other.cpt == pytest.approx(var.cpt)


class TestAgainstPgmpy:
    @pytest.mark.parametrize(
        "variable, value, evidence",
        [
            ("B", "T", {"J": "T", "M": "T"}),
            ("J", "T", {"B": "T"}),
            ("A", "F", {"M": "F"}),
            ("E", "T", None),
        ],
    )
    def test_alarm_queries(self, alarm, variable, value, evidence):
        engine = VariableElimination(to_pgmpy(alarm))
        expected = query_probability(engine, variable, value, evidence)
        names = [variable] + list(evidence or {})
        values = [value] + list((evidence or {}).values())
        for algorithm in (1, 2, 3):
            assert run_query(alarm, names, values, algorithm).probability == pytest.approx(expected, abs=1e-9)

    def test_random_networks(self):
        for seed in range(3):
            network = generate_random_network(6, max_parents=2, arity={"type": "range", "min": 2, "max": 3}, seed=seed)
            engine = VariableElimination(to_pgmpy(network))
            for spec in generate_queries(network, num_queries=5, evidence_counts=(0, 1, 2), seed=seed):
                expected = query_probability(engine, spec.target[0], spec.target[1], spec.evidence)
                got = run_query(network, spec.names, spec.values, 3).probability
                assert got == pytest.approx(expected, abs=1e-9)
