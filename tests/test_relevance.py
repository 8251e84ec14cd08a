"""
Tests for relevance.py - ancestor sets used to prune variable elimination.
"""

import pytest

from bn_inference.exceptions import UnknownVariable
from bn_inference.relevance import ancestors, relevant_variables


class TestAncestors:
    def test_includes_start_variable(self, alarm):
        assert ancestors(alarm, "B") == ["B"]

    def test_transitive(self, alarm):
        result = ancestors(alarm, "J")
        assert result[0] == "J"
        assert set(result) == {"J", "A", "B", "E"}

    def test_chain(self, chain):
        assert ancestors(chain, "Z") == ["Z", "Y", "X"]

    def test_unknown(self, alarm):
        with pytest.raises(UnknownVariable):
            ancestors(alarm, "Q")


class TestRelevantVariables:
    def test_declaration_order(self, alarm):
        assert relevant_variables(alarm, ["J", "B"]) == ["B", "E", "A", "J"]

    def test_sibling_not_relevant(self, alarm):
        assert "M" not in relevant_variables(alarm, ["B", "J"])

    def test_union(self, alarm):
        assert relevant_variables(alarm, ["M", "J"]) == ["B", "E", "A", "J", "M"]
