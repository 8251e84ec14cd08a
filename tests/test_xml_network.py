"""
Tests for xml_network.py - reading and writing network XML files.
"""

import pytest

from bn_inference.exceptions import MalformedNetwork
from bn_inference.xml_network import load_network, network_to_xml, parse_network

ALARM_XML = """<?xml version="1.0" encoding="US-ASCII"?>
<NETWORK>
<VARIABLE><NAME>B</NAME><OUTCOME>T</OUTCOME><OUTCOME>F</OUTCOME></VARIABLE>
<VARIABLE><NAME>E</NAME><OUTCOME>T</OUTCOME><OUTCOME>F</OUTCOME></VARIABLE>
<VARIABLE><NAME>A</NAME><OUTCOME>T</OUTCOME><OUTCOME>F</OUTCOME></VARIABLE>
<VARIABLE><NAME>J</NAME><OUTCOME>T</OUTCOME><OUTCOME>F</OUTCOME></VARIABLE>
<VARIABLE><NAME>M</NAME><OUTCOME>T</OUTCOME><OUTCOME>F</OUTCOME></VARIABLE>
<DEFINITION><FOR>B</FOR><TABLE>0.001 0.999</TABLE></DEFINITION>
<DEFINITION><FOR>E</FOR><TABLE>0.002 0.998</TABLE></DEFINITION>
<DEFINITION><FOR>A</FOR><GIVEN>B</GIVEN><GIVEN>E</GIVEN><TABLE>0.95 0.05 0.94 0.06 0.29 0.71 0.001 0.999</TABLE></DEFINITION>
<DEFINITION><FOR>J</FOR><GIVEN>A</GIVEN><TABLE>0.9 0.1 0.05 0.95</TABLE></DEFINITION>
<DEFINITION><FOR>M</FOR><GIVEN>A</GIVEN><TABLE>0.7 0.3 0.01 0.99</TABLE></DEFINITION>
</NETWORK>
"""


class TestParseNetwork:
    def test_alarm(self):
        net = parse_network(ALARM_XML.encode("ascii"))
        assert net.names == ["B", "E", "A", "J", "M"]
        assert net.parents("A") == ("B", "E")
        assert net.factor("A").value({"A": "T", "B": "T", "E": "F"}) == pytest.approx(0.94)

    def test_definitions_in_any_order(self):
        xml = """<NETWORK>
        <VARIABLE><NAME>X</NAME><OUTCOME>a</OUTCOME><OUTCOME>b</OUTCOME></VARIABLE>
        <VARIABLE><NAME>Y</NAME><OUTCOME>a</OUTCOME><OUTCOME>b</OUTCOME></VARIABLE>
        <DEFINITION><FOR>Y</FOR><GIVEN>X</GIVEN><TABLE>0.1 0.9 0.8 0.2</TABLE></DEFINITION>
        <DEFINITION><FOR>X</FOR><TABLE>0.5 0.5</TABLE></DEFINITION>
        </NETWORK>"""
        net = parse_network(xml)
        assert net.names == ["X", "Y"]
        assert net.factor("Y")[("b", "a")] == pytest.approx(0.9)

    @pytest.mark.parametrize(
        "xml",
        [
            "<NETWORK><VARIABLE>",
            "<NETWORK><VARIABLE><OUTCOME>T</OUTCOME></VARIABLE></NETWORK>",
            "<NETWORK><VARIABLE><NAME>X</NAME><OUTCOME>a</OUTCOME><OUTCOME>b</OUTCOME></VARIABLE></NETWORK>",
            "<NETWORK><VARIABLE><NAME>X</NAME><OUTCOME>a</OUTCOME><OUTCOME>b</OUTCOME></VARIABLE>"
            "<DEFINITION><FOR>X</FOR><TABLE>0.5 half</TABLE></DEFINITION></NETWORK>",
            "<NETWORK><VARIABLE><NAME>X</NAME><OUTCOME>a</OUTCOME><OUTCOME>b</OUTCOME></VARIABLE>"
            "<DEFINITION><FOR>X</FOR><TABLE>0.5 0.5</TABLE></DEFINITION>"
            "<DEFINITION><FOR>Z</FOR><TABLE>0.5 0.5</TABLE></DEFINITION></NETWORK>",
            "<NETWORK><VARIABLE><NAME>X</NAME><OUTCOME>a</OUTCOME><OUTCOME>b</OUTCOME></VARIABLE>"
            "<DEFINITION><FOR>X</FOR><TABLE>0.2 0.3 0.5</TABLE></DEFINITION></NETWORK>",
        ],
    )
    def test_malformed(self, xml):
        with pytest.raises(MalformedNetwork):
            parse_network(xml)


class TestRoundTrip:
    def test_write_then_read(self, alarm, tmp_path):
        path = tmp_path / "alarm.xml"
        path.write_text(network_to_xml(alarm), encoding="utf-8")
        loaded = load_network(path)
        assert loaded.names == alarm.names
        for var in alarm:
            assert loaded.variable(var.name) == var
