"""
Load networks from the XML format used by the query input files.

    <NETWORK>
      <VARIABLE>
        <NAME>A</NAME>
        <OUTCOME>T</OUTCOME>
        <OUTCOME>F</OUTCOME>
      </VARIABLE>
      ...
      <DEFINITION>
        <FOR>A</FOR>
        <GIVEN>B</GIVEN>
        <TABLE>0.9 0.1 0.2 0.8</TABLE>
      </DEFINITION>
    </NETWORK>

TABLE lists the CPT with the FOR variable's outcome changing fastest and the
GIVEN parents in nested-loop order (see bn_inference.network).
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Union

from .exceptions import MalformedNetwork
from .network import Network, Variable

logger = logging.getLogger(__name__)


def _text(element: ET.Element, tag: str) -> str:
    child = element.find(tag)
    if child is None or child.text is None or not child.text.strip():
        raise MalformedNetwork(f"<{element.tag}> is missing <{tag}>")
    return child.text.strip()


def _texts(element: ET.Element, tag: str) -> List[str]:
    return [(child.text or "").strip() for child in element.findall(tag)]


def parse_network(xml_text: Union[str, bytes]) -> Network:
    """Build a Network from the XML document text."""
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise MalformedNetwork(f"Invalid network XML: {e}") from e

    outcomes: Dict[str, List[str]] = {}
    for element in root.iter("VARIABLE"):
        name = _text(element, "NAME")
        if name in outcomes:
            raise MalformedNetwork(f"Variable {name!r} is declared twice")
        outcomes[name] = _texts(element, "OUTCOME")

    definitions: Dict[str, ET.Element] = {}
    for element in root.iter("DEFINITION"):
        name = _text(element, "FOR")
        if name in definitions:
            raise MalformedNetwork(f"Variable {name!r} has two definitions")
        definitions[name] = element

    variables: List[Variable] = []
    for name, labels in outcomes.items():
        definition = definitions.pop(name, None)
        if definition is None:
            raise MalformedNetwork(f"Variable {name!r} has no <DEFINITION>")
        table = _text(definition, "TABLE").split()
        try:
            cpt = [float(p) for p in table]
        except ValueError as e:
            raise MalformedNetwork(f"TABLE of {name!r} is not numeric: {e}") from e
        variables.append(Variable(name, labels, _texts(definition, "GIVEN"), cpt))

    if definitions:
        raise MalformedNetwork(f"Definitions for undeclared variables: {sorted(definitions)}")

    return Network(variables)


def load_network(path: Union[str, Path]) -> Network:
    """Read and parse a network XML file."""
    path = Path(path)
    network = parse_network(path.read_bytes())
    logger.info("Loaded network %s with %d variables", path.name, len(network))
    return network


def network_to_xml(network: Network) -> str:
    """Serialize a Network back to the same XML format."""
    root = ET.Element("NETWORK")
    for var in network:
        element = ET.SubElement(root, "VARIABLE")
        ET.SubElement(element, "NAME").text = var.name
        for outcome in var.outcomes:
            ET.SubElement(element, "OUTCOME").text = outcome
    for var in network:
        element = ET.SubElement(root, "DEFINITION")
        ET.SubElement(element, "FOR").text = var.name
        for parent in var.parents:
            ET.SubElement(element, "GIVEN").text = parent
        ET.SubElement(element, "TABLE").text = " ".join(repr(p) for p in var.cpt)
    ET.indent(root)
    return ET.tostring(root, encoding="unicode")


__all__ = ["parse_network", "load_network", "network_to_xml"]
