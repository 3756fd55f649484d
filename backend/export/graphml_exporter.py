"""GraphML exporter for positioned swimlane diagrams.

Every node carries its kind, label, top-left position, size, swimlane and
drawing style as GraphML data; edges carry their branch label and stroke.
Swimlane bands are written as graph-level data so the document can be
re-opened by any GraphML-aware editor.
"""

import re
from typing import Any

from lxml import etree

from services.presentation import edge_style, node_style

GRAPHML_NAMESPACE = "http://graphml.graphdrawing.org/xmlns"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
GRAPHML_SCHEMA_LOCATION = (
    "http://graphml.graphdrawing.org/xmlns "
    "http://graphml.graphdrawing.org/xmlns/1.0/graphml.xsd"
)

NSMAP = {
    None: GRAPHML_NAMESPACE,
    "xsi": XSI_NAMESPACE,
}

# (key id, domain, attr.type)
_NODE_KEYS = [
    ("kind", "node", "string"),
    ("label", "node", "string"),
    ("x", "node", "double"),
    ("y", "node", "double"),
    ("width", "node", "double"),
    ("height", "node", "double"),
    ("lane", "node", "int"),
    ("sensitive", "node", "boolean"),
    ("shape", "node", "string"),
    ("fill", "node", "string"),
]

_EDGE_KEYS = [
    ("branch", "edge", "string"),
    ("stroke", "edge", "string"),
    ("badge", "edge", "string"),
]

_GRAPH_KEYS = [
    ("swimlanes", "graph", "string"),
]

_XML_INVALID_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def _tag(local_name: str) -> str:
    """Create a qualified element name in the GraphML namespace."""
    return f"{{{GRAPHML_NAMESPACE}}}{local_name}"


def _xml_safe(text: str) -> str:
    """Drop control characters XML 1.0 cannot carry."""
    return _XML_INVALID_CHARS.sub("", text)


def _add_data(parent: etree._Element, key: str, value: Any) -> None:
    data = etree.SubElement(parent, _tag("data"))
    data.set("key", key)
    if isinstance(value, bool):
        data.text = "true" if value else "false"
    else:
        data.text = _xml_safe(str(value))


def _format_swimlanes(swimlanes: list[dict[str, Any]]) -> str:
    """One ``top:height:title:department`` entry per band, separated by ``|``."""
    return "|".join(
        f"{lane['bandTop']}:{lane['bandHeight']}:{lane['title']}:{lane['department']}"
        for lane in swimlanes
    )


def export_graphml(diagram: dict[str, Any], title: str = "workflow") -> str:
    """Convert laid-out diagram data to a GraphML document.

    Args:
        diagram: The output of ``compute_layout``.
        title: Used as the id of the ``<graph>`` element.

    Returns:
        A string containing a UTF-8 GraphML document.
    """
    root = etree.Element(_tag("graphml"), nsmap=NSMAP)
    root.set(f"{{{XSI_NAMESPACE}}}schemaLocation", GRAPHML_SCHEMA_LOCATION)

    for key_id, domain, attr_type in _GRAPH_KEYS + _NODE_KEYS + _EDGE_KEYS:
        key = etree.SubElement(root, _tag("key"))
        key.set("id", key_id)
        key.set("for", domain)
        key.set("attr.name", key_id)
        key.set("attr.type", attr_type)

    graph = etree.SubElement(root, _tag("graph"))
    graph.set("id", _xml_safe(title))
    graph.set("edgedefault", "directed")
    _add_data(graph, "swimlanes", _format_swimlanes(diagram.get("swimlanes", [])))

    for node in diagram.get("nodes", []):
        style = node_style(node["kind"])
        node_elem = etree.SubElement(graph, _tag("node"))
        node_elem.set("id", _xml_safe(node["id"]))
        _add_data(node_elem, "kind", node["kind"])
        _add_data(node_elem, "label", node["label"])
        _add_data(node_elem, "x", node["x"])
        _add_data(node_elem, "y", node["y"])
        _add_data(node_elem, "width", node["width"])
        _add_data(node_elem, "height", node["height"])
        _add_data(node_elem, "lane", node["laneIndex"])
        _add_data(node_elem, "sensitive", node["isSensitive"])
        _add_data(node_elem, "shape", style.shape)
        _add_data(node_elem, "fill", style.fill)

    for edge in diagram.get("edges", []):
        branch = edge.get("branchLabel")
        style = edge_style(branch)
        edge_elem = etree.SubElement(graph, _tag("edge"))
        edge_elem.set("id", _xml_safe(edge["id"]))
        edge_elem.set("source", _xml_safe(edge["source"]))
        edge_elem.set("target", _xml_safe(edge["target"]))
        if branch:
            _add_data(edge_elem, "branch", branch)
            _add_data(edge_elem, "badge", style.badge_text)
        _add_data(edge_elem, "stroke", style.stroke)

    xml_bytes = etree.tostring(
        root,
        xml_declaration=True,
        encoding="UTF-8",
        pretty_print=True,
    )
    return xml_bytes.decode("UTF-8")
