"""Topology (de)serialization for `StrictMultiGraph`.

The accepted payload mirrors the topology-submission shape used by the web
editor::

    nodes: [{id, type, position}, ...]      # or a list of plain ids
    links: [{source, target, id?, weight|distance?, securityRisk|risk?}, ...]

``edges`` is accepted as an alias of ``links``. Weights and risks are stored
as given; coercion of malformed values happens in `secroute.algorithms.cost`
so the editor may hold transiently invalid data.
"""

from __future__ import annotations

from typing import Any, Dict, List

import yaml

from secroute.graph.strict_multigraph import StrictMultiGraph
from secroute.logging import get_logger

logger = get_logger(__name__)

# Payload key -> canonical edge attribute
_EDGE_ATTR_ALIASES = {
    "distance": "distance",
    "weight": "distance",
    "risk": "risk",
    "securityRisk": "risk",
    "security_risk": "risk",
}
_LINK_RESERVED = {"source", "target", "id", "key"}


def graph_from_dict(data: Dict[str, Any]) -> StrictMultiGraph:
    """Build a `StrictMultiGraph` from a node-link dictionary.

    Args:
        data: Mapping with ``nodes`` and ``links`` (or ``edges``) lists.

    Returns:
        The constructed graph.

    Raises:
        ValueError: If the payload is structurally malformed, a node is
            duplicated, or a link references an unknown node.
    """
    if not isinstance(data, dict):
        raise ValueError("Topology must be a mapping with 'nodes' and 'links'.")

    nodes = data.get("nodes") or []
    links = data.get("links", data.get("edges")) or []
    if not isinstance(nodes, list):
        raise ValueError("'nodes' must be a list")
    if not isinstance(links, list):
        raise ValueError("'links' must be a list")

    graph = StrictMultiGraph()
    for entry in nodes:
        if isinstance(entry, dict):
            if "id" not in entry:
                raise ValueError("Each node definition must include 'id'")
            attrs = {k: v for k, v in entry.items() if k != "id"}
            graph.add_node(str(entry["id"]), **attrs)
        else:
            graph.add_node(str(entry))

    for entry in links:
        if not isinstance(entry, dict):
            raise ValueError(
                "Each link definition must be a mapping with 'source' and 'target'"
            )
        if "source" not in entry or "target" not in entry:
            raise ValueError("Each link definition must include 'source' and 'target'")

        attrs: Dict[str, Any] = {}
        data_section = entry.get("data")
        extra: Dict[str, Any] = dict(data_section) if isinstance(data_section, dict) else {}
        extra.update({k: v for k, v in entry.items() if k not in _LINK_RESERVED | {"data"}})
        for name, value in extra.items():
            attrs[_EDGE_ATTR_ALIASES.get(name, name)] = value

        key = entry.get("id", entry.get("key"))
        graph.add_edge(
            str(entry["source"]),
            str(entry["target"]),
            key=None if key is None else str(key),
            **attrs,
        )

    logger.debug(
        "Loaded topology with %d nodes and %d links",
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )
    return graph


def graph_to_dict(graph: StrictMultiGraph) -> Dict[str, Any]:
    """Serialize a graph to the node-link dictionary read by `graph_from_dict`."""
    nodes: List[Dict[str, Any]] = [
        {"id": node_id, **attrs} for node_id, attrs in graph.get_nodes().items()
    ]
    links: List[Dict[str, Any]] = [
        {"id": key, "source": u, "target": v, **attrs}
        for key, (u, v, _, attrs) in graph.get_edges().items()
    ]
    return {"nodes": nodes, "links": links}


def load_topology_yaml(yaml_str: str) -> StrictMultiGraph:
    """Parse a YAML topology document into a `StrictMultiGraph`.

    The document may hold the node-link mapping at top level or under a
    ``topology`` key.

    Raises:
        ValueError: If the YAML does not describe a node-link mapping.
    """
    data = yaml.safe_load(yaml_str)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The provided YAML must map to a dictionary at top-level.")
    if isinstance(data.get("topology"), dict):
        data = data["topology"]
    return graph_from_dict(data)
