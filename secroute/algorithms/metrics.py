"""Per-destination routing metrics derived from a completed trace."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from secroute.algorithms.cost import distance_weight, risk_weight
from secroute.algorithms.paths import build_path_with_edges
from secroute.graph.strict_multigraph import EdgeID, NodeID, StrictMultiGraph
from secroute.logging import get_logger
from secroute.model.metrics import RoutingMetrics
from secroute.model.trace import Step, has_negative_cycle

logger = get_logger(__name__)


def _hop_attr(
    graph: StrictMultiGraph, u: NodeID, v: NodeID, edge_id: Optional[EdgeID]
) -> Optional[Mapping[str, Any]]:
    """Attributes of the edge used for hop ``u -> v``.

    Prefers the edge recorded by the engine; otherwise the first edge joining
    the pair in either orientation.
    """
    if edge_id is not None and graph.has_edge_by_id(edge_id):
        return graph.get_edge_attr(edge_id)
    candidates = graph.edges_between(u, v)
    if not candidates:
        return None
    return graph.get_edge_attr(candidates[0])


def compute_metrics(
    graph: StrictMultiGraph,
    steps: Sequence[Step],
    start: NodeID,
    target: NodeID,
    default_risk: Optional[float] = None,
) -> Optional[RoutingMetrics]:
    """Aggregate distance, risk and hop count of the path to ``target``.

    Args:
        graph: Graph the trace was computed on.
        steps: Trace from `run_dijkstra` or `run_bellman_ford`.
        start: Source vertex of the run.
        target: Destination vertex.
        default_risk: Risk assumed for edges with no risk value.

    Returns:
        `RoutingMetrics`, or ``None`` when ``target`` is unreachable, the trace
        is empty, or the trace reports a negative cycle (its distances are not
        trustworthy).
    """
    if not steps:
        return None
    if has_negative_cycle(steps):
        logger.warning(
            "Trace from '%s' reports a negative cycle; no metrics for '%s'",
            start,
            target,
        )
        return None

    path_nodes, path_edges = build_path_with_edges(steps, start, target)
    if not path_nodes:
        return None

    total_distance = 0.0
    total_risk = 0.0
    for (u, v), edge_id in zip(zip(path_nodes, path_nodes[1:]), path_edges):
        attr = _hop_attr(graph, u, v, edge_id)
        if attr is None:
            logger.debug("No edge between '%s' and '%s' in graph; hop not summed", u, v)
            continue
        total_distance += distance_weight(attr)
        total_risk += risk_weight(attr, default_risk)

    return RoutingMetrics(
        total_distance=total_distance,
        total_security_risk=total_risk,
        hop_count=len(path_nodes) - 1,
        path_nodes=tuple(path_nodes),
    )
