"""Dijkstra single-source shortest path with a full step trace.

Label-setting SPF over the undirected `StrictMultiGraph` using a binary heap
frontier. Entries are keyed by ``(distance, push_sequence)`` so equal
distances are extracted in the order they were discovered, which makes the
trace a pure function of (graph, start, policy, risk_threshold).

Notes:
    In security-aware mode an optional ``risk_threshold`` acts as admission
    control: edges whose risk exceeds it are skipped outright (recorded as a
    ``SKIP`` step) rather than penalized. Classic mode never reads risk, so the
    threshold is ignored there.
"""

from __future__ import annotations

import math
from heapq import heappop, heappush
from typing import Dict, List, Optional, Set, Tuple

from secroute.algorithms.cost import (
    CostFunc,
    format_cost_breakdown,
    make_cost_func,
    risk_weight,
)
from secroute.config import ROUTING_CONFIG
from secroute.graph.strict_multigraph import NodeID, StrictMultiGraph
from secroute.logging import get_logger
from secroute.model.policy import RoutingPolicy
from secroute.model.trace import Step, TraceRecorder, format_distance
from secroute.types.base import INF, StepKind

logger = get_logger(__name__)


def run_dijkstra(
    graph: StrictMultiGraph,
    start: NodeID,
    policy: RoutingPolicy,
    risk_threshold: Optional[float] = None,
    default_risk: Optional[float] = None,
    cost_func: Optional[CostFunc] = None,
) -> List[Step]:
    """Compute shortest paths from ``start`` and return the step trace.

    Args:
        graph: Undirected multigraph; every edge is traversable both ways.
        start: Source vertex.
        policy: Classic or security-aware cost policy.
        risk_threshold: SAR admission-control cutoff in [0, 1]. Defaults to
            ``ROUTING_CONFIG.risk_threshold`` (None disables the cutoff).
        default_risk: Risk used for edges without a risk value (SAR only).
        cost_func: Optional override of the blended cost function. Must return
            non-negative costs for the result to be a correct shortest path.

    Returns:
        Ordered steps: ``INIT``; per settled vertex a ``SETTLE`` followed by one
        ``SKIP``/``RELAX``/``NO_UPDATE`` per edge to an unsettled neighbor;
        ``COMPLETE``. When ``start`` is not in the graph only ``INIT`` is
        returned.
    """
    if risk_threshold is None:
        risk_threshold = ROUTING_CONFIG.risk_threshold
    risk_threshold = ROUTING_CONFIG.normalize_threshold(risk_threshold)
    breakdown = cost_func is None
    if cost_func is None:
        cost_func = make_cost_func(default_risk)
    apply_threshold = policy.is_security_aware and risk_threshold is not None

    distances: Dict[NodeID, float] = {node: INF for node in graph.nodes}
    predecessors: Dict[NodeID, Optional[NodeID]] = {node: None for node in graph.nodes}
    predecessor_edges: Dict[NodeID, Optional[str]] = {node: None for node in graph.nodes}
    distances[start] = 0.0
    predecessors.setdefault(start, None)
    predecessor_edges.setdefault(start, None)

    recorder = TraceRecorder(distances, predecessors, predecessor_edges)
    settled: Set[NodeID] = set()
    label = policy.describe()

    recorder.record(
        StepKind.INIT,
        f"{label} Dijkstra initialized. Start node: {start}, other distances set to inf.",
    )

    if start not in graph:
        logger.warning(
            "Start node '%s' is not in the graph; returning initialization-only trace",
            start,
        )
        return recorder.steps

    logger.debug(
        "Dijkstra from '%s' over %d nodes / %d edges, policy=%s, risk_threshold=%s",
        start,
        graph.number_of_nodes(),
        graph.number_of_edges(),
        label,
        risk_threshold,
    )

    sequence = 0
    min_pq: List[Tuple[float, int, NodeID]] = [(0.0, sequence, start)]

    while min_pq:
        current_dist, _, node_id = heappop(min_pq)
        if node_id in settled or current_dist > distances[node_id]:
            continue
        if math.isinf(current_dist):
            break

        settled.add(node_id)
        recorder.record(
            StepKind.SETTLE,
            f"Visiting node {node_id}. Shortest distance: {current_dist:.2f}. "
            "Marked as settled.",
            settled=frozenset(settled),
            current_node=node_id,
        )

        for neighbor_id, edge_id, attr in graph.incident_edges(node_id):
            # Also excludes self-loops, since node_id itself is settled
            if neighbor_id in settled:
                continue

            if apply_threshold:
                risk = risk_weight(attr, default_risk)
                if risk > risk_threshold:  # type: ignore[operator]
                    recorder.record(
                        StepKind.SKIP,
                        f"SAR: Skipping edge {edge_id} to {neighbor_id} - security "
                        f"risk {risk:.2f} exceeds threshold {risk_threshold:g}.",
                        settled=frozenset(settled),
                        current_node=node_id,
                        edge_id=edge_id,
                    )
                    continue

            cost = cost_func(attr, policy)
            candidate = current_dist + cost
            details = (
                format_cost_breakdown(attr, policy, cost, default_risk)
                if breakdown
                else f"cost {cost:.2f}"
            )
            previous = distances[neighbor_id]

            if candidate < previous:
                distances[neighbor_id] = candidate
                predecessors[neighbor_id] = node_id
                predecessor_edges[neighbor_id] = edge_id
                sequence += 1
                heappush(min_pq, (candidate, sequence, neighbor_id))
                recorder.record(
                    StepKind.RELAX,
                    f"Checked {neighbor_id} via edge {edge_id} ({details}). Updated "
                    f"distance {format_distance(previous)} -> {candidate:.2f}, "
                    f"predecessor {node_id}.",
                    settled=frozenset(settled),
                    current_node=node_id,
                    edge_id=edge_id,
                )
            else:
                recorder.record(
                    StepKind.NO_UPDATE,
                    f"Checked {neighbor_id} via edge {edge_id} ({details}). No update "
                    f"needed (new: {candidate:.2f} >= current: "
                    f"{format_distance(previous)}).",
                    settled=frozenset(settled),
                    current_node=node_id,
                    edge_id=edge_id,
                )

    unreachable = [n for n, d in distances.items() if math.isinf(d)]
    recorder.record(
        StepKind.COMPLETE,
        f"{label} Dijkstra finished. Settled {len(settled)} node(s); "
        f"unreachable: [{', '.join(str(n) for n in unreachable)}].",
        settled=frozenset(settled),
    )
    logger.debug(
        "Dijkstra from '%s' produced %d steps (%d unreachable)",
        start,
        len(recorder.steps),
        len(unreachable),
    )
    return recorder.steps
