"""Bellman-Ford single-source shortest path with a full step trace.

Every undirected edge ``(u, v)`` is relaxed as two arcs, ``u -> v`` then
``v -> u``, in edge insertion order. Up to ``|V| - 1`` passes are made,
stopping early when a pass relaxes nothing. One extra scan then checks for a
negative cycle. There is no risk admission control: the engine evaluates the
full blended cost, serving as the comparison baseline for Dijkstra.

Relaxation uses strict less-than, so an equal-cost alternative never replaces
the first-discovered predecessor. The source distance is never relaxed below
0, even when a cost override introduces negative cycles.
"""

from __future__ import annotations

import math
from typing import Dict, Iterator, List, Optional, Tuple

from secroute.algorithms.cost import CostFunc, make_cost_func
from secroute.graph.strict_multigraph import EdgeID, NodeID, StrictMultiGraph
from secroute.logging import get_logger
from secroute.model.policy import RoutingPolicy
from secroute.model.trace import Step, TraceRecorder, format_distance
from secroute.types.base import INF, StepKind

logger = get_logger(__name__)


def _arcs(
    graph: StrictMultiGraph, policy: RoutingPolicy, cost_func: CostFunc
) -> List[Tuple[NodeID, NodeID, EdgeID, float]]:
    """Directed arcs ``(from, to, edge_id, cost)`` in scan order; self-loops dropped."""
    arcs: List[Tuple[NodeID, NodeID, EdgeID, float]] = []
    for edge_id, (u, v, _, attr) in graph.get_edges().items():
        if u == v:
            continue
        cost = cost_func(attr, policy)
        arcs.append((u, v, edge_id, cost))
        arcs.append((v, u, edge_id, cost))
    return arcs


def _relaxable(
    arcs: List[Tuple[NodeID, NodeID, EdgeID, float]], distances: Dict[NodeID, float]
) -> Iterator[Tuple[NodeID, NodeID, EdgeID, float]]:
    for src, dst, edge_id, cost in arcs:
        if not math.isinf(distances[src]) and distances[src] + cost < distances[dst]:
            yield src, dst, edge_id, cost


def run_bellman_ford(
    graph: StrictMultiGraph,
    start: NodeID,
    policy: RoutingPolicy,
    default_risk: Optional[float] = None,
    cost_func: Optional[CostFunc] = None,
) -> List[Step]:
    """Compute shortest paths from ``start`` and return the step trace.

    Args:
        graph: Undirected multigraph.
        start: Source vertex.
        policy: Classic or security-aware cost policy.
        default_risk: Risk used for edges without a risk value (SAR only).
        cost_func: Optional override of the blended cost function. Unlike
            Dijkstra, negative costs are allowed and reported as negative
            cycles (in an undirected graph any negative edge forms one).

    Returns:
        Ordered steps: ``INIT``; per pass one ``RELAX`` per successful
        relaxation then ``PASS_COMPLETE``, or ``CONVERGE`` when the pass made no
        change; ``NEGATIVE_CYCLE`` or ``NO_NEGATIVE_CYCLE``; ``COMPLETE``. When
        ``start`` is not in the graph only ``INIT`` is returned.
    """
    if cost_func is None:
        cost_func = make_cost_func(default_risk)

    distances: Dict[NodeID, float] = {node: INF for node in graph.nodes}
    predecessors: Dict[NodeID, Optional[NodeID]] = {node: None for node in graph.nodes}
    predecessor_edges: Dict[NodeID, Optional[str]] = {node: None for node in graph.nodes}
    distances[start] = 0.0
    predecessors.setdefault(start, None)
    predecessor_edges.setdefault(start, None)

    recorder = TraceRecorder(distances, predecessors, predecessor_edges)
    recorder.record(
        StepKind.INIT,
        f"Bellman-Ford initialized. Source: {start}. All distances set to inf "
        "except source (0).",
    )

    if start not in graph:
        logger.warning(
            "Start node '%s' is not in the graph; returning initialization-only trace",
            start,
        )
        return recorder.steps

    node_count = graph.number_of_nodes()
    arcs = _arcs(graph, policy, cost_func)
    logger.debug(
        "Bellman-Ford from '%s' over %d nodes / %d arcs, policy=%s",
        start,
        node_count,
        len(arcs),
        policy.describe(),
    )

    passes = 0
    for iteration in range(1, node_count):
        passes = iteration
        updated = False
        for src, dst, edge_id, cost in arcs:
            # The source stays pinned at 0; the detection scan still checks arcs into it
            if dst == start or math.isinf(distances[src]):
                continue
            candidate = distances[src] + cost
            if candidate < distances[dst]:
                previous = distances[dst]
                distances[dst] = candidate
                predecessors[dst] = src
                predecessor_edges[dst] = edge_id
                updated = True
                recorder.record(
                    StepKind.RELAX,
                    f"Iteration {iteration}: Relaxed edge {src} -> {dst}. Distance to "
                    f"{dst}: {format_distance(previous)} -> {candidate:.2f} "
                    f"(cost: {cost:.2f})",
                    current_node=dst,
                    edge_id=edge_id,
                    iteration=iteration,
                )

        if not updated:
            recorder.record(
                StepKind.CONVERGE,
                f"Iteration {iteration}: No edges relaxed. Algorithm converged early.",
                iteration=iteration,
            )
            break
        recorder.record(
            StepKind.PASS_COMPLETE,
            f"Iteration {iteration}: Completed edge relaxation phase.",
            iteration=iteration,
        )

    offender = next(_relaxable(arcs, distances), None)
    if offender is not None:
        src, dst, edge_id, _ = offender
        logger.warning(
            "Negative cycle reachable from '%s': arc %s -> %s (edge %s) still relaxes",
            start,
            src,
            dst,
            edge_id,
        )
        recorder.record(
            StepKind.NEGATIVE_CYCLE,
            f"Negative cycle detected! Edge {src} -> {dst} can still be relaxed in "
            "the cycle detection phase. Distances are unreliable.",
            current_node=dst,
            edge_id=edge_id,
            iteration=passes,
        )
    else:
        recorder.record(
            StepKind.NO_NEGATIVE_CYCLE,
            "Negative cycle detection phase: no negative cycles found.",
            iteration=passes,
        )

    reachable = recorder.steps[-1].reachable_from(start)
    recorder.record(
        StepKind.COMPLETE,
        f"Algorithm completed. Reachable nodes from {start}: "
        f"[{', '.join(str(n) for n in reachable)}]. Mode: {policy.describe()}. "
        f"Passes: {passes} of {max(node_count - 1, 0)}.",
        iteration=passes,
    )
    return recorder.steps


def bellman_ford_complexity(graph: StrictMultiGraph) -> str:
    """Describe the O(V*E) time and O(V) space bound for ``graph``."""
    nodes = graph.number_of_nodes()
    edges = graph.number_of_edges()
    return (
        f"Time: O(VxE) = O({nodes}x{edges}) = O({nodes * edges}), "
        f"Space: O(V) = O({nodes})"
    )
