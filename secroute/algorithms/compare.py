"""Classic vs. security-aware routing comparison over one topology.

Both policies are run from the same start with the same engine. Every other
vertex is then classified by reachability and, when both policies reach it,
by whether the literal vertex sequence of the route changed.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from secroute.algorithms.bellman_ford import run_bellman_ford
from secroute.algorithms.dijkstra import run_dijkstra
from secroute.algorithms.metrics import compute_metrics
from secroute.graph.strict_multigraph import NodeID, StrictMultiGraph
from secroute.logging import get_logger
from secroute.model.metrics import (
    ComparisonResult,
    ComparisonSummary,
    DestinationComparison,
    RoutingMetrics,
)
from secroute.model.policy import RoutingPolicy
from secroute.model.trace import Step, has_negative_cycle
from secroute.types.base import Algorithm, RouteOutcome

logger = get_logger(__name__)


def _percent_of(delta: float, baseline: float) -> float:
    """``delta / baseline * 100``; 0.0 when the baseline is zero."""
    if baseline == 0:
        return 0.0
    return delta / baseline * 100.0


def _classify(
    classic: Optional[RoutingMetrics], sar: Optional[RoutingMetrics]
) -> RouteOutcome:
    if classic is None and sar is None:
        return RouteOutcome.BOTH_UNREACHABLE
    if sar is None:
        return RouteOutcome.CLASSIC_ONLY
    if classic is None:
        return RouteOutcome.SAR_ONLY
    if classic.path_nodes == sar.path_nodes:
        return RouteOutcome.SAME_PATH
    return RouteOutcome.ROUTE_CHANGED


def _run(
    algorithm: Algorithm,
    graph: StrictMultiGraph,
    start: NodeID,
    policy: RoutingPolicy,
    risk_threshold: Optional[float],
    default_risk: Optional[float],
) -> List[Step]:
    if algorithm == Algorithm.BELLMAN_FORD:
        return run_bellman_ford(graph, start, policy, default_risk=default_risk)
    return run_dijkstra(
        graph,
        start,
        policy,
        risk_threshold=risk_threshold,
        default_risk=default_risk,
    )


def compare_destination(
    destination: NodeID,
    classic: Optional[RoutingMetrics],
    sar: Optional[RoutingMetrics],
) -> DestinationComparison:
    """Build the comparison record for one destination."""
    outcome = _classify(classic, sar)
    if classic is None or sar is None:
        return DestinationComparison(destination, classic, sar, outcome)
    # Positive risk reduction means SAR is safer; positive increase means longer
    return DestinationComparison(
        destination,
        classic,
        sar,
        outcome,
        risk_reduction_pct=_percent_of(
            classic.total_security_risk - sar.total_security_risk,
            classic.total_security_risk,
        ),
        distance_increase_pct=_percent_of(
            sar.total_distance - classic.total_distance, classic.total_distance
        ),
    )


def summarize(
    records: Dict[NodeID, DestinationComparison],
    classic_negative_cycle: bool = False,
    sar_negative_cycle: bool = False,
) -> ComparisonSummary:
    """Aggregate per-destination records into a `ComparisonSummary`."""
    both: List[Tuple[float, float]] = [
        (r.risk_reduction_pct or 0.0, r.distance_increase_pct or 0.0)
        for r in records.values()
        if r.classic is not None and r.sar is not None
    ]
    classic_reached = [r.classic for r in records.values() if r.classic is not None]
    sar_reached = [r.sar for r in records.values() if r.sar is not None]

    return ComparisonSummary(
        destinations=len(records),
        classic_reachable=len(classic_reached),
        sar_reachable=len(sar_reached),
        route_changes=sum(1 for r in records.values() if r.route_changed),
        avg_risk_reduction_pct=sum(p[0] for p in both) / len(both) if both else 0.0,
        avg_distance_increase_pct=sum(p[1] for p in both) / len(both) if both else 0.0,
        classic_total_distance=sum(m.total_distance for m in classic_reached),
        classic_total_risk=sum(m.total_security_risk for m in classic_reached),
        sar_total_distance=sum(m.total_distance for m in sar_reached),
        sar_total_risk=sum(m.total_security_risk for m in sar_reached),
        classic_negative_cycle=classic_negative_cycle,
        sar_negative_cycle=sar_negative_cycle,
    )


def compare_all(
    graph: StrictMultiGraph,
    start: NodeID,
    classic_policy: Optional[RoutingPolicy] = None,
    sar_policy: Optional[RoutingPolicy] = None,
    algorithm: Algorithm = Algorithm.DIJKSTRA,
    risk_threshold: Optional[float] = None,
    default_risk: Optional[float] = None,
) -> ComparisonResult:
    """Run both policies from ``start`` and compare every other destination.

    Args:
        graph: Topology shared by both runs.
        start: Source vertex.
        classic_policy: Baseline policy; defaults to `RoutingPolicy.classic()`.
        sar_policy: Security-aware policy; defaults to
            `RoutingPolicy.security_aware()` with the configured beta.
        algorithm: Engine used for both runs.
        risk_threshold: Dijkstra admission-control cutoff (ignored for
            Bellman-Ford and for classic policies).
        default_risk: Risk used for edges with no risk value.

    Returns:
        `ComparisonResult` with per-destination records in graph node order.
    """
    if classic_policy is None:
        classic_policy = RoutingPolicy.classic()
    if sar_policy is None:
        sar_policy = RoutingPolicy.security_aware()

    classic_steps = _run(
        algorithm, graph, start, classic_policy, risk_threshold, default_risk
    )
    sar_steps = _run(algorithm, graph, start, sar_policy, risk_threshold, default_risk)

    records: Dict[NodeID, DestinationComparison] = {}
    for node in graph.nodes:
        if node == start:
            continue
        records[node] = compare_destination(
            node,
            compute_metrics(graph, classic_steps, start, node, default_risk),
            compute_metrics(graph, sar_steps, start, node, default_risk),
        )

    summary = summarize(
        records,
        classic_negative_cycle=has_negative_cycle(classic_steps),
        sar_negative_cycle=has_negative_cycle(sar_steps),
    )
    logger.info(
        "Compared %d destinations from '%s' (%s): classic %d reachable, "
        "SAR %d reachable, %d route change(s)",
        summary.destinations,
        start,
        algorithm.name.lower(),
        summary.classic_reachable,
        summary.sar_reachable,
        summary.route_changes,
    )
    return ComparisonResult(records, summary, classic_steps, sar_steps)
