"""secroute: security-aware shortest-path routing.

Dijkstra and Bellman-Ford engines over an undirected multigraph whose edges
carry a distance and a security risk. Each run returns a replayable trace of
immutable steps; paths, per-destination metrics and classic-vs-SAR
comparisons are derived from those traces.

Primary API:
    run_dijkstra() / run_bellman_ford() - Compute a step trace
    build_path() - Rebuild a route from a trace
    compute_metrics() - Distance, risk and hops for one destination
    compare_all() - Classic vs. security-aware routing across all destinations
    TracePlayer - Forward/backward/seek navigation over a trace

Example:
    from secroute import RoutingPolicy, StrictMultiGraph, run_dijkstra, build_path

    g = StrictMultiGraph()
    for n in "ABC":
        g.add_node(n)
    g.add_edge("A", "B", distance=2, risk=0.9)
    g.add_edge("B", "C", distance=2, risk=0.9)
    g.add_edge("A", "C", distance=5, risk=0.1)

    steps = run_dijkstra(g, "A", RoutingPolicy.security_aware(beta=0.8))
    build_path(steps, "A", "C")  # ['A', 'C']
"""

from __future__ import annotations

from secroute import cli, logging
from secroute._version import __version__
from secroute.algorithms import (
    bellman_ford_complexity,
    build_path,
    compare_all,
    compute_metrics,
    run_bellman_ford,
    run_dijkstra,
)
from secroute.graph.io import graph_from_dict, graph_to_dict, load_topology_yaml
from secroute.graph.strict_multigraph import StrictMultiGraph
from secroute.model import (
    ComparisonResult,
    ComparisonSummary,
    DestinationComparison,
    RoutingMetrics,
    RoutingPolicy,
    Step,
)
from secroute.replay import TracePlayer
from secroute.types.base import Algorithm, RouteOutcome, RoutingMode, StepKind

__all__ = [
    # Version
    "__version__",
    # Graph
    "StrictMultiGraph",
    "graph_from_dict",
    "graph_to_dict",
    "load_topology_yaml",
    # Engines
    "run_dijkstra",
    "run_bellman_ford",
    "bellman_ford_complexity",
    # Analytics
    "build_path",
    "compute_metrics",
    "compare_all",
    # Model
    "RoutingPolicy",
    "Step",
    "RoutingMetrics",
    "DestinationComparison",
    "ComparisonSummary",
    "ComparisonResult",
    # Types
    "Algorithm",
    "RouteOutcome",
    "RoutingMode",
    "StepKind",
    # Replay
    "TracePlayer",
    # Utilities
    "cli",
    "logging",
]
