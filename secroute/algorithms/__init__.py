"""Shortest-path engines and the analytics built on their traces."""

from secroute.algorithms.bellman_ford import bellman_ford_complexity, run_bellman_ford
from secroute.algorithms.compare import compare_all
from secroute.algorithms.cost import distance_weight, edge_cost, risk_weight
from secroute.algorithms.dijkstra import run_dijkstra
from secroute.algorithms.metrics import compute_metrics
from secroute.algorithms.paths import build_path

__all__ = [
    "run_dijkstra",
    "run_bellman_ford",
    "bellman_ford_complexity",
    "build_path",
    "compute_metrics",
    "compare_all",
    "edge_cost",
    "distance_weight",
    "risk_weight",
]
