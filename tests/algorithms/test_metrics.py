import pytest

from secroute.algorithms.bellman_ford import run_bellman_ford
from secroute.algorithms.dijkstra import run_dijkstra
from secroute.algorithms.metrics import compute_metrics
from secroute.model.metrics import RoutingMetrics
from secroute.model.policy import RoutingPolicy


def test_metrics_sum_distance_and_risk(triangle_risky):
    steps = run_dijkstra(triangle_risky, "A", RoutingPolicy.classic())
    metrics = compute_metrics(triangle_risky, steps, "A", "C")

    assert metrics.path_nodes == ("A", "B", "C")
    assert metrics.hop_count == 2
    assert metrics.total_distance == pytest.approx(2.0)
    assert metrics.total_security_risk == pytest.approx(1.8)


def test_metrics_for_start_and_unreachable(triangle_risky):
    steps = run_dijkstra(triangle_risky, "A", RoutingPolicy.classic())

    assert compute_metrics(triangle_risky, steps, "A", "A") == RoutingMetrics(
        0.0, 0.0, 0, ("A",)
    )
    assert compute_metrics(triangle_risky, steps, "A", "D") is None
    assert compute_metrics(triangle_risky, [], "A", "B") is None


def test_metrics_use_the_traversed_parallel_edge(parallel_and_loop):
    steps = run_dijkstra(parallel_and_loop, "A", RoutingPolicy.classic())
    metrics = compute_metrics(parallel_and_loop, steps, "A", "C")

    # A-B#2 (distance 2, risk 0.6) then B-C (distance 1, risk 0.2)
    assert metrics.total_distance == pytest.approx(3.0)
    assert metrics.total_security_risk == pytest.approx(0.8)


def test_metrics_default_risk_for_missing_values(negative_triangle):
    negative_triangle.update_edge_attr("B-C", distance=4)
    steps = run_bellman_ford(negative_triangle, "A", RoutingPolicy.classic())

    metrics = compute_metrics(negative_triangle, steps, "A", "C", default_risk=0.25)
    assert metrics.path_nodes == ("A", "C")
    assert metrics.total_security_risk == pytest.approx(0.25)
    assert compute_metrics(negative_triangle, steps, "A", "C").total_security_risk == 0.0


def test_metrics_to_dict(triangle_risky):
    steps = run_dijkstra(triangle_risky, "A", RoutingPolicy.classic())
    data = compute_metrics(triangle_risky, steps, "A", "B").to_dict()

    assert data == {
        "total_distance": 1.0,
        "total_security_risk": 0.9,
        "hop_count": 1,
        "path_nodes": ["A", "B"],
    }
