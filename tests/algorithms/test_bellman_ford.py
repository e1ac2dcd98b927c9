import math

import pytest

from secroute.algorithms.bellman_ford import bellman_ford_complexity, run_bellman_ford
from secroute.algorithms.dijkstra import run_dijkstra
from secroute.algorithms.metrics import compute_metrics
from secroute.algorithms.paths import build_path
from secroute.graph.strict_multigraph import StrictMultiGraph
from secroute.model.policy import RoutingPolicy
from secroute.model.trace import has_negative_cycle
from secroute.types.base import StepKind


def raw_distance(attr, policy):
    return float(attr["distance"])


def test_bellman_ford_trace_on_triangle(triangle_risky):
    steps = run_bellman_ford(triangle_risky, "A", RoutingPolicy.classic())

    assert [s.kind for s in steps] == [
        StepKind.INIT,
        StepKind.RELAX,
        StepKind.RELAX,
        StepKind.PASS_COMPLETE,
        StepKind.CONVERGE,
        StepKind.NO_NEGATIVE_CYCLE,
        StepKind.COMPLETE,
    ]
    assert [(s.current_node, s.edge_id, s.iteration) for s in steps[1:3]] == [
        ("B", "A-B", 1),
        ("C", "B-C", 1),
    ]
    assert steps[4].iteration == 2

    final = steps[-1]
    assert final.distances == {"A": 0.0, "B": 1.0, "C": 2.0, "D": math.inf}
    assert "Reachable nodes from A: [B, C]" in final.message
    assert "Passes: 2 of 3" in final.message
    assert not final.negative_cycle


def test_bellman_ford_equal_cost_keeps_first_predecessor(square_equal):
    steps = run_bellman_ford(square_equal, "A", RoutingPolicy.classic())
    assert steps[-1].predecessors["D"] == "B"
    assert steps[-1].distances["D"] == 2.0


@pytest.mark.parametrize("beta", [None, 0.0, 0.5, 0.7, 0.9, 1.0])
def test_bellman_ford_agrees_with_dijkstra(secure_vs_risky, five_node, beta):
    policy = RoutingPolicy.classic() if beta is None else RoutingPolicy.security_aware(beta)
    for graph in (secure_vs_risky, five_node):
        bf = run_bellman_ford(graph, "A", policy)[-1].distances
        dj = run_dijkstra(graph, "A", policy)[-1].distances
        assert bf.keys() == dj.keys()
        for node in bf:
            assert bf[node] == pytest.approx(dj[node])


def test_bellman_ford_start_distance_is_zero_in_every_step(secure_vs_risky):
    steps = run_bellman_ford(secure_vs_risky, "A", RoutingPolicy.security_aware(0.5))
    assert all(step.distances["A"] == 0 for step in steps)


def test_bellman_ford_detects_negative_cycle(negative_triangle):
    steps = run_bellman_ford(
        negative_triangle, "A", RoutingPolicy.classic(), cost_func=raw_distance
    )

    kinds = [s.kind for s in steps]
    assert StepKind.NEGATIVE_CYCLE in kinds
    assert StepKind.NO_NEGATIVE_CYCLE not in kinds
    assert kinds[-1] == StepKind.COMPLETE
    assert steps[-1].negative_cycle
    assert has_negative_cycle(steps)
    # Termination within |V| - 1 passes
    assert max(s.iteration for s in steps) <= negative_triangle.number_of_nodes() - 1
    assert all(s.distances["A"] == 0 for s in steps)

    detected = next(s for s in steps if s.kind == StepKind.NEGATIVE_CYCLE)
    assert detected.edge_id == "A-B"
    assert not any(s.negative_cycle for s in steps[: detected.index])


def test_negative_cycle_paths_terminate_and_report_no_metrics(negative_triangle):
    steps = run_bellman_ford(
        negative_triangle, "A", RoutingPolicy.classic(), cost_func=raw_distance
    )

    for target in ("B", "C"):
        assert build_path(steps, "A", target) == []
        assert compute_metrics(negative_triangle, steps, "A", target) is None


def test_bellman_ford_ignores_self_loops(parallel_and_loop):
    steps = run_bellman_ford(parallel_and_loop, "A", RoutingPolicy.classic())

    assert not any(s.edge_id == "A-A" for s in steps)
    assert steps[-1].distances == {"A": 0.0, "B": 2.0, "C": 3.0}
    assert steps[-1].predecessor_edges["B"] == "A-B#2"


def test_bellman_ford_missing_start_returns_init_only(triangle_risky):
    steps = run_bellman_ford(triangle_risky, "Z", RoutingPolicy.classic())
    assert [s.kind for s in steps] == [StepKind.INIT]
    assert steps[0].distances["Z"] == 0


def test_bellman_ford_single_node():
    g = StrictMultiGraph()
    g.add_node("A")
    steps = run_bellman_ford(g, "A", RoutingPolicy.classic())

    assert [s.kind for s in steps] == [
        StepKind.INIT,
        StepKind.NO_NEGATIVE_CYCLE,
        StepKind.COMPLETE,
    ]
    assert "Passes: 0 of 0" in steps[-1].message


def test_bellman_ford_complexity(secure_vs_risky):
    assert (
        bellman_ford_complexity(secure_vs_risky)
        == "Time: O(VxE) = O(7x14) = O(98), Space: O(V) = O(7)"
    )


def test_bellman_ford_accepts_integer_node_ids():
    g = StrictMultiGraph()
    g.add_nodes_from([1, 2, 3])
    g.add_edge(1, 2, distance=1)
    steps = run_bellman_ford(g, 1, RoutingPolicy.classic())

    final = steps[-1]
    assert final.kind == StepKind.COMPLETE
    assert "Reachable nodes from 1: [2]" in final.message
    assert final.reachable_from(1) == [2]
