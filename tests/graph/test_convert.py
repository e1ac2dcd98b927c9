import networkx as nx
import pytest

from secroute.graph.convert import to_cost_graph
from secroute.model.policy import RoutingPolicy


def test_to_cost_graph_keeps_cheapest_parallel_edge(parallel_and_loop):
    g = to_cost_graph(parallel_and_loop, RoutingPolicy.classic())

    assert isinstance(g, nx.Graph) and not g.is_multigraph()
    assert g.edges["A", "B"] == {"cost": 2.0, "edge_id": "A-B#2"}
    assert not g.has_edge("A", "A")
    assert g.number_of_edges() == 2


def test_to_cost_graph_sar_choice_depends_on_policy(parallel_and_loop):
    # With beta=1 only risk counts: A-B (risk 0.1) beats A-B#2 (risk 0.6)
    g = to_cost_graph(parallel_and_loop, RoutingPolicy.security_aware(1.0))
    assert g.edges["A", "B"]["edge_id"] == "A-B"
    assert g.edges["A", "B"]["cost"] == pytest.approx(0.1)


def test_to_cost_graph_keeps_nodes_and_attributes(secure_vs_risky):
    g = to_cost_graph(secure_vs_risky, RoutingPolicy.classic())

    assert list(g.nodes) == list(secure_vs_risky.nodes)
    assert g.nodes["A"]["type"] == "router"
    assert nx.shortest_path(g, "A", "F", weight="cost") == ["A", "E", "F"]
