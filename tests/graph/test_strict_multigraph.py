import networkx as nx
import pytest

from secroute.graph.strict_multigraph import StrictMultiGraph


def test_add_node_duplicate():
    g = StrictMultiGraph()
    g.add_node("A")
    with pytest.raises(ValueError, match="already exists"):
        g.add_node("A")


def test_add_edge_requires_existing_nodes():
    g = StrictMultiGraph()
    g.add_node("A")
    with pytest.raises(ValueError, match="Target node 'B' does not exist"):
        g.add_edge("A", "B")
    with pytest.raises(ValueError, match="Source node 'Z' does not exist"):
        g.add_edge("Z", "A")
    assert "B" not in g


def test_edge_keys_generated_and_unique():
    g = StrictMultiGraph()
    g.add_node("A")
    g.add_node("B")

    assert g.add_edge("A", "B", distance=1) == "A-B"
    assert g.add_edge("A", "B", distance=2) == "A-B#2"
    assert g.add_edge("B", "A", distance=3) == "B-A"
    assert g.add_edge("A", "B", key="custom") == "custom"
    with pytest.raises(ValueError, match="already exists"):
        g.add_edge("A", "B", key="custom")

    assert list(g.get_edges()) == ["A-B", "A-B#2", "B-A", "custom"]
    assert isinstance(g, nx.MultiGraph)
    assert not g.is_directed()


def test_edges_between_is_orientation_agnostic():
    g = StrictMultiGraph()
    for node in ("A", "B", "C"):
        g.add_node(node)
    g.add_edge("A", "B")
    g.add_edge("B", "A")

    assert sorted(g.edges_between("A", "B")) == ["A-B", "B-A"]
    assert sorted(g.edges_between("B", "A")) == ["A-B", "B-A"]
    assert g.edges_between("A", "C") == []
    assert g.edges_between("missing", "A") == []


def test_incident_edges_yields_self_loop_once():
    g = StrictMultiGraph()
    g.add_node("A")
    g.add_node("B")
    g.add_edge("A", "B", distance=4)
    g.add_edge("A", "A", distance=1)

    incident = [(nbr, key) for nbr, key, _ in g.incident_edges("A")]
    assert incident == [("B", "A-B"), ("A", "A-A")]
    assert [(nbr, key) for nbr, key, _ in g.incident_edges("B")] == [("A", "A-B")]
    assert list(g.incident_edges("missing")) == []


def test_remove_edge_either_orientation():
    g = StrictMultiGraph()
    for node in ("A", "B"):
        g.add_node(node)
    g.add_edge("A", "B")
    g.add_edge("A", "B")

    g.remove_edge("B", "A", key="A-B")
    assert list(g.get_edges()) == ["A-B#2"]

    with pytest.raises(ValueError, match="not found|No edge"):
        g.remove_edge("A", "B", key="A-B")

    g.remove_edge("B", "A")
    assert g.number_of_edges() == 0
    with pytest.raises(ValueError, match="No edges between"):
        g.remove_edge("A", "B")


def test_remove_edge_key_must_join_the_pair():
    g = StrictMultiGraph()
    for node in ("A", "B", "C"):
        g.add_node(node)
    g.add_edge("A", "B")
    with pytest.raises(ValueError, match="joins A and B"):
        g.remove_edge("A", "C", key="A-B")


def test_remove_node_drops_incident_edges():
    g = StrictMultiGraph()
    for node in ("A", "B", "C"):
        g.add_node(node)
    g.add_edge("A", "B")
    g.add_edge("B", "C")

    g.remove_node("B")
    assert g.get_edges() == {}
    assert not g.has_edge_by_id("A-B")
    with pytest.raises(ValueError, match="does not exist"):
        g.remove_node("B")


def test_edge_attr_access_and_update():
    g = StrictMultiGraph()
    g.add_node("A")
    g.add_node("B")
    key = g.add_edge("A", "B", distance=2, risk=0.3)

    g.update_edge_attr(key, risk=0.8)
    assert g.get_edge_attr(key) == {"distance": 2, "risk": 0.8}
    assert g["B"]["A"][key]["risk"] == 0.8
    with pytest.raises(ValueError):
        g.get_edge_attr("nope")
    with pytest.raises(ValueError):
        g.update_edge_attr("nope", risk=0.1)
    with pytest.raises(ValueError):
        g.remove_edge_by_id("nope")


def test_revision_increases_on_every_mutation():
    g = StrictMultiGraph()
    revisions = [g.revision]
    g.add_node("A")
    revisions.append(g.revision)
    g.add_node("B")
    revisions.append(g.revision)
    key = g.add_edge("A", "B")
    revisions.append(g.revision)
    g.update_edge_attr(key, distance=3)
    revisions.append(g.revision)
    g.remove_edge_by_id(key)
    revisions.append(g.revision)
    g.remove_node("B")
    revisions.append(g.revision)

    assert revisions == sorted(set(revisions))


def test_to_dict():
    g = StrictMultiGraph()
    g.add_node("A", type="router")
    g.add_node("B")
    g.add_edge("A", "B", distance=1, risk=0.2)

    assert g.to_dict() == {
        "nodes": [{"id": "A", "type": "router"}, {"id": "B"}],
        "links": [
            {"id": "A-B", "source": "A", "target": "B", "distance": 1, "risk": 0.2}
        ],
    }


def test_add_nodes_from_goes_through_add_node():
    g = StrictMultiGraph()
    g.add_nodes_from(["A", ("B", {"type": "router"})], site="lab")

    assert g.get_nodes() == {
        "A": {"site": "lab"},
        "B": {"site": "lab", "type": "router"},
    }
    assert g.revision == 2
    with pytest.raises(ValueError, match="already exists"):
        g.add_nodes_from(["C", "A"])


def test_add_edges_from_accepts_networkx_tuple_forms():
    g = StrictMultiGraph()
    g.add_nodes_from("ABC")
    keys = g.add_edges_from(
        [
            ("A", "B"),
            ("A", "B", {"distance": 2}),
            ("B", "C", "bc"),
            ("A", "C", "ac", {"distance": 4}),
        ],
        risk=0.1,
    )

    assert keys == ["A-B", "A-B#2", "bc", "ac"]
    assert list(g.get_edges()) == keys
    assert g.get_edge_attr("A-B#2") == {"risk": 0.1, "distance": 2}
    assert g.get_edge_attr("ac") is g["C"]["A"]["ac"]
    with pytest.raises(ValueError, match="does not exist"):
        g.add_edges_from([("A", "Z")])
    with pytest.raises(ValueError, match="already exists"):
        g.add_edges_from([("A", "B", "bc")])


def test_remove_nodes_from_prunes_edge_index():
    g = StrictMultiGraph()
    g.add_nodes_from("ABC")
    g.add_edges_from([("A", "B"), ("B", "C"), ("A", "C")])
    before = g.revision

    g.remove_nodes_from(n for n in g if n == "B")

    assert list(g.get_edges()) == ["A-C"]
    assert g.revision > before
    with pytest.raises(ValueError, match="does not exist"):
        g.remove_nodes_from(["B"])


def test_remove_edges_from_by_key_and_by_pair():
    g = StrictMultiGraph()
    g.add_nodes_from("ABC")
    g.add_edges_from([("A", "B"), ("A", "B"), ("B", "C")])

    g.remove_edges_from([("B", "A", "A-B#2")])
    assert list(g.get_edges()) == ["A-B", "B-C"]
    g.remove_edges_from([("C", "B")])
    assert list(g.get_edges()) == ["A-B"]
    with pytest.raises(ValueError):
        g.remove_edges_from([("A", "C")])


def test_clear_and_clear_edges_reset_edge_index():
    g = StrictMultiGraph()
    g.add_nodes_from("AB")
    g.add_edge("A", "B")

    before = g.revision
    g.clear_edges()
    assert g.get_edges() == {}
    assert list(g) == ["A", "B"]
    assert g.revision > before
    assert g.add_edge("A", "B") == "A-B"

    before = g.revision
    g.clear()
    assert g.get_edges() == {}
    assert len(g) == 0
    assert g.revision > before


@pytest.mark.parametrize("pickle", [True, False])
def test_copy_is_independent_and_consistent(pickle):
    g = StrictMultiGraph()
    g.add_nodes_from(["A", ("B", {"type": "router"})])
    g.add_edge("A", "B", distance=1, risk=0.2)
    g.add_edge("B", "A", key="ba", distance=3)

    g2 = g.copy(pickle=pickle)

    assert isinstance(g2, StrictMultiGraph)
    assert g2.to_dict() == g.to_dict()
    assert list(g2.get_edges()) == ["A-B", "ba"]
    assert g2.get_edge_attr("A-B") is g2["A"]["B"]["A-B"]
    assert g2.get_edge_attr("A-B") is not g.get_edge_attr("A-B")

    g2.update_edge_attr("A-B", risk=0.9)
    g2.remove_node("B")
    assert g.get_edge_attr("A-B")["risk"] == 0.2
    assert list(g.get_edges()) == ["A-B", "ba"]
    assert g2.get_edges() == {}


def test_copy_as_view_is_rejected():
    g = StrictMultiGraph()
    with pytest.raises(ValueError, match="views"):
        g.copy(as_view=True)


def test_engines_run_after_bulk_node_removal():
    from secroute.algorithms.bellman_ford import run_bellman_ford
    from secroute.algorithms.dijkstra import run_dijkstra
    from secroute.model.policy import RoutingPolicy

    g = StrictMultiGraph()
    g.add_nodes_from("ABC")
    g.add_edges_from([("A", "B", {"distance": 1}), ("A", "C", {"distance": 5})])
    g.remove_nodes_from(["B"])

    for engine in (run_bellman_ford, run_dijkstra):
        final = engine(g, "A", RoutingPolicy.classic())[-1]
        assert final.distances == {"A": 0, "C": 5.0}
