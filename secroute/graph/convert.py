"""Conversion from `StrictMultiGraph` to plain NetworkX graphs.

Parallel edges are consolidated into a single edge carrying the minimal
blended cost, which is what any shortest path would use. The result can be
fed to NetworkX algorithms to cross-check the traced engines.
"""

from typing import Optional

import networkx as nx

from secroute.algorithms.cost import edge_cost
from secroute.graph.strict_multigraph import StrictMultiGraph
from secroute.model.policy import RoutingPolicy


def to_cost_graph(
    graph: StrictMultiGraph,
    policy: RoutingPolicy,
    default_risk: Optional[float] = None,
) -> nx.Graph:
    """Collapse ``graph`` into an ``nx.Graph`` weighted by blended cost.

    Args:
        graph: Source multigraph.
        policy: Cost policy applied to every edge.
        default_risk: Risk used for edges without a risk value.

    Returns:
        Undirected simple graph with a ``cost`` attribute per edge and an
        ``edge_id`` attribute naming the cheapest parallel edge. Self-loops are
        dropped since they never shorten a path.
    """
    nx_graph = nx.Graph()
    nx_graph.add_nodes_from(graph.get_nodes().items())

    for key, (u, v, _, attr) in graph.get_edges().items():
        if u == v:
            continue
        cost = edge_cost(attr, policy, default_risk)
        if nx_graph.has_edge(u, v) and nx_graph.edges[u, v]["cost"] <= cost:
            continue
        nx_graph.add_edge(u, v, cost=cost, edge_id=key)
    return nx_graph
