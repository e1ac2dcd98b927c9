"""Strict undirected multigraph used by the routing engines.

`StrictMultiGraph` extends `networkx.MultiGraph` to enforce explicit node
management and unique string edge identifiers. Every edge is traversable in
both directions; parallel edges between the same pair and self-loops are kept
as distinct edges. Edge insertion order is remembered so that engines which
scan the edge list (Bellman-Ford) are deterministic.
"""

from __future__ import annotations

from pickle import dumps, loads
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import networkx as nx

NodeID = str
EdgeID = str
AttrDict = Dict[str, Any]
EdgeTuple = Tuple[NodeID, NodeID, EdgeID, AttrDict]


class StrictMultiGraph(nx.MultiGraph):
    """An undirected multigraph with strict rules and unique edge IDs.

    This class enforces:
      - No automatic creation of missing nodes when adding an edge.
      - No duplicate nodes (raises ValueError on duplicates).
      - No duplicate edge keys (raises ValueError on duplicates).
      - Removing non-existent nodes or edges raises ValueError.
      - Edge keys default to ``"{u}-{v}"``, suffixed with ``#n`` on collision.

    The ``revision`` counter increases on every mutation made through this
    class, letting holders of derived data (e.g. a replay trace) detect that
    the topology changed underneath them.
    """

    def __init__(self, *args, **kwargs) -> None:
        # Set before the base init, which may load incoming graph data
        self._edges: Dict[EdgeID, EdgeTuple] = {}
        self.revision: int = 0
        super().__init__(*args, **kwargs)

    def new_edge_key(self, u: NodeID, v: NodeID) -> EdgeID:  # type: ignore[override]
        """Return an unused edge key derived from the endpoint names."""
        base = f"{u}-{v}"
        if base not in self._edges:
            return base
        suffix = 2
        while f"{base}#{suffix}" in self._edges:
            suffix += 1
        return f"{base}#{suffix}"

    def _touch(self) -> None:
        self.revision += 1

    def copy(self, as_view: bool = False, pickle: bool = True) -> StrictMultiGraph:
        """Create an independent copy of this graph.

        By default, use pickle-based deep copying. If ``pickle=False``, rebuild
        the graph through the strict mutators, sharing nothing but attribute
        values.

        Args:
            as_view: Not supported; read-only views would bypass the edge index.
            pickle: If True, perform a pickle-based deep copy.

        Returns:
            StrictMultiGraph: A new instance with the same nodes, edge keys and
            edge order.

        Raises:
            ValueError: If ``as_view`` is True.
        """
        if as_view:
            raise ValueError("StrictMultiGraph does not support graph views.")
        if pickle:
            return loads(dumps(self))

        graph = self.__class__()
        graph.graph.update(self.graph)
        for node, attr in self._node.items():
            graph.add_node(node, **attr)
        for key, (u, v, _, attr) in self._edges.items():
            graph.add_edge(u, v, key=key, **attr)
        return graph

    def clear(self) -> None:
        """Remove all nodes and edges."""
        super().clear()
        self._edges.clear()
        self._touch()

    def clear_edges(self) -> None:
        """Remove all edges, keeping the nodes."""
        super().clear_edges()
        self._edges.clear()
        self._touch()

    #
    # Node management
    #
    def add_node(self, node_for_adding: NodeID, **attr: Any) -> None:
        """Add a single node, disallowing duplicates.

        Raises:
            ValueError: If the node already exists in the graph.
        """
        if node_for_adding in self:
            raise ValueError(f"Node '{node_for_adding}' already exists in this graph.")
        super().add_node(node_for_adding, **attr)
        self._touch()

    def remove_node(self, n: NodeID) -> None:
        """Remove a node and all incident edges.

        Raises:
            ValueError: If the node does not exist in the graph.
        """
        if n not in self:
            raise ValueError(f"Node '{n}' does not exist.")
        to_delete = [
            e_id for e_id, (s, t, _, _) in self._edges.items() if s == n or t == n
        ]
        for e_id in to_delete:
            del self._edges[e_id]
        super().remove_node(n)
        self._touch()

    def add_nodes_from(self, nodes_for_adding: Iterable[Any], **attr: Any) -> None:
        """Add several nodes through `add_node`.

        Items are node IDs or ``(node, attrdict)`` pairs; ``attr`` applies to
        all of them, with per-node attributes taking precedence.

        Raises:
            ValueError: If any node already exists in the graph.
        """
        for item in nodes_for_adding:
            if isinstance(item, tuple) and len(item) == 2 and isinstance(item[1], dict):
                node, node_attr = item
                self.add_node(node, **{**attr, **node_attr})
            else:
                self.add_node(item, **attr)

    def remove_nodes_from(self, nodes: Iterable[NodeID]) -> None:
        """Remove several nodes through `remove_node`.

        Raises:
            ValueError: If any node does not exist in the graph.
        """
        for n in list(nodes):
            self.remove_node(n)

    #
    # Edge management
    #
    def add_edge(  # pyright: ignore[reportIncompatibleMethodOverride]
        self,
        u_for_edge: NodeID,
        v_for_edge: NodeID,
        key: Optional[EdgeID] = None,
        **attr: Any,
    ) -> EdgeID:
        """Add an undirected edge between two existing nodes.

        Args:
            u_for_edge: First endpoint. Must exist in the graph.
            v_for_edge: Second endpoint. Must exist in the graph.
            key: Unique edge key; generated from the endpoints when omitted.
            **attr: Edge attributes, typically ``distance`` and ``risk``.

        Returns:
            The key associated with the new edge.

        Raises:
            ValueError: If either node does not exist, or the key is in use.
        """
        if u_for_edge not in self:
            raise ValueError(f"Source node '{u_for_edge}' does not exist.")
        if v_for_edge not in self:
            raise ValueError(f"Target node '{v_for_edge}' does not exist.")

        if key is None:
            key = self.new_edge_key(u_for_edge, v_for_edge)
        elif key in self._edges:
            raise ValueError(f"Edge with id '{key}' already exists.")

        super().add_edge(u_for_edge, v_for_edge, key=key, **attr)
        self._edges[key] = (
            u_for_edge,
            v_for_edge,
            key,
            self[u_for_edge][v_for_edge][key],
        )
        self._touch()
        return key

    def remove_edge(self, u: NodeID, v: NodeID, key: Optional[EdgeID] = None) -> None:
        """Remove one edge (``key`` given) or all edges between ``u`` and ``v``.

        Raises:
            ValueError: If the nodes or the requested edge(s) do not exist.
        """
        if u not in self:
            raise ValueError(f"Source node '{u}' does not exist.")
        if v not in self:
            raise ValueError(f"Target node '{v}' does not exist.")

        if key is not None:
            if key not in self._edges:
                raise ValueError(f"No edge with id='{key}' found between {u} and {v}.")
            s, t, _, _ = self._edges[key]
            if {s, t} != {u, v}:
                raise ValueError(
                    f"Edge with id='{key}' joins {s} and {t}, not {u} and {v}."
                )
            self.remove_edge_by_id(key)
            return

        edge_ids = self.edges_between(u, v)
        if not edge_ids:
            raise ValueError(f"No edges between '{u}' and '{v}' to remove.")
        for e_id in edge_ids:
            self.remove_edge_by_id(e_id)

    def remove_edge_by_id(self, key: EdgeID) -> None:
        """Remove an edge by its unique key.

        Raises:
            ValueError: If no edge with this key exists in the graph.
        """
        if key not in self._edges:
            raise ValueError(f"Edge with id='{key}' not found.")
        s, t, _, _ = self._edges.pop(key)
        super().remove_edge(s, t, key=key)
        self._touch()

    def add_edges_from(  # pyright: ignore[reportIncompatibleMethodOverride]
        self, ebunch_to_add: Iterable[tuple], **attr: Any
    ) -> List[EdgeID]:
        """Add several edges through `add_edge`.

        Items are ``(u, v)``, ``(u, v, data)``, ``(u, v, key)`` or
        ``(u, v, key, data)``. ``attr`` applies to all edges, with per-edge
        data taking precedence.

        Returns:
            The keys of the new edges, in order.

        Raises:
            ValueError: On a malformed item, a missing node or a key in use.
        """
        keys: List[EdgeID] = []
        for item in ebunch_to_add:
            key: Optional[EdgeID] = None
            data: AttrDict = {}
            if len(item) == 4:
                u, v, key, data = item
            elif len(item) == 3:
                u, v, third = item
                if isinstance(third, dict):
                    data = third
                else:
                    key = third
            elif len(item) == 2:
                u, v = item
            else:
                raise ValueError(
                    f"Edge tuple {item} must be a 2-tuple, 3-tuple or 4-tuple."
                )
            keys.append(self.add_edge(u, v, key=key, **{**attr, **data}))
        return keys

    def remove_edges_from(self, ebunch: Iterable[tuple]) -> None:
        """Remove several edges through `remove_edge`.

        ``(u, v, key)`` removes one edge; ``(u, v)`` removes every edge between
        the pair.

        Raises:
            ValueError: If a requested edge does not exist.
        """
        for item in list(ebunch):
            if len(item) >= 3:
                self.remove_edge(item[0], item[1], key=item[2])
            else:
                self.remove_edge(item[0], item[1])

    def update_edge_attr(self, key: EdgeID, **attr: Any) -> None:
        """Update attributes on an existing edge.

        Raises:
            ValueError: If the edge with the given key does not exist.
        """
        if key not in self._edges:
            raise ValueError(f"Edge with id='{key}' not found.")
        self._edges[key][3].update(attr)
        self._touch()

    #
    # Convenience methods
    #
    def get_nodes(self) -> Dict[NodeID, AttrDict]:
        """Return all nodes and their attributes, in insertion order."""
        return dict(self.nodes(data=True))

    def get_edges(self) -> Dict[EdgeID, EdgeTuple]:
        """Return edges keyed by ID as ``(u, v, key, attr)``, in insertion order.

        ``u`` and ``v`` keep the orientation the edge was added with; it has no
        routing meaning.
        """
        return self._edges

    def get_edge_attr(self, key: EdgeID) -> AttrDict:
        """Return the attribute dictionary of an edge.

        Raises:
            ValueError: If no edge with this key is found.
        """
        if key not in self._edges:
            raise ValueError(f"Edge with id='{key}' not found.")
        return self._edges[key][3]

    def has_edge_by_id(self, key: EdgeID) -> bool:
        return key in self._edges

    def edges_between(self, u: NodeID, v: NodeID) -> List[EdgeID]:
        """List edge keys joining ``u`` and ``v`` in either orientation."""
        if u not in self._adj or v not in self._adj[u]:
            return []
        return list(self._adj[u][v].keys())

    def incident_edges(self, node: NodeID) -> Iterator[Tuple[NodeID, EdgeID, AttrDict]]:
        """Yield ``(neighbor, key, attr)`` for every edge incident to ``node``.

        A self-loop is yielded once, with ``neighbor == node``. Unknown nodes
        yield nothing.
        """
        neighbors = self._adj.get(node)
        if neighbors is None:
            return
        for neighbor, edges_map in neighbors.items():
            for key, attr in edges_map.items():
                yield neighbor, key, attr

    def to_dict(self) -> Dict[str, Any]:
        """Return the node-link dictionary produced by `secroute.graph.io`."""
        # Import here to avoid circular import
        from secroute.graph.io import graph_to_dict

        return graph_to_dict(self)
