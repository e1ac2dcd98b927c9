"""Path reconstruction from a trace's predecessor map."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from secroute.graph.strict_multigraph import EdgeID, NodeID
from secroute.model.trace import Step


def _select_step(steps: Sequence[Step], step_index: Optional[int]) -> Optional[Step]:
    if not steps:
        return None
    if step_index is None:
        return steps[-1]
    if not -len(steps) <= step_index < len(steps):
        return None
    return steps[step_index]


def build_path_with_edges(
    steps: Sequence[Step],
    start: NodeID,
    target: NodeID,
    step_index: Optional[int] = None,
) -> Tuple[List[NodeID], List[Optional[EdgeID]]]:
    """Rebuild ``start -> target`` and the edge keys used between hops.

    Returns ``([], [])`` when no path exists. The edge list has one entry per
    hop; an entry is ``None`` when the trace did not record the edge.
    """
    step = _select_step(steps, step_index)
    if step is None:
        return [], []
    if math.isinf(step.distance_to(target)):
        return [], []
    if target == start:
        return [start], []

    nodes: List[NodeID] = [target]
    edges: List[Optional[EdgeID]] = []
    current = target
    # A walk longer than the number of known vertices can only be a malformed map
    for _ in range(len(step.predecessors) + 1):
        parent = step.predecessors.get(current)
        if parent is None:
            return [], []
        edges.append(step.predecessor_edges.get(current))
        nodes.append(parent)
        if parent == start:
            nodes.reverse()
            edges.reverse()
            return nodes, edges
        current = parent
    return [], []


def build_path(
    steps: Sequence[Step],
    start: NodeID,
    target: NodeID,
    step_index: Optional[int] = None,
) -> List[NodeID]:
    """Return the vertex sequence ``start ... target`` or ``[]`` if unreachable.

    Uses the final step unless ``step_index`` selects an intermediate one.
    The walk is bounded by the number of vertices, so a predecessor map that
    never reaches ``start`` (e.g. after a negative cycle) yields ``[]``.
    """
    nodes, _ = build_path_with_edges(steps, start, target, step_index)
    return nodes
