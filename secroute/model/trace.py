"""Step records produced by the shortest-path engines.

A run returns an ordered list of `Step` objects. Each step is an immutable
snapshot of the engine state right after one decision (initialization, vertex
settlement, edge relaxation, ...). The list is the only replay mechanism:
consumers never re-run an engine to navigate a trace.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

from secroute.types.base import StepKind

_TERMINAL_KINDS = frozenset({StepKind.COMPLETE})


@dataclass(frozen=True)
class Step:
    """One immutable record of engine state.

    Attributes:
        index: Position of this step in its trace (0-based).
        kind: Tag describing what happened.
        distances: Snapshot of tentative distances; unreached vertices are ``inf``.
        predecessors: Snapshot of the predecessor map (``None`` = no predecessor).
        predecessor_edges: Edge key through which each vertex was last improved.
        settled: Vertices whose distance is final (Dijkstra only).
        current_node: Vertex being processed, if any.
        edge_id: Edge under consideration, if any.
        iteration: Bellman-Ford relaxation pass (0 for init and for Dijkstra).
        message: Human-readable description.
        negative_cycle: True on the step that detected a negative cycle and on
            every step after it.
    """

    index: int
    kind: StepKind
    distances: Dict[str, float] = field(hash=False)
    predecessors: Dict[str, Optional[str]] = field(hash=False)
    predecessor_edges: Dict[str, Optional[str]] = field(hash=False, default_factory=dict)
    settled: FrozenSet[str] = frozenset()
    current_node: Optional[str] = None
    edge_id: Optional[str] = None
    iteration: int = 0
    message: str = ""
    negative_cycle: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.kind in _TERMINAL_KINDS

    def distance_to(self, node: str) -> float:
        """Distance snapshot for ``node``; ``inf`` when unknown."""
        return self.distances.get(node, math.inf)

    def reachable_from(self, start: str) -> List[str]:
        """Vertices with a finite distance, excluding ``start``, in snapshot order."""
        return [
            node
            for node, dist in self.distances.items()
            if node != start and not math.isinf(dist)
        ]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe representation; infinite distances become ``None``."""
        return {
            "index": self.index,
            "kind": self.kind.name,
            "distances": {
                node: (None if math.isinf(dist) else dist)
                for node, dist in self.distances.items()
            },
            "predecessors": dict(self.predecessors),
            "predecessor_edges": dict(self.predecessor_edges),
            "settled": sorted(self.settled),
            "current_node": self.current_node,
            "edge_id": self.edge_id,
            "iteration": self.iteration,
            "message": self.message,
            "negative_cycle": self.negative_cycle,
        }


class TraceRecorder:
    """Append-only builder that snapshots mutable engine state into steps."""

    def __init__(
        self,
        distances: Dict[str, float],
        predecessors: Dict[str, Optional[str]],
        predecessor_edges: Dict[str, Optional[str]],
    ) -> None:
        self._distances = distances
        self._predecessors = predecessors
        self._predecessor_edges = predecessor_edges
        self.steps: List[Step] = []
        self.negative_cycle = False

    def record(
        self,
        kind: StepKind,
        message: str,
        *,
        settled: Optional[FrozenSet[str]] = None,
        current_node: Optional[str] = None,
        edge_id: Optional[str] = None,
        iteration: int = 0,
    ) -> Step:
        if kind == StepKind.NEGATIVE_CYCLE:
            self.negative_cycle = True
        step = Step(
            index=len(self.steps),
            kind=kind,
            distances=dict(self._distances),
            predecessors=dict(self._predecessors),
            predecessor_edges=dict(self._predecessor_edges),
            settled=settled if settled is not None else frozenset(),
            current_node=current_node,
            edge_id=edge_id,
            iteration=iteration,
            message=message,
            negative_cycle=self.negative_cycle,
        )
        self.steps.append(step)
        return step


def final_step(steps: Sequence[Step]) -> Optional[Step]:
    """Last step of a trace, or ``None`` for an empty trace."""
    return steps[-1] if steps else None


def has_negative_cycle(steps: Sequence[Step]) -> bool:
    """True when any step of the trace reports a negative cycle."""
    return any(step.negative_cycle for step in steps)


def format_distance(value: float) -> str:
    return "inf" if math.isinf(value) else f"{value:.2f}"


def steps_to_dicts(steps: Sequence[Step]) -> Tuple[Dict[str, Any], ...]:
    return tuple(step.to_dict() for step in steps)
