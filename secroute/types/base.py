"""Base enums and aliases shared across secroute."""

from __future__ import annotations

from enum import IntEnum
from typing import Union

#: Numeric cost of traversing an edge or a path.
Cost = Union[int, float]

#: Distance marker for vertices not (yet) reached.
INF: float = float("inf")


class RoutingMode(IntEnum):
    """Cost model used by the shortest-path engines."""

    #: Distance only; security risk is never read.
    CLASSIC = 1
    #: Security-Aware Routing: ``alpha * distance + beta * risk``.
    SAR = 2

    @classmethod
    def from_string(cls, value: str) -> "RoutingMode":
        """Parse a mode name (``classic``, ``sar`` or ``security-aware``).

        Raises:
            ValueError: If the string does not name a mode.
        """
        normalized = value.strip().upper().replace("-", "_")
        if normalized == "SECURITY_AWARE":
            normalized = "SAR"
        try:
            return cls[normalized]
        except KeyError:
            valid = ", ".join(m.name.lower() for m in cls)
            raise ValueError(
                f"Invalid routing mode '{value}'. Valid values are: {valid}"
            ) from None


class Algorithm(IntEnum):
    """Single-source shortest-path engine selector."""

    DIJKSTRA = 1
    BELLMAN_FORD = 2

    @classmethod
    def from_string(cls, value: str) -> "Algorithm":
        """Parse ``dijkstra`` or ``bellman-ford`` (case-insensitive).

        Raises:
            ValueError: If the string does not name an algorithm.
        """
        try:
            return cls[value.strip().upper().replace("-", "_")]
        except KeyError:
            valid = ", ".join(a.name.lower().replace("_", "-") for a in cls)
            raise ValueError(
                f"Invalid algorithm '{value}'. Valid values are: {valid}"
            ) from None


class StepKind(IntEnum):
    """Tag of a trace step."""

    INIT = 1
    #: Dijkstra: a vertex was extracted from the frontier and finalized.
    SETTLE = 2
    #: Dijkstra (SAR): edge rejected by the risk threshold.
    SKIP = 3
    #: A tentative distance decreased.
    RELAX = 4
    #: Dijkstra: candidate distance was not an improvement.
    NO_UPDATE = 5
    #: Bellman-Ford: a relaxation pass finished with at least one update.
    PASS_COMPLETE = 6
    #: Bellman-Ford: a pass relaxed nothing; iteration stopped early.
    CONVERGE = 7
    NEGATIVE_CYCLE = 8
    NO_NEGATIVE_CYCLE = 9
    COMPLETE = 10


class RouteOutcome(IntEnum):
    """Per-destination classification in a classic vs. SAR comparison."""

    BOTH_UNREACHABLE = 1
    CLASSIC_ONLY = 2
    SAR_ONLY = 3
    SAME_PATH = 4
    ROUTE_CHANGED = 5
