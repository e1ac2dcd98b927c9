"""Derived routing metrics and classic-vs-SAR comparison records."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from secroute.model.trace import Step
from secroute.types.base import RouteOutcome


@dataclass(frozen=True)
class RoutingMetrics:
    """Aggregates for one destination of one completed run.

    Attributes:
        total_distance: Sum of distance weights along the path.
        total_security_risk: Sum of risk values along the path.
        hop_count: Number of edges, ``len(path_nodes) - 1``.
        path_nodes: Vertices from start to destination.
    """

    total_distance: float
    total_security_risk: float
    hop_count: int
    path_nodes: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["path_nodes"] = list(self.path_nodes)
        return data


@dataclass(frozen=True)
class DestinationComparison:
    """Classic and SAR outcome for a single destination.

    The percentage fields are set only when both policies reach the
    destination; a zero classic baseline reports 0.0 rather than NaN/inf.
    """

    destination: str
    classic: Optional[RoutingMetrics]
    sar: Optional[RoutingMetrics]
    outcome: RouteOutcome
    risk_reduction_pct: Optional[float] = None
    distance_increase_pct: Optional[float] = None

    @property
    def route_changed(self) -> bool:
        return self.outcome == RouteOutcome.ROUTE_CHANGED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "destination": self.destination,
            "classic": self.classic.to_dict() if self.classic else None,
            "sar": self.sar.to_dict() if self.sar else None,
            "outcome": self.outcome.name,
            "risk_reduction_pct": self.risk_reduction_pct,
            "distance_increase_pct": self.distance_increase_pct,
        }


@dataclass(frozen=True)
class ComparisonSummary:
    """Network-wide aggregates of a classic-vs-SAR comparison."""

    destinations: int
    classic_reachable: int
    sar_reachable: int
    route_changes: int
    avg_risk_reduction_pct: float
    avg_distance_increase_pct: float
    classic_total_distance: float
    classic_total_risk: float
    sar_total_distance: float
    sar_total_risk: float
    classic_negative_cycle: bool = False
    sar_negative_cycle: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ComparisonResult:
    """Output of `compare_all`: per-destination records, summary and raw traces."""

    per_destination: Dict[str, DestinationComparison]
    summary: ComparisonSummary
    classic_steps: List[Step] = field(default_factory=list, repr=False)
    sar_steps: List[Step] = field(default_factory=list, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "per_destination": {
                node: record.to_dict() for node, record in self.per_destination.items()
            },
            "summary": self.summary.to_dict(),
        }
