"""Routing data model.

Policies (`RoutingPolicy`), trace steps (`Step`) and the derived metrics and
comparison records consumed by callers.
"""

from secroute.model.metrics import (
    ComparisonResult,
    ComparisonSummary,
    DestinationComparison,
    RoutingMetrics,
)
from secroute.model.policy import RoutingPolicy
from secroute.model.trace import Step

__all__ = [
    "RoutingPolicy",
    "Step",
    # Metrics
    "RoutingMetrics",
    "DestinationComparison",
    "ComparisonSummary",
    "ComparisonResult",
]
