"""Shared enums and type aliases for secroute.

Contains no runtime logic beyond enum parsing helpers.
"""

from secroute.types.base import INF, Algorithm, Cost, RouteOutcome, RoutingMode, StepKind

__all__ = [
    # Enums
    "Algorithm",
    "RouteOutcome",
    "RoutingMode",
    "StepKind",
    # Type aliases and constants
    "Cost",
    "INF",
]
