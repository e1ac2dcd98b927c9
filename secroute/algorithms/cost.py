"""Edge weight accessors and the blended cost function.

Distance weights are coerced so that no engine ever sees a negative or
non-finite distance: malformed, NaN, infinite or non-positive values become
``ROUTING_CONFIG.default_distance``. Risk values are clamped to [0, 1]; a
missing risk takes the caller-supplied default, never a random value.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Mapping, Optional

from secroute.config import ROUTING_CONFIG
from secroute.model.policy import RoutingPolicy
from secroute.types.base import Cost, RoutingMode

#: Signature of a cost override accepted by the engines.
CostFunc = Callable[[Mapping[str, Any], RoutingPolicy], Cost]


def _parse_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(parsed):
        return None
    return parsed


def distance_weight(attr: Mapping[str, Any]) -> float:
    """Return the edge's distance weight, coerced to a positive finite number.

    Reads ``distance`` (falling back to the legacy ``weight`` key).
    """
    raw = attr.get("distance", attr.get("weight"))
    value = _parse_float(raw)
    if value is None or value <= 0 or math.isinf(value):
        return ROUTING_CONFIG.default_distance
    return value


def risk_weight(attr: Mapping[str, Any], default_risk: Optional[float] = None) -> float:
    """Return the edge's security risk clamped to [0, 1].

    Reads ``risk`` (falling back to the legacy ``securityRisk`` key). Missing
    or unparseable values use ``default_risk``, or
    ``ROUTING_CONFIG.default_risk`` when that is None.
    """
    raw = attr.get("risk", attr.get("securityRisk"))
    value = _parse_float(raw)
    if value is None:
        value = ROUTING_CONFIG.default_risk if default_risk is None else default_risk
    return min(1.0, max(0.0, float(value)))


def edge_cost(
    attr: Mapping[str, Any],
    policy: RoutingPolicy,
    default_risk: Optional[float] = None,
) -> float:
    """Blended traversal cost of one edge under ``policy``.

    Classic mode returns the distance weight and never reads risk.
    Security-aware mode returns ``alpha * distance + beta * risk``.
    """
    distance = distance_weight(attr)
    if policy.mode == RoutingMode.CLASSIC:
        return distance
    return policy.alpha * distance + policy.beta * risk_weight(attr, default_risk)


def make_cost_func(default_risk: Optional[float] = None) -> CostFunc:
    """Bind ``default_risk`` into a `CostFunc` for the engines."""

    def _cost(attr: Mapping[str, Any], policy: RoutingPolicy) -> Cost:
        return edge_cost(attr, policy, default_risk)

    return _cost


def format_cost_breakdown(
    attr: Mapping[str, Any],
    policy: RoutingPolicy,
    cost: Cost,
    default_risk: Optional[float] = None,
) -> str:
    """Human-readable cost derivation used in trace messages."""
    distance = distance_weight(attr)
    if policy.mode == RoutingMode.CLASSIC:
        return f"cost {cost:.2f} (distance {distance:g})"
    risk = risk_weight(attr, default_risk)
    return (
        f"cost {policy.alpha:.1f}x{distance:g} + {policy.beta:.1f}x{risk:.2f}"
        f" = {cost:.2f}"
    )
