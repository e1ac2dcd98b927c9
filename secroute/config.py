"""Configuration defaults for secroute routing engines."""

import math
from dataclasses import dataclass
from typing import Optional


@dataclass
class RoutingConfig:
    """Defaults shared by the cost function, the engines and the CLI."""

    # Security weight used when a policy is built without an explicit beta
    default_beta: float = 0.5

    # Substituted for missing, non-numeric or non-positive distance weights
    default_distance: float = 1.0

    # Substituted for missing risk values in security-aware mode
    default_risk: float = 0.0

    # Dijkstra admission-control cutoff; None disables it
    risk_threshold: Optional[float] = None

    def normalize_threshold(self, value: Optional[float]) -> Optional[float]:
        """Clamp a risk threshold into [0, 1]; ``None`` and NaN mean no cutoff."""
        if value is None:
            return None
        value = float(value)
        if math.isnan(value):
            return None
        return min(1.0, max(0.0, value))


# Global configuration instance
ROUTING_CONFIG = RoutingConfig()
