"""Routing policy: which cost model an engine run uses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from secroute.config import ROUTING_CONFIG
from secroute.types.base import RoutingMode


@dataclass(frozen=True)
class RoutingPolicy:
    """Cost model for one engine run.

    Attributes:
        mode: ``CLASSIC`` ignores risk entirely; ``SAR`` blends distance and risk.
        beta: Security weight in [0, 1]. ``alpha = 1 - beta`` weights distance.
            Carried but unused in classic mode.
    """

    mode: RoutingMode = RoutingMode.CLASSIC
    beta: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.mode, RoutingMode):
            object.__setattr__(self, "mode", RoutingMode.from_string(str(self.mode)))
        beta = float(self.beta)
        if not 0.0 <= beta <= 1.0:
            raise ValueError(f"beta must be in [0, 1], got {self.beta}")
        object.__setattr__(self, "beta", beta)

    @property
    def alpha(self) -> float:
        """Distance weight, ``1 - beta``."""
        return 1.0 - self.beta

    @property
    def is_security_aware(self) -> bool:
        return self.mode == RoutingMode.SAR

    @classmethod
    def classic(cls) -> "RoutingPolicy":
        return cls(RoutingMode.CLASSIC, 0.0)

    @classmethod
    def security_aware(cls, beta: Optional[float] = None) -> "RoutingPolicy":
        """SAR policy; ``beta`` defaults to ``ROUTING_CONFIG.default_beta``."""
        if beta is None:
            beta = ROUTING_CONFIG.default_beta
        return cls(RoutingMode.SAR, beta)

    @classmethod
    def from_values(
        cls, mode: Union[str, RoutingMode], beta: Optional[float] = None
    ) -> "RoutingPolicy":
        """Build a policy from CLI/config style values.

        Raises:
            ValueError: On an unknown mode name or out-of-range beta.
        """
        if not isinstance(mode, RoutingMode):
            mode = RoutingMode.from_string(mode)
        if mode == RoutingMode.CLASSIC:
            return cls(mode, 0.0 if beta is None else beta)
        return cls.security_aware(beta)

    def describe(self) -> str:
        """Short label used in trace messages, e.g. ``SAR (beta=0.6)``."""
        if self.mode == RoutingMode.CLASSIC:
            return "Classic"
        return f"SAR (beta={self.beta:g})"
