"""
TradeSim - Risk Tier Table
==========================

Maps current capital to a position sizing fraction.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from tradesim.core.config import CAPITAL_CLAMP, DEFAULT_RISK_PERCENT
from tradesim.sim.sim_config import TierSpec


@dataclass(frozen=True)
class RiskTier:
    """
    Capital bracket [threshold, max_threshold) and its risk fraction.
    """
    threshold: float
    max_threshold: float
    risk_percent: float

    def contains(self, capital: float) -> bool:
        return self.threshold <= capital < self.max_threshold


FALLBACK_TIER = RiskTier(threshold=0.0, max_threshold=math.inf, risk_percent=DEFAULT_RISK_PERCENT)

DEFAULT_TIERS: List[RiskTier] = [
    RiskTier(threshold=0.0, max_threshold=100.0, risk_percent=0.8),
    RiskTier(threshold=100.0, max_threshold=500.0, risk_percent=0.08),
    RiskTier(threshold=500.0, max_threshold=1000.0, risk_percent=0.04),
    RiskTier(threshold=1000.0, max_threshold=5000.0, risk_percent=0.03),
    RiskTier(threshold=5000.0, max_threshold=math.inf, risk_percent=0.02),
]


class RiskTierTable:
    """
    Sorted, contiguous tiers covering [0, inf).
    """

    def __init__(self, tiers: Optional[Sequence[RiskTier]] = None):
        self._tiers: List[RiskTier] = list(tiers) if tiers else []

    @classmethod
    def from_thresholds(cls, specs: Sequence[TierSpec]) -> "RiskTierTable":
        """
        Build a table from (threshold, risk) pairs.

        Tiers are sorted by threshold, each upper bound is set to the next
        tier's threshold and the last tier is open ended. The lowest tier is
        pinned to 0 so every non-negative capital maps to exactly one tier.
        An empty spec list yields the default table.
        """
        if not specs:
            return cls(DEFAULT_TIERS)

        ordered = sorted(specs, key=lambda s: s.threshold)
        tiers: List[RiskTier] = []
        for i, spec in enumerate(ordered):
            lower = 0.0 if i == 0 else float(spec.threshold)
            upper = float(ordered[i + 1].threshold) if i + 1 < len(ordered) else math.inf
            tiers.append(RiskTier(threshold=lower, max_threshold=upper, risk_percent=float(spec.risk_percent)))

        # Duplicate thresholds would leave empty brackets; keep the last one
        tiers = [t for t in tiers if t.max_threshold > t.threshold]
        return cls(tiers)

    @property
    def tiers(self) -> List[RiskTier]:
        return list(self._tiers)

    def tier_for(self, capital: float) -> RiskTier:
        """
        Return the tier covering the capital, clamped to [0, 1e12].
        Falls back to a 5% tier when the table is empty or nothing matches.
        """
        safe = min(max(capital, 0.0), CAPITAL_CLAMP)
        for tier in self._tiers:
            if tier.contains(safe):
                return tier
        return FALLBACK_TIER
