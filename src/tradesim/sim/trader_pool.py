"""
TradeSim - Trader Pool
======================

Per-trader mutable state (efficiency, fatigue, streak) plus the
psychology model shared by all traders.

Philosophy:
- Losing streaks push traders to size up (revenge tilt).
- Long winning streaks breed over-confidence.
- Fatigue accumulates with losses and de-rates the trader on a logistic curve.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional


FATIGUE_WIN_RECOVERY = 0.02
FATIGUE_LOSS_PENALTY = 0.03
FATIGUE_STEEPNESS = 4.0
FATIGUE_MIDPOINT = 0.5


@dataclass
class TraderProfile:
    """
    Lives for one simulation run. fatigue and streak change after every trade.
    """
    id: str
    base_efficiency: float = 1.0
    fatigue: float = 0.0
    streak: int = 0


@dataclass(frozen=True)
class PsychologyEffect:
    multiplier: float
    reason: str  # "revenge-tilt" | "over-confidence" | "fomo-drawdown" | "normal"


def psychology_multiplier(streak: int, capital: float, peak_capital: float) -> PsychologyEffect:
    """
    Sizing multiplier driven by the current streak and drawdown.

    Args:
        streak: Signed streak (wins positive, losses negative).
        capital: Current capital.
        peak_capital: Highest capital seen so far.
    """
    drawdown = (peak_capital - capital) / peak_capital * 100 if peak_capital > 0 else 0.0

    if streak <= -3:
        return PsychologyEffect(min(1.5, 1 + (abs(streak) - 2) * 0.3), "revenge-tilt")
    if streak >= 5:
        return PsychologyEffect(min(1.4, 1 + (streak - 4) * 0.1), "over-confidence")
    if drawdown > 20 and streak == 0:
        return PsychologyEffect(1.2, "fomo-drawdown")
    return PsychologyEffect(1.0, "normal")


def logistic_fatigue(fatigue: float) -> float:
    """1 / (1 + e^(4 * (fatigue - 0.5))): ~0.88 fresh, 0.5 at midpoint, ~0.12 exhausted."""
    return 1.0 / (1.0 + math.exp(FATIGUE_STEEPNESS * (fatigue - FATIGUE_MIDPOINT)))


class TraderPool:
    """
    Owns the TraderProfile objects for one run.
    """

    def __init__(self, num_traders: int, efficiencies: Optional[Dict[int, float]] = None):
        efficiencies = efficiencies or {}
        self._profiles: Dict[str, TraderProfile] = {}
        for i in range(1, num_traders + 1):
            trader_id = trader_id_for(i)
            self._profiles[trader_id] = TraderProfile(
                id=trader_id,
                base_efficiency=float(efficiencies.get(i, 1.0)),
            )

    @property
    def profiles(self) -> List[TraderProfile]:
        return list(self._profiles.values())

    def get(self, trader_id: str) -> Optional[TraderProfile]:
        return self._profiles.get(trader_id)

    def update_fatigue(self, trader_id: str, is_win: bool) -> None:
        """Update streak and fatigue after a trade. Unknown ids are ignored."""
        profile = self._profiles.get(trader_id)
        if profile is None:
            return

        if is_win:
            profile.streak = max(0, profile.streak + 1)
            profile.fatigue = max(0.0, profile.fatigue - FATIGUE_WIN_RECOVERY)
        else:
            profile.streak = min(0, profile.streak - 1)
            profile.fatigue = min(1.0, profile.fatigue + FATIGUE_LOSS_PENALTY)

    def fatigue_multiplier(self, trader_id: str) -> float:
        profile = self._profiles.get(trader_id)
        if profile is None:
            return 1.0
        return logistic_fatigue(profile.fatigue)

    def efficiency(self, trader_id: str) -> float:
        profile = self._profiles.get(trader_id)
        return profile.base_efficiency if profile else 1.0


def trader_id_for(index: int) -> str:
    """1-based trader index -> 'TRADER_n'."""
    return f"TRADER_{index}"
