"""
TradeSim - Strategy Selection
=============================

Chooses which catalog strategy drives the next trade and computes its
decayed edge.
"""

from typing import Dict, List, Optional, Sequence

from tradesim.core.config import STRATEGY_PICK_FREQUENCY
from tradesim.sim.selectors import CyclicSelector, ISelector, RandomSource, WeightedSelector
from tradesim.sim.sim_config import Strategy

EDGE_FLOOR_FRACTION = 0.5
EDGE_DECAY_HORIZON = 10_000  # trades


class StrategySelector:
    """
    Weighted random pick when configured weights sum to a positive total,
    otherwise the deterministic cyclic pick seeded by day * 0.5.
    """

    def __init__(
        self,
        strategies: Sequence[Strategy],
        weights: Optional[Dict[str, float]],
        rng: RandomSource,
        fallback: Optional[ISelector] = None,
    ):
        if not strategies:
            raise ValueError("StrategySelector needs at least one strategy")
        self.strategies: List[Strategy] = list(strategies)
        self._by_name = {s.name: s for s in self.strategies}

        weights = weights or {}
        # Iteration order follows the weight map, as configured
        self._weighted_names = [name for name in weights if name in self._by_name]
        weight_values = [weights[name] for name in self._weighted_names]

        self._weighted: Optional[WeightedSelector] = None
        if sum(weight_values) > 0:
            self._weighted = WeightedSelector(weight_values, rng)

        self._fallback = fallback or CyclicSelector(STRATEGY_PICK_FREQUENCY)

    @property
    def uses_weights(self) -> bool:
        return self._weighted is not None

    def pick(self, day: int) -> Strategy:
        if self._weighted is not None:
            idx = self._weighted.select(day, len(self._weighted_names))
            return self._by_name[self._weighted_names[idx]]

        idx = self._fallback.select(day, len(self.strategies))
        return self.strategies[idx]


def decayed_edge(strategy: Strategy, trades_so_far: int) -> float:
    """
    baseEdge * max(0.5, 1 - (trades / 10000) * decay).
    Erodes monotonically with cumulative trade count, floored at half strength.
    """
    erosion = 1.0 - (trades_so_far / EDGE_DECAY_HORIZON) * strategy.decay_rate
    return strategy.base_edge * max(EDGE_FLOOR_FRACTION, erosion)
