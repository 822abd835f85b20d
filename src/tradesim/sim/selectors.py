"""
TradeSim - Index Selectors
==========================

Pluggable "pick one of N" strategies used for strategy and asset selection.

- CyclicSelector: deterministic sinusoidal index, depends only on the day.
- WeightedSelector: weighted random draw from a random source.
- SequenceSelector: replays a fixed list of indices (scripted runs, tests).
"""

import math
from typing import Protocol, Sequence, List


class RandomSource(Protocol):
    """Anything with random() -> float in [0, 1). numpy Generators qualify."""

    def random(self) -> float:
        ...


class ISelector(Protocol):
    """
    Protocol for index selection.
    """

    def select(self, day: int, count: int) -> int:
        """
        Pick an index in [0, count).

        Args:
            day: Current simulation day (1-based).
            count: Number of candidates.
        """
        ...


class CyclicSelector:
    """
    floor(sin(day * frequency) * n + n) mod n.
    """

    def __init__(self, frequency: float):
        self.frequency = frequency

    def select(self, day: int, count: int) -> int:
        if count <= 0:
            raise ValueError("count must be positive")
        return math.floor(math.sin(day * self.frequency) * count + count) % count


class WeightedSelector:
    """
    Standard weighted sampling: draw u in [0, total) and walk the cumulative
    weights, returning the first index whose running sum reaches u.
    Ties resolve in iteration order.
    """

    def __init__(self, weights: Sequence[float], rng: RandomSource):
        self.weights: List[float] = [float(w) for w in weights]
        self.total = sum(self.weights)
        self._rng = rng

    def select(self, day: int, count: int) -> int:
        if self.total <= 0:
            raise ValueError("WeightedSelector needs a positive total weight")

        draw = float(self._rng.random()) * self.total
        cumulative = 0.0
        last_positive = 0
        for i, weight in enumerate(self.weights[:count]):
            if weight <= 0:
                continue
            last_positive = i
            cumulative += weight
            if draw <= cumulative:
                return i
        # Float rounding can leave the draw a hair above the final sum
        return last_positive


class SequenceSelector:
    """
    Cycles through a fixed list of indices, ignoring the day.
    """

    def __init__(self, indices: Sequence[int]):
        if not indices:
            raise ValueError("SequenceSelector needs at least one index")
        self._indices = list(indices)
        self._pos = 0

    def select(self, day: int, count: int) -> int:
        idx = self._indices[self._pos % len(self._indices)]
        self._pos += 1
        return idx % count
