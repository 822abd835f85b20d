"""
Shared fixtures for TradeSim sim tests.
"""
import pytest

from tradesim.sim.sim_config import SimulationConfig


class ConstantRandom:
    """Random source that always returns the same draw."""

    def __init__(self, value: float):
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


@pytest.fixture
def always_win_rng():
    # Draw 0.0 is below any clamped win rate and keeps candles inside the stops
    return ConstantRandom(0.0)


@pytest.fixture
def always_lose_rng():
    return ConstantRandom(0.999)


@pytest.fixture
def base_config():
    return SimulationConfig(
        starting_capital=1000.0,
        leverage=25.0,
        num_traders=2,
        trading_hours=8,
        initial_profitability=0.80,
        final_profitability=0.65,
    )


@pytest.fixture
def constant_rng():
    """Factory: constant_rng(0.25) -> ConstantRandom."""
    return ConstantRandom
