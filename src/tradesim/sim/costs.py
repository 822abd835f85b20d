"""
TradeSim - Transaction Costs
============================

Fee and slippage rates for a position of a given notional size.
"""

import math
from dataclasses import dataclass

from tradesim.core.config import (
    BASE_SLIPPAGE,
    FEE_BANDS,
    FEE_RATE_FLOOR_BAND,
    MAX_SIZE_SLIPPAGE,
    MIN_SLIPPAGE,
)
from tradesim.sim.market_model import Regime
from tradesim.sim.sim_config import MarketKnobs


@dataclass(frozen=True)
class CostRates:
    fee_rate: float
    slippage_rate: float


def fee_rate(notional: float, price_impact: float) -> float:
    """
    Tiered by notional (0.3% / 0.2% / 0.15% / 0.1%), inflated by price impact.
    """
    rate = FEE_RATE_FLOOR_BAND
    for upper, band_rate in FEE_BANDS:
        if notional < upper:
            rate = band_rate
            break
    return rate * (1 + price_impact)


def slippage_rate(notional: float, regime: Regime, liquidity_factor: float, extra: float = 0.0) -> float:
    """
    Base 0.05% + log-scaled size term + regime term, divided by liquidity.
    `extra` carries shock slippage on news days.
    """
    size_term = min(MAX_SIZE_SLIPPAGE, 0.0001 * math.log1p(max(notional, 0.0) / 1000))
    rate = BASE_SLIPPAGE + size_term + (regime.volatility - 1) * 0.0002 + extra
    rate = rate / liquidity_factor
    return max(MIN_SLIPPAGE, rate)


def cost_rates(notional: float, regime: Regime, knobs: MarketKnobs, shock_slippage: float = 0.0) -> CostRates:
    return CostRates(
        fee_rate=fee_rate(notional, knobs.price_impact),
        slippage_rate=slippage_rate(notional, regime, knobs.liquidity_factor, shock_slippage),
    )
