"""
TradeSim - Market Model
=======================

Synthetic market: regime selection, per-asset candles and news shocks.

Philosophy:
- "A regime is the market's mood for the day; scheduled events can flip it."
- "Shocks are rare, short and they hurt edge and fills at the same time."

Correlation is a single knob that inflates every asset's apparent
volatility; it is not a covariance model.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from tradesim.core.config import (
    ASSET_PICK_FREQUENCY,
    EVENT_IMPACT,
    INITIAL_ASSET_PRICE,
    RANDOM_SHOCK_THRESHOLD,
    REGIME_TABLE,
)
from tradesim.sim.selectors import CyclicSelector, ISelector, RandomSource
from tradesim.sim.sim_config import (
    AssetSpec,
    EconomicEvent,
    MarketCondition,
    MarketKnobs,
    NewsItem,
)


@dataclass(frozen=True)
class Regime:
    name: str
    volatility: float
    drift: float


@dataclass(frozen=True)
class Candle:
    """OHLCV bar. Invariant: low <= min(open, close) <= max(open, close) <= high."""
    open: float
    high: float
    low: float
    close: float
    volume: int


@dataclass
class AssetState:
    """
    Run-scoped asset with its append-only price history.
    """
    spec: AssetSpec
    correlation_factor: float = 1.0
    price_history: List[Candle] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def volatility(self) -> float:
        """Base volatility inflated by the correlation knob."""
        return self.spec.volatility * self.correlation_factor

    @property
    def drift(self) -> float:
        return self.spec.drift

    @property
    def last_close(self) -> float:
        if not self.price_history:
            return INITIAL_ASSET_PRICE
        return self.price_history[-1].close


@dataclass(frozen=True)
class NewsShock:
    active: bool
    severity: float = 0.0
    slippage: float = 0.0
    edge_penalty: float = 0.0
    reason: str = ""


NO_SHOCK = NewsShock(active=False)


class MarketModel:
    """
    Owns the regime schedule, asset states and news calendar for one run.
    """

    def __init__(
        self,
        market_condition: MarketCondition,
        assets: Sequence[AssetSpec],
        knobs: MarketKnobs,
        rng: RandomSource,
        economic_events: Sequence[EconomicEvent] = (),
        news_events: Sequence[NewsItem] = (),
        asset_selector: Optional[ISelector] = None,
    ):
        if not assets:
            raise ValueError("MarketModel needs at least one asset")

        self.market_condition = market_condition
        self.knobs = knobs
        self._rng = rng
        self._asset_selector = asset_selector or CyclicSelector(ASSET_PICK_FREQUENCY)

        factor = correlation_adjustment(knobs.correlation_strength)
        self.assets: List[AssetState] = [AssetState(spec=a, correlation_factor=factor) for a in assets]

        # First event per day wins
        self._events: Dict[int, EconomicEvent] = {}
        for event in economic_events:
            self._events.setdefault(event.day, event)

        self._news: Dict[int, NewsItem] = {}
        for item in news_events:
            self._news.setdefault(item.day, item)

    # --- Regime ---

    def regime_for(self, day: int) -> Regime:
        """
        A scheduled event's effect overrides the configured condition, with its
        volatility scaled by the event's impact class.
        """
        event = self._events.get(day)
        if event is not None and event.effect in ("bull", "bear", "volatile"):
            vol, drift = REGIME_TABLE[event.effect]
            impact = EVENT_IMPACT.get(event.impact_class, 1.0)
            return Regime(name=event.effect, volatility=vol * impact, drift=drift)

        name = self.market_condition.value
        vol, drift = REGIME_TABLE.get(name, REGIME_TABLE["normal"])
        return Regime(name=name, volatility=vol, drift=drift)

    # --- Assets & candles ---

    def pick_asset(self, day: int) -> AssetState:
        idx = self._asset_selector.select(day, len(self.assets))
        return self.assets[idx]

    def generate_candle(self, prev_close: float, regime: Regime, asset: AssetState) -> Candle:
        """
        Build the next candle for the asset and append it to its history.
        """
        drift = asset.drift - 1.0
        vol = asset.volatility * regime.volatility

        open_ = prev_close * (1 + drift * 0.002)
        noise = (self._rng.random() - 0.5) * vol * 0.04
        high = open_ * (1 + abs(noise) + self._rng.random() * vol * 0.02)
        low = open_ * (1 - abs(noise) - self._rng.random() * vol * 0.02)
        close = open_ * (1 + noise)
        volume = math.floor(1_000_000 * (0.8 + self._rng.random() * 0.4) * (1 + vol * 0.5))

        candle = Candle(open=open_, high=high, low=low, close=close, volume=int(volume))
        asset.price_history.append(candle)
        return candle

    def advance(self, day: int, regime: Regime) -> tuple:
        """Pick the day's asset and append one candle. Returns (asset, candle)."""
        asset = self.pick_asset(day)
        candle = self.generate_candle(asset.last_close, regime, asset)
        return asset, candle

    # --- News ---

    def news_shock(self, day: int) -> NewsShock:
        """
        Scheduled news on this day -> shock with severity U[0.5, 1.0].
        Otherwise a deterministic ~2% chance of a random shock with
        severity U[0.2, 1.0].
        """
        item = self._news.get(day)
        if item is not None:
            severity = 0.5 + self._rng.random() * 0.5
            return self._shock(severity, f"Scheduled news: {item.text}")

        if shock_dice(day) < RANDOM_SHOCK_THRESHOLD:
            severity = 0.2 + self._rng.random() * 0.8
            return self._shock(severity, "Random market shock")

        return NO_SHOCK

    def _shock(self, severity: float, reason: str) -> NewsShock:
        sensitivity = self.knobs.news_sensitivity
        return NewsShock(
            active=True,
            severity=severity,
            slippage=severity * 0.01 * sensitivity,
            edge_penalty=severity * 0.15 * sensitivity,
            reason=reason,
        )


def correlation_adjustment(correlation_strength: float) -> float:
    """1 + (strength - 0.5) * 0.5"""
    return 1 + (correlation_strength - 0.5) * 0.5


def shock_dice(day: int) -> int:
    """sin(day * 0.314) * 10000 folded into an integer in [0, 999]."""
    seed = math.sin(day * ASSET_PICK_FREQUENCY) * 10_000
    return int(((math.fmod(seed, 1000) + 1000) % 1000))
