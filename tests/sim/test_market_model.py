"""
Tests for TradeSim market model
"""
import numpy as np
import pytest

from tradesim.sim.market_model import (
    MarketModel,
    correlation_adjustment,
    shock_dice,
)
from tradesim.sim.selectors import SequenceSelector
from tradesim.sim.sim_config import (
    DEFAULT_ASSETS,
    EconomicEvent,
    MarketCondition,
    MarketKnobs,
    NewsItem,
)


@pytest.fixture
def market():
    return MarketModel(
        market_condition=MarketCondition.NORMAL,
        assets=DEFAULT_ASSETS,
        knobs=MarketKnobs(),
        rng=np.random.default_rng(42),
        economic_events=[
            EconomicEvent(day=3, effect="bear", impact_class="high", name="CPI"),
            EconomicEvent(day=3, effect="bull", impact_class="low"),
            EconomicEvent(day=5, effect="sideways"),
        ],
        news_events=[NewsItem(day=4, text="Exchange outage")],
    )


def test_regime_follows_market_condition(market):
    regime = market.regime_for(1)
    assert regime.name == "normal"
    assert regime.volatility == pytest.approx(1.1)
    assert regime.drift == pytest.approx(1.0)


def test_scheduled_event_overrides_regime(market):
    regime = market.regime_for(3)
    assert regime.name == "bear"
    assert regime.volatility == pytest.approx(1.4 * 1.5)
    assert regime.drift == pytest.approx(0.85)


def test_unknown_event_effect_is_ignored(market):
    assert market.regime_for(5).name == "normal"


def test_candles_respect_ohlc_invariant_and_chain(market):
    regime = market.regime_for(1)
    for day in range(1, 300):
        asset, candle = market.advance(day, regime)
        assert candle.low <= min(candle.open, candle.close)
        assert max(candle.open, candle.close) <= candle.high
        assert candle.volume > 0
        assert asset.last_close == candle.close

    total = sum(len(a.price_history) for a in market.assets)
    assert total == 299


def test_first_candle_starts_near_initial_price(market):
    asset = market.assets[0]
    candle = market.generate_candle(asset.last_close, market.regime_for(1), asset)
    assert candle.open == pytest.approx(10_000.0)
    assert len(asset.price_history) == 1


def test_asset_selector_can_be_injected():
    model = MarketModel(
        market_condition=MarketCondition.BULL,
        assets=DEFAULT_ASSETS,
        knobs=MarketKnobs(),
        rng=np.random.default_rng(0),
        asset_selector=SequenceSelector([2]),
    )
    assert model.pick_asset(1).name == "SOL"


def test_correlation_inflates_volatility(market):
    factor = correlation_adjustment(0.7)
    assert factor == pytest.approx(1.1)
    assert market.assets[1].volatility == pytest.approx(1.2 * factor)


def test_scheduled_news_produces_shock(market):
    shock = market.news_shock(4)
    assert shock.active
    assert 0.5 <= shock.severity <= 1.0
    assert shock.slippage == pytest.approx(shock.severity * 0.01 * 0.5)
    assert shock.edge_penalty == pytest.approx(shock.severity * 0.15 * 0.5)
    assert "Exchange outage" in shock.reason


def test_random_shocks_follow_day_dice(market):
    shocked_days = 0
    for day in range(5, 2000):
        shock = market.news_shock(day)
        assert 0 <= shock_dice(day) < 1000
        if shock_dice(day) < 20:
            shocked_days += 1
            assert shock.active
            assert 0.2 <= shock.severity <= 1.0
        else:
            assert not shock.active
    assert 0 < shocked_days < 200
