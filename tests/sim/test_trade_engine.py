"""
Tests for TradeSim trade outcome engine
"""
from unittest.mock import patch

import pytest

from tradesim.core.config import CAPITAL_FLOOR, TRADE_LOG_LIMIT
from tradesim.sim.sim_config import SimulationConfig, StopConfig
from tradesim.sim.sim_engine import SimulationEngine
from tradesim.sim.trade_engine import stochastic_win_rate


def _trade_engine(config, rng):
    return SimulationEngine(config, rng=rng).trades


def test_stochastic_win_rate_is_clamped():
    assert stochastic_win_rate(0.99, 2.0, 5, 1.0, 0.99) == 0.99
    assert stochastic_win_rate(0.30, 1.0, 0, 1.0, 0.5) == 0.45


def test_stochastic_win_rate_terms():
    # Neutral draw, no streak, no fatigue: pure edge
    assert stochastic_win_rate(0.7, 1.0, 0, 1.0, 0.5) == pytest.approx(0.7)
    assert stochastic_win_rate(0.7, 1.0, -3, 1.0, 0.5) == pytest.approx(0.65)
    assert stochastic_win_rate(0.7, 1.0, 5, 1.0, 0.5) == pytest.approx(0.73)
    assert stochastic_win_rate(0.7, 1.0, 0, 0.5, 0.5) == pytest.approx(0.7 - 0.075)


def test_winning_trade_updates_capital_and_log(base_config, always_win_rng):
    engine = _trade_engine(base_config, always_win_rng)
    outcome = engine.execute(1000.0, day=1, total_days=30, trader_id="TRADER_1")

    assert outcome.is_win
    assert outcome.result > 0
    assert outcome.new_capital == pytest.approx(1000.0 + outcome.result)
    assert outcome.fee > 0
    assert outcome.slippage > 0
    assert engine.consecutive_wins == 1
    assert engine.trade_count == 1

    record = engine.records()[0]
    assert record.trader_id == "TRADER_1"
    assert record.exit_reason == "signal"
    assert record.strategy_name in {"scalp", "swing", "breakout"}
    assert record.asset_name in {"BTC", "ETH", "SOL"}
    assert 0.45 <= record.win_rate <= 0.99


def test_losing_streak_moves_counters_and_fatigue(base_config, always_lose_rng):
    engine = _trade_engine(base_config, always_lose_rng)
    capital = 1000.0
    for _ in range(4):
        capital = engine.execute(capital, 1, 30, "TRADER_1").new_capital

    assert capital < 1000.0
    assert engine.consecutive_losses == 4
    assert engine.streak == -4
    assert engine.traders.get("TRADER_1").fatigue == pytest.approx(0.12)
    assert engine.records()[-1].note == "Psychology: revenge-tilt"


def test_capital_never_drops_below_floor(base_config, always_lose_rng):
    engine = _trade_engine(base_config, always_lose_rng)
    outcome = engine.execute(CAPITAL_FLOOR, 1, 30, "TRADER_1")
    assert outcome.new_capital == CAPITAL_FLOOR


def test_trade_log_is_bounded_fifo(constant_rng):
    config = SimulationConfig(num_traders=1)
    engine = _trade_engine(config, constant_rng(0.3))

    total = TRADE_LOG_LIMIT + 5
    for i in range(1, total + 1):
        engine.execute(1000.0, day=i, total_days=total, trader_id="TRADER_1")

    records = engine.records()
    assert len(records) == TRADE_LOG_LIMIT
    assert records[0].day == 6
    assert records[-1].day == total
    assert engine.trade_count == total


def test_take_profit_overrides_signal(constant_rng):
    # A tiny take-profit target is hit whenever the candle closes up
    config = SimulationConfig(stops=StopConfig(take_profit=0.0001, trailing_stop=0.0))
    engine = _trade_engine(config, constant_rng(0.999))
    outcome = engine.execute(1000.0, 1, 30, "TRADER_1")

    assert outcome.record.exit_reason == "take_profit"
    assert outcome.is_win
    assert outcome.result > 0


def test_base_profitability_follows_schedule(base_config, constant_rng):
    engine = _trade_engine(base_config, constant_rng(0.5))
    first = engine.base_profitability(1, 30, drawdown_pct=0.0)
    last = engine.base_profitability(30, 30, drawdown_pct=0.0)

    assert base_config.final_profitability <= last <= first <= 0.99
    # Deep drawdown decays the target down to the final floor
    assert engine.base_profitability(30, 30, drawdown_pct=50.0) == pytest.approx(base_config.final_profitability)


def test_trade_debug_line_skipped_when_debug_disabled(base_config, always_win_rng):
    engine = _trade_engine(base_config, always_win_rng)
    with patch("tradesim.sim.trade_engine.logger") as mock_logger:
        mock_logger.isEnabledFor.return_value = False
        engine.execute(1000.0, day=1, total_days=30, trader_id="TRADER_1")
    mock_logger.debug.assert_not_called()


def test_trade_debug_line_emitted_when_debug_enabled(base_config, always_win_rng):
    engine = _trade_engine(base_config, always_win_rng)
    with patch("tradesim.sim.trade_engine.logger") as mock_logger:
        mock_logger.isEnabledFor.return_value = True
        engine.execute(1000.0, day=1, total_days=30, trader_id="TRADER_1")
    mock_logger.debug.assert_called_once()
    assert "TRADER_1" in mock_logger.debug.call_args[0][0]
