"""
Tests for TradeSim report views
"""
import json

import pandas as pd

from tradesim.sim.monte_carlo import MonteCarloRunner
from tradesim.sim.reports import (
    TRADE_COLUMNS,
    daily_results_frame,
    summarize_monte_carlo,
    summarize_result,
    trade_log_frame,
)
from tradesim.sim.sim_config import SimulationConfig
from tradesim.sim.sim_engine import SimulationEngine


def test_daily_results_frame(base_config):
    result = SimulationEngine(base_config).simulate(7)
    df = daily_results_frame(result)

    assert isinstance(df, pd.DataFrame)
    assert len(df) == 7
    assert list(df.index) == list(range(1, 8))
    assert (df["drawdown_pct"] >= 0).all()
    assert df["capital"].iloc[-1] == result.final_capital


def test_trade_log_frame(base_config):
    result = SimulationEngine(base_config).simulate(3)
    df = trade_log_frame(result)

    assert list(df.columns) == TRADE_COLUMNS
    assert len(df) == result.total_trades
    assert (df["low"] <= df["high"]).all()


def test_empty_result_frames(base_config):
    result = SimulationEngine(base_config).simulate(3, cancel_check=lambda: True)
    assert daily_results_frame(result).empty
    assert trade_log_frame(result).empty


def test_summarize_result_is_json_safe(base_config, always_win_rng):
    result = SimulationEngine(base_config, rng=always_win_rng).simulate(5)
    summary = summarize_result(result)

    assert summary["profit_factor"] == "no_losses"
    assert summary["total_trades"] == 40
    assert summary["model_strength"] == 60
    json.dumps(summary)


def test_summarize_monte_carlo():
    summary = MonteCarloRunner(SimulationConfig(), runs=5, total_days=2, seed=2).run()
    data = summarize_monte_carlo(summary)

    assert data["runs"] == 5
    assert set(data["percentiles"]) == {"p5", "p25", "p50", "p75", "p95"}
    json.dumps(data)
