"""
TradeSim - Reports
==================

Read-only views over simulation results: pandas frames for the daily
series and trade log, and JSON-safe summary dicts.
"""

from typing import Any, Dict

import pandas as pd

from tradesim.sim.metrics import profit_factor_label
from tradesim.sim.model_strength import model_strength
from tradesim.sim.monte_carlo import MonteCarloSummary
from tradesim.sim.sim_engine import SimulationResult

DAILY_COLUMNS = ["day", "capital", "daily_growth", "target_edge"]
TRADE_COLUMNS = [
    "day", "trader_id", "strategy_name", "asset_name", "regime",
    "position_size", "result", "is_win", "win_rate", "fee", "slippage",
    "new_capital", "exit_reason", "note",
    "open", "high", "low", "close", "volume",
]


def daily_results_frame(result: SimulationResult) -> pd.DataFrame:
    """One row per simulated day, indexed by day."""
    rows = [
        {
            "day": d.day,
            "capital": d.capital,
            "daily_growth": d.daily_growth,
            "target_edge": d.target_edge,
        }
        for d in result.daily_results
    ]
    df = pd.DataFrame(rows, columns=DAILY_COLUMNS)
    if df.empty:
        return df
    df["drawdown_pct"] = (df["capital"].cummax() - df["capital"]) / df["capital"].cummax() * 100
    return df.set_index("day")


def trade_log_frame(result: SimulationResult) -> pd.DataFrame:
    """Flattened trade log; candle OHLCV becomes plain columns."""
    rows = []
    for rec in result.trade_log:
        rows.append({
            "day": rec.day,
            "trader_id": rec.trader_id,
            "strategy_name": rec.strategy_name,
            "asset_name": rec.asset_name,
            "regime": rec.regime,
            "position_size": rec.position_size,
            "result": rec.result,
            "is_win": rec.is_win,
            "win_rate": rec.win_rate,
            "fee": rec.fee,
            "slippage": rec.slippage,
            "new_capital": rec.new_capital,
            "exit_reason": rec.exit_reason,
            "note": rec.note,
            "open": rec.candle.open,
            "high": rec.candle.high,
            "low": rec.candle.low,
            "close": rec.candle.close,
            "volume": rec.candle.volume,
        })
    return pd.DataFrame(rows, columns=TRADE_COLUMNS)


def summarize_result(result: SimulationResult) -> Dict[str, Any]:
    """JSON-safe headline numbers for a single run."""
    return {
        "final_capital": round(result.final_capital, 2),
        "total_growth_pct": round(result.total_growth, 2),
        "total_trades": result.total_trades,
        "winning_trades": result.winning_trades,
        "win_rate": round(result.actual_win_rate, 4),
        "total_fees": round(result.total_fees, 2),
        "total_slippage": round(result.total_slippage, 2),
        "max_drawdown_pct": round(result.max_drawdown, 2),
        "sharpe_ratio": round(result.sharpe_ratio, 3),
        "sortino_ratio": round(result.sortino_ratio, 3),
        "calmar_ratio": round(result.calmar_ratio, 3),
        "profit_factor": profit_factor_label(result.profit_factor),
        "days_simulated": result.days_simulated,
        "cancelled": result.cancelled,
        "guardrail_halts": dict(result.guardrail_halts),
        "model_strength": model_strength(result.config),
    }


def summarize_monte_carlo(summary: MonteCarloSummary) -> Dict[str, Any]:
    """JSON-safe view of a Monte Carlo sweep."""
    return {
        "runs": summary.runs,
        "avg_final_capital": round(summary.avg_final_capital, 2),
        "min_final_capital": round(summary.min_final_capital, 2),
        "max_final_capital": round(summary.max_final_capital, 2),
        "success_rate_pct": round(summary.success_rate, 2),
        "avg_drawdown_pct": round(summary.avg_drawdown, 2),
        "percentiles": {f"p{p}": round(v, 2) for p, v in summary.final_capital_percentiles.items()},
    }
