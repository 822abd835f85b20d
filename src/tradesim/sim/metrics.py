"""
TradeSim - Performance Metrics
==============================

Risk adjusted statistics over a daily return series.

Every ratio degrades to 0.0 instead of carrying NaN/inf into results, with
one exception: a profit factor with gains and no losses is reported as
PROFIT_FACTOR_NO_LOSSES.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Sequence, Union

import numpy as np

from tradesim.core.config import RISK_FREE_RATE, TRADING_DAYS_PER_YEAR

PROFIT_FACTOR_NO_LOSSES = math.inf
NO_LOSSES_LABEL = "no_losses"

DAILY_RISK_FREE = RISK_FREE_RATE / TRADING_DAYS_PER_YEAR


@dataclass(frozen=True)
class PerformanceMetrics:
    sharpe_ratio: float = 0.0
    sortino_ratio: float = 0.0
    profit_factor: float = 0.0

    @property
    def has_no_losses(self) -> bool:
        return is_no_losses(self.profit_factor)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sharpe_ratio": self.sharpe_ratio,
            "sortino_ratio": self.sortino_ratio,
            "profit_factor": profit_factor_label(self.profit_factor),
        }


def is_no_losses(profit_factor: float) -> bool:
    return profit_factor == PROFIT_FACTOR_NO_LOSSES


def profit_factor_label(profit_factor: float) -> Union[float, str]:
    """JSON-safe view: the no-losses sentinel becomes 'no_losses'."""
    return NO_LOSSES_LABEL if is_no_losses(profit_factor) else profit_factor


def _finite_or_zero(value: float) -> float:
    value = float(value)
    return value if math.isfinite(value) else 0.0


def compute_metrics(returns: Sequence[float]) -> PerformanceMetrics:
    """
    Sharpe, Sortino and profit factor for daily fractional returns.

    - Sharpe: (mean - rf_daily) / std * sqrt(365), population std.
    - Sortino: same numerator over the root mean square of negative returns,
      0 when the whole series has zero variance.
    - Profit factor: sum(gains) / |sum(losses)|.
    """
    if returns is None or len(returns) == 0:
        return PerformanceMetrics()

    arr = np.asarray(returns, dtype=float)
    arr = np.where(np.isfinite(arr), arr, 0.0)

    mean = float(arr.mean())
    # Identical returns have zero variance even if float rounding says otherwise
    flat = bool(np.all(arr == arr[0]))
    std = 0.0 if flat else float(np.sqrt(max(float(arr.var()), 0.0)))
    annualizer = math.sqrt(TRADING_DAYS_PER_YEAR)

    sharpe = 0.0
    if std > 0 and math.isfinite(std):
        sharpe = (mean - DAILY_RISK_FREE) / std * annualizer

    # Zero variance: Sortino is 0 like Sharpe
    downside = arr[arr < 0]
    sortino = 0.0
    if downside.size and std > 0:
        d_std = float(np.sqrt(max(float(np.mean(downside ** 2)), 0.0)))
        if d_std > 0 and math.isfinite(d_std):
            sortino = (mean - DAILY_RISK_FREE) / d_std * annualizer

    gains = float(arr[arr > 0].sum())
    losses = abs(float(downside.sum()))
    if losses > 0:
        profit_factor = _finite_or_zero(gains / losses)
    elif gains > 0:
        profit_factor = PROFIT_FACTOR_NO_LOSSES
    else:
        profit_factor = 0.0

    return PerformanceMetrics(
        sharpe_ratio=_finite_or_zero(sharpe),
        sortino_ratio=_finite_or_zero(sortino),
        profit_factor=profit_factor,
    )


def annualized_return(total_growth_pct: float, days: int) -> float:
    """
    (1 + growth)^(1/years) - 1 as a fraction, years = max(days, 1) / 365.
    Returns 0.0 for zero growth or when the value overflows.
    """
    if total_growth_pct == 0:
        return 0.0
    years = max(days, 1) / TRADING_DAYS_PER_YEAR
    base = 1 + total_growth_pct / 100
    if base <= 0:
        return -1.0
    try:
        value = math.exp(math.log(base) / years) - 1
    except OverflowError:
        return 0.0
    return _finite_or_zero(value)


def calmar_ratio(annualized: float, max_drawdown_pct: float) -> float:
    """Annualized return over max drawdown fraction; 0 when there was no drawdown."""
    if max_drawdown_pct <= 0:
        return 0.0
    return _finite_or_zero(annualized / (max_drawdown_pct / 100))
