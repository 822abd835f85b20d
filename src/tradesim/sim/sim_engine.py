"""
TradeSim - Simulation Engine
============================

Day-by-day simulation loop. Drives the TradeOutcomeEngine once per
trader hour-slot, compounds capital, records daily snapshots and tracks
peak / max drawdown. Metrics are computed once at the end of the run.

The loop is synchronous and performs no I/O; with a fixed random source
it is fully reproducible.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple

import numpy as np

from tradesim.core.config import CAPITAL_FLOOR, DAILY_COMPOUND_RATE
from tradesim.core.logging_utils import get_logger
from tradesim.sim.market_model import MarketModel
from tradesim.sim.metrics import annualized_return, calmar_ratio, compute_metrics
from tradesim.sim.risk_tiers import RiskTierTable
from tradesim.sim.selectors import ISelector, RandomSource
from tradesim.sim.sim_config import CompoundFrequency, SimulationConfig
from tradesim.sim.stops import GuardrailController
from tradesim.sim.strategy import StrategySelector
from tradesim.sim.trade_engine import TradeOutcomeEngine, TradeRecord
from tradesim.sim.trader_pool import TraderPool

logger = get_logger(__name__)

ProgressCallback = Callable[[int], None]
CancelCheck = Callable[[], bool]


@dataclass(frozen=True)
class DailyResult:
    day: int
    capital: float
    daily_growth: float        # percent
    target_edge: float = 0.0   # scheduled target win probability for the day


@dataclass(frozen=True)
class SimulationResult:
    """
    Immutable snapshot of a completed (or cancelled) run.
    """
    final_capital: float
    total_trades: int
    winning_trades: int
    actual_win_rate: float
    daily_results: Tuple[DailyResult, ...]
    total_growth: float        # percent
    total_fees: float
    total_slippage: float
    max_drawdown: float        # percent
    sharpe_ratio: float
    sortino_ratio: float
    calmar_ratio: float
    profit_factor: float
    trade_log: Tuple[TradeRecord, ...]
    config: SimulationConfig
    days_simulated: int = 0
    cancelled: bool = False
    guardrail_halts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def daily_returns(self) -> List[float]:
        return [d.daily_growth / 100 for d in self.daily_results]


class SimulationEngine:
    """
    One engine per run. Owns the trader pool, market state, trade log and
    counters for that run; nothing is shared between engines.
    """

    def __init__(
        self,
        config: SimulationConfig,
        rng: Optional[RandomSource] = None,
        strategy_selector: Optional[ISelector] = None,
        asset_selector: Optional[ISelector] = None,
    ):
        """
        Args:
            config: Validated run configuration.
            rng: Random source; defaults to numpy default_rng(config.seed).
            strategy_selector: Replaces the cyclic strategy fallback.
            asset_selector: Replaces the cyclic asset pick.
        """
        self.config = config
        self.rng: RandomSource = rng if rng is not None else np.random.default_rng(config.seed)

        self.traders = TraderPool(config.num_traders, config.trader_efficiency)
        self.market = MarketModel(
            market_condition=config.market_condition,
            assets=config.assets,
            knobs=config.market,
            rng=self.rng,
            economic_events=config.economic_events,
            news_events=config.news_events,
            asset_selector=asset_selector,
        )
        self.tiers = RiskTierTable.from_thresholds(config.risk_tiers)
        self.strategies = StrategySelector(
            config.strategies,
            config.strategy_weights,
            self.rng,
            fallback=strategy_selector,
        )
        self.trades = TradeOutcomeEngine(
            config=config,
            rng=self.rng,
            market=self.market,
            traders=self.traders,
            tiers=self.tiers,
            strategies=self.strategies,
        )
        self.guardrail = GuardrailController(config.stops)

    @property
    def hours_per_trader(self) -> int:
        return math.ceil(self.config.trading_hours / self.config.num_traders)

    def simulate(
        self,
        total_days: int,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_check: Optional[CancelCheck] = None,
    ) -> SimulationResult:
        """
        Run the simulation for `total_days` days.

        Args:
            total_days: Horizon in days (>= 1).
            progress_callback: Called once per day with an int percent 0-100.
            cancel_check: Polled between days and trades; True stops the run
                and a partial result is returned.
        """
        if total_days < 1:
            raise ValueError(f"total_days must be >= 1, got {total_days}")

        cfg = self.config
        capital = cfg.starting_capital
        total_trades = 0
        winning_trades = 0
        total_fees = 0.0
        total_slippage = 0.0
        peak = capital
        max_dd = 0.0
        daily: List[DailyResult] = []
        returns: List[float] = []
        halts: Dict[str, int] = {}
        cancelled = False
        collapse_logged = False

        logger.info(
            f"Simulation start: {total_days} days, capital={capital:.2f}, "
            f"traders={cfg.num_traders}, hours={cfg.trading_hours}, leverage={cfg.leverage}"
        )

        for day in range(1, total_days + 1):
            if cancel_check is not None and cancel_check():
                cancelled = True
                break

            day_start = capital
            day_halted = False

            for profile in self.traders.profiles:
                if day_halted or cancelled:
                    break

                for _ in range(self.hours_per_trader):
                    if capital <= CAPITAL_FLOOR:
                        if not collapse_logged:
                            logger.info(f"Capital collapsed on day {day}; skipping remaining hours")
                            collapse_logged = True
                        break
                    if cancel_check is not None and cancel_check():
                        cancelled = True
                        break

                    outcome = self.trades.execute(capital, day, total_days, profile.id)
                    capital = outcome.new_capital
                    total_trades += 1
                    total_fees += outcome.fee
                    total_slippage += outcome.slippage
                    if outcome.is_win:
                        winning_trades += 1

                    decision = self.guardrail.check(
                        capital, max(self.trades.peak_capital, capital), outcome.result
                    )
                    if not decision.allow:
                        halts[decision.reason_code] = halts.get(decision.reason_code, 0) + 1
                        logger.warning(
                            f"Guardrail {decision.reason_code} on day {day} for {profile.id}: {decision.details}"
                        )
                        if decision.reason_code == "MAX_DRAWDOWN":
                            day_halted = True
                        break

            # A day cancelled part way is still recorded as a partial snapshot
            if cfg.compound_frequency == CompoundFrequency.DAILY:
                capital *= DAILY_COMPOUND_RATE
            capital = max(CAPITAL_FLOOR, capital)

            growth = (capital - day_start) / day_start * 100 if day_start > 0 else 0.0
            if not math.isfinite(growth):
                growth = 0.0
            returns.append(growth / 100)

            if capital > peak:
                peak = capital
            dd = (peak - capital) / peak * 100
            if dd > max_dd:
                max_dd = dd

            daily.append(DailyResult(
                day=day,
                capital=capital,
                daily_growth=growth,
                target_edge=self.trades.base_profitability(day, total_days, dd),
            ))

            if progress_callback is not None:
                progress_callback(int(day * 100 / total_days))

            if cancelled:
                break

        days_run = len(daily)
        metrics = compute_metrics(returns)
        total_growth = (capital - cfg.starting_capital) / cfg.starting_capital * 100
        annualized = annualized_return(total_growth, max(days_run, 1))

        result = SimulationResult(
            final_capital=capital,
            total_trades=total_trades,
            winning_trades=winning_trades,
            actual_win_rate=winning_trades / total_trades if total_trades else 0.0,
            daily_results=tuple(daily),
            total_growth=total_growth,
            total_fees=total_fees,
            total_slippage=total_slippage,
            max_drawdown=max_dd,
            sharpe_ratio=metrics.sharpe_ratio,
            sortino_ratio=metrics.sortino_ratio,
            calmar_ratio=calmar_ratio(annualized, max_dd),
            profit_factor=metrics.profit_factor,
            trade_log=tuple(self.trades.trade_log),
            config=cfg,
            days_simulated=days_run,
            cancelled=cancelled,
            guardrail_halts=MappingProxyType(halts),
        )

        logger.info(
            f"Simulation {'cancelled' if cancelled else 'complete'}: days={days_run}, "
            f"trades={total_trades}, final={capital:.2f} ({total_growth:+.2f}%), max_dd={max_dd:.2f}%"
        )
        return result


def simulate(
    config: SimulationConfig,
    total_days: int,
    progress_callback: Optional[ProgressCallback] = None,
    rng: Optional[RandomSource] = None,
    cancel_check: Optional[CancelCheck] = None,
) -> SimulationResult:
    """Build a fresh engine for `config` and run it once."""
    engine = SimulationEngine(config, rng=rng)
    return engine.simulate(total_days, progress_callback=progress_callback, cancel_check=cancel_check)
