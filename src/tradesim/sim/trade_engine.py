"""
TradeSim - Trade Outcome Engine
===============================

Prices a single trade: sizing, costs, win/loss draw, stop override and
capital update, then feeds the result back into trader psychology.

All mutable state here (peak capital, consecutive win/loss counters,
trade log) belongs to one run. Build a new engine per run.
"""

import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import Deque, List

from tradesim.core.config import CAPITAL_FLOOR, MAX_FINAL_SLIPPAGE, TRADE_LOG_LIMIT
from tradesim.core.logging_utils import get_logger
from tradesim.sim.costs import cost_rates
from tradesim.sim.market_model import Candle, MarketModel, NewsShock
from tradesim.sim.risk_tiers import RiskTierTable
from tradesim.sim.selectors import RandomSource
from tradesim.sim.sim_config import RiskTolerance, SimulationConfig
from tradesim.sim.stops import evaluate_stops
from tradesim.sim.strategy import StrategySelector, decayed_edge
from tradesim.sim.trader_pool import TraderPool, psychology_multiplier

logger = get_logger(__name__)

RISK_TOLERANCE_SCALE = {
    RiskTolerance.CONSERVATIVE: 0.7,
    RiskTolerance.MODERATE: 1.0,
    RiskTolerance.AGGRESSIVE: 1.3,
}
MIN_RISK_PERCENT = 0.01
MAX_RISK_PERCENT = 1.0
MIN_WIN_RATE = 0.45
MAX_WIN_RATE = 0.99
MIN_VOLATILITY_MULT = 0.4
EFFICIENCY_BASELINE = 5  # x leverage


@dataclass(frozen=True)
class TradeRecord:
    """
    Immutable trade log entry.
    """
    day: int
    trader_id: str
    strategy_name: str
    position_size: float
    result: float
    is_win: bool
    fee: float
    slippage: float
    new_capital: float
    candle: Candle
    asset_name: str
    note: str
    win_rate: float = 0.0
    regime: str = ""
    exit_reason: str = "signal"  # "signal" | "take_profit" | "trailing_stop"


@dataclass(frozen=True)
class TradeOutcome:
    position_size: float
    result: float
    is_win: bool
    win_rate: float
    fee: float
    slippage: float
    new_capital: float
    record: TradeRecord


def stochastic_win_rate(
    base_rate: float,
    volatility_mult: float,
    streak: int,
    fatigue_mult: float,
    draw: float,
) -> float:
    """
    clamp(0.45, 0.99, edge + noise + streak tilt - fatigue penalty).

    Args:
        draw: Uniform [0, 1) draw used for the noise term.
    """
    noise = (draw - 0.5) * 0.12 * volatility_mult
    tilt = 0.0
    if streak <= -3:
        tilt = -0.05
    elif streak >= 5:
        tilt = 0.03
    fatigue_penalty = (1 - fatigue_mult) * 0.15
    rate = base_rate + noise + tilt - fatigue_penalty
    return max(MIN_WIN_RATE, min(MAX_WIN_RATE, rate))


class TradeOutcomeEngine:
    """
    Unit of work of the simulation loop: one call per trader hour-slot.
    """

    def __init__(
        self,
        config: SimulationConfig,
        rng: RandomSource,
        market: MarketModel,
        traders: TraderPool,
        tiers: RiskTierTable,
        strategies: StrategySelector,
    ):
        self.config = config
        self._rng = rng
        self.market = market
        self.traders = traders
        self.tiers = tiers
        self.strategies = strategies

        self.peak_capital = config.starting_capital
        self.consecutive_wins = 0
        self.consecutive_losses = 0
        self.trade_count = 0
        self.trade_log: Deque[TradeRecord] = deque(maxlen=TRADE_LOG_LIMIT)

    @property
    def streak(self) -> int:
        """Run level streak: wins minus losses since the last reset."""
        return self.consecutive_wins - self.consecutive_losses

    def volatility_multiplier(self, regime_volatility: float) -> float:
        noise = (self._rng.random() - 0.5) * 0.2
        return max(MIN_VOLATILITY_MULT, regime_volatility * self.config.base_volatility + noise)

    def risk_percent(self, capital: float, psychology: float) -> float:
        risk = self.tiers.tier_for(capital).risk_percent * psychology
        risk *= RISK_TOLERANCE_SCALE.get(self.config.risk_tolerance, 1.0)
        return max(MIN_RISK_PERCENT, min(MAX_RISK_PERCENT, risk))

    def execute(self, capital: float, day: int, total_days: int, trader_id: str) -> TradeOutcome:
        """
        Price one trade for `trader_id` on `day` starting from `capital`.
        """
        cfg = self.config

        # 1. Strategy, regime, candle, news
        strategy = self.strategies.pick(day)
        regime = self.market.regime_for(day)
        asset, candle = self.market.advance(day, regime)
        news: NewsShock = self.market.news_shock(day)

        # 2. Peak & psychology
        self.peak_capital = max(self.peak_capital, capital)
        streak = self.streak
        psyche = psychology_multiplier(streak, capital, self.peak_capital)

        # 3. Risk sizing
        risk = self.risk_percent(capital, psyche.multiplier)

        # 4-6. Edge, volatility, win rate
        edge = decayed_edge(strategy, self.trade_count)
        vol_mult = self.volatility_multiplier(regime.volatility)
        fatigue_mult = self.traders.fatigue_multiplier(trader_id)
        win_rate = stochastic_win_rate(edge, vol_mult, streak, fatigue_mult, self._rng.random())

        # 7. Position, fees, slippage
        position_size = capital * risk * cfg.leverage
        rates = cost_rates(
            position_size,
            regime,
            cfg.market,
            shock_slippage=news.slippage if news.active else 0.0,
        )
        fee = position_size * rates.fee_rate
        slip_loss = position_size * rates.slippage_rate
        position_size -= fee + slip_loss

        # 8. Efficiency scaling against a 5x leverage baseline
        base_pos = EFFICIENCY_BASELINE * cfg.leverage
        scaled = (position_size / base_pos) * self.traders.efficiency(trader_id)

        # 9. Win/loss draw (news shocks lower the odds)
        effective_rate = win_rate
        if news.active:
            effective_rate = max(MIN_WIN_RATE, win_rate - news.edge_penalty)
        is_win = self._rng.random() < effective_rate

        # 10. Stop override
        stop = evaluate_stops(scaled, candle.open, candle.close, cfg.stops)
        if stop.close:
            result = stop.profit
            is_win = result > 0
            exit_reason = stop.reason
        else:
            result = scaled * vol_mult if is_win else -scaled * vol_mult
            exit_reason = "signal"

        # 11. Final fill haircut and capital floor
        haircut = self._rng.random() * MAX_FINAL_SLIPPAGE
        haircut_amount = abs(result) * haircut
        result *= (1 - haircut)
        new_capital = max(CAPITAL_FLOOR, capital + result)

        # 12. Counters, fatigue, log
        if is_win:
            self.consecutive_wins += 1
            self.consecutive_losses = 0
        else:
            self.consecutive_losses += 1
            self.consecutive_wins = 0
        self.traders.update_fatigue(trader_id, is_win)
        self.trade_count += 1

        if psyche.reason != "normal":
            note = f"Psychology: {psyche.reason}"
        elif news.active:
            note = news.reason
        else:
            note = ""

        record = TradeRecord(
            day=day,
            trader_id=trader_id,
            strategy_name=strategy.name,
            position_size=position_size,
            result=result,
            is_win=is_win,
            fee=fee,
            slippage=slip_loss + haircut_amount,
            new_capital=new_capital,
            candle=candle,
            asset_name=asset.name,
            note=note,
            win_rate=win_rate,
            regime=regime.name,
            exit_reason=exit_reason,
        )
        self.trade_log.append(record)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Day {day} {trader_id} {strategy.name}/{asset.name}: "
                f"size={position_size:.2f} result={result:+.4f} capital={new_capital:.2f} ({exit_reason})"
            )

        return TradeOutcome(
            position_size=position_size,
            result=result,
            is_win=is_win,
            win_rate=win_rate,
            fee=fee,
            slippage=record.slippage,
            new_capital=new_capital,
            record=record,
        )

    def base_profitability(self, day: int, total_days: int, drawdown_pct: float) -> float:
        """
        Target edge for the day: initial -> final profitability along a
        (day/days)^1.5 curve, adjusted by crowding, drawdown, streak and a
        cyclical term, clamped to [final, 0.99].
        Reported alongside daily results; trade outcomes use strategy edge.
        """
        cfg = self.config
        initial, final = cfg.initial_profitability, cfg.final_profitability
        progress = day / total_days if total_days > 0 else 1.0
        raw = initial - (initial - final) * math.pow(progress, 1.5)

        crowding = min(0.3, self.trade_count / 10_000)
        if drawdown_pct > 30:
            dd_decay = 0.2
        elif drawdown_pct > 15:
            dd_decay = 0.08 + (drawdown_pct - 15) * 0.008
        else:
            dd_decay = 0.0

        streak = self.streak
        if streak >= 5:
            streak_bonus = -0.05
        elif streak <= -5:
            streak_bonus = 0.05
        else:
            streak_bonus = 0.0

        cycle = math.sin(day / cfg.cyclical_period) * 0.04
        decay_mult = 1 - crowding - dd_decay + streak_bonus + cycle
        return max(final, min(MAX_WIN_RATE, raw * decay_mult))

    def records(self) -> List[TradeRecord]:
        return list(self.trade_log)
