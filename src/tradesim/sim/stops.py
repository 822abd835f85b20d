"""
TradeSim - Stops
================

Per-trade take-profit / trailing-stop evaluation against a candle, and the
account level guardrails (daily loss, max drawdown).

Take-profit compares the open->close move against the target percentage.
The trailing stop is measured from max(open, close). The two use different
reference prices; both are kept as-is.
"""

from dataclasses import dataclass, field

from tradesim.sim.sim_config import StopConfig


@dataclass(frozen=True)
class StopResult:
    close: bool
    profit: float = 0.0
    reason: str = ""  # "take_profit" | "trailing_stop"


NO_STOP = StopResult(close=False)


def apply_take_profit_and_trailing_stop(
    position_size: float,
    open_price: float,
    current_price: float,
    take_profit: float,
    trailing_stop: float,
) -> StopResult:
    """
    Evaluate stops for one trade.

    Args:
        position_size: Position size the stop is applied to.
        open_price: Candle open.
        current_price: Candle close.
        take_profit: Target as a fraction (0.10 = 10%); 0 disables.
        trailing_stop: Trail as a fraction (0.05 = 5%); 0 disables.

    Returns:
        StopResult; `profit` is signed.
    """
    if open_price <= 0:
        return NO_STOP

    move_pct = (current_price - open_price) / open_price * 100

    if take_profit > 0 and move_pct >= take_profit * 100:
        return StopResult(close=True, profit=position_size * take_profit, reason="take_profit")

    if trailing_stop > 0:
        max_price = max(open_price, current_price)
        stop_price = max_price * (1 - trailing_stop)
        if current_price <= stop_price:
            loss = (open_price - current_price) / open_price * position_size
            return StopResult(close=True, profit=-loss, reason="trailing_stop")

    return NO_STOP


@dataclass
class GuardrailDecision:
    """
    Result of a guardrail check.
    """
    allow: bool
    reason_code: str  # "OK" | "DAILY_STOP" | "MAX_DRAWDOWN"
    details: dict = field(default_factory=dict)


class GuardrailController:
    """
    Account level risk limits checked after each trade.
    Disabled unless StopConfig.enforce_guardrails is set.
    """

    def __init__(self, config: StopConfig):
        self.config = config

    @property
    def enabled(self) -> bool:
        return self.config.enforce_guardrails

    def check(self, capital: float, peak_capital: float, trade_pnl: float) -> GuardrailDecision:
        """
        Args:
            capital: Capital after the trade.
            peak_capital: Highest capital seen so far.
            trade_pnl: Realized result of the trade just taken.
        """
        if not self.enabled:
            return GuardrailDecision(allow=True, reason_code="OK")

        drawdown = (peak_capital - capital) / peak_capital if peak_capital > 0 else 0.0
        if self.config.max_drawdown > 0 and drawdown >= self.config.max_drawdown:
            return GuardrailDecision(
                allow=False,
                reason_code="MAX_DRAWDOWN",
                details={"drawdown": drawdown, "limit": self.config.max_drawdown},
            )

        if self.config.max_daily_loss > 0 and trade_pnl <= -self.config.max_daily_loss * capital:
            return GuardrailDecision(
                allow=False,
                reason_code="DAILY_STOP",
                details={"trade_pnl": trade_pnl, "limit": self.config.max_daily_loss},
            )

        return GuardrailDecision(allow=True, reason_code="OK")


def evaluate_stops(position_size: float, open_price: float, close_price: float, config: StopConfig) -> StopResult:
    return apply_take_profit_and_trailing_stop(
        position_size, open_price, close_price, config.take_profit, config.trailing_stop
    )
