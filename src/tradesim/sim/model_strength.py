"""
TradeSim - Model Strength
=========================

Heuristic 10-99 score describing how robust a configuration looks before
it is run. Low leverage, conservative sizing, more traders and active
stops raise it; an aggressive edge schedule lowers it.
"""

from tradesim.sim.sim_config import RiskTolerance, SimulationConfig

MIN_STRENGTH = 10
MAX_STRENGTH = 99
BASE_STRENGTH = 50.0

TOLERANCE_ADJUSTMENT = {
    RiskTolerance.CONSERVATIVE: 15.0,
    RiskTolerance.MODERATE: 0.0,
    RiskTolerance.AGGRESSIVE: -10.0,
}


def model_strength(config: SimulationConfig) -> int:
    score = BASE_STRENGTH

    score += max(0.0, 25 - config.leverage)
    score += TOLERANCE_ADJUSTMENT.get(config.risk_tolerance, 0.0)

    initial_pct = config.initial_profitability * 100
    final_pct = config.final_profitability * 100
    score += (initial_pct - 70) * 0.5
    score -= initial_pct - final_pct

    score += (config.num_traders - 1) * 5

    stops = config.stops
    if stops.max_daily_loss < 0.10:
        score += 5
    if stops.max_drawdown < 0.30:
        score += 5
    if stops.take_profit > 0:
        score += 2
    if stops.trailing_stop > 0:
        score += 3

    return int(max(MIN_STRENGTH, min(MAX_STRENGTH, round(score))))
