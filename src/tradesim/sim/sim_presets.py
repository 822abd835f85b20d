"""
TradeSim - Scenario Presets
===========================

Named, versioned scenario presets. Each preset maps to a SimulationConfig
that callers can tweak through build_config_from_preset().
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from tradesim.sim.sim_config import (
    MarketCondition,
    RiskTolerance,
    SimulationConfig,
    StopConfig,
    TierSpec,
)


@dataclass(frozen=True)
class SimPreset:
    """
    A stable, versioned simulation scenario.
    """
    id: str                 # Unique ID
    label: str              # Short user-facing label
    description: str
    tags: List[str]
    version: str            # Semver-like string
    base_config: SimulationConfig


# --- Preset Definitions ---

_BASELINE_V1 = SimPreset(
    id="BASELINE_V1",
    label="Baseline - 2 traders, 25x",
    description=(
        "Default desk: $1,000 start, 25x leverage, two traders splitting an "
        "8 hour session, edge fading from 80% to 65%."
    ),
    version="1.0.0",
    tags=["default", "normal"],
    base_config=SimulationConfig(),
)

_CONSERVATIVE_DESK_V1 = SimPreset(
    id="CONSERVATIVE_DESK_V1",
    label="Conservative desk - 4 traders, 10x",
    description=(
        "Lower leverage, conservative risk scaling and enforced guardrails. "
        "Tighter trailing stop, wider tier ladder."
    ),
    version="1.0.0",
    tags=["conservative", "guardrails"],
    base_config=SimulationConfig(
        starting_capital=5000.0,
        leverage=10.0,
        trading_hours=12,
        num_traders=4,
        initial_profitability=0.75,
        final_profitability=0.65,
        risk_tolerance=RiskTolerance.CONSERVATIVE,
        risk_tiers=(
            TierSpec(threshold=0, risk_percent=0.10),
            TierSpec(threshold=1000, risk_percent=0.03),
            TierSpec(threshold=10000, risk_percent=0.015),
        ),
        stops=StopConfig(
            max_daily_loss=0.03,
            max_drawdown=0.15,
            take_profit=0.08,
            trailing_stop=0.03,
            enforce_guardrails=True,
        ),
    ),
)

_BULL_RUN_V1 = SimPreset(
    id="BULL_RUN_V1",
    label="Bull run - aggressive",
    description=(
        "Bull regime with aggressive risk scaling and a weighted strategy mix "
        "tilted towards breakouts."
    ),
    version="1.0.0",
    tags=["bull", "aggressive"],
    base_config=SimulationConfig(
        leverage=50.0,
        market_condition=MarketCondition.BULL,
        risk_tolerance=RiskTolerance.AGGRESSIVE,
        strategy_weights={"scalp": 0.2, "swing": 0.2, "breakout": 0.6},
    ),
)

_VOLATILE_STRESS_V1 = SimPreset(
    id="VOLATILE_STRESS_V1",
    label="Volatile stress test",
    description=(
        "Volatile regime, thin liquidity and a weak edge. Useful as a "
        "Monte Carlo stress scenario."
    ),
    version="1.0.0",
    tags=["volatile", "stress"],
    base_config=SimulationConfig(
        market_condition=MarketCondition.VOLATILE,
        initial_profitability=0.70,
        final_profitability=0.55,
        base_volatility=1.3,
    ),
)

_PRESETS: Dict[str, SimPreset] = {
    p.id: p for p in [
        _BASELINE_V1,
        _CONSERVATIVE_DESK_V1,
        _BULL_RUN_V1,
        _VOLATILE_STRESS_V1,
    ]
}


# --- Public API ---

def get_all_presets() -> List[SimPreset]:
    """Return list of all registered presets."""
    return list(_PRESETS.values())


def get_preset_by_id(preset_id: str) -> Optional[SimPreset]:
    """Retrieve a preset by its unique ID."""
    return _PRESETS.get(preset_id)


def build_config_from_preset(preset: SimPreset, **overrides: Any) -> SimulationConfig:
    """
    Create a fresh SimulationConfig from a preset.
    Overrides are validated like any other config.
    """
    return replace(preset.base_config, **overrides)
