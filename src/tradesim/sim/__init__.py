# TradeSim Sim Module
"""
Simulation engine, market model and result reporting.
"""

from .sim_config import (
    AssetSpec,
    CompoundFrequency,
    EconomicEvent,
    MarketCondition,
    MarketKnobs,
    NewsItem,
    RiskTolerance,
    SimulationConfig,
    StopConfig,
    Strategy,
    TierSpec,
    load_config,
)
from .sim_engine import DailyResult, SimulationEngine, SimulationResult, simulate
from .monte_carlo import MonteCarloRunner, MonteCarloSummary
from .metrics import PROFIT_FACTOR_NO_LOSSES, PerformanceMetrics
from .model_strength import model_strength
from .sim_presets import SimPreset, build_config_from_preset, get_all_presets, get_preset_by_id

__all__ = [
    # Config
    "AssetSpec",
    "CompoundFrequency",
    "EconomicEvent",
    "MarketCondition",
    "MarketKnobs",
    "NewsItem",
    "RiskTolerance",
    "SimulationConfig",
    "StopConfig",
    "Strategy",
    "TierSpec",
    "load_config",
    # Engine
    "DailyResult",
    "SimulationEngine",
    "SimulationResult",
    "simulate",
    # Monte Carlo
    "MonteCarloRunner",
    "MonteCarloSummary",
    # Metrics
    "PROFIT_FACTOR_NO_LOSSES",
    "PerformanceMetrics",
    "model_strength",
    # Presets
    "SimPreset",
    "build_config_from_preset",
    "get_all_presets",
    "get_preset_by_id",
]
