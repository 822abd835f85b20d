"""
TradeSim - Simulation Configuration
===================================

Defines the configuration data structures for a simulation run.

A SimulationConfig is built once (from code, a preset or a JSON file),
validated on construction and then handed to the engine. No sub-model
reads settings from anywhere else during a run.
"""

import json
from dataclasses import asdict, dataclass, field, fields, is_dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union


class MarketCondition(Enum):
    """Baseline market regime when no scheduled event overrides it."""
    NORMAL = "normal"
    BULL = "bull"
    BEAR = "bear"
    VOLATILE = "volatile"


class CompoundFrequency(Enum):
    NONE = "none"
    DAILY = "daily"


class RiskTolerance(Enum):
    """Scales tier risk: conservative x0.7, moderate x1.0, aggressive x1.3."""
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


@dataclass(frozen=True)
class TierSpec:
    """
    User supplied risk tier: capital threshold and risk fraction.
    Upper bounds are derived when the RiskTierTable is built.
    """
    threshold: float
    risk_percent: float


@dataclass(frozen=True)
class AssetSpec:
    name: str
    volatility: float = 1.0
    drift: float = 1.0
    correlation: float = 0.7


@dataclass(frozen=True)
class Strategy:
    """
    Static strategy catalog entry.

    base_edge: baseline win probability before noise/decay.
    volatility_multiplier: informational, strategy's volatility appetite.
    decay_rate: how fast the edge erodes with cumulative trade count.
    """
    name: str
    base_edge: float
    volatility_multiplier: float
    decay_rate: float


@dataclass(frozen=True)
class EconomicEvent:
    """Scheduled regime override for a single day."""
    day: int
    effect: str                 # "bull" | "bear" | "volatile"
    impact_class: str = "low"   # "high" | "medium" | anything else
    name: str = ""


@dataclass(frozen=True)
class NewsItem:
    day: int
    text: str


@dataclass(frozen=True)
class MarketKnobs:
    """Market microstructure knobs."""
    price_impact: float = 0.05
    liquidity_factor: float = 1.0
    correlation_strength: float = 0.7
    news_sensitivity: float = 0.5


@dataclass(frozen=True)
class StopConfig:
    """
    Stop settings as fractions (0.10 = 10%).

    take_profit / trailing_stop act on every trade's candle. A value of 0
    disables that stop. max_daily_loss / max_drawdown are guardrails and
    only act when enforce_guardrails is set.
    """
    max_daily_loss: float = 0.05
    max_drawdown: float = 0.20
    take_profit: float = 0.10
    trailing_stop: float = 0.05
    enforce_guardrails: bool = False


DEFAULT_STRATEGIES: Tuple[Strategy, ...] = (
    Strategy(name="scalp", base_edge=0.75, volatility_multiplier=1.2, decay_rate=1.5),
    Strategy(name="swing", base_edge=0.65, volatility_multiplier=1.0, decay_rate=1.0),
    Strategy(name="breakout", base_edge=0.70, volatility_multiplier=1.4, decay_rate=1.2),
)

DEFAULT_ASSETS: Tuple[AssetSpec, ...] = (
    AssetSpec(name="BTC", volatility=1.0, drift=1.00, correlation=0.7),
    AssetSpec(name="ETH", volatility=1.2, drift=1.00, correlation=0.8),
    AssetSpec(name="SOL", volatility=1.5, drift=1.00, correlation=0.6),
)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable configuration for one simulation run.
    """
    # Account
    starting_capital: float = 1000.0
    leverage: float = 25.0
    trading_hours: int = 8
    num_traders: int = 2

    # Edge schedule (target win probability at start / end of horizon)
    initial_profitability: float = 0.80
    final_profitability: float = 0.65

    # Market & behaviour
    market_condition: MarketCondition = MarketCondition.NORMAL
    compound_frequency: CompoundFrequency = CompoundFrequency.DAILY
    risk_tolerance: RiskTolerance = RiskTolerance.MODERATE
    base_volatility: float = 1.0
    cyclical_period: float = 14.0

    # Tables supplied by the configuration provider
    risk_tiers: Tuple[TierSpec, ...] = ()
    assets: Tuple[AssetSpec, ...] = DEFAULT_ASSETS
    strategies: Tuple[Strategy, ...] = DEFAULT_STRATEGIES
    strategy_weights: Mapping[str, float] = field(default_factory=dict)
    trader_efficiency: Mapping[int, float] = field(default_factory=dict)
    economic_events: Tuple[EconomicEvent, ...] = ()
    news_events: Tuple[NewsItem, ...] = ()

    market: MarketKnobs = field(default_factory=MarketKnobs)
    stops: StopConfig = field(default_factory=StopConfig)

    seed: Optional[int] = None

    def __post_init__(self):
        # An empty asset list means the default BTC/ETH/SOL basket
        if not self.assets:
            object.__setattr__(self, "assets", DEFAULT_ASSETS)
        # Read-only copies; the caller's dicts stay independent
        object.__setattr__(self, "strategy_weights", MappingProxyType(dict(self.strategy_weights)))
        object.__setattr__(self, "trader_efficiency", MappingProxyType(dict(self.trader_efficiency)))
        validate_config(self)

    def efficiency_for(self, trader_index: int) -> float:
        """Efficiency for a 1-based trader index (1.0 when not overridden)."""
        return float(self.trader_efficiency.get(trader_index, 1.0))


def validate_config(cfg: SimulationConfig) -> None:
    """
    Reject configurations the engine cannot run.

    Raises:
        ValueError: On the first invalid field found.
    """
    if not cfg.starting_capital > 0:
        raise ValueError(f"starting_capital must be positive, got {cfg.starting_capital}")
    if not cfg.leverage > 0:
        raise ValueError(f"leverage must be positive, got {cfg.leverage}")
    if not cfg.trading_hours > 0:
        raise ValueError(f"trading_hours must be positive, got {cfg.trading_hours}")
    if int(cfg.num_traders) != cfg.num_traders or cfg.num_traders < 1:
        raise ValueError(f"num_traders must be a positive integer, got {cfg.num_traders}")

    for label, value in (("initial_profitability", cfg.initial_profitability),
                         ("final_profitability", cfg.final_profitability)):
        if not 0.0 < value <= 1.0:
            raise ValueError(f"{label} must be in (0, 1], got {value}")

    if not cfg.base_volatility > 0:
        raise ValueError(f"base_volatility must be positive, got {cfg.base_volatility}")
    if not cfg.cyclical_period > 0:
        raise ValueError(f"cyclical_period must be positive, got {cfg.cyclical_period}")

    if not cfg.assets:
        raise ValueError("At least one asset is required")
    if not cfg.strategies:
        raise ValueError("At least one strategy is required")

    for tier in cfg.risk_tiers:
        if tier.threshold < 0 or tier.risk_percent <= 0:
            raise ValueError(f"Invalid risk tier: {tier}")

    known = {s.name for s in cfg.strategies}
    for name, weight in cfg.strategy_weights.items():
        if name not in known:
            raise ValueError(f"Unknown strategy in weights: {name}")
        if weight < 0:
            raise ValueError(f"Strategy weight must be >= 0: {name}={weight}")

    for idx, eff in cfg.trader_efficiency.items():
        if not 0.5 <= eff <= 1.5:
            raise ValueError(f"Trader {idx} efficiency must be in [0.5, 1.5], got {eff}")

    if not cfg.market.liquidity_factor > 0:
        raise ValueError(f"liquidity_factor must be positive, got {cfg.market.liquidity_factor}")

    stops = cfg.stops
    if stops.take_profit < 0:
        raise ValueError(f"stops.take_profit must be >= 0, got {stops.take_profit}")
    for label in ("max_daily_loss", "max_drawdown", "trailing_stop"):
        value = getattr(stops, label)
        if not 0.0 <= value < 1.0:
            raise ValueError(f"stops.{label} must be in [0, 1), got {value}")


# --- Serialization ---

def config_to_dict(cfg: SimulationConfig) -> Dict[str, Any]:
    """JSON-safe dict view of a config (enums as their values)."""
    data: Dict[str, Any] = {}
    for f in fields(cfg):
        value = getattr(cfg, f.name)
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, Mapping):
            value = {str(k): v for k, v in value.items()}
        elif isinstance(value, tuple):
            value = [asdict(item) for item in value]
        elif is_dataclass(value):
            value = asdict(value)
        data[f.name] = value
    return data


def config_from_dict(data: Dict[str, Any]) -> SimulationConfig:
    """
    Build a SimulationConfig from a plain dict (e.g. parsed JSON).
    Missing keys fall back to the dataclass defaults.

    Raises:
        ValueError: On invalid values, missing required entry fields,
            unknown entry fields or wrongly typed sections.
    """
    try:
        return SimulationConfig(**_config_kwargs(data))
    except (TypeError, KeyError, AttributeError) as e:
        raise ValueError(f"Malformed simulation config: {e!r}") from e


def _config_kwargs(data: Dict[str, Any]) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {}

    scalar_keys = (
        "starting_capital", "leverage", "trading_hours", "num_traders",
        "initial_profitability", "final_profitability",
        "base_volatility", "cyclical_period", "seed",
    )
    for key in scalar_keys:
        if key in data:
            kwargs[key] = data[key]

    if "market_condition" in data:
        kwargs["market_condition"] = MarketCondition(data["market_condition"])
    if "compound_frequency" in data:
        kwargs["compound_frequency"] = CompoundFrequency(data["compound_frequency"])
    if "risk_tolerance" in data:
        kwargs["risk_tolerance"] = RiskTolerance(data["risk_tolerance"])

    if "risk_tiers" in data:
        kwargs["risk_tiers"] = tuple(
            TierSpec(threshold=float(t["threshold"]), risk_percent=float(t["risk_percent"]))
            for t in data["risk_tiers"]
        )
    if "assets" in data:
        kwargs["assets"] = tuple(AssetSpec(**a) for a in data["assets"])
    if "strategies" in data:
        kwargs["strategies"] = tuple(Strategy(**s) for s in data["strategies"])
    if "strategy_weights" in data:
        kwargs["strategy_weights"] = {str(k): float(v) for k, v in data["strategy_weights"].items()}
    if "trader_efficiency" in data:
        kwargs["trader_efficiency"] = {int(k): float(v) for k, v in data["trader_efficiency"].items()}
    if "economic_events" in data:
        kwargs["economic_events"] = tuple(EconomicEvent(**e) for e in data["economic_events"])
    if "news_events" in data:
        kwargs["news_events"] = tuple(NewsItem(**n) for n in data["news_events"])
    if "market" in data:
        kwargs["market"] = MarketKnobs(**data["market"])
    if "stops" in data:
        kwargs["stops"] = StopConfig(**data["stops"])

    return kwargs


def load_config(path: Union[str, Path]) -> SimulationConfig:
    """
    Load a SimulationConfig from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the content is not a valid configuration.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Simulation config not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config root must be an object: {path}")

    return config_from_dict(data)
