"""
TradeSim - Central Configuration

This module contains all system-wide constants, defaults and environment settings.
It serves as the single source of truth for engine constants.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Environment Settings ---
ENVIRONMENT = os.getenv('ENVIRONMENT', 'production')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_TO_FILE = os.getenv('TRADESIM_LOG_TO_FILE', '1') not in ('0', 'false', 'False', '')


def _optional_int(name: str):
    raw = os.getenv(name, '').strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


# --- Run Defaults ---
DEFAULT_SEED = _optional_int('TRADESIM_DEFAULT_SEED')
DEFAULT_DAYS = int(os.getenv('TRADESIM_DEFAULT_DAYS', '30'))
MC_WORKERS = int(os.getenv('TRADESIM_MC_WORKERS', '1'))
MC_BATCH_SIZE = 10

# --- Engine Constants ---
TRADE_LOG_LIMIT = 10_000          # Max retained trade records (FIFO)
CAPITAL_FLOOR = 0.01              # Capital never drops below this
CAPITAL_CLAMP = 1e12              # Upper clamp for tier lookup
DEFAULT_RISK_PERCENT = 0.05       # Fallback tier risk
DAILY_COMPOUND_RATE = 1.0002
RISK_FREE_RATE = 0.02             # Annual
TRADING_DAYS_PER_YEAR = 365
INITIAL_ASSET_PRICE = 10_000.0

# --- Market Model ---
ASSET_PICK_FREQUENCY = 0.314
STRATEGY_PICK_FREQUENCY = 0.5
RANDOM_SHOCK_THRESHOLD = 20       # out of 1000 (~2%)
EVENT_IMPACT = {
    "high": 1.5,
    "medium": 1.2,
}
REGIME_TABLE = {
    "normal": (1.1, 1.00),
    "bull": (0.8, 1.05),
    "bear": (1.4, 0.85),
    "volatile": (2.0, 1.00),
}

# --- Fees / Slippage ---
# (notional upper bound, fee rate); last band is open ended
FEE_BANDS = [
    (1_000.0, 0.003),
    (10_000.0, 0.002),
    (100_000.0, 0.0015),
]
FEE_RATE_FLOOR_BAND = 0.001
BASE_SLIPPAGE = 0.0005
MIN_SLIPPAGE = 0.0001
MAX_SIZE_SLIPPAGE = 0.01
MAX_FINAL_SLIPPAGE = 0.005
