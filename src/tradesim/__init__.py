# TradeSim
"""
Stochastic trading desk simulator: risk tiers, trader psychology, synthetic
market regimes, transaction costs and Monte Carlo sweeps.
"""

__version__ = "1.0.0"
