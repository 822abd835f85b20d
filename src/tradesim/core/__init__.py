# TradeSim Core Module
"""
Environment configuration, engine constants and logging setup.
"""
