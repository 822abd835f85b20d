"""
Tests for TradeSim risk tier table
"""
import math

import pytest

from tradesim.sim.risk_tiers import DEFAULT_TIERS, FALLBACK_TIER, RiskTierTable
from tradesim.sim.sim_config import TierSpec


def _matching(table, capital):
    return [t for t in table.tiers if t.contains(capital)]


def test_default_table_used_when_no_specs():
    table = RiskTierTable.from_thresholds([])
    assert table.tiers == DEFAULT_TIERS
    assert table.tier_for(50).risk_percent == 0.8
    assert table.tier_for(1000).risk_percent == 0.03
    assert table.tier_for(1e9).risk_percent == 0.02


@pytest.mark.parametrize("capital", [0.0, 0.01, 99.99, 100.0, 499.0, 500.0, 4999.99, 5000.0, 1e12])
def test_every_capital_maps_to_exactly_one_tier(capital):
    table = RiskTierTable.from_thresholds([])
    assert len(_matching(table, capital)) == 1


def test_from_thresholds_sorts_and_links_bounds():
    specs = [
        TierSpec(threshold=5000, risk_percent=0.01),
        TierSpec(threshold=50, risk_percent=0.5),
        TierSpec(threshold=1000, risk_percent=0.05),
    ]
    tiers = RiskTierTable.from_thresholds(specs).tiers

    # Lowest threshold is pinned to 0 so small capital is still covered
    assert tiers[0].threshold == 0.0
    assert tiers[0].max_threshold == 1000
    assert tiers[1].threshold == 1000
    assert tiers[1].max_threshold == 5000
    assert math.isinf(tiers[-1].max_threshold)

    for a, b in zip(tiers, tiers[1:]):
        assert a.max_threshold == b.threshold


def test_duplicate_thresholds_do_not_leave_gaps():
    specs = [
        TierSpec(threshold=0, risk_percent=0.2),
        TierSpec(threshold=1000, risk_percent=0.1),
        TierSpec(threshold=1000, risk_percent=0.05),
    ]
    table = RiskTierTable.from_thresholds(specs)
    for capital in (0, 999, 1000, 10_000):
        assert len(_matching(table, capital)) == 1


def test_tier_for_clamps_out_of_range_capital():
    table = RiskTierTable.from_thresholds([])
    assert table.tier_for(-10).risk_percent == 0.8
    assert table.tier_for(float("inf")).risk_percent == 0.02


def test_empty_table_falls_back_to_five_percent():
    assert RiskTierTable([]).tier_for(1234) == FALLBACK_TIER
    assert FALLBACK_TIER.risk_percent == 0.05
