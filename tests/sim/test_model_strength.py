"""
Tests for TradeSim model strength heuristic
"""
from tradesim.sim.model_strength import model_strength
from tradesim.sim.sim_config import RiskTolerance, SimulationConfig, StopConfig


def test_default_config_strength():
    # 50 + 5 (initial edge) - 15 (edge fade) + 5 (traders) + 5 + 5 + 2 + 3 (stops)
    assert model_strength(SimulationConfig()) == 60


def test_safer_settings_score_higher():
    base = model_strength(SimulationConfig())
    safer = model_strength(SimulationConfig(leverage=5.0, risk_tolerance=RiskTolerance.CONSERVATIVE))
    riskier = model_strength(SimulationConfig(risk_tolerance=RiskTolerance.AGGRESSIVE))
    assert riskier < base < safer


def test_strength_is_clamped():
    strong = SimulationConfig(
        leverage=1.0,
        num_traders=20,
        risk_tolerance=RiskTolerance.CONSERVATIVE,
        initial_profitability=0.99,
        final_profitability=0.99,
    )
    assert model_strength(strong) == 99

    weak = SimulationConfig(
        leverage=100.0,
        num_traders=1,
        risk_tolerance=RiskTolerance.AGGRESSIVE,
        initial_profitability=0.99,
        final_profitability=0.10,
        stops=StopConfig(max_daily_loss=0.5, max_drawdown=0.9, take_profit=0.0, trailing_stop=0.0),
    )
    assert model_strength(weak) == 10
