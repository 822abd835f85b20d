"""
Tests for the TradeSim command line entry point
"""
import json
import logging
import sys
from unittest.mock import patch

import pandas as pd
import pytest

from tradesim.core.logging_utils import init_logging
from tradesim.sim import run_simulation
from tradesim.sim.sim_config import SimulationConfig, config_to_dict


@pytest.fixture
def stderr_logging(capsys):
    """Route tradesim console logging to the captured stderr for one test."""
    init_logging(level=logging.INFO, log_to_file=False, stream=sys.stderr, force=True)
    yield
    init_logging(log_to_file=False, stream=sys.__stderr__, force=True)


def test_single_run_prints_summary(capsys):
    assert run_simulation.main(["--days", "3", "--seed", "5"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["days_simulated"] == 3
    assert out["total_trades"] == 24


def test_preset_monte_carlo(capsys):
    code = run_simulation.main(["--preset", "BULL_RUN_V1", "--days", "2", "--monte-carlo", "4", "--seed", "1"])
    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["runs"] == 4


def test_config_file_and_trade_export(tmp_path, capsys):
    cfg_path = tmp_path / "scenario.json"
    cfg_path.write_text(json.dumps(config_to_dict(SimulationConfig(num_traders=1, trading_hours=4))), encoding="utf-8")
    csv_path = tmp_path / "trades.csv"

    code = run_simulation.main(["--config", str(cfg_path), "--days", "2", "--export-trades", str(csv_path)])
    assert code == 0
    df = pd.read_csv(csv_path)
    assert len(df) == 8


def test_unknown_preset_exits_non_zero():
    assert run_simulation.main(["--preset", "NOPE"]) == 1


def test_missing_config_exits_non_zero(tmp_path):
    assert run_simulation.main(["--config", str(tmp_path / "missing.json")]) == 1


def test_malformed_config_exits_non_zero(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"assets": [{"name": "BTC", "vol": 2.0}]}), encoding="utf-8")
    assert run_simulation.main(["--config", str(path)]) == 1
    assert capsys.readouterr().out == ""


def test_list_presets(capsys):
    assert run_simulation.main(["--list-presets"]) == 0
    assert "BASELINE_V1" in capsys.readouterr().out


@patch("tradesim.sim.run_simulation.SimulationEngine")
def test_engine_failure_exits_non_zero(mock_engine):
    mock_engine.return_value.simulate.side_effect = ValueError("boom")
    assert run_simulation.main(["--days", "1"]) == 1
    mock_engine.return_value.simulate.assert_called_once_with(1)


def test_stdout_is_pure_json_and_logs_go_to_stderr(stderr_logging, capsys):
    assert run_simulation.main(["--days", "2", "--seed", "1"]) == 0
    captured = capsys.readouterr()

    summary = json.loads(captured.out)
    assert summary["days_simulated"] == 2
    assert "Simulation complete" in captured.err
    assert "Simulation complete" not in captured.out


def test_monte_carlo_stdout_is_pure_json(stderr_logging, capsys):
    assert run_simulation.main(["--days", "1", "--monte-carlo", "3", "--seed", "2"]) == 0
    captured = capsys.readouterr()

    assert json.loads(captured.out)["runs"] == 3
    assert "Monte Carlo progress" in captured.err
