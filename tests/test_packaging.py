"""
Tests for TradeSim package metadata
"""
from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parents[1]


def _project_table():
    with open(ROOT / "pyproject.toml", "rb") as fh:
        return tomllib.load(fh)["project"]


def test_readme_is_user_facing_and_present():
    readme = _project_table()["readme"]
    assert readme == "README.md"
    text = (ROOT / readme).read_text(encoding="utf-8")
    assert text.startswith("# TradeSim")
    assert "--monte-carlo" in text


def test_console_script_points_at_cli():
    scripts = _project_table()["scripts"]
    assert scripts["tradesim"] == "tradesim.sim.run_simulation:main"
