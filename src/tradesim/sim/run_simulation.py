"""
TradeSim - Simulation CLI
=========================

Run a single simulation or a Monte Carlo sweep from the command line and
print a JSON summary.

Usage:
    python -m tradesim.sim.run_simulation --days 30 --seed 7
    python -m tradesim.sim.run_simulation --preset BULL_RUN_V1 --monte-carlo 200 --workers 4
    python -m tradesim.sim.run_simulation --config scenario.json --export-trades trades.csv
"""

import argparse
import json
import sys
from dataclasses import replace
from typing import List, Optional

from tradesim.core.config import DEFAULT_DAYS, DEFAULT_SEED, MC_WORKERS
from tradesim.core.logging_utils import get_logger
from tradesim.sim.model_strength import model_strength
from tradesim.sim.monte_carlo import MonteCarloRunner
from tradesim.sim.reports import summarize_monte_carlo, summarize_result, trade_log_frame
from tradesim.sim.sim_config import SimulationConfig, load_config
from tradesim.sim.sim_engine import SimulationEngine
from tradesim.sim.sim_presets import build_config_from_preset, get_all_presets, get_preset_by_id

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TradeSim - trading desk simulator")
    parser.add_argument("--days", type=int, default=DEFAULT_DAYS, help="Simulation horizon in days")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--config", type=str, help="Path to a JSON scenario config")
    source.add_argument("--preset", type=str, help="Preset ID (see --list-presets)")
    parser.add_argument("--list-presets", action="store_true", help="List available presets and exit")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Random seed")
    parser.add_argument("--monte-carlo", type=int, default=0, metavar="N", help="Run N independent simulations")
    parser.add_argument("--workers", type=int, default=MC_WORKERS, help="Thread workers for Monte Carlo")
    parser.add_argument("--export-trades", type=str, metavar="PATH", help="Write the trade log to CSV")
    return parser


def resolve_config(args: argparse.Namespace) -> SimulationConfig:
    """Config from --config, --preset or defaults; --seed overrides any of them."""
    if args.config:
        config = load_config(args.config)
    elif args.preset:
        preset = get_preset_by_id(args.preset)
        if preset is None:
            known = ", ".join(p.id for p in get_all_presets())
            raise ValueError(f"Unknown preset '{args.preset}'. Known presets: {known}")
        config = build_config_from_preset(preset)
    else:
        config = SimulationConfig()

    if args.seed is not None:
        config = replace(config, seed=args.seed)
    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_presets:
        for preset in get_all_presets():
            print(f"{preset.id:<24} v{preset.version:<8} {preset.label}")
        return 0

    try:
        config = resolve_config(args)
        logger.info(f"Model strength: {model_strength(config)}")

        if args.monte_carlo > 0:
            runner = MonteCarloRunner(
                config,
                runs=args.monte_carlo,
                total_days=args.days,
                seed=config.seed,
                max_workers=args.workers,
            )
            summary = runner.run(progress_callback=lambda pct: logger.info(f"Monte Carlo progress: {pct}%"))
            print(json.dumps(summarize_monte_carlo(summary), indent=2))
        else:
            result = SimulationEngine(config).simulate(args.days)
            print(json.dumps(summarize_result(result), indent=2))

            if args.export_trades:
                trade_log_frame(result).to_csv(args.export_trades, index=False)
                logger.info(f"Trade log exported to {args.export_trades} ({len(result.trade_log)} rows)")
    except (ValueError, FileNotFoundError, OSError) as e:
        logger.error(f"Simulation failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
