"""
TradeSim - Monte Carlo Runner
=============================

Repeats a configuration many times with independent random streams and
reduces the per-run outcomes into summary statistics.

Every run builds its own SimulationEngine and numpy Generator spawned from
one SeedSequence, so a seeded sweep gives the same summary whether it runs
serially or on a thread pool. Aggregation happens after all runs finish.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from tradesim.core.config import MC_BATCH_SIZE, MC_WORKERS
from tradesim.core.logging_utils import get_logger
from tradesim.sim.sim_config import SimulationConfig
from tradesim.sim.sim_engine import SimulationEngine

logger = get_logger(__name__)

PERCENTILES = (5, 25, 50, 75, 95)


@dataclass(frozen=True)
class RunOutcome:
    run_id: int
    final_capital: float
    max_drawdown: float  # percent
    total_trades: int


@dataclass(frozen=True)
class MonteCarloSummary:
    runs: int
    avg_final_capital: float
    min_final_capital: float
    max_final_capital: float
    success_rate: float      # percent of runs ending above starting capital
    avg_drawdown: float      # percent
    final_capital_percentiles: Dict[int, float] = field(default_factory=dict)
    final_capitals: Tuple[float, ...] = ()
    drawdowns: Tuple[float, ...] = ()


class MonteCarloRunner:
    """
    Usage:
        summary = MonteCarloRunner(config, runs=100, total_days=30, seed=7).run()
    """

    def __init__(
        self,
        config: SimulationConfig,
        runs: int,
        total_days: int,
        seed: Optional[int] = None,
        max_workers: Optional[int] = None,
        batch_size: int = MC_BATCH_SIZE,
    ):
        if runs < 1:
            raise ValueError(f"runs must be >= 1, got {runs}")
        if total_days < 1:
            raise ValueError(f"total_days must be >= 1, got {total_days}")
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        self.config = config
        self.runs = runs
        self.total_days = total_days
        self.seed = seed if seed is not None else config.seed
        self.max_workers = max(1, max_workers if max_workers is not None else MC_WORKERS)
        self.batch_size = batch_size

    def _streams(self) -> List[np.random.Generator]:
        children = np.random.SeedSequence(self.seed).spawn(self.runs)
        return [np.random.default_rng(child) for child in children]

    def _run_one(self, run_id: int, rng: np.random.Generator) -> RunOutcome:
        result = SimulationEngine(self.config, rng=rng).simulate(self.total_days)
        return RunOutcome(
            run_id=run_id,
            final_capital=result.final_capital,
            max_drawdown=result.max_drawdown,
            total_trades=result.total_trades,
        )

    def run(self, progress_callback: Optional[Callable[[int], None]] = None) -> MonteCarloSummary:
        """
        Execute all runs in batches and return the aggregated summary.

        Args:
            progress_callback: Called after each batch with percent of runs done.
        """
        logger.info(
            f"Monte Carlo start: {self.runs} runs x {self.total_days} days, "
            f"workers={self.max_workers}, batch={self.batch_size}"
        )

        streams = self._streams()
        outcomes: List[RunOutcome] = []

        executor = ThreadPoolExecutor(max_workers=self.max_workers) if self.max_workers > 1 else None
        try:
            for start in range(0, self.runs, self.batch_size):
                batch = range(start, min(start + self.batch_size, self.runs))
                if executor is not None:
                    futures = [executor.submit(self._run_one, i, streams[i]) for i in batch]
                    outcomes.extend(f.result() for f in futures)
                else:
                    outcomes.extend(self._run_one(i, streams[i]) for i in batch)

                if progress_callback is not None:
                    progress_callback(int(len(outcomes) * 100 / self.runs))
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        outcomes.sort(key=lambda o: o.run_id)
        summary = summarize_outcomes(outcomes, self.config.starting_capital)

        logger.info(
            f"Monte Carlo complete: avg={summary.avg_final_capital:.2f}, "
            f"success={summary.success_rate:.1f}%, avg_dd={summary.avg_drawdown:.2f}%"
        )
        return summary


def summarize_outcomes(outcomes: List[RunOutcome], starting_capital: float) -> MonteCarloSummary:
    """Reduce per-run outcomes into a MonteCarloSummary."""
    if not outcomes:
        return MonteCarloSummary(
            runs=0,
            avg_final_capital=0.0,
            min_final_capital=0.0,
            max_final_capital=0.0,
            success_rate=0.0,
            avg_drawdown=0.0,
        )

    finals = np.array([o.final_capital for o in outcomes], dtype=float)
    drawdowns = np.array([o.max_drawdown for o in outcomes], dtype=float)

    return MonteCarloSummary(
        runs=len(outcomes),
        avg_final_capital=float(finals.mean()),
        min_final_capital=float(finals.min()),
        max_final_capital=float(finals.max()),
        success_rate=float((finals > starting_capital).mean() * 100),
        avg_drawdown=float(drawdowns.mean()),
        final_capital_percentiles={p: float(np.percentile(finals, p)) for p in PERCENTILES},
        final_capitals=tuple(float(v) for v in finals),
        drawdowns=tuple(float(v) for v in drawdowns),
    )
