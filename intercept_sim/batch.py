"""
Interceptor Engagement Simulation - Batch Engagement Analysis

Framework for running many independent engagements to compare guidance
strategies on success rate and control effort. Runs are dispersed in
target maneuver AoA and maneuver start time.

Runs execute in a process pool when more than one worker is available;
otherwise, or if the pool cannot be started, they run serially. Each run
owns all of its state, so the only synchronization is result collection.
"""

import logging
import os
import time
from concurrent.futures import ProcessPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

import numpy as np

from .config import EngagementConfig, create_default_config
from .engagement import extract_metrics, run_engagement
from .phase_manager import Strategy

logger = logging.getLogger(__name__)


@dataclass
class BatchRunResult:
    """Result from a single batch run."""
    run_index: int
    success: bool
    outcome: str
    miss_distance: float
    total_effort: float
    intercept_time: Optional[float]
    selected_case: Optional[str]
    final_reason: str
    dispersions_applied: Dict[str, float] = field(default_factory=dict)


@dataclass
class BatchResults:
    """Aggregated results from a batch of engagements."""
    strategy: Strategy
    runs: List[BatchRunResult] = field(default_factory=list)
    workers: int = 1
    wall_time_s: float = 0.0

    @property
    def n_runs(self) -> int:
        return len(self.runs)

    @property
    def success_rate(self) -> float:
        if not self.runs:
            return 0.0
        return sum(r.success for r in self.runs) / len(self.runs)

    @property
    def n_errors(self) -> int:
        return sum(r.final_reason.startswith("ERROR") for r in self.runs)

    def get_statistic(self, attr: str) -> dict:
        """Compute mean/std/min/max for a scalar attribute across runs."""
        values = [getattr(r, attr) for r in self.runs
                  if getattr(r, attr, None) is not None and np.isfinite(getattr(r, attr))]
        if not values:
            return {'mean': 0, 'std': 0, 'min': 0, 'max': 0}
        arr = np.array(values, dtype=np.float64)
        return {
            'mean': float(np.mean(arr)),
            'std': float(np.std(arr)),
            'min': float(np.min(arr)),
            'max': float(np.max(arr)),
        }

    def summary(self) -> str:
        """Return a formatted summary string."""
        lines = [f"Batch Results ({self.strategy.name}): {self.n_runs} runs on "
                 f"{self.workers} worker(s) in {self.wall_time_s:.1f}s",
                 f"  {'success_rate':25s}: {self.success_rate:.3f}"]
        for attr in ['miss_distance', 'total_effort', 'intercept_time']:
            stats = self.get_statistic(attr)
            lines.append(f"  {attr:25s}: mean={stats['mean']:.2f} std={stats['std']:.2f} "
                         f"min={stats['min']:.2f} max={stats['max']:.2f}")
        if self.n_errors:
            lines.append(f"  {'errors':25s}: {self.n_errors}")
        return '\n'.join(lines)


def create_dispersed_configs(base_config: EngagementConfig = None, n_runs: int = 100,
                             seed: int = 42,
                             start_time_range: tuple = (15.0, 30.0)) -> List[EngagementConfig]:
    """
    Build n_runs configs with dispersed target maneuvers.

    Each run draws the target's AoA uniformly from the pre-simulation set
    and its maneuver start time uniformly from start_time_range.
    """
    if base_config is None:
        base_config = create_default_config()

    rng = np.random.default_rng(seed)
    configs = []
    for _ in range(n_runs):
        aoa = float(rng.choice(base_config.presim_maneuver_aoa_deg))
        start = float(rng.uniform(*start_time_range))
        configs.append(replace(base_config, target_maneuver_aoa_deg=aoa,
                               maneuver_start_time=start, maneuver_altitude=None))
    return configs


def probe_worker_count(max_workers: Optional[int] = None) -> int:
    """Number of workers to use: the request capped by available CPUs."""
    available = os.cpu_count() or 1
    if max_workers is None:
        return available
    return max(1, min(max_workers, available))


def _run_one(run_index: int, config: EngagementConfig, strategy: Strategy) -> BatchRunResult:
    dispersions = {
        'target_maneuver_aoa_deg': config.target_maneuver_aoa_deg,
        'maneuver_start_time': config.maneuver_start_time
        if config.maneuver_start_time is not None else float('nan'),
    }
    try:
        metrics = extract_metrics(run_engagement(config, strategy, record=False))
        return BatchRunResult(
            run_index=run_index,
            success=metrics['success'],
            outcome=metrics['outcome'],
            miss_distance=metrics['miss_distance'],
            total_effort=metrics['total_effort'],
            intercept_time=metrics['intercept_time'],
            selected_case=metrics['selected_case'],
            final_reason=metrics['termination_reason'],
            dispersions_applied=dispersions,
        )
    except Exception as e:
        return BatchRunResult(
            run_index=run_index, success=False, outcome="ERROR",
            miss_distance=float('inf'), total_effort=0.0, intercept_time=None,
            selected_case=None, final_reason=f"ERROR: {e}",
            dispersions_applied=dispersions,
        )


def _run_serial(configs: List[EngagementConfig], strategy: Strategy) -> List[BatchRunResult]:
    return [_run_one(i, cfg, strategy) for i, cfg in enumerate(configs)]


def _run_parallel(configs: List[EngagementConfig], strategy: Strategy,
                  workers: int) -> List[BatchRunResult]:
    with ProcessPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(_run_one, i, cfg, strategy) for i, cfg in enumerate(configs)]
        return [f.result() for f in futures]


def run_batch(configs: List[EngagementConfig],
              strategy: Strategy = Strategy.LEGACY,
              max_workers: Optional[int] = None,
              verbose: bool = True) -> BatchResults:
    """
    Run a batch of independent engagements.

    Args:
        configs: One configuration per run
        strategy: Guidance strategy for every run
        max_workers: Worker cap; None uses all available CPUs, 1 forces
                     serial execution
        verbose: Print the summary when done

    Returns:
        BatchResults with per-run data and statistics
    """
    workers = probe_worker_count(max_workers)
    if len(configs) < 2:
        workers = 1
    results = BatchResults(strategy=strategy, workers=workers)
    start = time.time()

    if workers > 1:
        try:
            results.runs = _run_parallel(configs, strategy, workers)
        except (OSError, NotImplementedError, BrokenProcessPool) as e:
            logger.warning("Process pool unavailable (%s); falling back to serial execution", e)
            results.workers = 1
            results.runs = _run_serial(configs, strategy)
    else:
        results.runs = _run_serial(configs, strategy)

    results.wall_time_s = time.time() - start

    if verbose:
        print(results.summary())

    return results
