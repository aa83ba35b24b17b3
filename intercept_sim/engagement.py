"""
Interceptor Engagement Simulation - Engagement Loop

This module implements the fixed-step engagement march:
- Initialization and (Phase-Based only) pre-simulation
- One sequential time march until intercept, miss or time limit
- Optional per-step history for external animation/reporting
- The immutable EngagementResult handed back to callers

Execution order per timestep:
1. Integrate the target (once it has launched)
2. Feed the optimal interceptor selector, applying any deactivation
3. For each interceptor: launch if due, select guidance mode from the
   range at the start of the step, compute and clamp the command,
   accrue effort, integrate, check for intercept/divergence
4. Check termination

Coordinate frame: NED, feet, seconds.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple

import numpy as np

from . import constants as C
from .config import EngagementConfig, create_default_config
from .dynamics import compute_interceptor_acceleration
from .guidance import compute_guidance_command
from .phase_manager import GuidanceMode, Strategy, guidance_law_for_mode
from .pip import compute_pip
from .presim import CandidateTrajectory, assign_interceptors, run_presimulation
from .selector import OptimalInterceptorSelector
from .state import KinematicState
from .utils import closest_approach_in_step
from .validation import check_state_finite, validate_config
from .vehicles import Interceptor, ManeuverCase, Target

# Configure module logger
logger = logging.getLogger(__name__)


class Outcome(Enum):
    INTERCEPTED = auto()
    MISSED = auto()
    TIMED_OUT = auto()


class EngagementPhase(Enum):
    INITIALIZING = auto()
    PRESIMULATING = auto()
    MARCHING = auto()
    TERMINATED = auto()


@dataclass
class EngagementLog:
    """Container for per-step engagement history."""
    time: List[float] = field(default_factory=list)
    target_position: List[np.ndarray] = field(default_factory=list)
    target_velocity: List[np.ndarray] = field(default_factory=list)
    target_aoa_deg: List[float] = field(default_factory=list)
    # Per step, one entry per interceptor (salvo order)
    interceptor_position: List[Tuple[np.ndarray, ...]] = field(default_factory=list)
    interceptor_mode: List[Tuple[str, ...]] = field(default_factory=list)
    interceptor_range: List[Tuple[float, ...]] = field(default_factory=list)
    interceptor_command_g: List[Tuple[float, ...]] = field(default_factory=list)
    interceptor_effort: List[Tuple[float, ...]] = field(default_factory=list)

    def append(self, t: float, target: Target, interceptors: List[Interceptor],
               modes: List[str], ranges: List[float], commands_g: List[float]):
        """Log data from current timestep."""
        self.time.append(t)
        self.target_position.append(target.state.r.copy())
        self.target_velocity.append(target.state.v.copy())
        self.target_aoa_deg.append(float(np.degrees(target.state.alpha)))
        self.interceptor_position.append(tuple(i.state.r.copy() for i in interceptors))
        self.interceptor_mode.append(tuple(modes))
        self.interceptor_range.append(tuple(ranges))
        self.interceptor_command_g.append(tuple(commands_g))
        self.interceptor_effort.append(tuple(i.effort for i in interceptors))

    def __len__(self) -> int:
        return len(self.time)

    def interceptor_track(self, index: int) -> np.ndarray:
        """Position history of one interceptor as an (n, 3) array."""
        return np.array([row[index] for row in self.interceptor_position])

    def target_track(self) -> np.ndarray:
        return np.array(self.target_position)


@dataclass(frozen=True)
class EngagementResult:
    """Outcome and metrics of one engagement. Immutable once built."""
    outcome: Outcome
    strategy: Strategy
    termination_reason: str
    final_time: float
    steps: int
    intercept_time: Optional[float]
    intercepting_interceptor: Optional[int]
    # Closest approach of the intercepting interceptor, or the best over all
    # launched interceptors when there was no hit (inf if none launched)
    miss_distance: float
    effort: Tuple[float, ...]
    effort_penalty: Tuple[bool, ...]
    final_modes: Tuple[GuidanceMode, ...]
    deactivation_times: Tuple[Optional[float], ...]
    assignments: Tuple[Optional[ManeuverCase], ...]
    selected_case: Optional[ManeuverCase] = None
    maneuver_detected_time: Optional[float] = None
    selection_time: Optional[float] = None
    pip_nonconverged_count: int = 0
    target_impact: bool = False
    target_anomaly: bool = False
    history: Optional[EngagementLog] = None

    @property
    def success(self) -> bool:
        return self.outcome == Outcome.INTERCEPTED

    @property
    def total_effort(self) -> float:
        return float(sum(self.effort))

    @property
    def active_interceptors(self) -> Tuple[int, ...]:
        """Indices of interceptors that were never deactivated."""
        return tuple(i for i, mode in enumerate(self.final_modes)
                     if mode != GuidanceMode.DEACTIVATED)


class EngagementRun:
    """
    Owns every piece of mutable state for one engagement.

    Nothing here is shared between runs, so independent runs can execute
    in separate worker processes.
    """

    def __init__(self, config: EngagementConfig, strategy: Strategy, record: bool = False):
        # Configuration errors fail here, before any state exists
        validate_config(config)

        self.config = config
        self.strategy = strategy
        self.phase = EngagementPhase.INITIALIZING
        self.dt = config.dt
        self.n_steps = int(round(config.max_time / config.dt))
        self.step_index = 0

        self.target = Target(config)
        self.target_launch_step = int(round(config.target_launch_delay / config.dt))

        self.candidates: Dict[ManeuverCase, CandidateTrajectory] = {}
        self.selector: Optional[OptimalInterceptorSelector] = None
        assignments: Tuple[Optional[ManeuverCase], ...] = (None,) * config.num_interceptors
        if strategy == Strategy.PHASE_BASED:
            self.phase = EngagementPhase.PRESIMULATING
            self.candidates = run_presimulation(config)
            assignments = assign_interceptors(config.num_interceptors)
            self.selector = OptimalInterceptorSelector(self.candidates, config)
            for case, candidate in self.candidates.items():
                logger.info("Candidate %s: PIP t_go=%.2fs converged=%s",
                            case.name, candidate.pip_time_to_go, candidate.pip_converged)
        self.assignments = assignments

        self.launch_steps = [
            self.target_launch_step + int(round(config.launch_time(i) / config.dt))
            for i in range(config.num_interceptors)
        ]
        self.interceptors = [
            Interceptor(i, self.launch_steps[i] * self.dt, config, strategy, assignments[i])
            for i in range(config.num_interceptors)
        ]

        self.pip_nonconverged = 0
        self.target_impact = False
        self.target_anomaly = False
        self.log = EngagementLog() if record else None
        if self.log is not None:
            n = config.num_interceptors
            self.log.append(0.0, self.target, self.interceptors,
                            [GuidanceMode.PRELAUNCH.name] * n, [float('nan')] * n, [0.0] * n)

    # ------------------------------------------------------------------
    # Guidance
    # ------------------------------------------------------------------

    def _live_pip(self, interceptor: Interceptor, target_state: KinematicState,
                  position: np.ndarray, speed: float):
        solution = compute_pip(target_state.r, target_state.v, position, speed,
                               tolerance=self.config.pip_tolerance,
                               max_iterations=self.config.pip_max_iterations)
        if not solution.converged:
            self.pip_nonconverged += 1
        return solution

    def _launch_aim_point(self, interceptor: Interceptor, target_state: KinematicState) -> np.ndarray:
        if interceptor.assignment is not None:
            return self.candidates[interceptor.assignment].pip
        return self._live_pip(interceptor, target_state, interceptor.launch_position,
                              self.config.interceptor_speed).point

    def _guidance_aim(self, interceptor: Interceptor, mode: GuidanceMode,
                      target_state: KinematicState) -> Tuple[np.ndarray, np.ndarray]:
        if mode == GuidanceMode.PRECALCULATED_PIP:
            return self.candidates[interceptor.assignment].pip, np.zeros(3)
        if mode == GuidanceMode.MIDCOURSE_PIP:
            solution = self._live_pip(interceptor, target_state, interceptor.state.r,
                                      interceptor.state.speed)
            return solution.point, np.zeros(3)
        return target_state.r, target_state.v

    # ------------------------------------------------------------------
    # Time march
    # ------------------------------------------------------------------

    def _apply_selection(self, case: ManeuverCase, t: float) -> None:
        for interceptor in self.interceptors:
            if interceptor.assignment != case and not interceptor.is_terminal():
                interceptor.deactivate(t)
                logger.info("Interceptor %d (%s) deactivated by selection at t=%.2fs",
                            interceptor.index, interceptor.assignment.name, t)

    def _step_interceptor(self, interceptor: Interceptor, k: int, t_prev: float, t: float,
                          target_prev: KinematicState) -> Tuple[str, float, float]:
        """Advance one interceptor; returns (mode name, range, command in G)."""
        if interceptor.intercepted:
            return 'INTERCEPTED', float(np.linalg.norm(self.target.state.r - interceptor.state.r)), 0.0

        if interceptor.deactivated:
            if interceptor.launched:
                interceptor.step(np.zeros(3), self.dt)
                interceptor.state.t = t
            return GuidanceMode.DEACTIVATED.name, float(
                np.linalg.norm(self.target.state.r - interceptor.state.r)), 0.0

        if not interceptor.launched and k >= self.launch_steps[interceptor.index]:
            interceptor.launch(self._launch_aim_point(interceptor, target_prev), t_prev)
            logger.info("Interceptor %d launched at t=%.2fs", interceptor.index, t_prev)

        range_to_target = float(np.linalg.norm(target_prev.r - interceptor.state.r))
        mode = interceptor.phase.update(range_to_target, t_prev, interceptor.launch_time)
        law = guidance_law_for_mode(mode)
        if law is None:
            return mode.name, range_to_target, 0.0

        aim_position, aim_velocity = self._guidance_aim(interceptor, mode, target_prev)
        command = compute_guidance_command(law, interceptor.state.r, interceptor.state.v,
                                           aim_position, aim_velocity, self.config)
        if not np.all(np.isfinite(command)):
            logger.warning("Interceptor %d: non-finite guidance command at t=%.2fs; deactivating",
                           interceptor.index, t_prev)
            interceptor.deactivate(t_prev, penalty=True)
            return GuidanceMode.DEACTIVATED.name, range_to_target, 0.0

        applied = compute_interceptor_acceleration(interceptor.state.r, interceptor.state.v,
                                                   command, self.config)
        interceptor.accrue_effort(applied['maneuver_magnitude'], self.dt)

        r_prev = interceptor.state.r.copy()
        interceptor.step(command, self.dt)
        interceptor.state.t = t

        if not check_state_finite(interceptor.state):
            logger.warning("Interceptor %d: non-finite state at t=%.2fs; deactivating",
                           interceptor.index, t)
            interceptor.deactivate(t, penalty=True)
            return mode.name, range_to_target, applied['maneuver_magnitude'] / C.G0

        distance, u = closest_approach_in_step(r_prev, interceptor.state.r,
                                               target_prev.r, self.target.state.r)
        interceptor.closest_approach = min(interceptor.closest_approach, distance)
        if distance <= self.config.intercept_radius:
            interceptor.intercepted = True
            interceptor.intercept_time = t_prev + u * self.dt
            logger.info("Interceptor %d intercepted target at t=%.3fs (miss %.1f ft)",
                        interceptor.index, interceptor.intercept_time, distance)
        else:
            interceptor.update_range(float(np.linalg.norm(self.target.state.r - interceptor.state.r)))
            if interceptor.state.altitude < 0.0:
                logger.info("Interceptor %d hit the ground at t=%.2fs", interceptor.index, t)
                interceptor.deactivate(t)

        return mode.name, range_to_target, applied['maneuver_magnitude'] / C.G0

    def step(self) -> Optional[Tuple[Outcome, str]]:
        """
        Execute one complete engagement timestep.

        Returns:
            (outcome, reason) once the engagement terminates, else None
        """
        k = self.step_index
        t_prev = k * self.dt
        t = (k + 1) * self.dt

        # Step 1: Target
        target_prev = self.target.state.copy()
        target_moved = k >= self.target_launch_step
        if target_moved:
            self.target.step(self.dt)
            if not check_state_finite(self.target.state):
                logger.warning("Target state became non-finite at t=%.2fs", t)
                self.target_anomaly = True
                self.step_index += 1
                return Outcome.MISSED, "Target state non-finite"

        # Step 2: Optimal interceptor selection
        if self.selector is not None and target_moved:
            case = self.selector.observe(self.target.flight_step, t, self.target.state.r)
            if case is not None:
                self._apply_selection(case, t)

        # Step 3: Interceptors
        modes, ranges, commands = [], [], []
        for interceptor in self.interceptors:
            mode, rng, cmd_g = self._step_interceptor(interceptor, k, t_prev, t, target_prev)
            modes.append(mode)
            ranges.append(rng)
            commands.append(cmd_g)

        self.step_index += 1
        if self.log is not None:
            self.log.append(t, self.target, self.interceptors, modes, ranges, commands)

        if target_moved and self.target.state.altitude <= 0.0:
            self.target_impact = True

        # Step 4: Termination
        return self.check_termination()

    def check_termination(self) -> Optional[Tuple[Outcome, str]]:
        """
        Check engagement termination conditions.

        Returns:
            (outcome, reason) tuple, or None to keep marching
        """
        hits = [i for i in self.interceptors if i.intercepted]
        if hits and self.config.stop_on_intercept:
            return Outcome.INTERCEPTED, f"Interceptor {hits[0].index} hit the target"

        if self.target_impact:
            if hits:
                return Outcome.INTERCEPTED, "Target reached the ground after intercept"
            return Outcome.MISSED, "Target reached the ground"

        pending = any(not i.launched and not i.is_terminal() for i in self.interceptors)
        closing = any(i.active and not i.diverged for i in self.interceptors)
        if not pending and not closing:
            if hits:
                return Outcome.INTERCEPTED, "All interceptors finished"
            return Outcome.MISSED, "Target passed all active interceptors"

        if self.step_index >= self.n_steps:
            if hits:
                return Outcome.INTERCEPTED, "Maximum simulation time reached after intercept"
            return Outcome.TIMED_OUT, "Maximum simulation time reached"

        return None

    def run(self) -> EngagementResult:
        """Run the time march to termination and build the result."""
        self.phase = EngagementPhase.MARCHING
        logger.info("Engagement start: strategy=%s, %d interceptor(s), dt=%.3fs, max_time=%.1fs",
                    self.strategy.name, len(self.interceptors), self.dt, self.config.max_time)

        termination = None
        while termination is None:
            termination = self.step()
        outcome, reason = termination

        self.phase = EngagementPhase.TERMINATED
        result = self._build_result(outcome, reason)
        logger.info("Engagement end: %s at t=%.2fs (%s)", outcome.name, result.final_time, reason)
        return result

    def _build_result(self, outcome: Outcome, reason: str) -> EngagementResult:
        hits = [i for i in self.interceptors if i.intercepted]
        if hits:
            first = min(hits, key=lambda i: i.intercept_time)
            intercept_time = first.intercept_time
            hitter = first.index
            miss_distance = first.closest_approach
        else:
            intercept_time = None
            hitter = None
            launched = [i.closest_approach for i in self.interceptors if i.launched]
            miss_distance = min(launched) if launched else float('inf')

        selector = self.selector
        return EngagementResult(
            outcome=outcome,
            strategy=self.strategy,
            termination_reason=reason,
            final_time=self.step_index * self.dt,
            steps=self.step_index,
            intercept_time=intercept_time,
            intercepting_interceptor=hitter,
            miss_distance=miss_distance,
            effort=tuple(i.effort for i in self.interceptors),
            effort_penalty=tuple(i.effort_penalty for i in self.interceptors),
            final_modes=tuple(i.mode for i in self.interceptors),
            deactivation_times=tuple(i.deactivation_time for i in self.interceptors),
            assignments=self.assignments,
            selected_case=selector.selected_case if selector else None,
            maneuver_detected_time=selector.trigger_time if selector else None,
            selection_time=selector.decision_time if selector else None,
            pip_nonconverged_count=self.pip_nonconverged,
            target_impact=self.target_impact,
            target_anomaly=self.target_anomaly,
            history=self.log,
        )


def run_engagement(config: Optional[EngagementConfig] = None,
                   strategy: Strategy = Strategy.LEGACY,
                   record: Optional[bool] = None) -> EngagementResult:
    """
    Run one complete engagement.

    Args:
        config: EngagementConfig instance. If None a default is created.
        strategy: Legacy or Phase-Based guidance strategy
        record: Keep per-step history. Defaults to config.record_history.

    Returns:
        EngagementResult

    Raises:
        ConfigurationError: If the configuration is rejected (no state is
                            created and the run never starts)
    """
    if config is None:
        config = create_default_config()
    if record is None:
        record = config.record_history
    return EngagementRun(config, strategy, record=record).run()


def extract_metrics(result: EngagementResult) -> dict:
    """Flatten a result into scalar metrics for reports and batch statistics."""
    return {
        'outcome': result.outcome.name,
        'strategy': result.strategy.name,
        'success': result.success,
        'intercept_time': result.intercept_time,
        'miss_distance': result.miss_distance,
        'total_effort': result.total_effort,
        'max_effort': max(result.effort) if result.effort else 0.0,
        'active_interceptors': len(result.active_interceptors),
        'selected_case': result.selected_case.name if result.selected_case else None,
        'selection_time': result.selection_time,
        'pip_nonconverged_count': result.pip_nonconverged_count,
        'penalized_interceptors': sum(result.effort_penalty),
        'final_time': result.final_time,
        'termination_reason': result.termination_reason,
    }
