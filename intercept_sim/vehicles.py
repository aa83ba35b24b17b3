"""
Interceptor Engagement Simulation - Vehicle Entities

Target and Interceptor each own their KinematicState and advance it only
through the RK4 integrator. All per-vehicle bookkeeping (maneuver latch,
guidance mode, effort, closest approach) lives on the entity so that
independent engagements never share mutable state.
"""

from enum import Enum
from typing import Optional

import numpy as np

from .config import EngagementConfig
from .dynamics import (
    clip_angle_of_attack,
    interceptor_state_derivative,
    target_state_derivative,
)
from .integrators import rk4_step
from .phase_manager import GuidanceMode, PhaseManager, Strategy
from .state import KinematicState
from .utils import unit_vector


class ManeuverCase(Enum):
    """Target maneuver assumption, in order of the configured AoA set."""
    POSITIVE = 0
    ZERO = 1
    NEGATIVE = 2


class Target:
    """
    Maneuvering ballistic target.

    The target's clock is its flight time: state.t = flight_step * dt.
    Its maneuver starts the first time either configured trigger (flight
    time or altitude) is met and stays on from then on.
    """

    def __init__(self, config: EngagementConfig, maneuver_aoa_deg: Optional[float] = None):
        self.config = config
        if maneuver_aoa_deg is None:
            maneuver_aoa_deg = config.target_maneuver_aoa_deg
        self.maneuver_aoa = clip_angle_of_attack(np.radians(maneuver_aoa_deg), config)
        self.state = KinematicState(
            r=np.array(config.target_initial_position, dtype=np.float64),
            v=np.array(config.target_initial_velocity, dtype=np.float64),
            alpha=0.0,
            t=0.0,
        )
        self.flight_step = 0
        self.maneuver_started_at: Optional[float] = None

    def _maneuver_triggered(self) -> bool:
        cfg = self.config
        if cfg.maneuver_start_time is not None and self.state.t >= cfg.maneuver_start_time - 1e-9:
            return True
        if cfg.maneuver_altitude is not None and self.state.altitude <= cfg.maneuver_altitude:
            return True
        return False

    def commanded_aoa(self) -> float:
        """AoA for the coming step, latching the maneuver start."""
        if self.maneuver_started_at is None and self._maneuver_triggered():
            self.maneuver_started_at = self.state.t
        return self.maneuver_aoa if self.maneuver_started_at is not None else 0.0

    def step(self, dt: float) -> KinematicState:
        """Advance the target one step with its AoA held over the step."""
        alpha = self.commanded_aoa()
        current = KinematicState(r=self.state.r, v=self.state.v, alpha=alpha, t=self.state.t)

        def rate_fn(y, t):
            return target_state_derivative(y, t, alpha, self.config)

        new_state = rk4_step(current, rate_fn, dt)
        self.flight_step += 1
        new_state.t = self.flight_step * dt
        self.state = new_state
        return new_state


class Interceptor:
    """
    One interceptor of the salvo.

    The interceptor sits at its launch position until launch(); from then
    on it is integrated every step, with a zero command once deactivated.
    Effort (integral of applied lateral acceleration) accrues only while
    it is launched and active.
    """

    def __init__(self, index: int, launch_time: float, config: EngagementConfig,
                 strategy: Strategy, assignment: Optional[ManeuverCase] = None):
        self.index = index
        self.launch_time = launch_time
        self.config = config
        self.launch_position = np.array(config.launch_position, dtype=np.float64)
        self.assignment = assignment
        self.phase = PhaseManager(index, strategy, config)
        self.state = KinematicState(r=self.launch_position.copy(), v=np.zeros(3))

        self.launched = False
        self.intercepted = False
        self.intercept_time: Optional[float] = None
        self.deactivation_time: Optional[float] = None
        self.effort = 0.0
        self.effort_penalty = False

        self.min_range = float('inf')
        self.closest_approach = float('inf')
        self.diverged = False
        self._prev_range: Optional[float] = None

    @property
    def mode(self) -> GuidanceMode:
        return self.phase.get_mode()

    @property
    def deactivated(self) -> bool:
        return self.mode == GuidanceMode.DEACTIVATED

    @property
    def active(self) -> bool:
        """Launched, still guiding and not yet hit."""
        return self.launched and not self.deactivated and not self.intercepted

    def is_terminal(self) -> bool:
        return self.intercepted or self.deactivated

    def launch(self, aim_point: np.ndarray, t: float) -> None:
        """Launch at the configured speed along the line to aim_point."""
        direction = unit_vector(np.asarray(aim_point, dtype=np.float64) - self.launch_position,
                                fallback=np.array([0.0, 0.0, -1.0]))
        self.state = KinematicState(r=self.launch_position.copy(),
                                    v=self.config.interceptor_speed * direction, t=t)
        self.launched = True

    def deactivate(self, t: float, penalty: bool = False) -> None:
        """Stop guiding for the rest of the run."""
        if self.is_terminal():
            return
        self.phase.deactivate(t)
        self.deactivation_time = t
        self.effort_penalty = self.effort_penalty or penalty

    def accrue_effort(self, acceleration_magnitude: float, dt: float) -> None:
        if self.active:
            self.effort += acceleration_magnitude * dt

    def step(self, command: np.ndarray, dt: float) -> KinematicState:
        """Advance one step with the command held over the step."""
        command = np.asarray(command, dtype=np.float64)

        def rate_fn(y, t):
            return interceptor_state_derivative(y, t, command, self.config)

        self.state = rk4_step(self.state, rate_fn, dt)
        return self.state

    def update_range(self, range_to_target: float) -> None:
        """Track closest approach and flag confirmed divergence."""
        self.min_range = min(self.min_range, range_to_target)
        opening = self._prev_range is not None and range_to_target > self._prev_range
        if opening and range_to_target > self.min_range + self.config.divergence_margin:
            self.diverged = True
        self._prev_range = range_to_target
