"""
Interceptor Engagement Simulation - Pre-Simulation (Phase-Based strategy)

Before the main engagement starts, the target-only dynamics are flown
three times under the positive, zero and negative maneuver AoA
assumptions. Each run yields a CandidateTrajectory sampled at every
target flight step plus the PIP an interceptor from the launch site would
fly to. Interceptors are then assigned to the candidates round-robin.

The pre-simulation uses the same Target model, schedule and time step as
the live target, so a target that flies one of the assumed AoAs
reproduces that candidate exactly.
"""

from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

import numpy as np

from .config import EngagementConfig
from .pip import compute_pip
from .vehicles import ManeuverCase, Target

# Assignment order: the zero case gets the first interceptor so a single
# interceptor flies against the non-maneuvering prediction.
ASSIGNMENT_ORDER = (ManeuverCase.ZERO, ManeuverCase.POSITIVE, ManeuverCase.NEGATIVE)


@dataclass(frozen=True)
class CandidateTrajectory:
    """
    Predicted target trajectory for one maneuver assumption.

    Samples are indexed by target flight step: positions[k] is the target
    position at flight time k * dt.
    """
    case: ManeuverCase
    maneuver_aoa_deg: float
    dt: float
    times: np.ndarray
    positions: np.ndarray
    velocities: np.ndarray
    pip: Optional[np.ndarray] = None
    pip_time_to_go: float = 0.0
    pip_converged: bool = True

    @property
    def n_samples(self) -> int:
        return len(self.times)

    @property
    def horizon(self) -> float:
        return float(self.times[-1])

    def position_at_step(self, step: int) -> Optional[np.ndarray]:
        """Sampled position at a flight step, or None beyond the horizon."""
        if 0 <= step < self.n_samples:
            return self.positions[step]
        return None

    def position_at(self, t: float) -> np.ndarray:
        """Position at flight time t, interpolated between samples.

        Beyond the horizon the last sample is extrapolated at its velocity.
        """
        if t >= self.horizon:
            return self.positions[-1] + self.velocities[-1] * (t - self.horizon)
        if t <= 0.0:
            return self.positions[0].copy()
        return np.array([np.interp(t, self.times, self.positions[:, i]) for i in range(3)])

    def velocity_at(self, t: float) -> np.ndarray:
        if t >= self.horizon:
            return self.velocities[-1].copy()
        if t <= 0.0:
            return self.velocities[0].copy()
        return np.array([np.interp(t, self.times, self.velocities[:, i]) for i in range(3)])


def simulate_candidate(config: EngagementConfig, case: ManeuverCase,
                       maneuver_aoa_deg: float) -> CandidateTrajectory:
    """
    Fly the target alone under one maneuver assumption.

    Integration stops at ground impact or after max_time of flight.
    """
    dt = config.dt
    n_steps = int(round(config.max_time / dt))
    target = Target(config, maneuver_aoa_deg=maneuver_aoa_deg)

    times = [0.0]
    positions = [target.state.r.copy()]
    velocities = [target.state.v.copy()]
    for _ in range(n_steps):
        state = target.step(dt)
        times.append(state.t)
        positions.append(state.r.copy())
        velocities.append(state.v.copy())
        if state.altitude <= 0.0:
            break

    return CandidateTrajectory(
        case=case,
        maneuver_aoa_deg=maneuver_aoa_deg,
        dt=dt,
        times=np.array(times),
        positions=np.array(positions),
        velocities=np.array(velocities),
    )


def solve_candidate_pip(trajectory: CandidateTrajectory,
                        config: EngagementConfig) -> CandidateTrajectory:
    """Attach the PIP for an interceptor leaving the launch site at first salvo launch."""
    t_launch = config.launch_time(0)
    solution = compute_pip(
        trajectory.position_at(t_launch),
        trajectory.velocity_at(t_launch),
        np.array(config.launch_position, dtype=np.float64),
        config.interceptor_speed,
        trajectory=trajectory,
        time_offset=t_launch,
        tolerance=config.pip_tolerance,
        max_iterations=config.pip_max_iterations,
    )
    return replace(trajectory, pip=solution.point, pip_time_to_go=solution.time_to_go,
                   pip_converged=solution.converged)


def run_presimulation(config: EngagementConfig) -> Dict[ManeuverCase, CandidateTrajectory]:
    """
    Produce the three candidate trajectories with their PIPs.

    Returns:
        Mapping from maneuver case to its candidate trajectory
    """
    candidates = {}
    for case, aoa_deg in zip(ManeuverCase, config.presim_maneuver_aoa_deg):
        trajectory = simulate_candidate(config, case, aoa_deg)
        candidates[case] = solve_candidate_pip(trajectory, config)
    return candidates


def assign_interceptors(count: int) -> Tuple[ManeuverCase, ...]:
    """
    Assign each interceptor of the salvo to one candidate.

    Cases are dealt round-robin so counts differ by at most one and every
    case is covered once count >= 3.
    """
    return tuple(ASSIGNMENT_ORDER[i % len(ASSIGNMENT_ORDER)] for i in range(count))
