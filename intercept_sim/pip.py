"""
Interceptor Engagement Simulation - Predicted Intercept Point Solver

Finds the time-to-go at which an interceptor flying straight at its current
speed meets the target's predicted future position, i.e. the root of

    g(t_go) = |P(t_go) - p_i| / V_i - t_go

seeded with t_go(0) = R / (V_i - v_t . los_hat).

The plain fixed-point update t_go <- |P(t_go) - p_i| / V_i only contracts
when the target is slower than the interceptor, and the default re-entry
target is not. Each iteration therefore takes a secant step on g, falling
back to the fixed-point update under-relaxed by V_i / (V_i + |v_t|) when the
secant slope is unusable.

The target is propagated at constant velocity, or along a supplied
candidate trajectory. If the iteration does not settle within the cap the
estimate with the smallest residual is returned with converged=False; the
run never fails here.
"""

import logging
from typing import NamedTuple, Optional, Protocol

import numpy as np

from . import constants as C

logger = logging.getLogger(__name__)


class TargetPropagator(Protocol):
    """Anything that can report a predicted target position at a time."""

    def position_at(self, t: float) -> np.ndarray:
        ...


class PIPSolution(NamedTuple):
    """Result of a PIP solve."""
    point: np.ndarray
    time_to_go: float
    converged: bool
    iterations: int


def _seed_time_to_go(target_position: np.ndarray, target_velocity: np.ndarray,
                     interceptor_position: np.ndarray, interceptor_speed: float) -> float:
    """Straight-line range over closing speed."""
    rel = target_position - interceptor_position
    rng = float(np.linalg.norm(rel))
    los_hat = rel / rng
    closing = interceptor_speed - float(np.dot(target_velocity, los_hat))
    if closing <= C.ZERO_TOLERANCE:
        closing = interceptor_speed
    return rng / closing


def compute_pip(target_position: np.ndarray, target_velocity: np.ndarray,
                interceptor_position: np.ndarray, interceptor_speed: float,
                trajectory: Optional[TargetPropagator] = None,
                time_offset: float = 0.0,
                tolerance: float = C.PIP_TOLERANCE,
                max_iterations: int = C.PIP_MAX_ITERATIONS) -> PIPSolution:
    """
    Compute the predicted intercept point and time-to-go.

    Args:
        target_position: Current target position (ft)
        target_velocity: Current target velocity (ft/s)
        interceptor_position: Interceptor position (ft)
        interceptor_speed: Assumed interceptor speed (ft/s)
        trajectory: Optional candidate trajectory; when given, the target
                    position after t_go is read at trajectory time
                    time_offset + t_go instead of extrapolated linearly
        time_offset: Trajectory time corresponding to "now" (s)
        tolerance: Convergence tolerance on the residual g (s)
        max_iterations: Iteration cap

    Returns:
        PIPSolution(point, time_to_go, converged, iterations)

    Raises:
        ValueError: If interceptor_speed is not positive
    """
    if not interceptor_speed > 0.0:
        raise ValueError(f"Interceptor speed must be positive, got {interceptor_speed}")

    target_position = np.asarray(target_position, dtype=np.float64)
    target_velocity = np.asarray(target_velocity, dtype=np.float64)
    interceptor_position = np.asarray(interceptor_position, dtype=np.float64)

    if np.linalg.norm(target_position - interceptor_position) < C.ZERO_TOLERANCE:
        return PIPSolution(target_position.copy(), 0.0, True, 0)

    def predict(t_go: float) -> np.ndarray:
        if trajectory is not None:
            return trajectory.position_at(time_offset + t_go)
        return target_position + target_velocity * t_go

    def residual(t_go: float, point: np.ndarray) -> float:
        return float(np.linalg.norm(point - interceptor_position)) / interceptor_speed - t_go

    target_speed = float(np.linalg.norm(target_velocity))
    relaxation = interceptor_speed / (interceptor_speed + target_speed)

    t_go = _seed_time_to_go(target_position, target_velocity,
                            interceptor_position, interceptor_speed)
    t_prev = g_prev = None
    best_point, best_t, best_g = predict(t_go), t_go, float('inf')

    for iteration in range(1, max_iterations + 1):
        point = predict(t_go)
        g = residual(t_go, point)
        if abs(g) < abs(best_g):
            best_point, best_t, best_g = point, t_go, g
        if abs(g) < tolerance:
            return PIPSolution(point, t_go, True, iteration)

        # Secant step while the residual is falling, relaxed fixed point otherwise
        step = relaxation * g
        if t_prev is not None and abs(t_go - t_prev) > C.ZERO_TOLERANCE:
            slope = (g - g_prev) / (t_go - t_prev)
            if slope < -C.ZERO_TOLERANCE:
                step = -g / slope
        t_prev, g_prev = t_go, g
        t_go = t_go + step if t_go + step > 0.0 else 0.5 * t_go

    logger.debug("PIP did not converge in %d iterations (t_go=%.3f s, residual=%.3g s)",
                 max_iterations, best_t, best_g)
    return PIPSolution(best_point, best_t, False, max_iterations)
