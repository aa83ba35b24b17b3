"""
Interceptor Engagement Simulation - Validation Checks

This module implements the checks that run outside the integrator:
- Configuration validation before an engagement starts (hard failure)
- Finite-state checks during the run (recovered by the caller)
"""

import numpy as np

from .config import EngagementConfig
from .state import KinematicState


class ConfigurationError(ValueError):
    """Raised when an engagement configuration is rejected before the run."""
    pass


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigurationError(message)


def validate_config(config: EngagementConfig) -> bool:
    """
    Reject configurations that cannot produce a meaningful engagement.

    Args:
        config: Engagement configuration

    Returns:
        True if valid, raises ConfigurationError otherwise
    """
    _require(config.dt > 0.0, f"Time step must be positive, got {config.dt}")
    _require(config.max_time > 0.0, f"Max simulation time must be positive, got {config.max_time}")
    _require(config.dt <= config.max_time,
             f"Time step {config.dt} exceeds max simulation time {config.max_time}")

    _require(config.num_interceptors >= 1,
             f"At least one interceptor is required, got {config.num_interceptors}")
    _require(config.target_launch_delay >= 0.0,
             f"Target launch delay must be non-negative, got {config.target_launch_delay}")
    _require(config.interceptor_launch_delay >= 0.0,
             f"Interceptor launch delay must be non-negative, got {config.interceptor_launch_delay}")
    _require(config.salvo_interval >= 0.0,
             f"Salvo interval must be non-negative, got {config.salvo_interval}")
    last_launch = config.launch_time(config.num_interceptors - 1)
    _require(last_launch < config.max_time,
             f"Last salvo launch at {last_launch:.2f}s is beyond max simulation time "
             f"{config.max_time:.2f}s")

    _require(config.interceptor_speed > 0.0,
             f"Interceptor speed must be positive, got {config.interceptor_speed}")
    _require(config.interceptor_max_g > 0.0 and config.target_max_g > 0.0,
             "G-limits must be positive")
    _require(config.target_mass > 0.0 and config.interceptor_mass > 0.0,
             "Vehicle masses must be positive")
    _require(config.target_aoa_min_deg <= 0.0 <= config.target_aoa_max_deg,
             f"AoA range [{config.target_aoa_min_deg}, {config.target_aoa_max_deg}] "
             "must contain zero")
    _require(len(config.presim_maneuver_aoa_deg) == 3,
             "Pre-simulation needs exactly three maneuver AoA values "
             "(positive, zero, negative)")

    _require(config.navigation_gain > 0.0,
             f"Navigation gain must be positive, got {config.navigation_gain}")
    _require(0.0 < config.terminal_range < config.midcourse_range,
             f"Gating ranges must satisfy 0 < terminal ({config.terminal_range}) "
             f"< midcourse ({config.midcourse_range})")
    _require(config.pip_tolerance > 0.0 and config.pip_max_iterations >= 1,
             "PIP tolerance must be positive and the iteration cap at least 1")

    _require(config.observation_window > 0.0,
             f"Observation window must be positive, got {config.observation_window}")
    _require(config.maneuver_detection_threshold > 0.0,
             "Maneuver detection threshold must be positive")
    _require(config.intercept_radius > 0.0,
             f"Intercept radius must be positive, got {config.intercept_radius}")
    _require(config.divergence_margin >= 0.0,
             f"Divergence margin must be non-negative, got {config.divergence_margin}")

    vectors = (config.target_initial_position, config.target_initial_velocity,
               config.launch_position)
    _require(all(len(vec) == 3 and np.all(np.isfinite(vec)) for vec in vectors),
             "Initial positions and velocities must be finite 3-vectors")
    return True


def check_state_finite(state: KinematicState) -> bool:
    """True when the state has no NaN/Inf component."""
    return state.is_finite()
