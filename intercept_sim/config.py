"""
Interceptor Engagement Simulation - Configuration

This module provides an EngagementConfig dataclass for dependency injection,
so every component receives its parameters explicitly instead of reading
shared module-level state.

Visualization flags (silent, skip_animation, skip_plot) are carried for the
benefit of external reporting tools and are ignored by the engagement core.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from . import constants as C


@dataclass(frozen=True)
class EngagementConfig:
    """
    Immutable configuration for one engagement.

    Using frozen=True ensures configs cannot be accidentally modified.
    Create new configs via dataclass replace() if needed.

    Section grouping:
      1. Simulation timing
      2. Target initial state and aerodynamics
      3. Target maneuver
      4. Interceptor salvo
      5. Guidance
      6. Optimal interceptor selection
      7. Termination
      8. Output / misc
    """

    # ── 1. Simulation timing ─────────────────────────────────────────────
    dt: float = C.DT
    max_time: float = C.MAX_TIME

    # ── 2. Target ────────────────────────────────────────────────────────
    target_initial_position: Tuple[float, float, float] = C.TARGET_INITIAL_POSITION
    target_initial_velocity: Tuple[float, float, float] = C.TARGET_INITIAL_VELOCITY
    # Target stays at its initial state until this engagement time (s)
    target_launch_delay: float = 0.0
    target_mass: float = C.TARGET_MASS
    target_reference_area: float = C.TARGET_REFERENCE_AREA
    target_cd0: float = C.TARGET_CD0
    target_cl_alpha: float = C.TARGET_CL_ALPHA
    target_induced_drag_factor: float = C.TARGET_INDUCED_DRAG_FACTOR
    target_max_g: float = C.TARGET_MAX_G
    target_aoa_min_deg: float = C.TARGET_AOA_MIN_DEG
    target_aoa_max_deg: float = C.TARGET_AOA_MAX_DEG

    # ── 3. Target maneuver ───────────────────────────────────────────────
    # AoA the real target flies once its maneuver begins (deg)
    target_maneuver_aoa_deg: float = 0.0
    # Maneuver begins at this target flight time (s) or altitude (ft),
    # whichever comes first. None disables that trigger.
    maneuver_start_time: Optional[float] = None
    maneuver_altitude: Optional[float] = C.MANEUVER_ALTITUDE
    # Pre-simulation AoA assumptions: (positive, zero, negative) in degrees
    presim_maneuver_aoa_deg: Tuple[float, float, float] = C.PRESIM_MANEUVER_AOA_DEG

    # ── 4. Interceptor salvo ─────────────────────────────────────────────
    num_interceptors: int = C.NUM_INTERCEPTORS
    launch_position: Tuple[float, float, float] = C.LAUNCH_POSITION
    # First launch, measured from target launch (s)
    interceptor_launch_delay: float = C.INTERCEPTOR_LAUNCH_DELAY
    salvo_interval: float = C.SALVO_INTERVAL
    interceptor_speed: float = C.INTERCEPTOR_SPEED
    interceptor_max_g: float = C.INTERCEPTOR_MAX_G
    interceptor_gravity: bool = True
    interceptor_drag: bool = False
    interceptor_mass: float = C.INTERCEPTOR_MASS
    interceptor_reference_area: float = C.INTERCEPTOR_REFERENCE_AREA
    interceptor_cd0: float = C.INTERCEPTOR_CD0

    # ── 5. Guidance ──────────────────────────────────────────────────────
    navigation_gain: float = C.NAVIGATION_GAIN
    terminal_range: float = C.TERMINAL_RANGE
    midcourse_range: float = C.MIDCOURSE_RANGE
    pip_tolerance: float = C.PIP_TOLERANCE
    pip_max_iterations: int = C.PIP_MAX_ITERATIONS

    # ── 6. Optimal interceptor selection ─────────────────────────────────
    observation_window: float = C.OBSERVATION_WINDOW
    maneuver_detection_threshold: float = C.MANEUVER_DETECTION_THRESHOLD

    # ── 7. Termination ───────────────────────────────────────────────────
    intercept_radius: float = C.INTERCEPT_RADIUS
    divergence_margin: float = C.DIVERGENCE_MARGIN
    stop_on_intercept: bool = True

    # ── 8. Output / misc ─────────────────────────────────────────────────
    record_history: bool = False
    silent: bool = True
    skip_animation: bool = True
    skip_plot: bool = True

    def launch_time(self, salvo_index: int) -> float:
        """Salvo launch time relative to target launch (s)."""
        return self.interceptor_launch_delay + salvo_index * self.salvo_interval


def create_default_config() -> EngagementConfig:
    """Create an EngagementConfig with default values from constants."""
    return EngagementConfig()


def create_test_config(dt: float = C.DT, max_time: float = C.MAX_TIME,
                       **overrides) -> EngagementConfig:
    """Create a config suitable for testing.

    Any keyword arg accepted by EngagementConfig can be passed as an override.
    """
    defaults = dict(dt=dt, max_time=max_time, silent=True)
    defaults.update(overrides)
    return EngagementConfig(**defaults)
