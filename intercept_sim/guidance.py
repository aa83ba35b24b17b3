"""
Guidance module implementing the two interceptor guidance laws:

- PIP_PURSUIT: open-loop steering toward a (possibly stale) predicted
  intercept point by nulling the line-of-sight rate to that point.
- TERMINAL_PN: closed-loop true proportional navigation against the live
  target, a = N * Vc * (omega x los_hat).

Both laws share one contract, compute_guidance_command(), and are selected
by the phase manager. The set of laws is closed; dispatch is a lookup on
the GuidanceLaw tag rather than a class hierarchy.
"""

from enum import Enum, auto

import numpy as np

from . import constants as C
from .config import EngagementConfig
from .utils import clamp_magnitude


class GuidanceLaw(Enum):
    PIP_PURSUIT = auto()
    TERMINAL_PN = auto()


# =============================================================================
# HELPER FUNCTIONS (stateless)
# =============================================================================

def compute_los_rate(own_position: np.ndarray, own_velocity: np.ndarray,
                     aim_position: np.ndarray, aim_velocity: np.ndarray) -> np.ndarray:
    """
    Line-of-sight angular rate vector.

    omega = (r x v_rel) / |r|^2, r = aim - own, v_rel = v_aim - v_own
    """
    r = aim_position - own_position
    r_sq = float(np.dot(r, r))
    if r_sq < C.ZERO_TOLERANCE:
        return np.zeros(3)
    v_rel = aim_velocity - own_velocity
    return np.cross(r, v_rel) / r_sq


def compute_closing_velocity(own_position: np.ndarray, own_velocity: np.ndarray,
                             aim_position: np.ndarray, aim_velocity: np.ndarray) -> float:
    """Closing velocity Vc = -(r . v_rel) / |r| (positive when closing)."""
    r = aim_position - own_position
    r_norm = float(np.linalg.norm(r))
    if r_norm < C.ZERO_TOLERANCE:
        return 0.0
    v_rel = aim_velocity - own_velocity
    return -float(np.dot(r, v_rel)) / r_norm


def _pn_acceleration(own_position: np.ndarray, own_velocity: np.ndarray,
                     aim_position: np.ndarray, aim_velocity: np.ndarray,
                     gain: float) -> np.ndarray:
    r = aim_position - own_position
    r_norm = float(np.linalg.norm(r))
    if r_norm < C.ZERO_TOLERANCE:
        return np.zeros(3)
    omega = compute_los_rate(own_position, own_velocity, aim_position, aim_velocity)
    vc = compute_closing_velocity(own_position, own_velocity, aim_position, aim_velocity)
    return gain * vc * np.cross(omega, r / r_norm)


# =============================================================================
# GUIDANCE LAWS
# =============================================================================

def pip_pursuit_command(own_position: np.ndarray, own_velocity: np.ndarray,
                        pip: np.ndarray, config: EngagementConfig) -> np.ndarray:
    """
    Steer toward a fixed predicted intercept point.

    The PIP is treated as stationary, so nulling the LOS rate to it turns
    the velocity vector onto the PIP.
    """
    return _pn_acceleration(own_position, own_velocity, pip, np.zeros(3),
                            config.navigation_gain)


def proportional_navigation_command(own_position: np.ndarray, own_velocity: np.ndarray,
                                    target_position: np.ndarray,
                                    target_velocity: np.ndarray,
                                    config: EngagementConfig) -> np.ndarray:
    """
    True proportional navigation against the live target.

    a = N * Vc * (omega x los_hat)
    """
    return _pn_acceleration(own_position, own_velocity, target_position,
                            target_velocity, config.navigation_gain)


_LAWS = {
    GuidanceLaw.PIP_PURSUIT: lambda p, v, ap, av, cfg: pip_pursuit_command(p, v, ap, cfg),
    GuidanceLaw.TERMINAL_PN: proportional_navigation_command,
}


def compute_guidance_command(law: GuidanceLaw, own_position: np.ndarray,
                             own_velocity: np.ndarray, aim_position: np.ndarray,
                             aim_velocity: np.ndarray,
                             config: EngagementConfig) -> np.ndarray:
    """
    Compute the acceleration command for the selected guidance law.

    Args:
        law: Guidance law tag
        own_position: Interceptor position (ft)
        own_velocity: Interceptor velocity (ft/s)
        aim_position: PIP (pursuit) or target position (PN) (ft)
        aim_velocity: Ignored by PIP pursuit; target velocity for PN (ft/s)
        config: Engagement configuration

    Returns:
        Commanded acceleration (ft/s^2), clamped to interceptor_max_g
    """
    command = _LAWS[law](np.asarray(own_position, dtype=np.float64),
                         np.asarray(own_velocity, dtype=np.float64),
                         np.asarray(aim_position, dtype=np.float64),
                         np.asarray(aim_velocity, dtype=np.float64),
                         config)
    return clamp_magnitude(command, config.interceptor_max_g * C.G0)
