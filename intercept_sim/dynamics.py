"""
Interceptor Engagement Simulation - Dynamics Equations

This module implements the point-mass equations of motion:
- Target:      r_dot = v,  v_dot = g + a_drag + clamp(a_lift, 30 G)
- Interceptor: r_dot = v,  v_dot = g + a_drag + clamp(a_lat, 50 G)

The maneuver component (target lift, interceptor guidance command) is
G-limited on its own before being summed with drag and gravity. The
interceptor command is applied perpendicular to the velocity, so guidance
turns the vehicle without changing its speed.
"""

import numpy as np

from . import constants as C
from .config import EngagementConfig
from .forces import (
    compute_drag_acceleration,
    compute_dynamic_pressure,
    compute_gravity_acceleration,
    compute_lift_acceleration,
)
from .types import AccelerationBreakdown
from .utils import clamp_magnitude, perpendicular_component


def clip_angle_of_attack(alpha: float, config: EngagementConfig) -> float:
    """Clip a commanded AoA (rad) to the target's allowed range."""
    return float(np.clip(alpha,
                         np.radians(config.target_aoa_min_deg),
                         np.radians(config.target_aoa_max_deg)))


def limit_lateral_acceleration(command: np.ndarray, v: np.ndarray,
                               max_g: float) -> np.ndarray:
    """
    Project a commanded acceleration perpendicular to velocity and clamp it.

    Args:
        command: Commanded acceleration (ft/s^2)
        v: Current velocity (ft/s)
        max_g: Limit in multiples of G0

    Returns:
        Applied lateral acceleration with |a| <= max_g * G0
    """
    lateral = perpendicular_component(np.asarray(command, dtype=np.float64), v)
    return clamp_magnitude(lateral, max_g * C.G0)


def compute_target_acceleration(r: np.ndarray, v: np.ndarray, alpha: float,
                                config: EngagementConfig) -> AccelerationBreakdown:
    """
    Target acceleration: gravity + drag + G-limited lift.

    CL = CL_alpha * alpha
    CD = CD0 + k * CL^2
    """
    alpha = clip_angle_of_attack(alpha, config)
    q_dyn = compute_dynamic_pressure(-r[2], float(np.linalg.norm(v)))
    cl = config.target_cl_alpha * alpha
    cd = config.target_cd0 + config.target_induced_drag_factor * cl * cl

    gravity = compute_gravity_acceleration()
    drag = compute_drag_acceleration(v, q_dyn, config.target_mass,
                                     config.target_reference_area, cd)
    lift = compute_lift_acceleration(v, q_dyn, config.target_mass,
                                     config.target_reference_area, cl)
    limit = config.target_max_g * C.G0
    maneuver = clamp_magnitude(lift, limit)
    maneuver_mag = float(np.linalg.norm(maneuver))

    return {
        'gravity': gravity,
        'drag': drag,
        'maneuver': maneuver,
        'total': gravity + drag + maneuver,
        'maneuver_magnitude': maneuver_mag,
        'limited': bool(np.linalg.norm(lift) > limit),
        'dynamic_pressure': q_dyn,
    }


def compute_interceptor_acceleration(r: np.ndarray, v: np.ndarray,
                                     command: np.ndarray,
                                     config: EngagementConfig) -> AccelerationBreakdown:
    """
    Interceptor acceleration: optional gravity/drag + lateral guidance command.

    The command is projected perpendicular to the velocity and clamped to
    interceptor_max_g; a command above the limit is applied at exactly the
    limit.
    """
    speed = float(np.linalg.norm(v))
    q_dyn = compute_dynamic_pressure(-r[2], speed)

    gravity = compute_gravity_acceleration() if config.interceptor_gravity else np.zeros(3)
    if config.interceptor_drag:
        drag = compute_drag_acceleration(v, q_dyn, config.interceptor_mass,
                                         config.interceptor_reference_area,
                                         config.interceptor_cd0)
    else:
        drag = np.zeros(3)

    maneuver = limit_lateral_acceleration(command, v, config.interceptor_max_g)
    lateral = perpendicular_component(np.asarray(command, dtype=np.float64), v)

    return {
        'gravity': gravity,
        'drag': drag,
        'maneuver': maneuver,
        'total': gravity + drag + maneuver,
        'maneuver_magnitude': float(np.linalg.norm(maneuver)),
        'limited': bool(np.linalg.norm(lateral) > config.interceptor_max_g * C.G0),
        'dynamic_pressure': q_dyn,
    }


def target_state_derivative(state_vec: np.ndarray, t: float, alpha: float,
                            config: EngagementConfig) -> np.ndarray:
    """
    Compute target state derivative as a flat vector for numerical integration.

    Args:
        state_vec: [r(3), v(3)]
        t: Time (unused, the model is autonomous)
        alpha: Commanded angle of attack held over the step (rad)
        config: Engagement configuration

    Returns:
        [r_dot(3), v_dot(3)]
    """
    r = state_vec[0:3]
    v = state_vec[3:6]
    accel = compute_target_acceleration(r, v, alpha, config)
    return np.concatenate([v, accel['total']])


def interceptor_state_derivative(state_vec: np.ndarray, t: float,
                                 command: np.ndarray,
                                 config: EngagementConfig) -> np.ndarray:
    """
    Compute interceptor state derivative as a flat vector for numerical integration.
    """
    r = state_vec[0:3]
    v = state_vec[3:6]
    accel = compute_interceptor_acceleration(r, v, command, config)
    return np.concatenate([v, accel['total']])
