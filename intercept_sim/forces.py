"""
Interceptor Engagement Simulation - Environment and Force Computations

This module implements the environment and aerodynamic models:
- Exponential atmosphere (density keyed on altitude)
- Uniform gravity (flat Earth, NED)
- Quadratic drag
- Lift perpendicular to velocity in the vertical maneuver plane

All functions are pure and return accelerations (ft/s^2) per unit mass
where a mass is supplied.
"""

import numpy as np

from . import constants as C
from .utils import unit_vector


# =============================================================================
# ATMOSPHERE MODEL (Exponential)
# =============================================================================

def compute_air_density(altitude: float) -> float:
    """
    Air density from the exponential atmosphere.

    rho = rho_0 * exp(-h / H)

    Args:
        altitude: Altitude above ground (ft). Negative values are treated
                  as sea level.

    Returns:
        Density (slug/ft^3)
    """
    h = max(float(altitude), 0.0)
    return C.RHO_0 * np.exp(-h / C.H_SCALE)


def compute_dynamic_pressure(altitude: float, speed: float) -> float:
    """Dynamic pressure q = 0.5 * rho * V^2 (lbf/ft^2)."""
    return 0.5 * compute_air_density(altitude) * speed * speed


# =============================================================================
# GRAVITY
# =============================================================================

def compute_gravity_acceleration() -> np.ndarray:
    """Gravity acceleration in NED (ft/s^2)."""
    return C.GRAVITY_NED.copy()


# =============================================================================
# AERODYNAMICS
# =============================================================================

def compute_drag_acceleration(v: np.ndarray, q_dyn: float, mass: float,
                              reference_area: float, cd: float) -> np.ndarray:
    """
    Drag acceleration opposite the velocity vector.

    a_D = -(q * S * CD / m) * v_hat
    """
    v_hat = unit_vector(v)
    if not np.any(v_hat) or mass < C.ZERO_TOLERANCE:
        return np.zeros(3)
    return -(q_dyn * reference_area * cd / mass) * v_hat


def compute_lift_direction(v: np.ndarray) -> np.ndarray:
    """
    Unit lift direction for a positive angle of attack.

    Lift lies in the vertical plane containing the velocity and points
    toward local up (-z in NED) as far as it can while staying
    perpendicular to the velocity. For a vertical velocity the plane is
    undefined and the north axis is used.
    """
    v_hat = unit_vector(v)
    if not np.any(v_hat):
        return np.zeros(3)
    up = np.array([0.0, 0.0, -1.0])
    lift_dir = up - np.dot(up, v_hat) * v_hat
    norm = np.linalg.norm(lift_dir)
    if norm < 1e-6:
        north = np.array([1.0, 0.0, 0.0])
        lift_dir = north - np.dot(north, v_hat) * v_hat
        norm = np.linalg.norm(lift_dir)
    return lift_dir / norm


def compute_lift_acceleration(v: np.ndarray, q_dyn: float, mass: float,
                              reference_area: float, cl: float) -> np.ndarray:
    """
    Lift acceleration perpendicular to velocity.

    a_L = (q * S * CL / m) * lift_dir
    Negative CL (negative AoA) pushes the vehicle down.
    """
    if mass < C.ZERO_TOLERANCE:
        return np.zeros(3)
    return (q_dyn * reference_area * cl / mass) * compute_lift_direction(v)
