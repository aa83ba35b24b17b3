"""
Interceptor Engagement Simulation - Utility Functions

This module contains the vector helpers shared by forces, dynamics,
guidance and the engagement loop.
"""

from typing import Tuple

import numpy as np

from . import constants as C


def unit_vector(vec: np.ndarray, fallback: np.ndarray = None) -> np.ndarray:
    """Return vec normalized, or fallback (zeros by default) if vec is ~0."""
    norm = np.linalg.norm(vec)
    if norm < C.ZERO_TOLERANCE:
        return np.zeros(3) if fallback is None else np.asarray(fallback, dtype=np.float64)
    return vec / norm


def clamp_magnitude(vec: np.ndarray, limit: float) -> np.ndarray:
    """Scale vec down so that |vec| <= limit, keeping its direction."""
    norm = np.linalg.norm(vec)
    if norm > limit and norm > C.ZERO_TOLERANCE:
        return vec * (limit / norm)
    return vec


def perpendicular_component(vec: np.ndarray, direction: np.ndarray) -> np.ndarray:
    """Component of vec perpendicular to direction."""
    d_hat = unit_vector(direction)
    if not np.any(d_hat):
        return vec.copy()
    return vec - np.dot(vec, d_hat) * d_hat


def closest_approach_in_step(a_prev: np.ndarray, a_curr: np.ndarray,
                             b_prev: np.ndarray, b_curr: np.ndarray) -> Tuple[float, float]:
    """
    Closest approach between two bodies moving in straight lines over one step.

    Both bodies move linearly from *_prev to *_curr over the step. The
    relative position is minimized over the step fraction u in [0, 1]:
        u = -(p0 . d) / |d|^2,  p0 = a_prev - b_prev,  d = relative motion

    Returns:
        (distance, u) tuple: minimum separation (ft) and step fraction at
        which it occurs
    """
    p0 = a_prev - b_prev
    d = (a_curr - a_prev) - (b_curr - b_prev)
    d_sq = float(np.dot(d, d))
    if d_sq > C.ZERO_TOLERANCE:
        u = float(np.clip(-np.dot(p0, d) / d_sq, 0.0, 1.0))
    else:
        u = 0.0
    return float(np.linalg.norm(p0 + u * d)), u
