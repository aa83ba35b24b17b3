"""
Interceptor Engagement Simulation - Type Definitions

This module provides TypedDict definitions for structured return types,
improving type safety and IDE support.
"""

from typing import TypedDict

import numpy as np
from numpy.typing import NDArray


class AccelerationBreakdown(TypedDict):
    """Return type for dynamics acceleration details (NED frame, ft/s^2)."""
    gravity: NDArray[np.float64]  # Gravity acceleration
    drag: NDArray[np.float64]  # Drag acceleration (opposite velocity)
    maneuver: NDArray[np.float64]  # Lift or guidance acceleration after G-limiting
    total: NDArray[np.float64]  # Sum of all contributions
    maneuver_magnitude: float  # |maneuver|
    limited: bool  # Whether the maneuver component hit its G-limit
    dynamic_pressure: float  # lbf/ft^2
