"""
Interceptor Engagement Simulation - Kinematic State

This module defines the point-mass state shared by the target and the
interceptors. Each entity owns exactly one KinematicState; only the
integrator produces new ones.
"""

from dataclasses import dataclass, field

import numpy as np


@dataclass
class KinematicState:
    """
    Point-mass kinematic state.

    Attributes:
        r: Position in NED frame (ft) [3]
        v: Velocity in NED frame (ft/s) [3]
        alpha: Angle of attack (rad), instantaneous response
        t: Time (s)
    """

    # Position in NED (ft)
    r: np.ndarray = field(default_factory=lambda: np.zeros(3))

    # Velocity in NED (ft/s)
    v: np.ndarray = field(default_factory=lambda: np.zeros(3))

    # Angle of attack (rad)
    alpha: float = 0.0

    # Time (s)
    t: float = 0.0

    def __post_init__(self):
        """Ensure arrays are numpy arrays with correct dtype."""
        for attr in ['r', 'v']:
            setattr(self, attr, np.asarray(getattr(self, attr), dtype=np.float64))

    def copy(self) -> 'KinematicState':
        """Create a deep copy of the state."""
        return KinematicState(r=self.r.copy(), v=self.v.copy(),
                              alpha=self.alpha, t=self.t)

    def to_vector(self) -> np.ndarray:
        """Convert state to a flat numpy array [r, v]."""
        return np.concatenate([self.r, self.v])

    @classmethod
    def from_vector(cls, vec: np.ndarray, t: float, alpha: float = 0.0) -> 'KinematicState':
        """
        Create a KinematicState from a flat numpy array.

        Args:
            vec: State vector [r(3), v(3)]
            t: Current simulation time
            alpha: Angle of attack carried over from the control input
        """
        return cls(r=vec[0:3].copy(), v=vec[3:6].copy(), alpha=alpha, t=t)

    @property
    def altitude(self) -> float:
        """Altitude above the flat ground (ft)."""
        return float(-self.r[2])

    @property
    def speed(self) -> float:
        """Magnitude of velocity (ft/s)."""
        return float(np.linalg.norm(self.v))

    def is_finite(self) -> bool:
        """True when every component is finite."""
        return bool(np.all(np.isfinite(self.r)) and np.all(np.isfinite(self.v))
                    and np.isfinite(self.alpha))

    def __str__(self) -> str:
        """Human-readable state summary."""
        return (
            f"KinematicState(t={self.t:.2f}s, "
            f"alt={self.altitude/1000:.2f}kft, "
            f"v={self.speed:.1f}ft/s)"
        )
