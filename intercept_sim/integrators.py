"""
Interceptor Engagement Simulation - Numerical Integration

This module implements the fixed-step RK4 integrator used for every
dynamics model. There is no adaptive step-size control: identical inputs
always produce identical outputs, which keeps regression runs reproducible.
NaN/Inf propagation is left to the caller to detect.
"""

from typing import Callable

import numpy as np

from .state import KinematicState

# rate_fn(y, t) -> dy/dt over the flat [r, v] vector
RateFunction = Callable[[np.ndarray, float], np.ndarray]


def rk4_step(state: KinematicState, rate_fn: RateFunction, dt: float) -> KinematicState:
    """
    Perform a single RK4 integration step.

    The RK4 method computes:
    k1 = f(t, y)
    k2 = f(t + dt/2, y + dt/2 * k1)
    k3 = f(t + dt/2, y + dt/2 * k2)
    k4 = f(t + dt, y + dt * k3)
    y_new = y + dt/6 * (k1 + 2*k2 + 2*k3 + k4)

    Args:
        state: Current state
        rate_fn: State derivative function with control inputs bound
        dt: Time step (s)

    Returns:
        New state after integration (alpha is carried over unchanged)

    Raises:
        ValueError: If dt <= 0
    """
    if dt <= 0:
        raise ValueError(f"Time step dt must be positive, got {dt}")

    t = state.t
    y = state.to_vector()

    k1 = rate_fn(y, t)
    k2 = rate_fn(y + 0.5 * dt * k1, t + 0.5 * dt)
    k3 = rate_fn(y + 0.5 * dt * k2, t + 0.5 * dt)
    k4 = rate_fn(y + dt * k3, t + dt)

    y_new = y + (dt / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)

    return KinematicState.from_vector(y_new, t + dt, alpha=state.alpha)


def euler_step(state: KinematicState, rate_fn: RateFunction, dt: float) -> KinematicState:
    """
    Perform a single Euler integration step.

    This is a first-order method, primarily for testing/comparison.
    """
    if dt <= 0:
        raise ValueError(f"Time step dt must be positive, got {dt}")

    y = state.to_vector()
    y_new = y + dt * rate_fn(y, state.t)
    return KinematicState.from_vector(y_new, state.t + dt, alpha=state.alpha)


def integrate(state: KinematicState, rate_fn: RateFunction, dt: float,
              method: str = 'rk4') -> KinematicState:
    """
    Integrate the state forward by one timestep.

    Args:
        state: Current state
        rate_fn: State derivative function
        dt: Time step (s)
        method: Integration method ('rk4' or 'euler')

    Returns:
        New state after integration
    """
    if method == 'rk4':
        return rk4_step(state, rate_fn, dt)
    elif method == 'euler':
        return euler_step(state, rate_fn, dt)
    else:
        raise ValueError(f"Unknown integration method: {method}")
