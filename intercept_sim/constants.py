"""
Interceptor Engagement Simulation - Physical Constants and Default Parameters

This module defines the environment constants, vehicle parameters and the
default guidance/engagement settings used throughout the simulation.

Unit conventions:
- Frame: North-East-Down (NED), flat non-rotating Earth, origin at the
  launch site on the ground
- Length: feet, Time: seconds, Mass: slugs, Force: lbf
- Altitude is -r[2] (down axis points into the ground)
"""

import numpy as np

# =============================================================================
# ENVIRONMENT
# =============================================================================

# Standard gravitational acceleration (ft/s^2)
G0 = 32.174

# Gravity vector in NED (points down)
GRAVITY_NED = np.array([0.0, 0.0, G0])

# Exponential atmosphere
RHO_0 = 0.0023769  # Sea level density (slug/ft^3)
H_SCALE = 23800.0  # Density scale height (ft)

# Unit conversions
FT_PER_KM = 3280.84

# =============================================================================
# SIMULATION TIMING
# =============================================================================

DT = 0.01  # Integration time step (s)
MAX_TIME = 100.0  # Maximum engagement time (s)

# =============================================================================
# TARGET (BALLISTIC RE-ENTRY VEHICLE)
# =============================================================================

# Initial state: 400 kft north of the launch site at 200 kft altitude,
# heading south on a ~25 deg descending flight path at ~6000 ft/s
TARGET_INITIAL_POSITION = (400000.0, 0.0, -200000.0)  # ft (NED)
TARGET_INITIAL_VELOCITY = (-5438.0, 0.0, 2536.0)  # ft/s (NED)

# Mass properties: 1000 lb weight, ballistic coefficient W/(CD0*S) = 2000 psf
TARGET_MASS = 31.08  # slug
TARGET_REFERENCE_AREA = 5.0  # ft^2
TARGET_CD0 = 0.1  # zero-lift drag coefficient
TARGET_CL_ALPHA = 2.0  # lift curve slope (per rad)
TARGET_INDUCED_DRAG_FACTOR = 0.5  # CD = CD0 + k * CL^2

# Limits
TARGET_MAX_G = 30.0  # maneuver acceleration limit (G)
TARGET_AOA_MIN_DEG = -5.0
TARGET_AOA_MAX_DEG = 10.0

# Maneuver schedule
MANEUVER_ALTITUDE = 100000.0  # ft, altitude at which the maneuver begins

# Pre-simulation AoA assumptions (positive, zero, negative), degrees
PRESIM_MANEUVER_AOA_DEG = (10.0, 0.0, -5.0)

# =============================================================================
# INTERCEPTORS
# =============================================================================

NUM_INTERCEPTORS = 3
LAUNCH_POSITION = (0.0, 0.0, 0.0)  # ft (NED), launch site on the ground
INTERCEPTOR_LAUNCH_DELAY = 10.0  # s after target launch
SALVO_INTERVAL = 0.5  # s between successive launches
INTERCEPTOR_SPEED = 4500.0  # launch speed (ft/s)
INTERCEPTOR_MAX_G = 50.0  # lateral acceleration limit (G)

# Aerodynamics (drag is optional and off by default)
INTERCEPTOR_MASS = 15.54  # slug (500 lb)
INTERCEPTOR_REFERENCE_AREA = 1.0  # ft^2
INTERCEPTOR_CD0 = 0.3

# =============================================================================
# GUIDANCE
# =============================================================================

NAVIGATION_GAIN = 4.0  # PN effective navigation ratio N

# Phase gating ranges
TERMINAL_RANGE = 5.0 * FT_PER_KM  # below: terminal PN (ft)
MIDCOURSE_RANGE = 10.0 * FT_PER_KM  # above: pre-calculated PIP (ft)

# PIP solver
PIP_TOLERANCE = 1.0e-4  # s, time-to-go convergence tolerance
PIP_MAX_ITERATIONS = 25

# =============================================================================
# OPTIMAL INTERCEPTOR SELECTION
# =============================================================================

OBSERVATION_WINDOW = 10.0  # s
MANEUVER_DETECTION_THRESHOLD = 5.0  # ft deviation from the zero-maneuver case

# =============================================================================
# TERMINATION
# =============================================================================

INTERCEPT_RADIUS = 50.0  # ft
DIVERGENCE_MARGIN = 1000.0  # ft beyond closest approach

# =============================================================================
# NUMERICAL TOLERANCES
# =============================================================================

ZERO_TOLERANCE = 1e-9
