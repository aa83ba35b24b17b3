"""
Interceptor Engagement Simulation Package

A point-mass simulation of a maneuvering ballistic target engaged by a
salvo of guided interceptors, for comparing the Legacy and Phase-Based
guidance strategies on success rate and control effort.

Modules:
    - constants: Environment constants and default parameters
    - config: Immutable engagement configuration
    - state: Kinematic state dataclass
    - forces: Atmosphere, gravity, drag and lift
    - dynamics: Target and interceptor equations of motion
    - integrators: RK4 numerical integration
    - pip: Predicted intercept point solver
    - guidance: PIP pursuit and proportional navigation
    - phase_manager: Per-interceptor guidance mode state machine
    - vehicles: Target and interceptor entities
    - presim: Candidate trajectory pre-simulation
    - selector: Optimal interceptor selection
    - engagement: Engagement loop entry point
    - batch: Parallel batch runner
    - validation: Configuration and state checks
"""

from .config import EngagementConfig, create_default_config, create_test_config
from .engagement import (
    EngagementLog,
    EngagementResult,
    Outcome,
    extract_metrics,
    run_engagement,
)
from .phase_manager import GuidanceMode, Strategy
from .state import KinematicState
from .validation import ConfigurationError
from .vehicles import ManeuverCase

__version__ = "1.0.0"
__author__ = "Intercept Simulation Team"

__all__ = [
    'EngagementConfig',
    'create_default_config',
    'create_test_config',
    'EngagementLog',
    'EngagementResult',
    'Outcome',
    'extract_metrics',
    'run_engagement',
    'GuidanceMode',
    'Strategy',
    'KinematicState',
    'ConfigurationError',
    'ManeuverCase',
]
