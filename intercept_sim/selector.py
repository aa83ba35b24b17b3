"""
Interceptor Engagement Simulation - Optimal Interceptor Selector

Watches the live target against the pre-simulated candidates:

1. IDLE        until the target departs from the zero-maneuver candidate
               by more than maneuver_detection_threshold
2. OBSERVING   collects target positions for observation_window seconds
               without deciding anything
3. DECIDED     picks the candidate with the smallest time-aligned sum of
               squared position errors over the window

Only one decision is made per engagement. If the target never departs
from the zero case the selector stays idle for the whole run.
"""

from enum import Enum, auto
import logging
from typing import Dict, List, Optional

import numpy as np

from .config import EngagementConfig
from .presim import CandidateTrajectory
from .vehicles import ManeuverCase

logger = logging.getLogger(__name__)


class SelectorState(Enum):
    IDLE = auto()
    OBSERVING = auto()
    DECIDED = auto()


def trajectory_deviation(steps: List[int], positions: List[np.ndarray],
                         candidate: CandidateTrajectory) -> float:
    """
    Sum of squared position errors between observed samples and a candidate.

    Samples are aligned on target flight step. A candidate that ends before
    an observed sample cannot explain it and scores infinity.
    """
    total = 0.0
    for step, position in zip(steps, positions):
        predicted = candidate.position_at_step(step)
        if predicted is None:
            return float('inf')
        err = position - predicted
        total += float(np.dot(err, err))
    return total


class OptimalInterceptorSelector:
    """Detect the target maneuver, observe it, and pick the matching candidate."""

    def __init__(self, candidates: Dict[ManeuverCase, CandidateTrajectory],
                 config: EngagementConfig):
        self.candidates = candidates
        self.config = config
        self.state = SelectorState.IDLE
        self.trigger_time: Optional[float] = None
        self.decision_time: Optional[float] = None
        self.selected_case: Optional[ManeuverCase] = None
        self.deviations: Dict[ManeuverCase, float] = {}
        self._steps: List[int] = []
        self._positions: List[np.ndarray] = []

    def _departed_from_zero_case(self, flight_step: int, position: np.ndarray) -> bool:
        reference = self.candidates[ManeuverCase.ZERO].position_at_step(flight_step)
        if reference is None:
            return False
        return float(np.linalg.norm(position - reference)) > self.config.maneuver_detection_threshold

    def observe(self, flight_step: int, t: float,
                position: np.ndarray) -> Optional[ManeuverCase]:
        """
        Feed one live target sample.

        Args:
            flight_step: Target flight step of the sample
            t: Engagement time of the sample (s)
            position: Target position (ft)

        Returns:
            The selected case on the step the decision is made, else None
        """
        if self.state == SelectorState.DECIDED:
            return None

        if self.state == SelectorState.IDLE:
            if not self._departed_from_zero_case(flight_step, position):
                return None
            self.state = SelectorState.OBSERVING
            self.trigger_time = t
            logger.info("Target maneuver detected at t=%.2fs; observing for %.1fs",
                        t, self.config.observation_window)

        self._steps.append(flight_step)
        self._positions.append(np.array(position, dtype=np.float64))

        if t - self.trigger_time < self.config.observation_window - 1e-9:
            return None

        self.deviations = {
            case: trajectory_deviation(self._steps, self._positions, candidate)
            for case, candidate in self.candidates.items()
        }
        self.selected_case = min(self.deviations, key=self.deviations.get)
        self.decision_time = t
        self.state = SelectorState.DECIDED
        logger.info("Selected %s candidate at t=%.2fs (deviations: %s)",
                    self.selected_case.name, t,
                    ", ".join(f"{c.name}={d:.3g}" for c, d in self.deviations.items()))
        return self.selected_case
