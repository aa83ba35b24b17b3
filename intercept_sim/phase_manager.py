"""
Interceptor Guidance Phase Manager

This module handles the per-interceptor guidance mode state machine.
It defines the discrete guidance modes, the two guidance strategies and
the transition rule between modes.

Transitions are a pure function of (range, time, deactivation flag):
  - Deactivated:       terminal, reachable from any non-terminal mode
  - PreLaunch:         until the interceptor's launch time elapses
  - Legacy:            range >= 5 km -> live PIP pursuit, else PN
  - Phase-Based:       range > 10 km -> pre-calculated PIP
                       5-10 km      -> live PIP pursuit
                       < 5 km       -> PN

The rule is re-evaluated every step and is not latched: if range opens
again, the mode follows it back. A target that re-extends range therefore
moves the interceptor back to an earlier mode instead of holding it in a
closer one.
"""

from enum import Enum, auto
import logging
from typing import List, Optional, Tuple

from .config import EngagementConfig
from .guidance import GuidanceLaw

logger = logging.getLogger(__name__)


class Strategy(Enum):
    LEGACY = auto()
    PHASE_BASED = auto()


class GuidanceMode(Enum):
    PRELAUNCH = auto()
    PRECALCULATED_PIP = auto()
    MIDCOURSE_PIP = auto()
    TERMINAL_PN = auto()
    DEACTIVATED = auto()


_MODE_LAWS = {
    GuidanceMode.PRELAUNCH: None,
    GuidanceMode.PRECALCULATED_PIP: GuidanceLaw.PIP_PURSUIT,
    GuidanceMode.MIDCOURSE_PIP: GuidanceLaw.PIP_PURSUIT,
    GuidanceMode.TERMINAL_PN: GuidanceLaw.TERMINAL_PN,
    GuidanceMode.DEACTIVATED: None,
}


def select_guidance_mode(strategy: Strategy, range_to_target: float, t: float,
                         launch_time: float, deactivated: bool,
                         config: EngagementConfig) -> GuidanceMode:
    """
    Select the guidance mode for one interceptor at one step.

    Args:
        strategy: Legacy or Phase-Based
        range_to_target: Live interceptor-target range (ft)
        t: Engagement time (s)
        launch_time: Interceptor launch time on the same clock (s)
        deactivated: Whether the interceptor has been deactivated
        config: Engagement configuration (gating ranges)

    Returns:
        GuidanceMode for this step
    """
    if deactivated:
        return GuidanceMode.DEACTIVATED
    if t < launch_time:
        return GuidanceMode.PRELAUNCH

    if range_to_target < config.terminal_range:
        return GuidanceMode.TERMINAL_PN

    if strategy == Strategy.PHASE_BASED and range_to_target > config.midcourse_range:
        return GuidanceMode.PRECALCULATED_PIP

    return GuidanceMode.MIDCOURSE_PIP


def guidance_law_for_mode(mode: GuidanceMode) -> Optional[GuidanceLaw]:
    """Guidance law flown in a mode, or None when no command is issued."""
    return _MODE_LAWS[mode]


class PhaseManager:
    """
    Tracks the current guidance mode of one interceptor.

    The manager only records and reports transitions; the next mode always
    comes from select_guidance_mode() and never depends on this history.
    """

    def __init__(self, index: int, strategy: Strategy, config: EngagementConfig):
        self.index = index
        self.strategy = strategy
        self.config = config
        self.current_mode = GuidanceMode.PRELAUNCH
        self.transitions: List[Tuple[float, GuidanceMode, GuidanceMode]] = []

    def get_mode(self) -> GuidanceMode:
        return self.current_mode

    def is_terminal(self) -> bool:
        return self.current_mode == GuidanceMode.DEACTIVATED

    def update(self, range_to_target: float, t: float, launch_time: float,
               deactivated: bool = False) -> GuidanceMode:
        """Re-evaluate the mode for this step and record any transition."""
        if self.is_terminal():
            return self.current_mode
        new_mode = select_guidance_mode(self.strategy, range_to_target, t,
                                        launch_time, deactivated, self.config)
        self._transition(new_mode, t, range_to_target)
        return new_mode

    def deactivate(self, t: float) -> None:
        """One-way transition into DEACTIVATED."""
        if not self.is_terminal():
            self._transition(GuidanceMode.DEACTIVATED, t)

    def _transition(self, new_mode: GuidanceMode, t: float,
                    range_to_target: Optional[float] = None) -> None:
        if new_mode == self.current_mode:
            return
        self.transitions.append((t, self.current_mode, new_mode))
        if range_to_target is None:
            logger.info("Interceptor %d: %s -> %s at t=%.2fs", self.index,
                        self.current_mode.name, new_mode.name, t)
        else:
            logger.info("Interceptor %d: %s -> %s at t=%.2fs (range %.0f ft)",
                        self.index, self.current_mode.name, new_mode.name, t,
                        range_to_target)
        self.current_mode = new_mode
