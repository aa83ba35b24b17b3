"""Tests for guidance mode selection and the per-interceptor phase manager."""
import unittest

from intercept_sim.config import create_test_config
from intercept_sim.guidance import GuidanceLaw
from intercept_sim.phase_manager import (
    GuidanceMode,
    PhaseManager,
    Strategy,
    guidance_law_for_mode,
    select_guidance_mode,
)


class TestSelectGuidanceMode(unittest.TestCase):

    def setUp(self):
        self.cfg = create_test_config()
        self.terminal = self.cfg.terminal_range
        self.midcourse = self.cfg.midcourse_range

    def _mode(self, strategy, rng, t=20.0, launch=10.0, deactivated=False):
        return select_guidance_mode(strategy, rng, t, launch, deactivated, self.cfg)

    def test_prelaunch(self):
        self.assertEqual(self._mode(Strategy.LEGACY, 1e6, t=9.99), GuidanceMode.PRELAUNCH)
        self.assertEqual(self._mode(Strategy.PHASE_BASED, 1e6, t=9.99), GuidanceMode.PRELAUNCH)

    def test_deactivated_wins(self):
        self.assertEqual(self._mode(Strategy.LEGACY, 100.0, deactivated=True),
                         GuidanceMode.DEACTIVATED)
        self.assertEqual(self._mode(Strategy.PHASE_BASED, 100.0, t=0.0, deactivated=True),
                         GuidanceMode.DEACTIVATED)

    def test_legacy_gating(self):
        self.assertEqual(self._mode(Strategy.LEGACY, 1e6), GuidanceMode.MIDCOURSE_PIP)
        self.assertEqual(self._mode(Strategy.LEGACY, self.terminal), GuidanceMode.MIDCOURSE_PIP)
        self.assertEqual(self._mode(Strategy.LEGACY, self.terminal - 1.0), GuidanceMode.TERMINAL_PN)

    def test_phase_based_gating(self):
        self.assertEqual(self._mode(Strategy.PHASE_BASED, self.midcourse + 1.0),
                         GuidanceMode.PRECALCULATED_PIP)
        self.assertEqual(self._mode(Strategy.PHASE_BASED, self.midcourse),
                         GuidanceMode.MIDCOURSE_PIP)
        self.assertEqual(self._mode(Strategy.PHASE_BASED, self.terminal),
                         GuidanceMode.MIDCOURSE_PIP)
        self.assertEqual(self._mode(Strategy.PHASE_BASED, self.terminal - 1.0),
                         GuidanceMode.TERMINAL_PN)

    def test_mode_laws(self):
        self.assertIsNone(guidance_law_for_mode(GuidanceMode.PRELAUNCH))
        self.assertIsNone(guidance_law_for_mode(GuidanceMode.DEACTIVATED))
        self.assertEqual(guidance_law_for_mode(GuidanceMode.PRECALCULATED_PIP), GuidanceLaw.PIP_PURSUIT)
        self.assertEqual(guidance_law_for_mode(GuidanceMode.MIDCOURSE_PIP), GuidanceLaw.PIP_PURSUIT)
        self.assertEqual(guidance_law_for_mode(GuidanceMode.TERMINAL_PN), GuidanceLaw.TERMINAL_PN)


class TestPhaseManager(unittest.TestCase):

    def setUp(self):
        self.cfg = create_test_config()

    def test_starts_in_prelaunch(self):
        pm = PhaseManager(0, Strategy.PHASE_BASED, self.cfg)
        self.assertEqual(pm.get_mode(), GuidanceMode.PRELAUNCH)
        self.assertFalse(pm.is_terminal())

    def test_transitions_recorded(self):
        pm = PhaseManager(0, Strategy.PHASE_BASED, self.cfg)
        pm.update(1e6, 5.0, 10.0)
        pm.update(1e6, 10.0, 10.0)
        pm.update(20000.0, 30.0, 10.0)
        pm.update(1000.0, 40.0, 10.0)
        modes = [new for _, _, new in pm.transitions]
        self.assertEqual(modes, [GuidanceMode.PRECALCULATED_PIP, GuidanceMode.MIDCOURSE_PIP,
                                 GuidanceMode.TERMINAL_PN])

    def test_range_reopening_returns_to_earlier_mode(self):
        pm = PhaseManager(0, Strategy.LEGACY, self.cfg)
        self.assertEqual(pm.update(1000.0, 30.0, 10.0), GuidanceMode.TERMINAL_PN)
        self.assertEqual(pm.update(20000.0, 30.01, 10.0), GuidanceMode.MIDCOURSE_PIP)

    def test_deactivation_is_terminal(self):
        pm = PhaseManager(2, Strategy.PHASE_BASED, self.cfg)
        pm.update(20000.0, 30.0, 10.0)
        pm.deactivate(31.0)
        self.assertTrue(pm.is_terminal())
        self.assertEqual(pm.update(1000.0, 32.0, 10.0), GuidanceMode.DEACTIVATED)
        pm.deactivate(33.0)
        self.assertEqual(pm.transitions[-1], (31.0, GuidanceMode.MIDCOURSE_PIP, GuidanceMode.DEACTIVATED))


if __name__ == '__main__':
    unittest.main()
