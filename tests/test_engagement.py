"""End-to-end engagement scenarios for both guidance strategies."""
import numpy as np
import pytest

from intercept_sim.config import create_test_config
from intercept_sim import engagement, vehicles
from intercept_sim.engagement import (
    EngagementPhase,
    EngagementRun,
    Outcome,
    extract_metrics,
    run_engagement,
)
from intercept_sim.phase_manager import GuidanceMode, Strategy
from intercept_sim.vehicles import ManeuverCase


@pytest.fixture(scope="module")
def legacy_result():
    """Non-maneuvering target against a single Legacy interceptor."""
    cfg = create_test_config(num_interceptors=1, maneuver_altitude=None,
                             target_maneuver_aoa_deg=0.0, record_history=True)
    return run_engagement(cfg, Strategy.LEGACY)


@pytest.fixture(scope="module")
def phase_based_config():
    return create_test_config(num_interceptors=3, maneuver_start_time=20.0,
                              maneuver_altitude=None, target_maneuver_aoa_deg=10.0,
                              maneuver_detection_threshold=1.0, record_history=True)


@pytest.fixture(scope="module")
def phase_based_result(phase_based_config):
    """Target flies the positive-AoA assumption from t=20 s."""
    return run_engagement(phase_based_config, Strategy.PHASE_BASED)


@pytest.mark.slow
def test_legacy_intercepts_ballistic_target(legacy_result):
    assert legacy_result.outcome == Outcome.INTERCEPTED
    assert legacy_result.success
    assert legacy_result.intercepting_interceptor == 0
    assert legacy_result.miss_distance <= 50.0
    assert 10.0 < legacy_result.intercept_time <= legacy_result.final_time
    assert legacy_result.selected_case is None
    assert legacy_result.assignments == (None,)


@pytest.mark.slow
def test_legacy_never_flies_precalculated_pip(legacy_result):
    modes = {row[0] for row in legacy_result.history.interceptor_mode}
    assert GuidanceMode.PRECALCULATED_PIP.name not in modes
    assert GuidanceMode.MIDCOURSE_PIP.name in modes
    assert GuidanceMode.PRELAUNCH.name in modes

    track = legacy_result.history.interceptor_track(0)
    assert track.shape == (len(legacy_result.history), 3)
    np.testing.assert_array_equal(track[0], np.zeros(3))


@pytest.mark.slow
def test_effort_is_monotonic(legacy_result):
    efforts = np.array([row[0] for row in legacy_result.history.interceptor_effort])
    assert np.all(np.diff(efforts) >= 0.0)
    assert efforts[-1] == pytest.approx(legacy_result.effort[0])
    assert legacy_result.total_effort > 0.0


@pytest.mark.slow
def test_phase_based_selects_positive_candidate(phase_based_result):
    result = phase_based_result
    assert result.assignments == (ManeuverCase.ZERO, ManeuverCase.POSITIVE, ManeuverCase.NEGATIVE)
    assert result.selected_case == ManeuverCase.POSITIVE
    assert 20.0 < result.maneuver_detected_time < 22.0
    assert result.selection_time == pytest.approx(result.maneuver_detected_time + 10.0, abs=0.02)
    assert result.outcome == Outcome.INTERCEPTED
    assert result.intercepting_interceptor == 1


@pytest.mark.slow
def test_phase_based_deactivates_non_matching_in_decision_step(phase_based_result):
    result = phase_based_result
    assert result.active_interceptors == (1,)
    assert result.deactivation_times[0] == pytest.approx(result.selection_time)
    assert result.deactivation_times[2] == pytest.approx(result.selection_time)
    assert result.deactivation_times[1] is None
    assert result.final_modes[0] == GuidanceMode.DEACTIVATED
    assert result.final_modes[2] == GuidanceMode.DEACTIVATED


@pytest.mark.slow
def test_deactivated_effort_frozen(phase_based_result):
    result = phase_based_result
    log = result.history
    times = np.array(log.time)
    after = times > result.selection_time
    for i in (0, 2):
        efforts = np.array([row[i] for row in log.interceptor_effort])
        assert np.all(efforts[after] == result.effort[i])


@pytest.mark.slow
def test_phase_gating_matches_recorded_range(phase_based_result, phase_based_config):
    cfg = phase_based_config
    log = phase_based_result.history
    seen = set()
    for modes, ranges in zip(log.interceptor_mode, log.interceptor_range):
        mode, rng = modes[1], ranges[1]
        seen.add(mode)
        if mode == GuidanceMode.TERMINAL_PN.name:
            assert rng < cfg.terminal_range
        elif mode == GuidanceMode.PRECALCULATED_PIP.name:
            assert rng > cfg.midcourse_range
        elif mode == GuidanceMode.MIDCOURSE_PIP.name:
            assert cfg.terminal_range <= rng <= cfg.midcourse_range
    assert GuidanceMode.PRECALCULATED_PIP.name in seen


def test_delayed_target_times_out():
    cfg = create_test_config(target_launch_delay=150.0, record_history=True)
    result = run_engagement(cfg, Strategy.LEGACY)
    assert result.outcome == Outcome.TIMED_OUT
    assert result.final_time == pytest.approx(cfg.max_time)
    assert result.intercept_time is None
    assert result.miss_distance == float('inf')
    assert result.total_effort == 0.0
    assert all(mode == GuidanceMode.PRELAUNCH for mode in result.final_modes)
    assert len(result.history) == result.steps + 1
    np.testing.assert_array_equal(result.history.target_track()[-1], cfg.target_initial_position)


def test_record_false_keeps_no_history():
    cfg = create_test_config(target_launch_delay=150.0, max_time=20.0, record_history=True)
    result = run_engagement(cfg, Strategy.LEGACY, record=False)
    assert result.history is None


def test_launch_steps_offset_by_target_delay():
    cfg = create_test_config(target_launch_delay=5.0)
    run = EngagementRun(cfg, Strategy.LEGACY)
    assert run.target_launch_step == 500
    assert run.launch_steps == [1500, 1550, 1600]
    assert run.interceptors[1].launch_time == pytest.approx(15.5)
    assert run.phase == EngagementPhase.INITIALIZING


def test_extract_metrics_keys():
    cfg = create_test_config(target_launch_delay=150.0, max_time=20.0)
    metrics = extract_metrics(run_engagement(cfg, Strategy.LEGACY))
    assert metrics['outcome'] == 'TIMED_OUT'
    assert metrics['success'] is False
    assert metrics['selected_case'] is None
    assert metrics['active_interceptors'] == 3
    assert metrics['penalized_interceptors'] == 0


@pytest.mark.slow
def test_phase_based_intercepts_ballistic_target():
    cfg = create_test_config(target_maneuver_aoa_deg=0.0)
    result = run_engagement(cfg, Strategy.PHASE_BASED)
    assert result.outcome == Outcome.INTERCEPTED
    assert result.miss_distance <= cfg.intercept_radius
    # The target never departs from the zero-maneuver candidate
    assert result.selected_case is None
    assert result.active_interceptors == (0, 1, 2)


@pytest.mark.slow
def test_negative_maneuver_leaves_only_negative_interceptor():
    cfg = create_test_config(max_time=40.0, maneuver_start_time=20.0, maneuver_altitude=None,
                             target_maneuver_aoa_deg=-5.0, maneuver_detection_threshold=1.0)
    run = EngagementRun(cfg, Strategy.PHASE_BASED)
    assert run.phase == EngagementPhase.PRESIMULATING
    assert all(c.pip_converged for c in run.candidates.values())

    while run.selector.decision_time is None:
        assert run.step() is None

    assert run.selector.selected_case == ManeuverCase.NEGATIVE
    active = tuple(i.index for i in run.interceptors if not i.deactivated)
    assert active == (2,)
    for index in (0, 1):
        assert run.interceptors[index].deactivation_time == pytest.approx(run.selector.decision_time)


def _single_interceptor_config():
    # Launch at t=0 so the first step already guides
    return create_test_config(num_interceptors=1, interceptor_launch_delay=0.0, max_time=1.0)


def test_non_finite_command_deactivates_with_penalty(monkeypatch):
    monkeypatch.setattr(engagement, 'compute_guidance_command',
                        lambda *args, **kwargs: np.full(3, np.nan))
    result = run_engagement(_single_interceptor_config(), Strategy.LEGACY)
    assert result.final_modes == (GuidanceMode.DEACTIVATED,)
    assert result.effort_penalty == (True,)
    assert result.deactivation_times == (0.0,)
    assert result.effort == (0.0,)
    assert result.outcome == Outcome.MISSED


def test_non_finite_interceptor_state_deactivates_with_penalty(monkeypatch):
    monkeypatch.setattr(vehicles, 'interceptor_state_derivative',
                        lambda y, t, command, config: np.full(6, np.nan))
    cfg = _single_interceptor_config()
    result = run_engagement(cfg, Strategy.LEGACY)
    assert result.final_modes == (GuidanceMode.DEACTIVATED,)
    assert result.effort_penalty == (True,)
    assert result.deactivation_times[0] == pytest.approx(cfg.dt)
    assert result.outcome == Outcome.MISSED
    assert not result.target_anomaly


def test_non_finite_target_state_ends_run(monkeypatch):
    monkeypatch.setattr(vehicles, 'target_state_derivative',
                        lambda y, t, alpha, config: np.full(6, np.inf))
    run = EngagementRun(_single_interceptor_config(), Strategy.LEGACY)
    result = run.run()
    assert result.outcome == Outcome.MISSED
    assert result.target_anomaly is True
    assert result.steps == 1
    assert result.termination_reason == "Target state non-finite"
    assert run.phase == EngagementPhase.TERMINATED
