"""Tests for the predicted intercept point solver."""
import numpy as np
import pytest

from intercept_sim.pip import compute_pip


def test_stationary_target_converges_in_one_iteration():
    target = np.array([10000.0, 0.0, -5000.0])
    solution = compute_pip(target, np.zeros(3), np.zeros(3), 1000.0)
    assert solution.converged
    assert solution.iterations == 1
    np.testing.assert_allclose(solution.point, target)
    assert solution.time_to_go == pytest.approx(np.linalg.norm(target) / 1000.0)


def test_crossing_target_matches_closed_form():
    """Target crossing at 3000 ft/s, interceptor at 4000 ft/s: 1e8 = 7e6 * t^2."""
    target = np.array([10000.0, 0.0, 0.0])
    velocity = np.array([0.0, 3000.0, 0.0])
    solution = compute_pip(target, velocity, np.zeros(3), 4000.0,
                           tolerance=1e-9, max_iterations=200)
    expected_t = np.sqrt(1e8 / 7e6)
    assert solution.converged
    assert solution.time_to_go == pytest.approx(expected_t, rel=1e-6)
    np.testing.assert_allclose(solution.point, target + velocity * solution.time_to_go)
    # Interceptor and target arrive together
    assert np.linalg.norm(solution.point) / 4000.0 == pytest.approx(solution.time_to_go, rel=1e-6)


def test_non_convergence_returns_last_estimate():
    target = np.array([10000.0, 0.0, 0.0])
    velocity = np.array([0.0, 3000.0, 0.0])
    solution = compute_pip(target, velocity, np.zeros(3), 4000.0, max_iterations=1)
    assert not solution.converged
    assert solution.iterations == 1
    assert np.all(np.isfinite(solution.point))
    assert solution.time_to_go > 0.0


def test_zero_range():
    p = np.array([100.0, 200.0, -300.0])
    solution = compute_pip(p, np.array([1000.0, 0.0, 0.0]), p.copy(), 4500.0)
    assert solution.converged
    assert solution.time_to_go == 0.0
    assert solution.iterations == 0
    np.testing.assert_allclose(solution.point, p)


@pytest.mark.parametrize("speed", [0.0, -100.0])
def test_non_positive_speed_raises(speed):
    with pytest.raises(ValueError):
        compute_pip(np.array([1000.0, 0.0, 0.0]), np.zeros(3), np.zeros(3), speed)


def test_trajectory_propagator_is_used():
    class Parked:
        def position_at(self, t):
            return np.array([20000.0, 0.0, -1000.0])

    solution = compute_pip(np.array([10000.0, 0.0, 0.0]), np.array([-1000.0, 0.0, 0.0]),
                           np.zeros(3), 2000.0, trajectory=Parked(), time_offset=5.0)
    assert solution.converged
    np.testing.assert_allclose(solution.point, [20000.0, 0.0, -1000.0])


def _residual(solution, interceptor_position, speed):
    return np.linalg.norm(solution.point - interceptor_position) / speed - solution.time_to_go


def test_target_faster_than_interceptor_converges():
    """Re-entry geometry: ~6100 ft/s target closing on a 4500 ft/s interceptor."""
    target = np.array([345576.0, 0.0, -173008.0])
    velocity = np.array([-5430.0, 0.0, 2860.0])
    solution = compute_pip(target, velocity, np.zeros(3), 4500.0)
    assert solution.converged
    assert abs(_residual(solution, np.zeros(3), 4500.0)) < 1e-4
    # Nearer root of (|v|^2 - V^2) t^2 + 2 (p . v) t + |p|^2 = 0
    a = np.dot(velocity, velocity) - 4500.0 ** 2
    b = 2.0 * np.dot(target, velocity)
    c = np.dot(target, target)
    expected_t = (-b - np.sqrt(b * b - 4.0 * a * c)) / (2.0 * a)
    assert solution.time_to_go == pytest.approx(expected_t, abs=1e-3)
    np.testing.assert_allclose(solution.point, target + velocity * solution.time_to_go)


def test_capped_solve_returns_smallest_residual():
    target = np.array([345576.0, 0.0, -173008.0])
    velocity = np.array([-5430.0, 0.0, 2860.0])
    first = compute_pip(target, velocity, np.zeros(3), 4500.0, tolerance=1e-12, max_iterations=1)
    capped = compute_pip(target, velocity, np.zeros(3), 4500.0, tolerance=1e-12, max_iterations=2)
    assert not capped.converged
    assert abs(_residual(capped, np.zeros(3), 4500.0)) <= abs(_residual(first, np.zeros(3), 4500.0))
