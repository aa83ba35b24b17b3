import numpy as np

from intercept_sim.state import KinematicState


def test_state_defaults():
    s = KinematicState()
    assert s.r.shape == (3,)
    assert s.v.shape == (3,)
    assert s.alpha == 0.0
    assert s.t == 0.0


def test_state_converts_lists_to_arrays():
    s = KinematicState(r=[1, 2, -3], v=[4, 5, 6])
    assert isinstance(s.r, np.ndarray)
    assert s.r.dtype == np.float64
    assert s.altitude == 3.0


def test_vector_round_trip_keeps_alpha_and_time():
    s = KinematicState(r=np.array([1.0, 2.0, -3.0]), v=np.array([4.0, 5.0, 6.0]), alpha=0.1, t=2.0)
    vec = s.to_vector()
    assert vec.shape == (6,)
    s2 = KinematicState.from_vector(vec, t=2.0, alpha=0.1)
    np.testing.assert_array_equal(s2.r, s.r)
    np.testing.assert_array_equal(s2.v, s.v)
    assert s2.alpha == 0.1


def test_copy_is_independent():
    s = KinematicState(r=np.array([1.0, 0.0, 0.0]), v=np.array([0.0, 1.0, 0.0]))
    s2 = s.copy()
    s2.r[0] = 99.0
    assert s.r[0] == 1.0


def test_speed_and_finite():
    s = KinematicState(v=np.array([3.0, 4.0, 0.0]))
    assert s.speed == 5.0
    assert s.is_finite()
    s.v[2] = np.nan
    assert not s.is_finite()


def test_str_contains_time():
    s = KinematicState(r=np.array([0.0, 0.0, -100000.0]), t=1.5)
    assert "t=1.50s" in str(s)
