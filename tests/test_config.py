"""Tests for config module."""
from dataclasses import replace

import pytest

from intercept_sim import config
from intercept_sim import constants as C


def test_engagement_config_defaults():
    """Test that default config uses constants values."""
    cfg = config.EngagementConfig()
    assert cfg.dt == C.DT
    assert cfg.max_time == C.MAX_TIME
    assert cfg.num_interceptors == C.NUM_INTERCEPTORS
    assert cfg.navigation_gain == C.NAVIGATION_GAIN
    assert cfg.terminal_range == C.TERMINAL_RANGE
    assert cfg.midcourse_range == C.MIDCOURSE_RANGE
    assert cfg.interceptor_gravity is True
    assert cfg.interceptor_drag is False


def test_gating_ranges_in_feet():
    cfg = config.create_default_config()
    assert cfg.terminal_range == pytest.approx(16404.2, abs=0.1)
    assert cfg.midcourse_range == pytest.approx(32808.4, abs=0.1)


def test_engagement_config_frozen():
    """Test that config is immutable (frozen)."""
    cfg = config.EngagementConfig()
    with pytest.raises(Exception):  # FrozenInstanceError
        cfg.dt = 0.5


def test_replace_creates_new_config():
    cfg = config.create_default_config()
    cfg2 = replace(cfg, num_interceptors=5)
    assert cfg2.num_interceptors == 5
    assert cfg.num_interceptors == C.NUM_INTERCEPTORS


def test_launch_time_salvo_spacing():
    cfg = config.create_test_config(interceptor_launch_delay=10.0, salvo_interval=0.5)
    assert cfg.launch_time(0) == pytest.approx(10.0)
    assert cfg.launch_time(1) == pytest.approx(10.5)
    assert cfg.launch_time(4) == pytest.approx(12.0)


def test_create_test_config_custom():
    """Test create_test_config with custom parameters and overrides."""
    cfg = config.create_test_config(dt=0.05, max_time=5.0, num_interceptors=1)
    assert cfg.dt == 0.05
    assert cfg.max_time == 5.0
    assert cfg.num_interceptors == 1
    assert cfg.silent is True


def test_create_test_config_rejects_unknown_field():
    with pytest.raises(TypeError):
        config.create_test_config(not_a_field=1.0)
