"""Tests for the configuration models."""

import pytest
from pydantic import ValidationError

from powerbutton.core.models.config import ActuatorConfig, PowerButtonConfig
from powerbutton.core.models.state import Control, PulseSpec


class TestActuatorConfig:
    def test_defaults(self):
        cfg = ActuatorConfig()
        assert cfg.poll_interval_ms == 500
        assert cfg.poll_interval_seconds == pytest.approx(0.5)
        assert cfg.reactivation_policy == "ignore"
        assert cfg.mock is False

    def test_pulse_specs(self):
        specs = ActuatorConfig(short_pulse_seconds=1.5, long_pulse_seconds=8).pulse_specs()
        assert specs == {
            Control.SHORT_PULSE: PulseSpec(duration_seconds=1.5),
            Control.LONG_PULSE: PulseSpec(duration_seconds=8),
        }
        assert Control.POWER_BUTTON not in specs

    def test_pulse_longer_than_max_rejected(self):
        with pytest.raises(ValidationError, match="max_press_seconds"):
            ActuatorConfig(long_pulse_seconds=45, max_press_seconds=30)

    def test_pulse_below_one_millisecond_rejected(self):
        with pytest.raises(ValidationError):
            ActuatorConfig(short_pulse_seconds=1e-7)

    def test_poll_interval_floor(self):
        with pytest.raises(ValidationError):
            ActuatorConfig(poll_interval_ms=10)

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValidationError):
            ActuatorConfig(reactivation_policy="restart")

    def test_extra_keys_forbidden(self):
        with pytest.raises(ValidationError):
            ActuatorConfig(colour="red")


class TestPulseSpec:
    @pytest.mark.parametrize("seconds", [0, 1e-7])
    def test_duration_must_be_at_least_a_millisecond(self, seconds):
        with pytest.raises(ValidationError):
            PulseSpec(duration_seconds=seconds)

    def test_is_immutable(self):
        spec = PulseSpec(duration_seconds=1.5)
        with pytest.raises(ValidationError):
            spec.duration_seconds = 3


def test_top_level_defaults():
    cfg = PowerButtonConfig()
    assert cfg.system.webui_port == 8080
    assert cfg.actuator.base_url == "http://localhost:8000"
