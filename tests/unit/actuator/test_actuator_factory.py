"""Tests for create_actuator."""

from powerbutton.actuator import create_actuator
from powerbutton.actuator.http_actuator import HttpActuator
from powerbutton.actuator.mock_actuator import MockActuator
from powerbutton.core.models.config import ActuatorConfig, PowerButtonConfig


def test_mock_selected_by_flag():
    cfg = PowerButtonConfig(actuator=ActuatorConfig(mock=True))
    assert isinstance(create_actuator(cfg), MockActuator)


def test_http_actuator_by_default():
    cfg = PowerButtonConfig(
        actuator=ActuatorConfig(base_url="https://relay.example/", request_timeout_seconds=2.5)
    )
    actuator = create_actuator(cfg)
    assert isinstance(actuator, HttpActuator)
    assert actuator.base_url == "https://relay.example"
