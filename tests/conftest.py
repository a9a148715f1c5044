"""Shared pytest fixtures for Power Button tests."""

from __future__ import annotations

import pytest

from powerbutton.actuator.mock_actuator import MockActuator
from powerbutton.core.event_bus import EventBus
from powerbutton.core.markers import MarkerBoard
from powerbutton.core.models.config import PowerButtonConfig


@pytest.fixture
async def event_bus():
    """Provide a started EventBus that is stopped after the test."""
    bus = EventBus(queue_size=100)
    await bus.start()
    yield bus
    await bus.stop()


@pytest.fixture
def markers(event_bus: EventBus) -> MarkerBoard:
    return MarkerBoard(event_bus)


@pytest.fixture
def mock_actuator() -> MockActuator:
    """Mock actuator whose timed presses return immediately."""
    return MockActuator(time_scale=0.0)


@pytest.fixture(scope="session")
def pb_config() -> PowerButtonConfig:
    """Session-scoped default config (no file I/O)."""
    return PowerButtonConfig()
