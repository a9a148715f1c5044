"""Actuator factory: HTTP client in production, in-memory mock otherwise."""

from __future__ import annotations

import logging

from powerbutton.core.interfaces.actuator import ActuatorClient
from powerbutton.core.models.config import PowerButtonConfig

_log = logging.getLogger(__name__)


def create_actuator(config: PowerButtonConfig) -> ActuatorClient:
    """Return the :class:`ActuatorClient` selected by ``actuator.mock``."""
    if config.actuator.mock:
        from powerbutton.actuator.mock_actuator import MockActuator

        _log.info("Using MockActuator")
        return MockActuator()

    from powerbutton.actuator.http_actuator import HttpActuator

    _log.info("Using HttpActuator at %s", config.actuator.base_url)
    return HttpActuator(
        config.actuator.base_url,
        timeout=config.actuator.request_timeout_seconds,
    )
