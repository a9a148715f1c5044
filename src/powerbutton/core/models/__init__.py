"""Pydantic models for configuration, controls, actuator state and events."""
from powerbutton.core.models.command import Command, CommandResult
from powerbutton.core.models.config import ActuatorConfig, PowerButtonConfig, SystemConfig
from powerbutton.core.models.event import Event
from powerbutton.core.models.state import (
    ActivationEvent,
    ActivationKind,
    ActuatorStatus,
    ButtonPress,
    Control,
    InputSource,
    PulseSpec,
)

__all__ = [
    "ActivationEvent",
    "ActivationKind",
    "ActuatorConfig",
    "ActuatorStatus",
    "ButtonPress",
    "Command",
    "CommandResult",
    "Control",
    "Event",
    "InputSource",
    "PowerButtonConfig",
    "PulseSpec",
    "SystemConfig",
]
