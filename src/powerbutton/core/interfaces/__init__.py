"""Abstract interfaces for the remote actuator."""

from powerbutton.core.interfaces.actuator import ActuatorClient

__all__ = ["ActuatorClient"]
