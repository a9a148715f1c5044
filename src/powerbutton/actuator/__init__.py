"""Actuator backends: factory + HTTP and mock clients."""

from powerbutton.actuator.factory import create_actuator

__all__ = ["create_actuator"]
