"""Configuration Pydantic models: PowerButtonConfig, ActuatorConfig, SystemConfig."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from powerbutton.core.models.state import MIN_PRESS_SECONDS, Control, PulseSpec


class ActuatorConfig(BaseModel):
    """Where the remote actuator lives and how the controls talk to it.

    ``short_pulse_seconds`` / ``long_pulse_seconds`` become the
    :class:`PulseSpec` of the two pulse controls.  ``max_press_seconds``
    mirrors the actuator's own press timeout; longer pulses would be
    rejected server-side, so they are rejected here at load time instead.
    """

    model_config = ConfigDict(extra="forbid")

    base_url: str = Field(
        default="http://localhost:8000",
        description="Absolute base URL of the actuator (no trailing slash needed)",
    )
    request_timeout_seconds: float = Field(
        default=5.0, gt=0, description="Transport timeout per round trip"
    )
    short_pulse_seconds: float = Field(
        default=1.5, ge=MIN_PRESS_SECONDS, description="Short pulse duration"
    )
    long_pulse_seconds: float = Field(
        default=10.0, ge=MIN_PRESS_SECONDS, description="Long pulse duration"
    )
    max_press_seconds: float = Field(
        default=20.0, gt=0, description="Longest press the actuator accepts"
    )
    poll_interval_ms: int = Field(default=500, ge=50, description="Status poll interval")
    reactivation_policy: Literal["ignore", "queue"] = Field(
        default="ignore",
        description="What a second pulse activation does while one is in flight",
    )
    mock: bool = Field(default=False, description="Use the in-memory actuator")

    @model_validator(mode="after")
    def _check_pulse_bounds(self) -> "ActuatorConfig":
        for name in ("short_pulse_seconds", "long_pulse_seconds"):
            value = getattr(self, name)
            if value > self.max_press_seconds:
                raise ValueError(
                    f"{name} ({value}s) cannot be longer than max_press_seconds "
                    f"({self.max_press_seconds}s)"
                )
        return self

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0

    def pulse_specs(self) -> dict[Control, PulseSpec]:
        """Return the immutable pulse spec for each pulse control."""
        return {
            Control.SHORT_PULSE: PulseSpec(duration_seconds=self.short_pulse_seconds),
            Control.LONG_PULSE: PulseSpec(duration_seconds=self.long_pulse_seconds),
        }


class SystemConfig(BaseModel):
    """Non-actuator runtime settings."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(default="Power Button", description="Browser page title")
    log_level: str = Field(default="INFO", description="Root log level")
    log_dir: str = Field(default="logs", description="Directory for rotating log files")
    event_bus_queue_size: int = Field(default=1000, description="Max queued events")
    webui_port: int = Field(default=8080, description="NiceGUI listen port")
    dev_mode: bool = Field(default=False, description="Show the dev panel with the mock actuator")


class PowerButtonConfig(BaseModel):
    """Top-level configuration loaded from ``powerbutton_config.json``."""

    model_config = ConfigDict(extra="forbid")

    actuator: ActuatorConfig = Field(default_factory=ActuatorConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)
