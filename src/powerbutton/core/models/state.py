"""Control enumerations and actuator state models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# The actuator times presses in whole milliseconds.
MIN_PRESS_SECONDS = 0.001


class Control(str, Enum):
    """The three logical controls on the page."""

    POWER_BUTTON = "power_button"
    SHORT_PULSE = "short_pulse"
    LONG_PULSE = "long_pulse"


class InputSource(str, Enum):
    """Input modality a gesture arrived through."""

    MOUSE = "mouse"
    TOUCH = "touch"


class ActivationKind(str, Enum):
    BEGIN = "begin"
    END = "end"


class ActivationEvent(BaseModel):
    """A gesture began or ended on *control*.  Consumed once, never stored."""

    model_config = ConfigDict(frozen=True)

    control: Control
    kind: ActivationKind
    source: InputSource


class PulseSpec(BaseModel):
    """Duration attached to a pulse control at configuration time."""

    model_config = ConfigDict(frozen=True)

    duration_seconds: float = Field(ge=MIN_PRESS_SECONDS, description="Press length in seconds")


class ButtonPress(BaseModel):
    """One completed press as recorded by the actuator."""

    number: int | None = Field(default=None, description="Actuator-side press id")
    source: str = Field(default="unknown")
    pressed_at: datetime | None = None
    elapsed: float = Field(default=0.0, description="Seconds the button was held")
    start_state: bool = False
    end_state: bool = False


class ActuatorStatus(BaseModel):
    """Body of a successful ``GET /status``.

    Only ``on`` is required; the rest is informational and shown in the
    status line when the actuator provides it.
    """

    on: bool = Field(strict=True, description="Device power state")
    pressed: bool = False
    running_since: datetime | None = None
    last_press: ButtonPress | None = None
