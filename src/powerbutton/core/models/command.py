"""Actuator commands and their best-effort results."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Command(str, Enum):
    PRESS = "press"
    RELEASE = "release"
    TIMED_PRESS = "timed_press"
    STATUS = "status"


class CommandResult(BaseModel):
    """Outcome of one actuator round trip.

    Actuator calls never raise; a failure is reported here (and logged by
    the client) instead.  ``error`` is a short human-readable summary.
    """

    command: Command
    ok: bool
    status_code: int | None = Field(default=None, description="HTTP status, if a response arrived")
    error: str | None = None
    payload: Any = None

    @classmethod
    def success(
        cls, command: Command, status_code: int | None = None, payload: Any = None
    ) -> "CommandResult":
        return cls(command=command, ok=True, status_code=status_code, payload=payload)

    @classmethod
    def failure(
        cls, command: Command, error: str, status_code: int | None = None
    ) -> "CommandResult":
        return cls(command=command, ok=False, status_code=status_code, error=error)
