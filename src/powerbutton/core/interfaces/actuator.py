"""Actuator abstraction (ABC).

The HTTP client and the in-memory mock both implement
:class:`ActuatorClient`, so the dispatcher, the poller and the tests never
care which one is behind the page.

Every method is a coroutine and **never raises** for transport or protocol
problems; it returns a failed :class:`CommandResult` instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from powerbutton.core.models.command import CommandResult


class ActuatorClient(ABC):
    """Remote device that drives the physical button."""

    @abstractmethod
    async def press(self) -> CommandResult:
        """Start holding the button down until :meth:`release`."""

    @abstractmethod
    async def release(self) -> CommandResult:
        """Let the button go.  Harmless when it is already released."""

    @abstractmethod
    async def timed_press(self, seconds: float) -> CommandResult:
        """Hold for *seconds*, returning only once the actuator let go."""

    @abstractmethod
    async def status(self) -> CommandResult:
        """Query power state.

        On success ``payload`` is an
        :class:`~powerbutton.core.models.state.ActuatorStatus`.
        """

    async def close(self) -> None:
        """Release client resources.  No-op by default (mock)."""
