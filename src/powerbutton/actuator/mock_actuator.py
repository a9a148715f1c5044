"""In-memory actuator for development and testing.

Behaves like the relay server: a press while already pressed is refused
with 418, a timed press holds for its duration and then lets go, and
``status`` reports power plus the last completed press.  A press held for
at least ``toggle_threshold`` seconds flips the simulated power state, the
way a PC power button does.

``simulate_power`` and ``fail_next`` drive the dev panel and tests.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone

from powerbutton.core.interfaces.actuator import ActuatorClient
from powerbutton.core.models.command import Command, CommandResult
from powerbutton.core.models.state import MIN_PRESS_SECONDS, ActuatorStatus, ButtonPress

_log = logging.getLogger(__name__)


class MockActuator(ActuatorClient):
    """Simulated relay.

    Args:
        latency: Seconds every round trip takes before it resolves.
        time_scale: Multiplier for timed-press sleeps (``0`` in tests).
        toggle_threshold: Minimum hold, in seconds, that flips power.

    Attributes:
        calls: ``(command, seconds)`` for every request received, in order.
    """

    def __init__(
        self,
        latency: float = 0.0,
        time_scale: float = 1.0,
        toggle_threshold: float = 0.1,
    ) -> None:
        self.latency = latency
        self.time_scale = time_scale
        self.toggle_threshold = toggle_threshold
        self.calls: list[tuple[Command, float | None]] = []

        self._on = False
        self._pressed = False
        self._pressed_at: datetime | None = None
        self._press_started: float = 0.0
        self._start_state = False
        self._press_source = "mock"
        self._press_count = 0
        self._last_press: ButtonPress | None = None
        self._fail_remaining = 0
        self._running_since = datetime.now(timezone.utc)

    # ------------------------------------------------------------------
    # Simulation helpers
    # ------------------------------------------------------------------

    @property
    def is_on(self) -> bool:
        return self._on

    @property
    def is_pressed(self) -> bool:
        return self._pressed

    @property
    def last_press(self) -> ButtonPress | None:
        return self._last_press

    def simulate_power(self, on: bool) -> None:
        """Force the simulated device power state."""
        self._on = on

    def fail_next(self, count: int = 1) -> None:
        """Make the next *count* requests fail with HTTP 503."""
        self._fail_remaining = max(0, count)

    # ------------------------------------------------------------------
    # ActuatorClient
    # ------------------------------------------------------------------

    async def press(self) -> CommandResult:
        failed = await self._begin(Command.PRESS)
        if failed is not None:
            return failed
        if self._pressed:
            return CommandResult.failure(Command.PRESS, "button already pressed", 418)
        self._hold(source="mock")
        return CommandResult.success(Command.PRESS, 202, {"timeout": None})

    async def release(self) -> CommandResult:
        failed = await self._begin(Command.RELEASE)
        if failed is not None:
            return failed
        if not self._pressed:
            return CommandResult.success(Command.RELEASE, 200, None)
        bp = self._let_go(time.monotonic() - self._press_started)
        return CommandResult.success(Command.RELEASE, 200, bp.model_dump(mode="json"))

    async def timed_press(self, seconds: float) -> CommandResult:
        if seconds < MIN_PRESS_SECONDS:
            raise ValueError(f"Press duration must be at least {MIN_PRESS_SECONDS}s, got {seconds}")
        failed = await self._begin(Command.TIMED_PRESS, seconds)
        if failed is not None:
            return failed
        if self._pressed:
            return CommandResult.failure(Command.TIMED_PRESS, "button already pressed", 418)
        self._hold(source="mock")
        await asyncio.sleep(seconds * self.time_scale)
        if not self._pressed:
            # Released by someone else while we slept.
            assert self._last_press is not None
            return CommandResult.success(
                Command.TIMED_PRESS, 200, self._last_press.model_dump(mode="json")
            )
        bp = self._let_go(seconds)
        return CommandResult.success(Command.TIMED_PRESS, 200, bp.model_dump(mode="json"))

    async def status(self) -> CommandResult:
        failed = await self._begin(Command.STATUS)
        if failed is not None:
            return failed
        return CommandResult.success(
            Command.STATUS,
            200,
            ActuatorStatus(
                on=self._on,
                pressed=self._pressed,
                running_since=self._running_since,
                last_press=self._last_press,
            ),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _begin(self, command: Command, seconds: float | None = None) -> CommandResult | None:
        self.calls.append((command, seconds))
        if self.latency:
            await asyncio.sleep(self.latency)
        if self._fail_remaining:
            self._fail_remaining -= 1
            _log.debug("Simulated failure for %s", command.value)
            return CommandResult.failure(command, "HTTP 503 Service Unavailable", 503)
        return None

    def _hold(self, source: str) -> None:
        self._pressed = True
        self._pressed_at = datetime.now(timezone.utc)
        self._press_started = time.monotonic()
        self._start_state = self._on
        self._press_source = source

    def _let_go(self, elapsed: float) -> ButtonPress:
        self._pressed = False
        if elapsed >= self.toggle_threshold:
            self._on = not self._on
        self._press_count += 1
        self._last_press = ButtonPress(
            number=self._press_count,
            source=self._press_source,
            pressed_at=self._pressed_at,
            elapsed=round(elapsed, 3),
            start_state=self._start_state,
            end_state=self._on,
        )
        _log.info("Mock release #%d after %.3fs (on=%s)", self._press_count, elapsed, self._on)
        return self._last_press
