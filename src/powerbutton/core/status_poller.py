"""StatusPoller: keeps the cached power state in line with the actuator.

The poller is the only writer of the power state.  Every
``poll_interval`` it spawns a ``status`` round trip; ticks are not awaited
by the loop, so a slow reply can overlap the next tick.  Each tick gets a
sequence number and a reply older than the newest one already applied is
discarded.  At most ``max_in_flight`` ticks are pending at once; while the
actuator is that slow, further ticks are skipped.

A failed poll (transport error, non-200, malformed body) never touches the
state.  Subscribers see ``state.power.changed`` only when ``on`` actually
flips.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from powerbutton.core import events
from powerbutton.core.event_bus import EventBus
from powerbutton.core.interfaces.actuator import ActuatorClient
from powerbutton.core.models.command import CommandResult
from powerbutton.core.models.state import ActuatorStatus

_log = logging.getLogger(__name__)


class StatusPoller:
    """Fixed-interval reconciliation loop.

    Args:
        actuator: Client queried with ``status()``.
        event_bus: Receives power-state and status notifications.
        poll_interval: Seconds between ticks.
        max_in_flight: Pending ``status`` calls after which ticks are skipped.
    """

    def __init__(
        self,
        actuator: ActuatorClient,
        event_bus: EventBus,
        poll_interval: float = 0.5,
        max_in_flight: int = 2,
    ) -> None:
        self._actuator = actuator
        self._bus = event_bus
        self._interval = poll_interval
        self._max_in_flight = max(1, max_in_flight)

        self._power_state = False
        self._last_status: ActuatorStatus | None = None
        self._issued = 0
        self._applied = 0
        self._failing = False

        self._loop_task: asyncio.Task[None] | None = None
        self._ticks: set[asyncio.Task[Any]] = set()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def power_state(self) -> bool:
        """Last successfully observed power state (``False`` until then)."""
        return self._power_state

    @property
    def last_status(self) -> ActuatorStatus | None:
        return self._last_status

    @property
    def poll_interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self._loop_task is not None:
            return
        self._loop_task = asyncio.create_task(self._run(), name="status-poller")
        _log.info("Status poller started (interval=%.3fs)", self._interval)

    async def stop(self) -> None:
        tasks = list(self._ticks)
        if self._loop_task is not None:
            tasks.append(self._loop_task)
            self._loop_task = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._ticks.clear()
        _log.info("Status poller stopped")

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    async def tick(self) -> CommandResult:
        """Run one status round trip and reconcile the cached state."""
        self._issued += 1
        seq = self._issued

        result = await self._actuator.status()
        if not result.ok:
            self._poll_failed(result)
            return result

        if seq < self._applied:
            _log.debug("Discarding stale status reply #%d (applied #%d)", seq, self._applied)
            return result
        self._applied = seq

        if self._failing:
            self._failing = False
            _log.info("Status polling recovered")

        status: ActuatorStatus = result.payload
        if status != self._last_status:
            self._last_status = status
            await self._bus.publish(
                events.ACTUATOR_STATUS_UPDATED, {"status": status.model_dump(mode="json")}
            )

        if status.on != self._power_state:
            self._power_state = status.on
            _log.info("Power is now %s", "on" if status.on else "off")
            await self._bus.publish(events.POWER_STATE_CHANGED, {"on": status.on})

        return result

    def _poll_failed(self, result: CommandResult) -> None:
        # One warning per outage; the rest at debug to keep a dead link quiet.
        if not self._failing:
            self._failing = True
            _log.warning("Status poll failed: %s", result.error)
        else:
            _log.debug("Status poll failed: %s", result.error)
        self._bus.publish_nowait(
            events.POLL_FAILED, {"error": result.error, "status_code": result.status_code}
        )

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def _run(self) -> None:
        while True:
            if len(self._ticks) >= self._max_in_flight:
                _log.debug("Skipping tick, %d status requests still pending", len(self._ticks))
            else:
                task = asyncio.create_task(self.tick(), name=f"status-tick-{self._issued + 1}")
                self._ticks.add(task)
                task.add_done_callback(self._tick_done)
            await asyncio.sleep(self._interval)

    def _tick_done(self, task: asyncio.Task[Any]) -> None:
        self._ticks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _log.error("Status tick raised", exc_info=exc)
