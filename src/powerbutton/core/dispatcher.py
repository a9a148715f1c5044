"""CommandDispatcher: activations in, actuator commands out.

Hold (power button)
    activation sends ``press``, deactivation sends ``release``.  The two
    share a lock, so a quick tap can never put the release on the wire
    before the press.

Timed pulse (short / long)
    strictly sequential: ``release`` (forces a known released state after
    an interrupted hold), set marker, ``press?t=<seconds>&wait``, clear
    marker.  The marker clear runs on every exit path.

Nothing is retried and nothing raises into the UI; every round trip ends
in a :class:`CommandResult` that is logged and published on the bus.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Literal

from powerbutton.core import events
from powerbutton.core.event_bus import EventBus
from powerbutton.core.interfaces.actuator import ActuatorClient
from powerbutton.core.markers import MarkerBoard
from powerbutton.core.models.command import CommandResult
from powerbutton.core.models.state import Control, PulseSpec
from powerbutton.log_config.logger import ContextualLogger

_log = logging.getLogger(__name__)

ReactivationPolicy = Literal["ignore", "queue"]


class CommandDispatcher:
    """Issues hold and pulse commands against *actuator*.

    Args:
        actuator: The remote actuator client.
        markers: Marker board for pulse feedback.
        event_bus: Receives ``command.completed`` / ``command.failed``.
        pulse_specs: Duration per pulse control.
        reactivation_policy: ``"ignore"`` drops a pulse activation while the
            same control's pulse is in flight; ``"queue"`` runs it after.
    """

    def __init__(
        self,
        actuator: ActuatorClient,
        markers: MarkerBoard,
        event_bus: EventBus,
        pulse_specs: dict[Control, PulseSpec],
        reactivation_policy: ReactivationPolicy = "ignore",
    ) -> None:
        self._actuator = actuator
        self._markers = markers
        self._bus = event_bus
        self._pulse_specs = dict(pulse_specs)
        self._policy = reactivation_policy
        self._in_flight: set[Control] = set()
        self._pulse_locks: dict[Control, asyncio.Lock] = {c: asyncio.Lock() for c in self._pulse_specs}
        self._hold_lock = asyncio.Lock()

    @property
    def reactivation_policy(self) -> ReactivationPolicy:
        return self._policy

    def is_in_flight(self, control: Control) -> bool:
        return control in self._in_flight

    # ------------------------------------------------------------------
    # Hold
    # ------------------------------------------------------------------

    async def hold_start(self, control: Control = Control.POWER_BUTTON) -> CommandResult:
        async with self._hold_lock:
            return self._report(control, await self._actuator.press())

    async def hold_end(self, control: Control = Control.POWER_BUTTON) -> CommandResult:
        async with self._hold_lock:
            return self._report(control, await self._actuator.release())

    # ------------------------------------------------------------------
    # Timed pulse
    # ------------------------------------------------------------------

    async def pulse(self, control: Control) -> list[CommandResult] | None:
        """Run one release/press pulse for *control*.

        Returns ``[release_result, press_result]``, or ``None`` when the
        activation was dropped under the ``ignore`` policy.
        """
        spec = self._pulse_specs.get(control)
        if spec is None:
            raise ValueError(f"{control.value} has no pulse duration configured")

        log = ContextualLogger(_log, control=control.value)
        if self._policy == "ignore" and control in self._in_flight:
            log.info("Pulse already in flight, ignoring activation")
            return None

        async with self._pulse_locks[control]:
            self._in_flight.add(control)
            try:
                return await self._run_pulse(control, spec, log)
            finally:
                self._in_flight.discard(control)

    async def _run_pulse(
        self, control: Control, spec: PulseSpec, log: ContextualLogger
    ) -> list[CommandResult]:
        log.info("Pulse %.3gs", spec.duration_seconds)
        released = self._report(control, await self._actuator.release())

        self._markers.set(control)
        try:
            pressed = await self._actuator.timed_press(spec.duration_seconds)
        finally:
            self._markers.clear(control)

        self._report(control, pressed)
        log.debug("Pulse finished (ok=%s)", pressed.ok)
        return [released, pressed]

    # ------------------------------------------------------------------
    # Result reporting
    # ------------------------------------------------------------------

    def _report(self, control: Control, result: CommandResult) -> CommandResult:
        payload = {
            "control": control.value,
            "command": result.command.value,
            "status_code": result.status_code,
        }
        if result.ok:
            self._bus.publish_nowait(events.COMMAND_COMPLETED, payload)
        else:
            ContextualLogger(_log, control=control.value).warning(
                "%s failed: %s", result.command.value, result.error
            )
            self._bus.publish_nowait(events.COMMAND_FAILED, {**payload, "error": result.error})
        return result
