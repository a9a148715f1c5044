"""SystemManager: wires actuator, binder, dispatcher and poller together."""

from __future__ import annotations

import logging

from powerbutton.core import events
from powerbutton.core.dispatcher import CommandDispatcher
from powerbutton.core.event_bus import EventBus
from powerbutton.core.input_binder import InputBinder
from powerbutton.core.interfaces.actuator import ActuatorClient
from powerbutton.core.markers import MarkerBoard
from powerbutton.core.models.config import PowerButtonConfig
from powerbutton.core.models.state import Control
from powerbutton.core.status_poller import StatusPoller

_log = logging.getLogger(__name__)


class SystemManager:
    """Composition of the three core components.

    Every control is bound here, once, for the lifetime of the process:

    * ``POWER_BUTTON``: hold (press on begin, release on end);
    * ``SHORT_PULSE`` / ``LONG_PULSE``: timed pulse on begin only.

    Args:
        config: Validated configuration.
        event_bus: The notification bus (not yet started).
        actuator: Client for the remote actuator.
    """

    def __init__(
        self,
        config: PowerButtonConfig,
        event_bus: EventBus,
        actuator: ActuatorClient,
    ) -> None:
        self._config = config
        self._bus = event_bus
        self._actuator = actuator

        self._markers = MarkerBoard(event_bus)
        self._dispatcher = CommandDispatcher(
            actuator=actuator,
            markers=self._markers,
            event_bus=event_bus,
            pulse_specs=config.actuator.pulse_specs(),
            reactivation_policy=config.actuator.reactivation_policy,
        )
        self._binder = InputBinder(self._markers, event_bus)
        self._binder.bind(Control.POWER_BUTTON, self._dispatcher.hold_start, self._dispatcher.hold_end)
        self._binder.bind(Control.SHORT_PULSE, self._dispatcher.pulse)
        self._binder.bind(Control.LONG_PULSE, self._dispatcher.pulse)

        self._poller = StatusPoller(
            actuator=actuator,
            event_bus=event_bus,
            poll_interval=config.actuator.poll_interval_seconds,
        )

    # ------------------------------------------------------------------
    # Public properties
    # ------------------------------------------------------------------

    @property
    def actuator(self) -> ActuatorClient:
        return self._actuator

    @property
    def binder(self) -> InputBinder:
        return self._binder

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    @property
    def markers(self) -> MarkerBoard:
        return self._markers

    @property
    def poller(self) -> StatusPoller:
        return self._poller

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start the bus, then the poller."""
        _log.info("SystemManager starting")
        await self._bus.start()
        self._poller.start()
        await self._bus.publish(
            events.SYSTEM_STARTED, {"actuator": type(self._actuator).__name__}
        )
        _log.info("SystemManager started (actuator=%s)", type(self._actuator).__name__)

    async def shutdown(self, reason: str = "user request") -> None:
        """Stop polling, let in-flight gestures finish, stop the bus."""
        _log.info("SystemManager shutting down: %s", reason)
        await self._bus.publish(events.SHUTDOWN_INITIATED, {"reason": reason})
        await self._poller.stop()
        await self._binder.drain()
        await self._actuator.close()
        await self._bus.stop()
        _log.info("SystemManager shutdown complete")
