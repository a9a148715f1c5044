"""Dev panel: drives the in-memory actuator from the page.

Rendered under the front panel when the mock actuator is in use and
``system.dev_mode`` is on.  It can flip the simulated device power, make
the next request fail, and shows a running log of gestures, commands and
poll failures.
"""

from __future__ import annotations

import logging as _logging
from typing import Any

from nicegui import ui

from powerbutton.actuator.mock_actuator import MockActuator
from powerbutton.core import events
from powerbutton.core.event_bus import EventBus
from powerbutton.core.models.event import Event

_log = _logging.getLogger(__name__)

_LOGGED_EVENTS = (
    events.ACTIVATION_BEGAN,
    events.ACTIVATION_ENDED,
    events.COMMAND_COMPLETED,
    events.COMMAND_FAILED,
    events.POLL_FAILED,
    events.POWER_STATE_CHANGED,
)


def describe_event(event: Event) -> str:
    """Render a bus event as one log line."""
    p = event.payload
    stamp = event.timestamp.strftime("%H:%M:%S.%f")[:-3]
    if event.event_type in (events.ACTIVATION_BEGAN, events.ACTIVATION_ENDED):
        verb = "begin" if event.event_type == events.ACTIVATION_BEGAN else "end"
        text = f"{p.get('control')} {verb} ({p.get('source')})"
    elif event.event_type == events.COMMAND_COMPLETED:
        text = f"{p.get('control')}: {p.get('command')} -> {p.get('status_code')}"
    elif event.event_type == events.COMMAND_FAILED:
        text = f"{p.get('control')}: {p.get('command')} FAILED ({p.get('error')})"
    elif event.event_type == events.POLL_FAILED:
        text = f"poll FAILED ({p.get('error')})"
    elif event.event_type == events.POWER_STATE_CHANGED:
        text = f"power {'ON' if p.get('on') else 'OFF'}"
    else:
        text = event.event_type
    return f"{stamp} {text}"


class DevPanel:
    """Simulation controls wired to a :class:`MockActuator`.

    Args:
        actuator: The mock actuator behind the page.
        event_bus: Bus whose events are logged.
    """

    def __init__(self, actuator: MockActuator, event_bus: EventBus) -> None:
        self._actuator = actuator
        self._bus = event_bus
        self._power_switch: Any = None
        self._log_view: Any = None

    def build(self) -> None:
        """Render the panel inline and subscribe to the logged events."""
        with ui.card().classes("w-full").style(
            "max-width: 640px; background: #222222; color: #ffffff;"
        ):
            ui.label("SIMULATED ACTUATOR").style(
                "color: #888888; font-size: 12px; font-weight: bold;"
            )
            with ui.row().classes("items-center").style("gap: 16px;"):
                self._power_switch = ui.switch(
                    "Device power",
                    value=self._actuator.is_on,
                    on_change=lambda e: self._actuator.simulate_power(bool(e.value)),
                )
                ui.button("Fail next request", on_click=lambda: self._actuator.fail_next(1)).props(
                    "outline"
                )
            self._log_view = ui.log(max_lines=200).classes("w-full").style("height: 160px;")

        subs = [self._bus.subscribe(event_type, self._on_event) for event_type in _LOGGED_EVENTS]
        subs.append(self._bus.subscribe(events.POWER_STATE_CHANGED, self._on_power_changed))

        def _unsubscribe() -> None:
            for sub_id in subs:
                self._bus.unsubscribe(sub_id)

        ui.context.client.on_disconnect(_unsubscribe)

    async def _on_event(self, event: Event) -> None:
        if self._log_view is None:
            return
        try:
            self._log_view.push(describe_event(event))
        except RuntimeError:
            _log.debug("log view client gone, ignoring event")

    async def _on_power_changed(self, event: Event) -> None:
        if self._power_switch is None:
            return
        try:
            self._power_switch.value = bool(event.payload.get("on", False))
        except RuntimeError:
            _log.debug("power switch client gone, ignoring update")
