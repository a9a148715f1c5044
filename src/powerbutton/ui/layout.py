"""Main page layout: single-page NiceGUI front panel.

Provides the ``@ui.page('/')`` route with:
* a round power button whose icon glows while the device is on
* "short" and "long" pulse buttons
* a status line with the last press reported by the actuator

Raw DOM pointer events are forwarded to the :class:`InputBinder`; the page
itself only reacts to bus notifications (markers, power state, status).
"""

from __future__ import annotations

import logging as _logging
from typing import Any, Callable

from nicegui import ui

from powerbutton.core import events
from powerbutton.core.event_bus import EventBus
from powerbutton.core.input_binder import InputBinder
from powerbutton.core.models.config import PowerButtonConfig
from powerbutton.core.models.event import Event
from powerbutton.core.models.state import ActuatorStatus, Control
from powerbutton.core.system_manager import SystemManager

_log = _logging.getLogger(__name__)

_CSS = """
.power-button { width: 160px; height: 160px; background: #222222 !important; }
.power-button .power-icon { font-size: 96px; color: #555555; transition: color 0.2s; }
.power-button .power-icon.on { color: #44ff44; text-shadow: 0 0 16px #44ff44; }
.pulse-button { min-width: 120px; height: 56px; background: #333333 !important; color: #ffffff; }
.pressed { transform: scale(0.94); filter: brightness(1.6); }
"""

# DOM event -> InputBinder entry point
_POINTER_EVENTS: dict[str, Callable[[InputBinder, Control], bool]] = {
    "mousedown": InputBinder.pointer_down,
    "mouseup": InputBinder.pointer_up,
    "mouseleave": InputBinder.pointer_leave,
    # ``.prevent`` stops the browser from scrolling / zooming on touch.
    "touchstart.prevent": InputBinder.touch_start,
    "touchend": InputBinder.touch_end,
    "touchcancel": InputBinder.touch_end,
}


def format_last_press(status: ActuatorStatus | None) -> str:
    """One-line summary of the actuator's last completed press."""
    if status is None:
        return "Waiting for actuator…"
    if status.pressed:
        return "Button is being pressed"
    bp = status.last_press
    if bp is None:
        return "No presses yet"
    number = f"#{bp.number} " if bp.number is not None else ""
    return f"Last press {number}by {bp.source}: {bp.elapsed:.2f}s"


class PageView:
    """Widgets of one rendered page and the handlers that update them.

    NiceGUI elements belong to a browser client; once that client is gone,
    writing to them raises ``RuntimeError``.  Handlers swallow that so the
    bus does not drop the subscription on the first stale update.
    """

    def __init__(
        self,
        buttons: dict[Control, Any],
        power_icon: Any,
        status_label: Any,
    ) -> None:
        self.buttons = buttons
        self.power_icon = power_icon
        self.status_label = status_label

    async def on_marker_changed(self, event: Event) -> None:
        try:
            control = Control(event.payload.get("control"))
        except ValueError:
            return
        element = self.buttons.get(control)
        if element is None:
            return
        try:
            if event.payload.get("pressed", False):
                element.classes(add="pressed")
            else:
                element.classes(remove="pressed")
        except RuntimeError:
            _log.debug("button client gone, ignoring marker update")

    async def on_power_changed(self, event: Event) -> None:
        self.show_power(bool(event.payload.get("on", False)))

    async def on_status_updated(self, event: Event) -> None:
        raw = event.payload.get("status")
        status = ActuatorStatus.model_validate(raw) if raw is not None else None
        self.show_status(status)

    def show_power(self, on: bool) -> None:
        try:
            if on:
                self.power_icon.classes(add="on")
            else:
                self.power_icon.classes(remove="on")
        except RuntimeError:
            _log.debug("power icon client gone, ignoring update")

    def show_status(self, status: ActuatorStatus | None) -> None:
        try:
            self.status_label.text = format_last_press(status)
        except RuntimeError:
            _log.debug("status label client gone, ignoring update")


class PowerButtonLayout:
    """Registers and builds the front-panel page.

    Args:
        system: Running system (binder, markers, poller).
        event_bus: Bus the page subscribes to.
        config: Configuration (page title, pulse durations).
        extra: Optional callable rendered under the panel (dev panel).
    """

    def __init__(
        self,
        system: SystemManager,
        event_bus: EventBus,
        config: PowerButtonConfig,
        extra: Callable[[], None] | None = None,
    ) -> None:
        self._system = system
        self._bus = event_bus
        self._config = config
        self._extra = extra

    def setup_page(self) -> None:
        """Register the ``@ui.page('/')`` route."""

        @ui.page("/", title=self._config.system.title)
        def index():
            self._build_page()

    def _build_page(self) -> PageView:
        ui.dark_mode().enable()
        ui.add_css(_CSS)
        ui.query("body").style("background: #1a1a1a;")

        buttons: dict[Control, Any] = {}
        actuator_cfg = self._config.actuator

        with ui.column().classes("w-full items-center").style("gap: 24px; padding-top: 48px;"):
            with ui.button().props("round unelevated").classes("power-button") as power:
                power_icon = ui.icon("power_settings_new").classes("power-icon")
            buttons[Control.POWER_BUTTON] = power

            with ui.row().classes("items-center").style("gap: 16px;"):
                buttons[Control.SHORT_PULSE] = ui.button(
                    f"Short ({actuator_cfg.short_pulse_seconds:g}s)"
                ).classes("pulse-button")
                buttons[Control.LONG_PULSE] = ui.button(
                    f"Long ({actuator_cfg.long_pulse_seconds:g}s)"
                ).classes("pulse-button")

            status_label = ui.label("").style("color: #aaaaaa; font-size: 14px;")

            if self._extra is not None:
                self._extra()

        for control, element in buttons.items():
            self._wire(element, control)

        view = PageView(buttons, power_icon, status_label)
        view.show_power(self._system.poller.power_state)
        view.show_status(self._system.poller.last_status)
        for control, pressed in self._system.markers.snapshot().items():
            if pressed:
                buttons[control].classes(add="pressed")

        subs = [
            self._bus.subscribe(events.MARKER_CHANGED, view.on_marker_changed),
            self._bus.subscribe(events.POWER_STATE_CHANGED, view.on_power_changed),
            self._bus.subscribe(events.ACTUATOR_STATUS_UPDATED, view.on_status_updated),
        ]

        def _unsubscribe() -> None:
            for sub_id in subs:
                self._bus.unsubscribe(sub_id)

        ui.context.client.on_disconnect(_unsubscribe)
        return view

    def _wire(self, element: Any, control: Control) -> None:
        binder = self._system.binder
        for dom_event, entry in _POINTER_EVENTS.items():
            element.on(
                dom_event,
                lambda _e, entry=entry: entry(binder, control),
                args=[],
            )
