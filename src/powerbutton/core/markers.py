"""Per-control "pressed" markers.

A marker is the transient visual indicator that a control is currently
pressed.  The board is the only place markers live; every change is
published as ``output.marker.changed`` so the page can add or remove its
``pressed`` class.  Setting a marker to the value it already has is a
no-op and publishes nothing.
"""

from __future__ import annotations

import logging

from powerbutton.core import events
from powerbutton.core.event_bus import EventBus
from powerbutton.core.models.state import Control

_log = logging.getLogger(__name__)


class MarkerBoard:
    """Holds one boolean marker per :class:`Control`."""

    def __init__(self, event_bus: EventBus) -> None:
        self._bus = event_bus
        self._markers: dict[Control, bool] = {c: False for c in Control}

    def is_set(self, control: Control) -> bool:
        return self._markers[control]

    def set(self, control: Control) -> None:
        self._update(control, True)

    def clear(self, control: Control) -> None:
        self._update(control, False)

    def snapshot(self) -> dict[Control, bool]:
        return dict(self._markers)

    def _update(self, control: Control, pressed: bool) -> None:
        if self._markers[control] == pressed:
            return
        self._markers[control] = pressed
        _log.debug("Marker %s -> %s", control.value, pressed)
        self._bus.publish_nowait(
            events.MARKER_CHANGED, {"control": control.value, "pressed": pressed}
        )
