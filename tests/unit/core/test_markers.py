"""Tests for MarkerBoard."""

from __future__ import annotations

import asyncio

from powerbutton.core import events
from powerbutton.core.models.state import Control
from tests.helpers.runtime import EventRecorder


class TestMarkerBoard:
    async def test_all_clear_initially(self, markers):
        assert markers.snapshot() == {c: False for c in Control}

    async def test_set_and_clear_publish(self, markers, event_bus):
        recorder = EventRecorder(event_bus, events.MARKER_CHANGED)

        markers.set(Control.LONG_PULSE)
        assert markers.is_set(Control.LONG_PULSE)
        markers.clear(Control.LONG_PULSE)
        await asyncio.sleep(0.05)

        assert recorder.payloads(events.MARKER_CHANGED) == [
            {"control": "long_pulse", "pressed": True},
            {"control": "long_pulse", "pressed": False},
        ]

    async def test_repeated_value_is_silent(self, markers, event_bus):
        recorder = EventRecorder(event_bus, events.MARKER_CHANGED)

        markers.clear(Control.SHORT_PULSE)
        markers.set(Control.SHORT_PULSE)
        markers.set(Control.SHORT_PULSE)
        await asyncio.sleep(0.05)

        assert len(recorder.events) == 1
