"""Unit tests for the DevPanel handlers.

NiceGUI itself is not exercised, only the async handlers that respond to
bus notifications.  Once a page's client has been torn down, writing to
its elements raises ``RuntimeError``; the handlers swallow that so the
bus keeps the subscription alive for other pages.
"""

from __future__ import annotations

from unittest.mock import MagicMock

from powerbutton.actuator.mock_actuator import MockActuator
from powerbutton.core import events
from powerbutton.core.models.event import Event
from powerbutton.ui.dev_panel import DevPanel, describe_event


class _BrokenValueElement:
    """Mimics a NiceGUI switch whose client has already been deleted."""

    @property
    def value(self):
        return None

    @value.setter
    def value(self, v):
        raise RuntimeError("The client this element belongs to has been deleted.")


def _event(event_type: str, **payload) -> Event:
    return Event(event_type=event_type, payload=payload)


class TestDescribeEvent:
    def test_activation(self):
        text = describe_event(_event(events.ACTIVATION_BEGAN, control="long_pulse", source="touch"))
        assert text.endswith("long_pulse begin (touch)")

    def test_command_completed(self):
        text = describe_event(
            _event(events.COMMAND_COMPLETED, control="short_pulse", command="release", status_code=200)
        )
        assert text.endswith("short_pulse: release -> 200")

    def test_command_failed(self):
        text = describe_event(
            _event(
                events.COMMAND_FAILED,
                control="power_button",
                command="press",
                status_code=418,
                error="HTTP 418",
            )
        )
        assert text.endswith("power_button: press FAILED (HTTP 418)")

    def test_poll_failed_and_power(self):
        assert describe_event(_event(events.POLL_FAILED, error="Read timeout")).endswith(
            "poll FAILED (Read timeout)"
        )
        assert describe_event(_event(events.POWER_STATE_CHANGED, on=True)).endswith("power ON")

    def test_other_events_use_type(self):
        assert describe_event(_event(events.SYSTEM_STARTED)).endswith(events.SYSTEM_STARTED)


async def test_event_handler_pushes_to_log() -> None:
    panel = DevPanel(actuator=MockActuator(), event_bus=MagicMock())
    panel._log_view = MagicMock()

    await panel._on_event(_event(events.POWER_STATE_CHANGED, on=False))

    panel._log_view.push.assert_called_once()
    assert panel._log_view.push.call_args[0][0].endswith("power OFF")


async def test_handlers_before_build_are_noops() -> None:
    panel = DevPanel(actuator=MockActuator(), event_bus=MagicMock())
    await panel._on_event(_event(events.POLL_FAILED, error="x"))
    await panel._on_power_changed(_event(events.POWER_STATE_CHANGED, on=True))


async def test_handlers_ignore_runtime_error() -> None:
    panel = DevPanel(actuator=MockActuator(), event_bus=MagicMock())
    panel._power_switch = _BrokenValueElement()
    panel._log_view = MagicMock()
    panel._log_view.push.side_effect = RuntimeError("client deleted")

    await panel._on_power_changed(_event(events.POWER_STATE_CHANGED, on=True))
    await panel._on_event(_event(events.POWER_STATE_CHANGED, on=True))
