"""Tests for StatusPoller reconciliation."""

from __future__ import annotations

import asyncio

from powerbutton.core import events
from powerbutton.core.interfaces.actuator import ActuatorClient
from powerbutton.core.models.command import Command, CommandResult
from powerbutton.core.models.state import ActuatorStatus
from powerbutton.core.status_poller import StatusPoller
from tests.helpers.fakes import ScriptedActuator
from tests.helpers.runtime import EventRecorder, wait_for


async def _settle() -> None:
    await asyncio.sleep(0.05)


class TestTick:
    async def test_initial_state_is_off(self, event_bus):
        poller = StatusPoller(ScriptedActuator(), event_bus)
        assert poller.power_state is False
        assert poller.last_status is None

    async def test_change_updates_state_and_notifies_once(self, event_bus):
        recorder = EventRecorder(event_bus, events.POWER_STATE_CHANGED)
        actuator = ScriptedActuator()
        actuator.statuses = [ActuatorStatus(on=True), ActuatorStatus(on=True)]
        poller = StatusPoller(actuator, event_bus)

        await poller.tick()
        await poller.tick()
        await _settle()

        assert poller.power_state is True
        assert recorder.payloads(events.POWER_STATE_CHANGED) == [{"on": True}]

    async def test_same_value_as_cache_is_noop(self, event_bus):
        recorder = EventRecorder(event_bus, events.POWER_STATE_CHANGED)
        actuator = ScriptedActuator()
        actuator.statuses = [ActuatorStatus(on=False)]
        poller = StatusPoller(actuator, event_bus)

        await poller.tick()
        await _settle()

        assert recorder.events == []

    async def test_failed_poll_keeps_state(self, event_bus):
        recorder = EventRecorder(event_bus, events.POWER_STATE_CHANGED, events.POLL_FAILED)
        actuator = ScriptedActuator()
        actuator.statuses = [ActuatorStatus(on=True), 503, ActuatorStatus(on=True)]
        poller = StatusPoller(actuator, event_bus)

        await poller.tick()
        assert poller.power_state is True
        result = await poller.tick()
        assert result.ok is False
        assert poller.power_state is True
        await poller.tick()
        await _settle()

        assert poller.power_state is True
        assert len(recorder.of_type(events.POWER_STATE_CHANGED)) == 1
        assert recorder.payloads(events.POLL_FAILED) == [
            {"error": "HTTP 503", "status_code": 503}
        ]

    async def test_failure_before_first_success_leaves_off(self, event_bus):
        actuator = ScriptedActuator()
        actuator.statuses = [500]
        poller = StatusPoller(actuator, event_bus)

        await poller.tick()

        assert poller.power_state is False
        assert poller.last_status is None

    async def test_status_details_published_on_change_only(self, event_bus):
        recorder = EventRecorder(event_bus, events.ACTUATOR_STATUS_UPDATED)
        actuator = ScriptedActuator()
        actuator.statuses = [
            ActuatorStatus(on=False, pressed=True),
            ActuatorStatus(on=False, pressed=True),
            ActuatorStatus(on=False, pressed=False),
        ]
        poller = StatusPoller(actuator, event_bus)

        for _ in range(3):
            await poller.tick()
        await _settle()

        assert [p["status"]["pressed"] for p in recorder.payloads(events.ACTUATOR_STATUS_UPDATED)] == [
            True,
            False,
        ]
        assert poller.last_status == ActuatorStatus(on=False, pressed=False)


class _OutOfOrderActuator(ActuatorClient):
    """Each status call blocks on its own gate, so replies can be reordered."""

    def __init__(self, replies: list[bool]) -> None:
        self.replies = list(replies)
        self.gates: list[asyncio.Event] = []

    async def press(self) -> CommandResult:
        raise NotImplementedError

    async def release(self) -> CommandResult:
        raise NotImplementedError

    async def timed_press(self, seconds: float) -> CommandResult:
        raise NotImplementedError

    async def status(self) -> CommandResult:
        gate = asyncio.Event()
        self.gates.append(gate)
        on = self.replies.pop(0)
        await gate.wait()
        return CommandResult.success(Command.STATUS, 200, ActuatorStatus(on=on))


class TestOverlappingTicks:
    async def test_stale_reply_is_discarded(self, event_bus):
        actuator = _OutOfOrderActuator([False, True])
        poller = StatusPoller(actuator, event_bus)

        older = asyncio.create_task(poller.tick())
        newer = asyncio.create_task(poller.tick())
        await wait_for(lambda: len(actuator.gates) == 2)

        actuator.gates[1].set()
        await newer
        assert poller.power_state is True

        actuator.gates[0].set()
        await older
        assert poller.power_state is True


class TestLoop:
    async def test_loop_keeps_ticking_through_failures(self, event_bus):
        actuator = ScriptedActuator()
        actuator.statuses = [503, 503, ActuatorStatus(on=True)]
        poller = StatusPoller(actuator, event_bus, poll_interval=0.01)

        poller.start()
        try:
            await wait_for(lambda: poller.power_state is True, timeout=2.0)
        finally:
            await poller.stop()

        assert not poller.is_running
        assert len(actuator.timeline) >= 3

    async def test_start_twice_is_harmless(self, event_bus):
        poller = StatusPoller(ScriptedActuator(), event_bus, poll_interval=0.01)
        poller.start()
        poller.start()
        await poller.stop()
        assert not poller.is_running

    async def test_slow_actuator_caps_pending_ticks(self, event_bus):
        actuator = ScriptedActuator()
        gate = asyncio.Event()
        actuator.gates[Command.STATUS] = gate
        poller = StatusPoller(actuator, event_bus, poll_interval=0.01, max_in_flight=2)

        poller.start()
        try:
            await asyncio.sleep(0.2)
            # twenty intervals passed, but only two requests were sent
            assert actuator.calls() == ["status", "status"]

            gate.set()
            await wait_for(lambda: len(actuator.calls()) > 2)
        finally:
            await poller.stop()
