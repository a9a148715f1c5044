"""InputBinder: turns mouse and touch gestures into begin/end activations.

Every bound control owns one :class:`PointerSession`.  All input sources
funnel into ``session.begin(source)`` / ``session.end(source)``, so a
gesture produces at most one activation and at most one matching
deactivation no matter how many raw events the browser emits for it:

* a second ``begin`` while the session is open is dropped;
* an ``end`` with no open session, or from another modality than the one
  that opened it, is dropped;
* mouse events emulated by the browser right after a touch gesture
  (within ``compat_window`` seconds) are dropped.

Mouse-leave while held ends the session exactly like mouse-up, so a drag
off the button never leaves it stuck down.

Marker handling: a registration with an ``on_deactivate`` callback owns the
control's marker for the whole gesture (set on begin, cleared *before*
``on_deactivate``).  Activation-only registrations leave the marker to the
callback they trigger.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from powerbutton.core import events
from powerbutton.core.event_bus import EventBus
from powerbutton.core.markers import MarkerBoard
from powerbutton.core.models.state import ActivationEvent, ActivationKind, Control, InputSource

_log = logging.getLogger(__name__)

# Callback(control) -> None | awaitable
ActivationCallback = Callable[[Control], Any]

# Browsers fire emulated mouse events up to a few hundred ms after touchend.
_DEFAULT_COMPAT_WINDOW = 0.8


class PointerSession:
    """begin/end state machine for one control.

    Args:
        clock: Monotonic time source (injectable for tests).
        compat_window: Seconds after a touch during which mouse input is
            treated as browser emulation and ignored.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        compat_window: float = _DEFAULT_COMPAT_WINDOW,
    ) -> None:
        self._clock = clock
        self._compat_window = compat_window
        self._source: InputSource | None = None
        self._last_touch: float | None = None

    @property
    def active(self) -> bool:
        return self._source is not None

    @property
    def source(self) -> InputSource | None:
        return self._source

    def begin(self, source: InputSource) -> bool:
        """Open the session; ``False`` if this input must be ignored."""
        if self._source is not None:
            return False
        if source is InputSource.MOUSE and self._recent_touch():
            return False
        self._source = source
        if source is InputSource.TOUCH:
            self._last_touch = self._clock()
        return True

    def end(self, source: InputSource) -> bool:
        """Close the session; ``False`` if it was not opened by *source*."""
        if self._source is not source:
            return False
        self._source = None
        if source is InputSource.TOUCH:
            self._last_touch = self._clock()
        return True

    def _recent_touch(self) -> bool:
        return (
            self._last_touch is not None
            and self._clock() - self._last_touch < self._compat_window
        )


@dataclass
class _Registration:
    control: Control
    on_activate: ActivationCallback
    on_deactivate: ActivationCallback | None
    session: PointerSession


class InputBinder:
    """Routes raw pointer events for each bound control.

    Args:
        markers: Marker board updated around hold gestures.
        event_bus: Receives ``input.activation.*`` notifications.
        clock: Monotonic time source shared by all sessions.
        compat_window: See :class:`PointerSession`.
    """

    def __init__(
        self,
        markers: MarkerBoard,
        event_bus: EventBus,
        clock: Callable[[], float] = time.monotonic,
        compat_window: float = _DEFAULT_COMPAT_WINDOW,
    ) -> None:
        self._markers = markers
        self._bus = event_bus
        self._clock = clock
        self._compat_window = compat_window
        self._registrations: dict[Control, _Registration] = {}
        self._tasks: set[asyncio.Task[Any]] = set()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def bind(
        self,
        control: Control,
        on_activate: ActivationCallback,
        on_deactivate: ActivationCallback | None = None,
    ) -> None:
        """Register *control*.  Each control may be bound only once."""
        if control in self._registrations:
            raise ValueError(f"{control.value} is already bound")
        self._registrations[control] = _Registration(
            control=control,
            on_activate=on_activate,
            on_deactivate=on_deactivate,
            session=PointerSession(self._clock, self._compat_window),
        )

    def is_bound(self, control: Control) -> bool:
        return control in self._registrations

    def is_active(self, control: Control) -> bool:
        reg = self._registrations.get(control)
        return reg is not None and reg.session.active

    # ------------------------------------------------------------------
    # Raw input entry points (called by the page)
    # ------------------------------------------------------------------

    def pointer_down(self, control: Control) -> bool:
        return self.begin(control, InputSource.MOUSE)

    def pointer_up(self, control: Control) -> bool:
        return self.end(control, InputSource.MOUSE)

    def pointer_leave(self, control: Control) -> bool:
        return self.end(control, InputSource.MOUSE)

    def touch_start(self, control: Control) -> bool:
        return self.begin(control, InputSource.TOUCH)

    def touch_end(self, control: Control) -> bool:
        return self.end(control, InputSource.TOUCH)

    # ------------------------------------------------------------------
    # Session transitions
    # ------------------------------------------------------------------

    def begin(self, control: Control, source: InputSource) -> bool:
        """Start a gesture.  Returns ``True`` if ``on_activate`` fired."""
        reg = self._registration(control)
        if not reg.session.begin(source):
            _log.debug("Ignoring %s begin on %s", source.value, control.value)
            return False

        if reg.on_deactivate is not None:
            self._markers.set(control)
        self._publish(ActivationEvent(control=control, kind=ActivationKind.BEGIN, source=source))
        self._invoke(reg.on_activate, control)
        return True

    def end(self, control: Control, source: InputSource) -> bool:
        """Finish a gesture.  Returns ``True`` if ``on_deactivate`` fired."""
        reg = self._registration(control)
        if not reg.session.end(source):
            return False

        self._publish(ActivationEvent(control=control, kind=ActivationKind.END, source=source))
        if reg.on_deactivate is None:
            return False
        self._markers.clear(control)
        self._invoke(reg.on_deactivate, control)
        return True

    async def drain(self) -> None:
        """Wait for every callback task spawned so far (tests, shutdown)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _registration(self, control: Control) -> _Registration:
        try:
            return self._registrations[control]
        except KeyError:
            raise ValueError(f"{control.value} is not bound") from None

    def _publish(self, activation: ActivationEvent) -> None:
        event_type = (
            events.ACTIVATION_BEGAN
            if activation.kind is ActivationKind.BEGIN
            else events.ACTIVATION_ENDED
        )
        self._bus.publish_nowait(
            event_type,
            {"control": activation.control.value, "source": activation.source.value},
        )

    def _invoke(self, callback: ActivationCallback, control: Control) -> None:
        result = callback(control)
        if asyncio.iscoroutine(result):
            task = asyncio.create_task(result, name=f"activation-{control.value}")
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _log.error("Activation callback %s failed", task.get_name(), exc_info=exc)
