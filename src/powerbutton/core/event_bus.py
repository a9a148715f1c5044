"""Async notification bus: ``asyncio.Queue``-backed pub/sub.

The core publishes here (marker changes, power-state changes, command
outcomes); the NiceGUI page and the dev panel subscribe.  Publishers never
see subscriber failures.

Behaviour:
* Handlers may be plain functions or coroutines; both run on the loop.
* A handler that raises is logged and **removed**.
* Handlers of one event type run in subscription order.
* The queue is bounded; on overflow the oldest event is discarded.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Callable

from powerbutton.core.models.event import Event

_log = logging.getLogger(__name__)

Handler = Callable[[Event], Any]


class EventBus:
    """Bounded pub/sub queue drained by a single consumer task.

    Args:
        queue_size: Maximum number of undelivered events.
    """

    def __init__(self, queue_size: int = 1000) -> None:
        self._queue_size = queue_size
        self._queue: asyncio.Queue[Event] | None = None
        # event_type -> {sub_id: handler}, insertion ordered
        self._handlers: dict[str, dict[str, Handler]] = {}
        self._consumer_task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._consumer_task is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Create the queue and spawn the consumer on the running loop."""
        self._queue = asyncio.Queue(maxsize=self._queue_size)
        self._consumer_task = asyncio.create_task(self._consume(), name="event-bus-consumer")
        _log.info("Event bus started (queue_size=%d)", self._queue_size)

    async def stop(self) -> None:
        """Cancel the consumer and forget every subscription."""
        task, self._consumer_task = self._consumer_task, None
        if task is not None:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        self._handlers.clear()
        _log.info("Event bus stopped")

    # ------------------------------------------------------------------
    # Publish
    # ------------------------------------------------------------------

    async def publish(self, event_type: str, payload: dict[str, Any] | None = None) -> None:
        """Enqueue an event from a coroutine."""
        self.publish_nowait(event_type, payload)

    def publish_nowait(self, event_type: str, payload: dict[str, Any] | None = None) -> None:
        """Enqueue an event from synchronous code running on the loop.

        Gesture callbacks and the marker board are synchronous, so they use
        this entry point directly.
        """
        assert self._queue is not None, "EventBus.start() has not been called"
        if self._queue.full():
            self._queue.get_nowait()
            _log.warning("Event bus queue overflow, dropped oldest event")
        self._queue.put_nowait(Event(event_type=event_type, payload=payload or {}))

    # ------------------------------------------------------------------
    # Subscribe / unsubscribe
    # ------------------------------------------------------------------

    def subscribe(self, event_type: str, handler: Handler) -> str:
        """Register *handler* for *event_type* and return the subscription id."""
        sub_id = f"{event_type}:{uuid.uuid4().hex}"
        self._handlers.setdefault(event_type, {})[sub_id] = handler
        return sub_id

    def unsubscribe(self, sub_id: str) -> None:
        event_type = sub_id.rpartition(":")[0]
        self._handlers.get(event_type, {}).pop(sub_id, None)

    # ------------------------------------------------------------------
    # Consumer loop
    # ------------------------------------------------------------------

    async def _consume(self) -> None:
        assert self._queue is not None
        while True:
            await self._dispatch(await self._queue.get())

    async def _dispatch(self, event: Event) -> None:
        handlers = self._handlers.get(event.event_type, {})
        for sub_id, handler in list(handlers.items()):
            if sub_id not in handlers:
                # removed by an earlier handler of this event
                continue
            try:
                result = handler(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                _log.exception(
                    "Handler %s for '%s' raised, removing it", handler, event.event_type
                )
                self.unsubscribe(sub_id)
