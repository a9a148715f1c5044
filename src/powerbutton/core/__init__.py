"""Core services: input binding, command dispatch, status polling."""

from powerbutton.core.dispatcher import CommandDispatcher
from powerbutton.core.event_bus import EventBus
from powerbutton.core.input_binder import InputBinder, PointerSession
from powerbutton.core.markers import MarkerBoard
from powerbutton.core.status_poller import StatusPoller
from powerbutton.core.system_manager import SystemManager

__all__ = [
    "CommandDispatcher",
    "EventBus",
    "InputBinder",
    "MarkerBoard",
    "PointerSession",
    "StatusPoller",
    "SystemManager",
]
