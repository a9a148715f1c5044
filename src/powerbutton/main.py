"""Power Button: application entry point (NiceGUI composition root).

Wires together: Config -> EventBus -> Actuator -> SystemManager -> UI.
NiceGUI owns the event loop; ``app.on_startup`` / ``app.on_shutdown``
handle lifecycle.
"""

from __future__ import annotations

import logging as _logging
from typing import Callable

from nicegui import app, ui

from powerbutton.actuator.factory import create_actuator
from powerbutton.config.config_manager import load_config
from powerbutton.core.event_bus import EventBus
from powerbutton.core.system_manager import SystemManager
from powerbutton.log_config.logger import setup_logging

_log = _logging.getLogger(__name__)


def main() -> None:
    """Synchronous entry point: bootstraps and starts NiceGUI."""

    # 1. Configuration, then logging at the configured level
    config = load_config()
    setup_logging(config.system.log_level, config.system.log_dir)
    _log.info("Starting Power Button")

    # 2. Event bus + actuator
    bus = EventBus(queue_size=config.system.event_bus_queue_size)
    actuator = create_actuator(config)

    # 3. Core components
    system = SystemManager(config=config, event_bus=bus, actuator=actuator)

    # 4. Dev panel (mock actuator only)
    from powerbutton.actuator.mock_actuator import MockActuator
    from powerbutton.ui.layout import PowerButtonLayout

    extra: Callable[[], None] | None = None
    if config.system.dev_mode and isinstance(actuator, MockActuator):
        from powerbutton.ui.dev_panel import DevPanel

        def _dev_panel() -> None:
            DevPanel(actuator=actuator, event_bus=bus).build()

        extra = _dev_panel

    layout = PowerButtonLayout(system=system, event_bus=bus, config=config, extra=extra)
    layout.setup_page()

    # 5. Lifecycle hooks
    async def on_startup() -> None:
        await system.start()
        _log.info("Power Button running on http://localhost:%d", config.system.webui_port)

    async def on_shutdown() -> None:
        await system.shutdown(reason="nicegui shutdown")

    app.on_startup(on_startup)
    app.on_shutdown(on_shutdown)

    # 6. Launch NiceGUI (blocks forever)
    ui.run(
        port=config.system.webui_port,
        title=config.system.title,
        reload=False,
        show=False,
    )


if __name__ == "__main__":
    main()
