"""Well-known event type constants.

Defined centrally so publishers and subscribers reference the same strings.
"""

# --- Input events (binder -> dispatcher) ----------------------------------

ACTIVATION_BEGAN = "input.activation.began"
ACTIVATION_ENDED = "input.activation.ended"

# --- Output events (core -> UI) -------------------------------------------

MARKER_CHANGED = "output.marker.changed"
POWER_STATE_CHANGED = "state.power.changed"
ACTUATOR_STATUS_UPDATED = "state.actuator.updated"

# --- Command lifecycle events ---------------------------------------------

COMMAND_COMPLETED = "command.completed"
COMMAND_FAILED = "command.failed"
POLL_FAILED = "poll.failed"

# --- System lifecycle events ----------------------------------------------

SYSTEM_STARTED = "system.started"
SHUTDOWN_INITIATED = "system.shutdown.initiated"
