"""Event definitions for the hook system."""

from enum import Enum


class HookEvent(str, Enum):
    """Event types that observer hooks can subscribe to"""

    # Application Lifecycle
    APP_STARTUP = "app.startup"
    APP_SHUTDOWN = "app.shutdown"

    # Request Lifecycle
    REQUEST_RECEIVED = "request.received"
    REQUEST_ALTERED = "request.altered"
    REQUEST_COMPLETED = "request.completed"
    REQUEST_FAILED = "request.failed"
