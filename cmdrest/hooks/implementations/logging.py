"""Structured logging hook implementation."""

from typing import Any

import structlog

from ..base import HookContext
from ..events import HookEvent


class LoggingHook:
    """Structured logging for request and application events"""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        """Initialize logging hook.

        Args:
            logger: Optional structlog logger instance. If None, creates a new one.
        """
        self.logger = logger or structlog.get_logger(__name__)
        self._name = "logging_hook"
        self._events = list(HookEvent)

    @property
    def name(self) -> str:
        """Hook name for debugging"""
        return self._name

    @property
    def events(self) -> list[HookEvent]:
        """Events this hook listens to"""
        return self._events

    async def __call__(self, context: HookContext) -> None:
        """Log event with structured context.

        Args:
            context: Hook context containing event data and metadata
        """
        log_data: dict[str, Any] = {"hook_event": context.event.value}

        if context.request_id:
            log_data["request_id"] = context.request_id
        if context.data:
            log_data.update(context.data)

        if context.caller:
            log_data["caller_ip"] = context.caller.ip_address
            log_data["caller_host"] = context.caller.host
            log_data["port"] = context.caller.port

        if context.request:
            log_data["alias"] = context.request.alias
            log_data["command"] = context.request.command

        if context.error:
            log_data["error_type"] = type(context.error).__name__
            log_data["error_message"] = str(context.error)

        log_level = self._get_log_level(context.event, context.error)
        getattr(self.logger, log_level)("hook_event", **log_data)

    def _get_log_level(
        self, event: HookEvent, error: BaseException | None = None
    ) -> str:
        """Determine appropriate log level for event."""
        if error or event is HookEvent.REQUEST_FAILED:
            return "error"

        if event is HookEvent.REQUEST_RECEIVED:
            return "debug"

        return "info"
