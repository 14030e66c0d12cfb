"""Hook execution manager.

Runs request-alter hooks for one request and notifies observer hooks of
lifecycle events. Alter hooks run sequentially in registry order and the
first one that returns a replacement ends the chain. A failing alter hook
fails its request; a failing observer is logged and skipped.
"""

import asyncio
from datetime import UTC, datetime
from typing import Any

import structlog

from cmdrest.core.errors import HookExecutionError
from cmdrest.models.requests import CallerContext, IncomingRequest

from .base import UNALTERED, Hook, HookContext, HookResult, Replaced, normalize_result
from .events import HookEvent
from .registry import PROCESS_REQUEST_ALTER, HookRegistration, HookRegistry


class HookManager:
    """Manages hook execution with async/sync support."""

    def __init__(self, registry: HookRegistry):
        """Initialize the hook manager.

        Args:
            registry: The hook registry to get hooks from
        """
        self._registry = registry
        self._logger = structlog.get_logger(__name__)

    @property
    def registry(self) -> HookRegistry:
        return self._registry

    async def process_request_alter(
        self,
        caller: CallerContext,
        request: IncomingRequest,
        hook_name: str = PROCESS_REQUEST_ALTER,
    ) -> HookResult:
        """Give every matching alter hook a chance to replace the response.

        Args:
            caller: Untrusted network origin of the request
            request: The parsed request; each hook gets its own copy
            hook_name: Extension point to run

        Returns:
            The first :class:`Replaced` result, or ``UNALTERED``

        Raises:
            HookExecutionError: A hook raised; the request must fail
        """
        registrations = self._registry.get_alter_hooks_for_port(caller.port, hook_name)
        if not registrations:
            return UNALTERED

        for registration in registrations:
            result = await self._execute_alter_hook(registration, caller, request)
            if isinstance(result, Replaced):
                self._logger.debug(
                    "hook_replaced_response",
                    hook=registration.name,
                    port=caller.port,
                    command=request.command,
                )
                return result

        return UNALTERED

    async def _execute_alter_hook(
        self,
        registration: HookRegistration,
        caller: CallerContext,
        request: IncomingRequest,
    ) -> HookResult:
        try:
            result: Any = registration.hook(
                caller.ip_address,
                caller.host,
                caller.port,
                request.model_copy(deep=True),
            )
            if asyncio.iscoroutine(result):
                result = await result
        except Exception as e:
            self._logger.error(
                "hook_failed",
                hook=registration.name,
                port=caller.port,
                command=request.command,
                error=str(e),
                exc_info=e,
            )
            raise HookExecutionError(registration.name, e) from e
        return normalize_result(result)

    async def emit(
        self, event: HookEvent, data: dict[str, Any] | None = None, **kwargs: Any
    ) -> None:
        """Emit an event to all registered observer hooks.

        Args:
            event: The event to emit
            data: Optional data dictionary to include in context
            **kwargs: Additional context fields (caller, request, error, ...)
        """
        hooks = self._registry.get_hooks(event)
        if not hooks:
            return

        context = HookContext(
            event=event,
            timestamp=datetime.now(UTC),
            data=data or {},
            metadata={},
            **kwargs,
        )

        for hook in hooks:
            try:
                await self._execute_hook(hook, context)
            except Exception as e:
                self._logger.error(
                    "observer_hook_failed",
                    hook=hook.name,
                    hook_event=event.value,
                    error=str(e),
                )

    async def _execute_hook(self, hook: Hook, context: HookContext) -> None:
        result = hook(context)
        if asyncio.iscoroutine(result):
            await result
