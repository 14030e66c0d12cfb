"""Central registry for all hooks"""

from collections import defaultdict
from collections.abc import Callable, Collection
from dataclasses import dataclass
from itertools import count
from typing import Any

import structlog

from .base import Hook
from .events import HookEvent


PROCESS_REQUEST_ALTER = "process_request_alter"

DEFAULT_PRIORITY = 500


@dataclass(frozen=True)
class HookRegistration:
    """A registered callback together with its port guard and ordering."""

    hook: Callable[..., Any]
    name: str
    ports: frozenset[str] | None
    priority: int
    sequence: int

    def matches_port(self, port: str) -> bool:
        """Exact string comparison; ``None`` means every port."""
        return self.ports is None or port in self.ports

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.priority, self.sequence)


def _hook_name(hook: Callable[..., Any]) -> str:
    name = getattr(hook, "name", None)
    if isinstance(name, str) and name:
        return name
    return getattr(hook, "__qualname__", None) or type(hook).__name__


class HookRegistry:
    """Central registry for all hooks.

    Alter hooks are stored per hook name as an ordered sequence: ascending
    priority, then registration order. Observer hooks are stored per event.
    """

    def __init__(self) -> None:
        self._alter_hooks: dict[str, list[HookRegistration]] = defaultdict(list)
        self._hooks: dict[HookEvent, list[Hook]] = defaultdict(list)
        self._sequence = count()
        self._logger = structlog.get_logger(__name__)

    def register_alter(
        self,
        hook: Callable[..., Any],
        *,
        name: str | None = None,
        ports: Collection[str | int] | None = None,
        priority: int | None = None,
        hook_name: str = PROCESS_REQUEST_ALTER,
    ) -> HookRegistration:
        """Register a request-alter callback.

        Args:
            hook: Callable implementing the alter contract (sync or async)
            name: Display name, defaults to ``hook.name`` or its qualname
            ports: Listening ports the hook applies to, defaults to
                ``hook.ports``; ``None`` applies it to every port
            priority: Lower runs first, defaults to ``hook.priority`` or 500
            hook_name: Extension point the callback is registered for

        Returns:
            The stored registration
        """
        if not callable(hook):
            raise TypeError(f"Hook {hook!r} is not callable")

        if ports is None:
            ports = getattr(hook, "ports", None)
        if priority is None:
            priority = getattr(hook, "priority", DEFAULT_PRIORITY)

        registration = HookRegistration(
            hook=hook,
            name=name or _hook_name(hook),
            ports=frozenset(str(p) for p in ports) if ports is not None else None,
            priority=int(priority),
            sequence=next(self._sequence),
        )
        registrations = self._alter_hooks[hook_name]
        registrations.append(registration)
        registrations.sort(key=lambda r: r.sort_key)

        self._logger.info(
            "hook_registered",
            hook=registration.name,
            hook_name=hook_name,
            ports=sorted(registration.ports) if registration.ports else None,
            priority=registration.priority,
        )
        return registration

    def unregister_alter(
        self, hook: Callable[..., Any], hook_name: str = PROCESS_REQUEST_ALTER
    ) -> None:
        """Remove every registration of ``hook``."""
        if hook_name in self._alter_hooks:
            self._alter_hooks[hook_name] = [
                r for r in self._alter_hooks[hook_name] if r.hook is not hook
            ]

    def get_alter_hooks(
        self, hook_name: str = PROCESS_REQUEST_ALTER
    ) -> list[HookRegistration]:
        """All registrations for an extension point, in invocation order."""
        return list(self._alter_hooks.get(hook_name, []))

    def get_alter_hooks_for_port(
        self, port: str, hook_name: str = PROCESS_REQUEST_ALTER
    ) -> list[HookRegistration]:
        """Registrations whose port guard accepts ``port``."""
        return [r for r in self.get_alter_hooks(hook_name) if r.matches_port(port)]

    def register(self, hook: Hook) -> None:
        """Register an observer hook for its events"""
        for event in hook.events:
            self._hooks[event].append(hook)
            self._logger.debug("observer_registered", hook=hook.name, hook_event=event.value)

    def unregister(self, hook: Hook) -> None:
        """Remove an observer hook from all events"""
        for event in hook.events:
            if hook in self._hooks[event]:
                self._hooks[event].remove(hook)

    def get_hooks(self, event: HookEvent) -> list[Hook]:
        """Get all observer hooks for an event"""
        return self._hooks.get(event, [])

    def clear(self) -> None:
        self._alter_hooks.clear()
        self._hooks.clear()
