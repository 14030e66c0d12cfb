"""Core types of the hook system.

A request-alter hook is called once per inbound request, before the server
runs the command, with the caller's reported address, host name, the
listening port and the parsed request::

    def process_request_alter(ip_address, host, port, request) -> HookResult

It may return :data:`UNALTERED` (or ``None``) to let the request continue, or
a :class:`Replaced` result whose payload becomes the response. Any other
return value is treated as a replacement payload.

Because a hook alters *every* request reaching the server, register it with
a port guard (or give it a ``ports`` attribute) so it only applies to the
server instance it was written for. ``ip_address`` and ``host`` can be
spoofed by non-browser clients.
"""

from collections.abc import Awaitable, Collection
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, TypeAlias, runtime_checkable

from cmdrest.models.requests import CallerContext, IncomingRequest

from .events import HookEvent


@dataclass(frozen=True)
class Unaltered:
    """The hook leaves the request to the next hook or to default processing."""

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class Replaced:
    """The hook supplies the caller-visible response.

    ``payload`` is opaque to the server. Strings are sent as text, bytes as
    binary, anything else as JSON, unless ``media_type`` says otherwise.
    """

    payload: Any
    media_type: str | None = None
    status_code: int = 200

    @classmethod
    def reject(
        cls, message: str, *, status_code: int = 403, error_type: str = "rejected"
    ) -> "Replaced":
        """Build an error-shaped replacement."""
        return cls(
            payload={"error": {"type": error_type, "message": message}},
            status_code=status_code,
        )


HookResult: TypeAlias = Unaltered | Replaced

UNALTERED = Unaltered()


def normalize_result(value: Any) -> HookResult:
    """Map whatever a hook returned onto a :data:`HookResult`."""
    if isinstance(value, Unaltered | Replaced):
        return value
    if value is None:
        return UNALTERED
    return Replaced(payload=value)


@runtime_checkable
class RequestAlterHook(Protocol):
    """Callable invoked before a request is dispatched to its command.

    Implementations may optionally expose ``name``, ``ports`` and
    ``priority`` attributes; the registry picks them up as defaults.
    """

    def __call__(
        self,
        ip_address: str,
        host: str,
        port: str,
        request: IncomingRequest,
    ) -> HookResult | Any | Awaitable[HookResult | Any]: ...


class BaseRequestAlterHook:
    """Convenience base for class-based hooks restricted to some ports."""

    name: str = "request_alter_hook"
    priority: int = 500

    def __init__(self, ports: Collection[str] | None = None) -> None:
        self.ports: frozenset[str] | None = (
            frozenset(str(p) for p in ports) if ports is not None else None
        )

    def __call__(
        self,
        ip_address: str,
        host: str,
        port: str,
        request: IncomingRequest,
    ) -> HookResult | Awaitable[HookResult]:
        return self.alter(ip_address, host, port, request)

    def alter(
        self,
        ip_address: str,
        host: str,
        port: str,
        request: IncomingRequest,
    ) -> HookResult | Awaitable[HookResult]:
        raise NotImplementedError


class NoopRequestAlterHook(BaseRequestAlterHook):
    """Default implementation: never alters anything."""

    name = "noop"

    def alter(
        self,
        ip_address: str,
        host: str,
        port: str,
        request: IncomingRequest,
    ) -> HookResult:
        return UNALTERED


@dataclass
class HookContext:
    """Context passed to observer hooks for lifecycle events."""

    event: HookEvent
    timestamp: datetime
    data: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    request_id: str | None = None
    caller: CallerContext | None = None
    request: IncomingRequest | None = None
    error: BaseException | None = None


class Hook(Protocol):
    """Observer hook notified of lifecycle events."""

    @property
    def name(self) -> str: ...

    @property
    def events(self) -> list[HookEvent]: ...

    def __call__(self, context: HookContext) -> Awaitable[None] | None: ...
