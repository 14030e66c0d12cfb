"""Request-alter hooks that reject requests."""

from collections.abc import Collection

import structlog

from cmdrest.models.requests import IncomingRequest

from ..base import UNALTERED, BaseRequestAlterHook, HookResult, Replaced


logger = structlog.get_logger(__name__)


class CommandFilterHook(BaseRequestAlterHook):
    """Whitelist and/or blacklist commands.

    With ``allowed`` set only those commands pass; ``denied`` always wins.
    Rejections are answered with a 403 error payload.
    """

    name = "command_filter"
    priority = 100

    def __init__(
        self,
        allowed: Collection[str] | None = None,
        denied: Collection[str] = (),
        ports: Collection[str] | None = None,
    ) -> None:
        super().__init__(ports)
        self.allowed = frozenset(allowed) if allowed is not None else None
        self.denied = frozenset(denied)

    def is_allowed(self, command: str) -> bool:
        if command in self.denied:
            return False
        return self.allowed is None or command in self.allowed

    def alter(
        self,
        ip_address: str,
        host: str,
        port: str,
        request: IncomingRequest,
    ) -> HookResult:
        if self.is_allowed(request.command):
            return UNALTERED

        logger.warning(
            "command_rejected",
            command=request.command,
            alias=request.alias,
            port=port,
        )
        return Replaced.reject(
            f"Command '{request.command}' is not allowed",
            error_type="command_not_allowed",
        )


class CallerAllowlistHook(BaseRequestAlterHook):
    """Reject callers whose reported IP address or host name is not listed.

    Both values come from the caller and can be spoofed, so this is a
    convenience filter for trusted networks, not authentication.
    """

    name = "caller_allowlist"
    priority = 50

    def __init__(
        self,
        addresses: Collection[str],
        ports: Collection[str] | None = None,
    ) -> None:
        super().__init__(ports)
        self.addresses = frozenset(addresses)

    def alter(
        self,
        ip_address: str,
        host: str,
        port: str,
        request: IncomingRequest,
    ) -> HookResult:
        if ip_address in self.addresses or host in self.addresses:
            return UNALTERED

        logger.warning(
            "caller_rejected",
            ip_address=ip_address,
            host=host,
            port=port,
        )
        return Replaced.reject(
            "Caller is not allowed to use this server",
            error_type="caller_not_allowed",
        )
