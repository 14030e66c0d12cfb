"""Request-alter hooks that change the shape of the response.

They run the command themselves through an invoker and hand back a
different representation of its output than the default JSON document.
"""

from collections.abc import Collection, Sequence

from cmdrest.models.requests import IncomingRequest
from cmdrest.models.responses import CommandResult
from cmdrest.services.invoker import Invoker

from ..base import BaseRequestAlterHook, HookResult, Replaced


class _InvokingHook(BaseRequestAlterHook):
    def __init__(
        self,
        ports: Collection[str] | None = None,
        invoker: Invoker | None = None,
    ) -> None:
        super().__init__(ports)
        self._invoker = invoker

    def bind_invoker(self, invoker: Invoker) -> None:
        """Use the server's invoker unless one was passed explicitly."""
        if self._invoker is None:
            self._invoker = invoker

    @property
    def invoker(self) -> Invoker:
        if self._invoker is None:
            raise RuntimeError(
                f"{type(self).__name__} has no invoker; pass one or load it through the hook loader"
            )
        return self._invoker

    async def alter(
        self,
        ip_address: str,
        host: str,
        port: str,
        request: IncomingRequest,
    ) -> HookResult:
        result = await self.invoker.invoke(request)
        return self.render(result)

    def render(self, result: CommandResult) -> HookResult:
        raise NotImplementedError


class PlainOutputHook(_InvokingHook):
    """Return the command's standard output as ``text/plain``."""

    name = "plain_output"

    def render(self, result: CommandResult) -> HookResult:
        return Replaced(
            payload=result.output,
            media_type="text/plain",
            status_code=200 if not result.error_status else 500,
        )


class OutputSubsetHook(_InvokingHook):
    """Return only some fields of the command result."""

    name = "output_subset"

    def __init__(
        self,
        fields: Sequence[str] = ("object", "exit_code"),
        ports: Collection[str] | None = None,
        invoker: Invoker | None = None,
    ) -> None:
        super().__init__(ports, invoker)
        unknown = set(fields) - set(CommandResult.model_fields)
        if unknown:
            raise ValueError(f"Unknown result fields: {sorted(unknown)}")
        self.fields = tuple(fields)

    def render(self, result: CommandResult) -> HookResult:
        return Replaced(payload=result.model_dump(mode="json", include=set(self.fields)))
