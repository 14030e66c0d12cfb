"""Per-request pipeline of the server.

The processor gives the registered request-alter hooks the first word and
falls back to running the command, then encodes whatever came out into a
response body. It never looks at the caller's address or host itself.
"""

import json
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic_core import to_jsonable_python

from cmdrest.hooks.base import Replaced
from cmdrest.hooks.events import HookEvent
from cmdrest.hooks.manager import HookManager
from cmdrest.models.requests import CallerContext, IncomingRequest

from .invoker import Invoker


logger = structlog.get_logger(__name__)

JSON_MEDIA_TYPE = "application/json"
TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"
BINARY_MEDIA_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class ProcessedResponse:
    """Encoded response ready to be sent to the caller."""

    content: bytes
    media_type: str
    status_code: int = 200
    altered: bool = False

    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


def encode_json(payload: Any) -> bytes:
    return json.dumps(
        payload, default=to_jsonable_python, ensure_ascii=False
    ).encode("utf-8")


def encode_replacement(result: Replaced) -> ProcessedResponse:
    """Serialize a hook's payload.

    Strings become text and bytes stay binary unless the hook named a media
    type; everything else is sent as JSON.
    """
    payload = result.payload
    media_type = result.media_type

    if isinstance(payload, bytes):
        content = payload
        media_type = media_type or BINARY_MEDIA_TYPE
    elif isinstance(payload, str):
        content = payload.encode("utf-8")
        media_type = media_type or TEXT_MEDIA_TYPE
    else:
        content = encode_json(payload)
        media_type = media_type or JSON_MEDIA_TYPE

    return ProcessedResponse(
        content=content,
        media_type=media_type,
        status_code=result.status_code,
        altered=True,
    )


class RequestProcessor:
    """Runs alter hooks, then the default invocation."""

    def __init__(self, hook_manager: HookManager, invoker: Invoker):
        self.hook_manager = hook_manager
        self.invoker = invoker

    async def process(
        self,
        caller: CallerContext,
        request: IncomingRequest,
        request_id: str | None = None,
    ) -> ProcessedResponse:
        """Handle one request.

        Args:
            caller: Untrusted origin of the request, passed through to hooks
            request: The parsed request
            request_id: Correlation id for observer hooks

        Returns:
            The encoded response

        Raises:
            HookExecutionError: A hook failed
            CmdRestError: The default invocation failed
        """
        context: dict[str, Any] = {
            "caller": caller,
            "request": request,
            "request_id": request_id,
        }
        await self.hook_manager.emit(HookEvent.REQUEST_RECEIVED, **context)

        try:
            result = await self.hook_manager.process_request_alter(caller, request)

            if isinstance(result, Replaced):
                response = encode_replacement(result)
                await self.hook_manager.emit(
                    HookEvent.REQUEST_ALTERED,
                    {"status_code": response.status_code},
                    **context,
                )
                return response

            command_result = await self.invoker.invoke(request)
            response = ProcessedResponse(
                content=encode_json(command_result.model_dump(mode="json")),
                media_type=JSON_MEDIA_TYPE,
            )
        except Exception as e:
            await self.hook_manager.emit(HookEvent.REQUEST_FAILED, error=e, **context)
            raise

        await self.hook_manager.emit(
            HookEvent.REQUEST_COMPLETED,
            {"exit_code": command_result.exit_code},
            **context,
        )
        return response
