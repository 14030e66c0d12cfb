"""Command request endpoints.

``POST /request`` takes a JSON document; ``GET /run/{alias}/{command}`` takes
positional arguments as repeated ``arg`` query parameters and treats every
other query parameter as an option (an empty value marks a flag).
"""

from fastapi import APIRouter, Request, Response
from pydantic import ValidationError as PydanticValidationError

from cmdrest.api.dependencies import CallerDep, ProcessorDep
from cmdrest.core.errors import ValidationError
from cmdrest.models.requests import IncomingRequest, OptionValue
from cmdrest.services.request_processor import ProcessedResponse


router = APIRouter(tags=["commands"])


def _to_response(processed: ProcessedResponse) -> Response:
    return Response(
        content=processed.content,
        media_type=processed.media_type,
        status_code=processed.status_code,
        headers={"x-cmdrest-altered": "1" if processed.altered else "0"},
    )


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@router.post("/request")
async def process_request(
    body: IncomingRequest,
    request: Request,
    caller: CallerDep,
    processor: ProcessorDep,
) -> Response:
    """Process a command request sent as JSON."""
    processed = await processor.process(caller, body, request_id=_request_id(request))
    return _to_response(processed)


@router.get("/run/{alias}/{command}")
async def process_query_request(
    alias: str,
    command: str,
    request: Request,
    caller: CallerDep,
    processor: ProcessorDep,
) -> Response:
    """Process a command request encoded in the URL."""
    args = request.query_params.getlist("arg")
    options: dict[str, OptionValue] = {
        key: value if value != "" else True
        for key, value in request.query_params.multi_items()
        if key != "arg"
    }
    try:
        incoming = IncomingRequest(
            alias=alias, command=command, args=tuple(args), options=options
        )
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid command request", details={"errors": e.errors()}
        ) from e

    processed = await processor.process(
        caller, incoming, request_id=_request_id(request)
    )
    return _to_response(processed)
