"""Error handling for the cmdrest API.

Every failure is local to its request and answered with
``{"error": {"type": ..., "message": ...}}``.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from structlog import get_logger

from cmdrest.core.errors import CmdRestError
from cmdrest.models.responses import ErrorDetail, ErrorResponse


logger = get_logger(__name__)


def _error_response(status_code: int, error_type: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=ErrorDetail(type=error_type, message=message)
        ).model_dump(),
    )


def setup_error_handlers(app: FastAPI) -> None:
    """Setup error handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(CmdRestError)
    async def cmdrest_error_handler(request: Request, exc: CmdRestError) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            exc.error_type,
            error_message=exc.message,
            status_code=exc.status_code,
            request_method=request.method,
            request_url=str(request.url.path),
            **exc.details,
        )
        return _error_response(exc.status_code, exc.error_type, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(
            "request_validation_error",
            errors=exc.errors(),
            request_url=str(request.url.path),
        )
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        return _error_response(422, "invalid_request_error", messages)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        # 404s are expected noise
        log = logger.debug if exc.status_code == 404 else logger.warning
        log(
            "http_error",
            error_message=exc.detail,
            status_code=exc.status_code,
            request_method=request.method,
            request_url=str(request.url.path),
        )
        return _error_response(exc.status_code, "http_error", str(exc.detail))

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            error_message=str(exc),
            request_method=request.method,
            request_url=str(request.url.path),
            exc_info=exc,
        )
        return _error_response(
            500, "internal_server_error", "An internal server error occurred"
        )

    logger.debug("error_handlers_setup_completed")
