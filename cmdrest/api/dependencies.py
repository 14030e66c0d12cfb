"""FastAPI dependencies shared by the routes."""

from typing import Annotated

from fastapi import Depends, Request

from cmdrest.config.settings import Settings
from cmdrest.models.requests import CallerContext
from cmdrest.services.container import ServiceContainer
from cmdrest.services.request_processor import RequestProcessor


def get_container(request: Request) -> ServiceContainer:
    container: ServiceContainer = request.app.state.container
    return container


def get_settings(
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> Settings:
    return container.settings


def get_request_processor(
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> RequestProcessor:
    return container.request_processor


def get_caller_context(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> CallerContext:
    """Collect the caller's origin as the transport reports it.

    Nothing here is verified; the values are only handed on to hooks.
    """
    ip_address = request.client.host if request.client else ""
    if settings.server.trust_forwarded_headers:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            ip_address = first_hop

    return CallerContext(
        ip_address=ip_address,
        host=request.headers.get("host", ""),
        port=settings.listening_port,
    )


ContainerDep = Annotated[ServiceContainer, Depends(get_container)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
ProcessorDep = Annotated[RequestProcessor, Depends(get_request_processor)]
CallerDep = Annotated[CallerContext, Depends(get_caller_context)]
