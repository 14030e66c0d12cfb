"""FastAPI application factory for the cmdrest server."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from structlog import get_logger

from cmdrest import __version__
from cmdrest.api.middleware.errors import setup_error_handlers
from cmdrest.api.middleware.request_id import RequestIDMiddleware
from cmdrest.api.routes.health import router as health_router
from cmdrest.api.routes.request import router as request_router
from cmdrest.config.settings import Settings, get_settings
from cmdrest.core.logging import setup_logging
from cmdrest.hooks.events import HookEvent
from cmdrest.services.container import ServiceContainer, create_service_container


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    container: ServiceContainer = app.state.container
    settings = container.settings

    logger.info(
        "server_starting",
        host=settings.server.host,
        port=settings.server.port,
        alter_hooks=[r.name for r in container.hook_registry.get_alter_hooks()],
        category="lifecycle",
    )
    await container.hook_manager.emit(
        HookEvent.APP_STARTUP, {"port": settings.listening_port}
    )

    yield

    await container.hook_manager.emit(HookEvent.APP_SHUTDOWN)
    logger.info("server_stopped", category="lifecycle")


def create_app(
    settings: Settings | None = None,
    container: ServiceContainer | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; loaded from the default sources if omitted
        container: Prebuilt services; created from ``settings`` if omitted
    """
    if container is None:
        if settings is None:
            settings = get_settings()
            setup_logging(
                json_logs=settings.logging.json_logs,
                log_level_name=settings.logging.level,
                log_file=settings.logging.file,
                colors=settings.logging.colors,
            )
        container = create_service_container(settings)

    app = FastAPI(
        title="cmdrest",
        description="REST server running commands, with request-alter hooks",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(RequestIDMiddleware)
    setup_error_handlers(app)

    app.include_router(health_router)
    app.include_router(request_router)

    return app
