"""Service container wiring settings, hooks and the request pipeline.

Built once per process (the API lifespan or a CLI command) and shared by
every request handled there.
"""

import structlog

from cmdrest.config.settings import Settings
from cmdrest.hooks.implementations.logging import LoggingHook
from cmdrest.hooks.loader import load_hooks
from cmdrest.hooks.manager import HookManager
from cmdrest.hooks.registry import HookRegistry

from .invoker import CommandInvoker, Invoker
from .request_processor import RequestProcessor


logger = structlog.get_logger(__name__)


class ServiceContainer:
    """Holds the long-lived services of one server process."""

    def __init__(
        self,
        settings: Settings,
        registry: HookRegistry | None = None,
        invoker: Invoker | None = None,
    ) -> None:
        self.settings = settings
        self.hook_registry = registry or HookRegistry()
        self.hook_manager = HookManager(self.hook_registry)
        self.invoker: Invoker = invoker or CommandInvoker(settings.commands)
        self.request_processor = RequestProcessor(self.hook_manager, self.invoker)


def create_service_container(
    settings: Settings,
    registry: HookRegistry | None = None,
    invoker: Invoker | None = None,
    load_configured_hooks: bool = True,
) -> ServiceContainer:
    """Create a container and populate its hook registry.

    Args:
        settings: Application settings
        registry: Pre-populated registry, e.g. from tests
        invoker: Replacement for the subprocess invoker
        load_configured_hooks: Register hooks named in ``settings.hooks``
    """
    container = ServiceContainer(settings, registry=registry, invoker=invoker)
    container.hook_registry.register(LoggingHook())

    if load_configured_hooks:
        load_hooks(container.hook_registry, settings.hooks, invoker=container.invoker)

    logger.debug(
        "service_container_created",
        alter_hooks=len(container.hook_registry.get_alter_hooks()),
        executable=settings.commands.executable,
    )
    return container
