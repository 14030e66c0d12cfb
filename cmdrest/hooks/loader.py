"""Populate the hook registry at startup.

Hooks come from two places:

- ``[[hooks.request_alter]]`` entries in the configuration, each naming an
  import path (``package.module:attribute``) plus an optional port guard and
  priority;
- installed distributions publishing the ``cmdrest.hooks`` entry point group::

    [project.entry-points."cmdrest.hooks"]
    only_status = "mypkg.hooks:only_status"

An attribute that is a class is instantiated with the entry's ``options`` as
keyword arguments (entry points get none). Hooks that run the command
themselves are bound to the server's invoker.
"""

import importlib
import importlib.metadata
import inspect
from collections.abc import Callable, Mapping
from typing import Any

import structlog

from cmdrest.config.hooks import HookEntry, HookSettings
from cmdrest.core.errors import HookLoadError
from cmdrest.services.invoker import Invoker

from .registry import HookRegistration, HookRegistry


logger = structlog.get_logger(__name__)

ENTRY_POINT_GROUP = "cmdrest.hooks"


def _materialize(
    obj: Any, source: str, options: Mapping[str, Any] | None = None
) -> Callable[..., Any]:
    if inspect.isclass(obj):
        try:
            obj = obj(**(options or {}))
        except Exception as e:
            raise HookLoadError(source, f"cannot instantiate: {e}") from e
    elif options:
        raise HookLoadError(source, "options are only accepted by hook classes")
    if not callable(obj):
        raise HookLoadError(source, "object is not callable")
    return obj  # type: ignore[no-any-return]


def import_hook(
    path: str, options: Mapping[str, Any] | None = None
) -> Callable[..., Any]:
    """Resolve ``package.module:attribute`` to a hook callable."""
    module_name, _, attr_path = path.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise HookLoadError(path, f"import failed: {e}") from e

    obj: Any = module
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise HookLoadError(path, f"no attribute '{part}'") from e
    return _materialize(obj, path, options)


class HookLoader:
    """Handles hook discovery and loading."""

    def __init__(
        self,
        registry: HookRegistry,
        strict: bool = False,
        invoker: Invoker | None = None,
    ):
        self.registry = registry
        self.strict = strict
        self.invoker = invoker

    def _bind(self, hook: Callable[..., Any]) -> Callable[..., Any]:
        bind_invoker = getattr(hook, "bind_invoker", None)
        if self.invoker is not None and callable(bind_invoker):
            bind_invoker(self.invoker)
        return hook

    def load_entry(self, entry: HookEntry) -> HookRegistration | None:
        """Import and register one configured hook."""
        if not entry.enabled:
            logger.debug("hook_disabled", path=entry.path)
            return None
        try:
            hook = import_hook(entry.path, entry.options)
        except HookLoadError as e:
            if self.strict:
                raise
            logger.error("hook_load_failed", path=entry.path, error=e.message)
            return None
        return self.registry.register_alter(
            self._bind(hook),
            name=entry.path,
            ports=entry.ports,
            priority=entry.priority,
        )

    def load_entry_points(self) -> list[HookRegistration]:
        """Register hooks published by installed packages."""
        registrations: list[HookRegistration] = []
        for entry_point in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            try:
                hook = _materialize(entry_point.load(), entry_point.value)
            except HookLoadError as e:
                if self.strict:
                    raise
                logger.error(
                    "hook_entry_point_load_failed",
                    hook=entry_point.name,
                    error=e.message,
                )
                continue
            except (ImportError, AttributeError) as e:
                if self.strict:
                    raise HookLoadError(entry_point.value, str(e)) from e
                logger.error(
                    "hook_entry_point_import_failed",
                    hook=entry_point.name,
                    error=str(e),
                    exc_info=e,
                )
                continue
            registrations.append(
                self.registry.register_alter(self._bind(hook), name=entry_point.name)
            )
        return registrations

    def load(self, settings: HookSettings) -> list[HookRegistration]:
        """Load every hook the settings ask for.

        Configured entries are registered first, so with equal priority they
        run before entry point hooks.
        """
        registrations = [
            registration
            for registration in (self.load_entry(e) for e in settings.request_alter)
            if registration is not None
        ]
        if settings.discover_entry_points:
            registrations.extend(self.load_entry_points())

        logger.info("hooks_loaded", count=len(registrations))
        return registrations


def load_hooks(
    registry: HookRegistry,
    settings: HookSettings,
    invoker: Invoker | None = None,
) -> list[HookRegistration]:
    """Convenience wrapper around :class:`HookLoader`."""
    return HookLoader(registry, strict=settings.strict, invoker=invoker).load(settings)
