"""Hook system for cmdrest.

This package lets external code intercept an incoming request before the
server runs its command.

Key components:
- RequestAlterHook: Protocol of the ``process_request_alter`` callback
- HookResult: ``Unaltered`` or ``Replaced(payload)``
- HookRegistry: Ordered registrations with port guards
- HookManager: Runs alter hooks and emits lifecycle events
- HookLoader: Registers hooks from configuration and entry points
"""

from .base import (
    UNALTERED,
    BaseRequestAlterHook,
    Hook,
    HookContext,
    HookResult,
    NoopRequestAlterHook,
    Replaced,
    RequestAlterHook,
    Unaltered,
    normalize_result,
)
from .events import HookEvent
from .loader import HookLoader, load_hooks
from .manager import HookManager
from .registry import PROCESS_REQUEST_ALTER, HookRegistration, HookRegistry


__all__ = [
    "PROCESS_REQUEST_ALTER",
    "UNALTERED",
    "BaseRequestAlterHook",
    "Hook",
    "HookContext",
    "HookEvent",
    "HookLoader",
    "HookManager",
    "HookRegistration",
    "HookRegistry",
    "HookResult",
    "NoopRequestAlterHook",
    "Replaced",
    "RequestAlterHook",
    "Unaltered",
    "load_hooks",
    "normalize_result",
]
