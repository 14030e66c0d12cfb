"""Hook implementations shipped with cmdrest."""

from .filters import CallerAllowlistHook, CommandFilterHook
from .formatting import OutputSubsetHook, PlainOutputHook
from .logging import LoggingHook


__all__ = [
    "CallerAllowlistHook",
    "CommandFilterHook",
    "LoggingHook",
    "OutputSubsetHook",
    "PlainOutputHook",
]
