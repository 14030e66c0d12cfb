"""Configuration module for the cmdrest server."""

from .commands import CommandSettings
from .hooks import HookEntry, HookSettings
from .logging import LoggingSettings
from .server import ServerSettings
from .settings import ConfigurationError, Settings, get_settings


__all__ = [
    "CommandSettings",
    "ConfigurationError",
    "HookEntry",
    "HookSettings",
    "LoggingSettings",
    "ServerSettings",
    "Settings",
    "get_settings",
]
