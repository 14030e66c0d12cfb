"""Command modules for the cmdrest CLI."""

from .hooks import list_hooks
from .request import request_command
from .serve import api


__all__ = ["api", "list_hooks", "request_command"]
