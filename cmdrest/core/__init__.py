"""Core utilities shared across the cmdrest server."""

from cmdrest._version import __version__


__all__ = ["__version__"]
