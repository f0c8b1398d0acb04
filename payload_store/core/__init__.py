"""Core types, configuration and errors for the payload store middleware."""

from .version import __version__

__all__ = ["__version__"]
