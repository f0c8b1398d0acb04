"""Version information for the payload store middleware."""

__version__ = "0.3.0"
