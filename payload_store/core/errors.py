"""Custom exceptions for the payload store middleware."""

from typing import Any


class PayloadStoreError(Exception):
    """Base exception for payload store errors."""

    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class NoStoreFoundError(PayloadStoreError):
    """Raised when no configured store can load a reference or store a payload."""

    def __init__(self, operation: str, path: str = "", details: str = None):
        self.operation = operation
        self.path = path
        location = f" at '{path}'" if path else ""
        super().__init__(f"No store can {operation} payload{location}", details)


class SelectorNotFoundError(PayloadStoreError):
    """Raised when the configured selector does not exist in the output."""

    def __init__(self, selector: str, details: str = None):
        self.selector = selector
        super().__init__(f"Selector '{selector}' not found in output", details)


class UnsupportedTypeError(PayloadStoreError):
    """Raised when a value is neither a string nor JSON-serializable."""

    def __init__(self, type_name: str, details: str = None):
        self.type_name = type_name
        super().__init__(f"Unsupported payload type: {type_name}", details)


class InvalidPathError(PayloadStoreError):
    """Raised for malformed paths or writes the path cannot address."""

    def __init__(self, path: Any, details: str = None):
        self.path = path
        super().__init__(f"Invalid path '{path}'", details)


class InvalidReferenceError(PayloadStoreError):
    """Raised when a store claims a reference that turns out to be malformed."""

    def __init__(self, reference: Any, details: str = None):
        self.reference = reference
        super().__init__(f"Invalid reference: {reference!r}", details)


class StoreConfigurationError(PayloadStoreError):
    """Raised for invalid store setup."""

    def __init__(self, message: str = "Invalid store configuration", details: str = None):
        super().__init__(message, details)
