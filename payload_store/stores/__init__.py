"""Payload stores for offloaded payloads.

This module provides the pluggable backends the offload engine delegates to.
Use the `create_store()` factory function to build a store from its registered
type name, e.g. from configuration.

Supported store types:
- s3: Offloads payloads to an S3 bucket
- base64: Encodes payloads inline into the reference token

Example:
    >>> from payload_store.stores import create_store
    >>> store = create_store("s3", bucket="my-payload-bucket", format="arn")
    >>> store.name
    's3'
"""

from typing import Any, Final

from ..core.errors import StoreConfigurationError
from .base import Store
from .base64_store import Base64Store
from .s3 import S3Store

# Maps store type string to store class
STORES: Final[dict[str, type[Store]]] = {
    "s3": S3Store,
    "base64": Base64Store,
}


def create_store(store_type: str, **options: Any) -> Store:
    """Factory function to create store instances.

    Args:
        store_type: Store type identifier. Must be one of:
            - "s3": S3 bucket store
            - "base64": inline base64 store
        **options: Keyword arguments passed to the store constructor

    Returns:
        Configured Store instance

    Raises:
        StoreConfigurationError: If store_type is not recognized

    Example:
        >>> store = create_store("base64")
        >>> isinstance(store, Base64Store)
        True
    """
    if store_type not in STORES:
        available_types: str = ", ".join(sorted(STORES.keys()))
        raise StoreConfigurationError(
            f"Unknown store type: '{store_type}'", f"Available types: {available_types}"
        )

    store_class: type[Store] = STORES[store_type]
    return store_class(**options)


def get_available_store_types() -> list[str]:
    """Get a sorted list of all registered store type identifiers."""
    return sorted(STORES.keys())


__all__ = [
    # Base class
    "Store",
    # Store implementations
    "S3Store",
    "Base64Store",
    # Factory functions
    "create_store",
    "get_available_store_types",
    # Registry
    "STORES",
]
