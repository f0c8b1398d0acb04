"""
Payload store middleware for AWS Lambda and Step Functions.

Moves oversized function output to an external store (S3 by default),
leaving a small ``{"@middy-store": <token>}`` reference in its place, and
swaps such references back for the real payload before the next function
runs.

Example:
    >>> from payload_store import S3Store, payload_store_middleware
    >>> @payload_store_middleware(
    ...     stores=[S3Store(bucket="my-payload-bucket")],
    ...     store_options={"selector": "items[*]", "min_size": "always"},
    ... )
    ... def handler(event, context):
    ...     return {"items": build_items(event)}
"""

from .core.config import ALWAYS, NEVER, LoadOptions, OffloadConfig, StoreOptions
from .core.errors import (
    InvalidPathError,
    InvalidReferenceError,
    NoStoreFoundError,
    PayloadStoreError,
    SelectorNotFoundError,
    StoreConfigurationError,
    UnsupportedTypeError,
)
from .core.models import LoadArgs, StoreArgs
from .core.version import __version__
from .engine import PayloadOffloadEngine
from .middleware import (
    PayloadStoreMiddleware,
    load_input,
    payload_store_middleware,
    store_output,
)
from .stores import Base64Store, S3Store, Store, create_store
from .utils import (
    LAMBDA_ASYNC_PAYLOAD_LIMIT,
    LAMBDA_SYNC_PAYLOAD_LIMIT,
    REFERENCE_KEY,
    STATE_MACHINE_PAYLOAD_LIMIT,
    calculate_byte_size,
    create_reference,
    find_all_references,
    is_reference,
    kb,
    mb,
)

__all__ = [
    "__version__",
    # Configuration
    "ALWAYS",
    "NEVER",
    "LoadOptions",
    "OffloadConfig",
    "StoreOptions",
    # Errors
    "InvalidPathError",
    "InvalidReferenceError",
    "NoStoreFoundError",
    "PayloadStoreError",
    "SelectorNotFoundError",
    "StoreConfigurationError",
    "UnsupportedTypeError",
    # Engine and Lambda host
    "LoadArgs",
    "StoreArgs",
    "PayloadOffloadEngine",
    "PayloadStoreMiddleware",
    "load_input",
    "payload_store_middleware",
    "store_output",
    # Stores
    "Base64Store",
    "S3Store",
    "Store",
    "create_store",
    # Helpers
    "LAMBDA_ASYNC_PAYLOAD_LIMIT",
    "LAMBDA_SYNC_PAYLOAD_LIMIT",
    "REFERENCE_KEY",
    "STATE_MACHINE_PAYLOAD_LIMIT",
    "calculate_byte_size",
    "create_reference",
    "find_all_references",
    "is_reference",
    "kb",
    "mb",
]
