"""Path, reference and size helpers used by the offload engine."""

from .paths import (
    WILDCARD,
    expand_path,
    format_path,
    get_value,
    has_wildcard,
    parse_path,
    path_exists,
    set_value,
    wildcard_base,
)
from .references import (
    REFERENCE_KEY,
    FoundReference,
    create_reference,
    find_all_references,
    get_token,
    is_reference,
)
from .size_utils import (
    LAMBDA_ASYNC_PAYLOAD_LIMIT,
    LAMBDA_SYNC_PAYLOAD_LIMIT,
    STATE_MACHINE_PAYLOAD_LIMIT,
    calculate_byte_size,
    kb,
    mb,
)

__all__ = [
    "WILDCARD",
    "expand_path",
    "format_path",
    "get_value",
    "has_wildcard",
    "parse_path",
    "path_exists",
    "set_value",
    "wildcard_base",
    "REFERENCE_KEY",
    "FoundReference",
    "create_reference",
    "find_all_references",
    "get_token",
    "is_reference",
    "LAMBDA_ASYNC_PAYLOAD_LIMIT",
    "LAMBDA_SYNC_PAYLOAD_LIMIT",
    "STATE_MACHINE_PAYLOAD_LIMIT",
    "calculate_byte_size",
    "kb",
    "mb",
]
