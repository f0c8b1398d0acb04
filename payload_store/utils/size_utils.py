"""
Payload size calculation and size helpers.

Sizes are measured the way AWS measures them: the UTF-8 length of the
compact JSON document (or of the string itself for string payloads).
"""

import json
from decimal import Decimal
from typing import Any

from ..core.errors import UnsupportedTypeError

KB = 1024
MB = 1024 * KB

# AWS service payload limits
STATE_MACHINE_PAYLOAD_LIMIT = 256 * KB
LAMBDA_SYNC_PAYLOAD_LIMIT = 6 * MB
LAMBDA_ASYNC_PAYLOAD_LIMIT = 256 * KB


def kb(n: float) -> int:
    return int(n * KB)


def mb(n: float) -> int:
    return int(n * MB)


def json_default(o):
    # DynamoDB hands numbers back as Decimal
    if isinstance(o, Decimal):
        return int(o) if o % 1 == 0 else float(o)
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


def to_json(value: Any) -> str:
    """Serialize ``value`` to compact JSON (no whitespace, UTF-8 preserved)."""
    return json.dumps(
        value,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
        default=json_default,
    )


def calculate_byte_size(value: Any) -> int:
    """
    Calculate the serialized byte size of a payload.

    Args:
        value: A string or any JSON-serializable value

    Returns:
        UTF-8 byte length of the string, or of the compact JSON serialization

    Raises:
        UnsupportedTypeError: If the value cannot be serialized to JSON

    Examples:
        >>> calculate_byte_size("héllo")
        6
        >>> calculate_byte_size({"foo": "bar"})
        13
    """
    if isinstance(value, str):
        return len(value.encode("utf-8"))

    try:
        return len(to_json(value).encode("utf-8"))
    except (TypeError, ValueError) as exc:
        raise UnsupportedTypeError(type(value).__name__, str(exc)) from exc
