"""
Inline base64 store.

Keeps the payload inside the token itself, base64-encoded. Nothing leaves the
invocation, so this is only useful to hide a sub-document from downstream
states or to round-trip payloads in tests; it never makes a payload smaller.
"""

import base64
import binascii
import json
import math
from typing import Any, Dict

from ..core.errors import InvalidReferenceError, StoreConfigurationError
from ..core.models import LoadArgs, StoreArgs
from ..utils.size_utils import to_json
from .base import Store


class Base64Store(Store):
    """Store that encodes dict/list payloads into ``{"store": "base64", ...}`` tokens."""

    name = "base64"

    def __init__(self, max_size: float = math.inf):
        if max_size < 0:
            raise StoreConfigurationError("max_size must be non-negative")
        self.max_size = max_size

    def can_load(self, args: LoadArgs) -> bool:
        reference = args.reference
        if not isinstance(reference, dict) or reference.get("store") != self.name:
            return False

        encoded = reference.get("base64")
        if not isinstance(encoded, str) or not encoded:
            raise InvalidReferenceError(
                reference, f"'base64' must be a non-empty string, got {encoded!r}"
            )
        return True

    def load(self, args: LoadArgs) -> Any:
        try:
            decoded = base64.b64decode(args.reference["base64"], validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise InvalidReferenceError(args.reference, str(exc)) from exc

        try:
            parsed = json.loads(decoded)
        except ValueError:
            return decoded
        return parsed if isinstance(parsed, (dict, list)) else decoded

    def can_store(self, args: StoreArgs) -> bool:
        if args.byte_size > self.max_size:
            return False
        return isinstance(args.payload, (dict, list))

    def store(self, args: StoreArgs) -> Dict[str, str]:
        encoded = base64.b64encode(to_json(args.payload).encode("utf-8")).decode("ascii")
        return {"store": self.name, "base64": encoded}
