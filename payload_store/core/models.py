"""Value objects handed to stores by the offload engine.

Both are created fresh for a single capability probe and the operation that
follows it; stores must not keep them around.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class LoadArgs:
    """Arguments for ``can_load``/``load`` (and ``can_delete``/``delete``).

    Attributes:
        reference: Opaque token found inside a reference wrapper
    """

    reference: Any


@dataclass(frozen=True)
class StoreArgs:
    """Arguments for ``can_store``/``store``.

    Attributes:
        payload: The selected value to offload
        byte_size: Serialized UTF-8 size of ``payload`` in bytes
    """

    payload: Any
    byte_size: int
