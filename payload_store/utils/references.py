"""
Reference protocol for offloaded payloads.

An offloaded payload is replaced by a reference: a single-key dict
``{"@middy-store": <token>}`` where the token is whatever the store returned
(an S3 URL/ARN, a ``{"store": ...}`` dict, ...). The marker key is shared
with the Node.js middy-store middleware so references can cross runtimes
between pipeline steps.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from .paths import Path, format_path

REFERENCE_KEY = "@middy-store"


@dataclass(frozen=True)
class FoundReference:
    """A reference located inside a payload."""

    token: Any
    path: Path

    @property
    def path_string(self) -> str:
        return format_path(self.path)


def is_reference(value: Any) -> bool:
    """Return True if ``value`` is a reference wrapper."""
    return isinstance(value, dict) and REFERENCE_KEY in value


def create_reference(token: Any) -> Dict[str, Any]:
    return {REFERENCE_KEY: token}


def get_token(reference: Dict[str, Any]) -> Any:
    return reference[REFERENCE_KEY]


def find_all_references(value: Any) -> List[FoundReference]:
    """
    Find every reference inside ``value``.

    Traversal is depth-first pre-order: dict items in insertion order, list
    elements by ascending index. A reference is recorded with its path and
    never descended into, so tokens are not scanned for nested references.

    Examples:
        >>> refs = find_all_references({"a": [{REFERENCE_KEY: "r1"}], "b": {REFERENCE_KEY: "r2"}})
        >>> [(r.token, r.path_string) for r in refs]
        [('r1', 'a[0]'), ('r2', 'b')]
    """
    found: List[FoundReference] = []
    _collect(value, (), found)
    return found


def _collect(node: Any, path: Path, found: List[FoundReference]) -> None:
    if is_reference(node):
        found.append(FoundReference(token=get_token(node), path=path))
        return

    if isinstance(node, dict):
        for key, child in node.items():
            _collect(child, path + (key,), found)
    elif isinstance(node, list):
        for index, child in enumerate(node):
            _collect(child, path + (index,), found)
