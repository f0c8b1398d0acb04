"""Base store interface for offloaded payloads.

This module defines the abstract base class every backend store implements.
The offload engine never inspects tokens itself: it asks each configured store,
in order, whether it can handle a reference (``can_load``) or a payload
(``can_store``) and hands the work to the first one that says yes.

Stores are created once at handler setup and shared by every invocation of
the warm Lambda container, so they must not keep per-call state between a
capability probe and the operation that follows it. Everything a call needs
arrives in its ``LoadArgs``/``StoreArgs``.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..core.models import LoadArgs, StoreArgs


class Store(ABC):
    """Abstract base class for payload stores.

    Example:
        >>> store = Base64Store()
        >>> args = StoreArgs(payload={"foo": "bar"}, byte_size=13)
        >>> store.can_store(args)
        True
        >>> token = store.store(args)
        >>> store.load(LoadArgs(reference=token))
        {'foo': 'bar'}
    """

    #: Unique store name, also used as the ``store`` tag of structured tokens
    name: str = ""

    @abstractmethod
    def can_load(self, args: LoadArgs) -> bool:
        """Return True if this store recognizes and can resolve the reference.

        Must not perform I/O. May raise ``InvalidReferenceError`` when the
        token carries this store's discriminator but is malformed, so that no
        other store attempts it.
        """

    @abstractmethod
    def load(self, args: LoadArgs) -> Any:
        """Fetch the payload behind the reference.

        Only called after ``can_load`` returned True for the same arguments.
        """

    @abstractmethod
    def can_store(self, args: StoreArgs) -> bool:
        """Return True if this store accepts the payload (type, size). No I/O."""

    @abstractmethod
    def store(self, args: StoreArgs) -> Any:
        """Persist the payload and return the token that identifies it."""

    def can_delete(self, args: LoadArgs) -> bool:
        """Return True if the payload behind the reference can be deleted.

        Stores without delete support keep the default.
        """
        return False

    def delete(self, args: LoadArgs) -> None:
        raise NotImplementedError(f"Store '{self.name}' does not support delete")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
