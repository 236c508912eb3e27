"""Abstract option store interface (host key-value settings storage)."""

from abc import ABC, abstractmethod
from typing import Any

from ..core.enums import OptionScope


class OptionStoreBase(ABC):
    """Key-value store for opaque option blobs.

    Every key is stored under the store's scope, so a network-wide
    (multisite) store never sees site-scoped values and vice versa.
    """

    def __init__(self, scope: OptionScope = OptionScope.SITE):
        self.scope = scope

    def scoped_key(self, key: str) -> str:
        return f"{self.scope.value}:{key}"

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value, or ``default`` when absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> bool:
        """Store ``value`` (JSON-compatible)."""
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if it existed."""
        ...
