"""
Key-value storage capability.

The engine persists through this interface only. Each backend is one
implementation, selected once at construction.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStore(ABC):
    """Async key-value store. Values must be JSON-serializable."""

    # Name used in logs and StorageError messages
    backend: str = "unknown"

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any existing one."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""

    async def ping(self) -> bool:
        """True if the backend is reachable."""
        return True

    async def close(self) -> None:
        """Release backend resources."""
