"""In-process storage. State does not survive a restart."""

from typing import Any, Optional

from workflow_fsm.storage.base import KeyValueStore


class MemoryStore(KeyValueStore):
    """Dictionary-backed store for development and tests."""

    backend = "memory"

    def __init__(self):
        self._data: dict[str, Any] = {}

    async def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)
