"""
Workflow persistence adapter.

Saves and loads the current state name and the workflow version through
any KeyValueStore. State writes are retried with exponential backoff;
if every attempt fails a StorageError is raised so the engine can unwind
the transition instead of leaving memory and storage out of sync.
"""

import asyncio
import logging
from typing import Optional

from workflow_fsm.config.settings import PersistenceSettings
from workflow_fsm.core.errors import StorageError
from workflow_fsm.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

# Persisted layout
CURRENT_STATE_KEY = "currentState"
VERSION_KEY = "version"


class WorkflowPersistence:
    """Persists the workflow's current state and version."""

    def __init__(
        self,
        store: KeyValueStore,
        retry: Optional[PersistenceSettings] = None,
    ):
        self.store = store
        self.retry = retry or PersistenceSettings()

    @property
    def backend(self) -> str:
        return self.store.backend

    async def save(self, state_name: str) -> None:
        """Persist the current state name, retrying on StorageError."""
        await self._write_with_retry(CURRENT_STATE_KEY, state_name)

    async def load(self) -> Optional[str]:
        """Load the persisted state name, if any."""
        value = await self._read(CURRENT_STATE_KEY)
        return str(value) if value is not None else None

    async def save_version(self, version: str) -> None:
        await self._write_with_retry(VERSION_KEY, version)

    async def load_version(self) -> Optional[str]:
        value = await self._read(VERSION_KEY)
        return str(value) if value is not None else None

    async def ping(self) -> bool:
        return await self.store.ping()

    async def close(self) -> None:
        await self.store.close()

    async def _read(self, key: str):
        try:
            return await self.store.get(key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read {key}: {e}", backend=self.backend) from e

    async def _write_with_retry(self, key: str, value: str) -> None:
        attempt = 0
        while True:
            try:
                await self.store.set(key, value)
                return
            except Exception as e:
                error = e if isinstance(e, StorageError) else StorageError(
                    f"Failed to write {key}: {e}", backend=self.backend
                )
                if attempt >= self.retry.max_retries:
                    logger.error(
                        f"Giving up persisting {key}={value!r} after {attempt + 1} attempts: {error}"
                    )
                    raise error from e

                attempt += 1
                delay = self.retry.get_delay(attempt)
                logger.warning(
                    f"Persisting {key} failed, retry {attempt}/{self.retry.max_retries} in {delay:.2f}s: {error}"
                )
                await asyncio.sleep(delay)
