"""
Pytest fixtures and configuration for tests.
"""

from typing import Any, Optional

import pytest

from workflow_fsm.config import Environment, Settings
from workflow_fsm.config.settings import PersistenceSettings
from workflow_fsm.core.errors import StorageError
from workflow_fsm.core.state_machine import WorkflowManager
from workflow_fsm.storage import MemoryStore, WorkflowPersistence


class FailingStore(MemoryStore):
    """Memory store whose writes fail a configurable number of times."""

    backend = "failing"

    def __init__(self, failures: Optional[int] = None):
        super().__init__()
        # None means every write fails
        self.failures = failures
        self.write_attempts = 0

    async def set(self, key: str, value: Any) -> None:
        self.write_attempts += 1
        if self.failures is None or self.write_attempts <= self.failures:
            raise StorageError(f"write {key} refused", backend=self.backend)
        await super().set(key, value)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        environment=Environment.TEST,
        debug=True,
        log_level="debug",
    )


@pytest.fixture
def no_wait_retry() -> PersistenceSettings:
    """Retry policy without backoff sleeps."""
    return PersistenceSettings(max_retries=2, initial_delay=0.0, max_delay=0.0)


@pytest.fixture
def workflow_definition() -> dict:
    """Three-state workflow: initial -> in_progress -> completed."""
    return {
        "states": [
            {"name": "initial"},
            {"name": "in_progress"},
            {"name": "completed"},
        ],
        "transitions": [
            {"from": "initial", "to": "in_progress", "condition": "always"},
            {"from": "in_progress", "to": "completed", "condition": "always"},
        ],
        "events": [
            {"name": "taskStarted", "callback": lambda: None},
            {"name": "taskCompleted", "callback": lambda: None},
        ],
    }


@pytest.fixture
def failing_store():
    """Factory for stores whose writes fail."""
    return FailingStore


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def manager(workflow_definition, store) -> WorkflowManager:
    """Manager over the sample workflow with an always-true guard."""
    manager = WorkflowManager(
        workflow_definition,
        persistence=WorkflowPersistence(store),
    )
    manager.add_rule("always", lambda: True)
    return manager
