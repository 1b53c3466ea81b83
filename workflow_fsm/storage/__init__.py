"""Storage layer for workflow persistence."""

from workflow_fsm.storage.base import KeyValueStore
from workflow_fsm.storage.factory import create_store
from workflow_fsm.storage.memory import MemoryStore
from workflow_fsm.storage.persistence import (
    CURRENT_STATE_KEY,
    VERSION_KEY,
    WorkflowPersistence,
)

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "WorkflowPersistence",
    "create_store",
    "CURRENT_STATE_KEY",
    "VERSION_KEY",
]
