"""PostgreSQL storage backend."""

from workflow_fsm.storage.postgres.database import Database
from workflow_fsm.storage.postgres.models import Base, KeyValueModel
from workflow_fsm.storage.postgres.store import PostgresStore

__all__ = ["Base", "Database", "KeyValueModel", "PostgresStore"]
