"""Redis storage backend."""

from workflow_fsm.storage.redis.connection import RedisConnection
from workflow_fsm.storage.redis.store import RedisStore

__all__ = ["RedisConnection", "RedisStore"]
