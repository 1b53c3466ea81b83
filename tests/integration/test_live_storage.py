"""
Persistence against live backends.

Requires Redis and PostgreSQL running (use docker-compose up redis postgres).
Each backend is skipped when it cannot be reached.
"""

import pytest
import pytest_asyncio
import redis.asyncio as redis

from workflow_fsm.config import Settings, StorageType
from workflow_fsm.config.settings import StorageSettings
from workflow_fsm.core.state_machine import WorkflowManager
from workflow_fsm.storage import create_store

# Skip if Redis not available
pytest.importorskip("redis")

TEST_NAMESPACE = "fsm_integration"


@pytest_asyncio.fixture
async def redis_settings():
    settings = Settings(
        storage_type=StorageType.REDIS,
        storage=StorageSettings(namespace=TEST_NAMESPACE),
    )
    client = redis.Redis(
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.db,
        decode_responses=True,
    )

    try:
        await client.ping()
    except redis.ConnectionError:
        await client.aclose()
        pytest.skip("Redis not available")

    yield settings

    # Cleanup test keys
    async for key in client.scan_iter(match=f"{settings.storage.key_prefix}{TEST_NAMESPACE}:*"):
        await client.delete(key)
    await client.aclose()


@pytest_asyncio.fixture
async def postgres_settings():
    from workflow_fsm.storage.postgres import Database

    settings = Settings(
        storage_type=StorageType.POSTGRES,
        storage=StorageSettings(namespace=TEST_NAMESPACE),
    )
    database = Database(settings)

    try:
        await database.init()
        await database.create_schema()
    except Exception as e:
        await database.close()
        pytest.skip(f"PostgreSQL not available: {e}")

    yield settings

    store = await create_store(settings)
    for key in ("currentState", "version"):
        await store.delete(key)
    await store.close()
    await database.close()


async def restart(definition: dict, settings: Settings) -> WorkflowManager:
    manager = await WorkflowManager.from_settings(definition, settings)
    manager.add_rule("always", lambda: True)
    await manager.bootstrap()
    return manager


async def check_state_survives_restart(definition: dict, settings: Settings) -> None:
    first = await restart(definition, settings)
    await first.transition_to("in_progress")
    await first.save_version("2.0.0")
    await first.shutdown()

    second = await restart(definition, settings)
    try:
        assert second.get_current_state().name == "in_progress"
        assert second.active_states() == ["in_progress"]
        assert second.get_version() == "2.0.0"
    finally:
        await second.shutdown()


@pytest.mark.asyncio
async def test_redis_state_survives_restart(workflow_definition, redis_settings):
    await check_state_survives_restart(workflow_definition, redis_settings)


@pytest.mark.asyncio
async def test_postgres_state_survives_restart(workflow_definition, postgres_settings):
    await check_state_survives_restart(workflow_definition, postgres_settings)
