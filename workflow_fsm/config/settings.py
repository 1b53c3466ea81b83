"""
Environment-aware configuration settings for the workflow state machine.

Supports dev, test, and prod environments with appropriate defaults.
"""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from workflow_fsm.config.logging import LOG_LEVELS


class Environment(str, Enum):
    """Supported deployment environments."""

    DEV = "dev"
    TEST = "test"
    PROD = "prod"


class StorageType(str, Enum):
    """Supported persistence backends."""

    MEMORY = "memory"
    REDIS = "redis"
    POSTGRES = "postgres"


class RedisSettings(BaseSettings):
    """Redis connection settings."""

    model_config = SettingsConfigDict(env_prefix="REDIS_")

    host: str = Field(default="localhost", description="Redis server hostname")
    port: int = Field(default=6379, description="Redis server port")
    db: int = Field(default=0, description="Redis database number")
    password: Optional[str] = Field(default=None, description="Redis password")
    max_connections: int = Field(default=10, description="Maximum connection pool size")
    socket_timeout: float = Field(default=5.0, description="Socket timeout (seconds)")
    socket_connect_timeout: float = Field(default=5.0, description="Connection timeout")

    @property
    def url(self) -> str:
        """Generate Redis connection URL."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


class PostgresSettings(BaseSettings):
    """PostgreSQL connection settings."""

    model_config = SettingsConfigDict(env_prefix="POSTGRES_")

    host: str = Field(default="localhost", description="PostgreSQL server hostname")
    port: int = Field(default=5432, description="PostgreSQL server port")
    database: str = Field(default="workflow_fsm", description="Database name")
    user: str = Field(default="postgres", description="Database user")
    password: str = Field(default="postgres", description="Database password")
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Max overflow connections")
    pool_timeout: float = Field(default=10.0, description="Pool timeout in seconds (fail fast)")

    @property
    def url(self) -> str:
        """Generate PostgreSQL connection URL."""
        return (
            f"postgresql+asyncpg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class StorageSettings(BaseSettings):
    """
    Backend-neutral storage settings.

    ``uri`` overrides the host/port based URL of the selected backend.
    ``namespace`` scopes the persisted keys: it becomes the Redis key
    prefix segment and the ``namespace`` column of the Postgres table.
    """

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    uri: Optional[str] = Field(default=None, description="Backend connection URI")
    db_name: Optional[str] = Field(default=None, description="Database name for document/SQL backends")
    namespace: str = Field(default="workflow", description="Namespace (collection) for persisted keys")
    key_prefix: str = Field(default="fsm:", description="Prefix for Redis keys")


class PersistenceSettings(BaseSettings):
    """
    Retry policy for state persistence.

    A transition is only complete once its new state name is stored.
    Writes are retried with exponential backoff before the transition
    is declared failed and unwound.
    """

    model_config = SettingsConfigDict(env_prefix="PERSISTENCE_")

    max_retries: int = Field(default=3, ge=0, description="Retry attempts after the first write")
    initial_delay: float = Field(default=0.1, ge=0.0, description="Initial retry delay (seconds)")
    max_delay: float = Field(default=2.0, ge=0.0, description="Maximum retry delay (seconds)")
    exponential_base: float = Field(default=2.0, ge=1.0, description="Exponential backoff base")

    def get_delay(self, attempt: int) -> float:
        """Backoff delay before retry number ``attempt`` (1-based)."""
        delay = self.initial_delay * (self.exponential_base ** (attempt - 1))
        return min(delay, self.max_delay)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_",
        case_sensitive=False,  # WORKFLOW_LOG_LEVEL and workflow_log_level both work
        extra="ignore",        # Ignore unknown environment variables
    )

    # Application
    app_name: str = Field(default="Workflow State Machine")
    environment: Environment = Field(default=Environment.DEV)
    debug: bool = Field(default=False)
    log_level: str = Field(default="info")
    default_locale: str = Field(default="en")
    version: str = Field(default="1.0.0", description="Initial workflow version")

    # Workflow definition and extensions
    definition_path: Optional[str] = Field(default=None, description="JSON workflow definition file")
    plugins: list[str] = Field(default_factory=list, description="Plugin import strings")

    # Notifications
    webhook_url: Optional[str] = Field(default=None, description="Webhook target for state changes")
    webhook_timeout: float = Field(default=5.0, description="Webhook request timeout (seconds)")

    # Authorization
    users: dict[str, list[str]] = Field(default_factory=dict, description="User id to roles")
    transition_roles: list[str] = Field(
        default_factory=list,
        description="Roles allowed to request transitions (empty disables the check)",
    )

    # Storage
    storage_type: StorageType = Field(default=StorageType.MEMORY)

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    postgres: PostgresSettings = Field(default_factory=PostgresSettings)
    persistence: PersistenceSettings = Field(default_factory=PersistenceSettings)

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str | Environment) -> Environment:
        """Validate and convert environment string to enum."""
        if isinstance(v, Environment):
            return v
        return Environment(v.lower())

    @field_validator("storage_type", mode="before")
    @classmethod
    def validate_storage_type(cls, v: str | StorageType) -> StorageType:
        """Validate and convert storage type string to enum."""
        if isinstance(v, StorageType):
            return v
        return StorageType(v.lower())

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept info/warn/error as well as standard logging level names."""
        level = v.lower()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEV

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TEST

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PROD


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
