"""Configuration management."""

from workflow_fsm.config.logging import configure_logging, resolve_log_level
from workflow_fsm.config.settings import Environment, Settings, StorageType, get_settings

__all__ = [
    "Environment",
    "Settings",
    "StorageType",
    "get_settings",
    "configure_logging",
    "resolve_log_level",
]
