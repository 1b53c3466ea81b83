"""Logging setup shared by the API and embedded uses of the engine."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Workflow definitions use info/warn/error; standard names are accepted too
LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def resolve_log_level(level: str) -> int:
    """Map a configured level name onto a ``logging`` level."""
    try:
        return LOG_LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"Unsupported log level: {level}") from None


def configure_logging(level: str = "info") -> None:
    """Configure root logging for the process."""
    logging.basicConfig(
        level=resolve_log_level(level),
        format=LOG_FORMAT,
    )
    logging.getLogger("workflow_fsm").setLevel(resolve_log_level(level))
