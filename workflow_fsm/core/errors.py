"""
Exception taxonomy for the workflow state machine.

Every error raised by the engine is a ``WorkflowError`` so callers and the
notification fan-out can handle them uniformly.
"""

from typing import Optional


class WorkflowError(Exception):
    """Base class for workflow errors."""


class RuleNotFoundError(WorkflowError):
    """Raised when a guard references a rule that was never registered."""

    def __init__(self, rule_name: str):
        self.rule_name = rule_name
        super().__init__(f"Rule {rule_name} not found")


class InvalidTransitionError(WorkflowError):
    """Raised when no edge leads to the target or its guard rejects it."""

    def __init__(self, target: str, from_state: Optional[str] = None, message: str = ""):
        self.target = target
        self.from_state = from_state
        super().__init__(
            f"Cannot transition to state: {target}"
            + (f" from {from_state}" if from_state else "")
            + (f": {message}" if message else "")
        )


class UnknownStateError(WorkflowError):
    """Raised when an edge points at a state that is not in the graph."""

    def __init__(self, state_name: str):
        self.state_name = state_name
        super().__init__(f"Unknown state: {state_name}")


class NoPreviousStateError(WorkflowError):
    """Raised when rollback is requested with nothing to roll back to."""

    def __init__(self):
        super().__init__("No previous state to rollback to")


class StorageError(WorkflowError):
    """Raised when a persistence backend fails."""

    def __init__(self, message: str, backend: Optional[str] = None):
        self.backend = backend
        super().__init__(f"[{backend}] {message}" if backend else message)
