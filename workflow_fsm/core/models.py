"""
Graph model for workflows: states, guarded transitions and named events.

All models use Pydantic for validation and serialization.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from workflow_fsm.core.imports import import_object
from workflow_fsm.core.rules import RuleEngine

# Prefix of the synthetic event fired when a state is entered
TRANSITION_EVENT_PREFIX = "transitionTo"


def transition_event_name(state_name: str) -> str:
    """Synthetic event name fired on arrival in ``state_name``."""
    return f"{TRANSITION_EVENT_PREFIX}{state_name}"


class State(BaseModel):
    """A named workflow state. Exactly one state of a workflow is active."""

    name: str = Field(..., min_length=1, description="Unique state name")
    is_active: bool = Field(default=False, description="Whether this is the current state")

    def activate(self) -> None:
        self.is_active = True

    def deactivate(self) -> None:
        self.is_active = False


class Transition(BaseModel):
    """
    A directed edge between two named states.

    The guard is a rule name resolved through the RuleEngine each time the
    edge is evaluated. An edge without a condition is always traversable.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_state: str = Field(..., alias="from", min_length=1)
    to_state: str = Field(..., alias="to", min_length=1)
    condition: Optional[str] = Field(default=None, description="Guard rule name")

    def matches(self, from_state: str, to_state: str) -> bool:
        return self.from_state == from_state and self.to_state == to_state

    def can_transition(self, rules: RuleEngine) -> bool:
        """Evaluate the guard. Raises RuleNotFoundError for unknown rules."""
        if self.condition is None:
            return True
        return rules.evaluate_rule(self.condition)


class Event(BaseModel):
    """
    A named trigger with a callback.

    Callbacks can be given as callables or as ``module:function`` import
    strings so that JSON definitions can reference them.
    """

    name: str = Field(..., min_length=1)
    callback: Callable[[], Any]

    @field_validator("callback", mode="before")
    @classmethod
    def resolve_callback(cls, v: Any) -> Any:
        """Import string callbacks."""
        if isinstance(v, str):
            try:
                return import_object(v)
            except ImportError as e:
                raise ValueError(f"Cannot import event callback {v!r}: {e}") from e
        return v

    def trigger(self) -> None:
        self.callback()


class TransitionKind(str, Enum):
    """How a state change came about."""

    TRANSITION = "transition"  # Guarded edge traversal
    TIMED = "timed"            # Delayed transition fired by a timer
    ROLLBACK = "rollback"      # Emergency unwind to the previous state
    RESTORE = "restore"        # Bootstrap from persisted state


class StateTransition(BaseModel):
    """Represents a state change event."""

    from_state: Optional[str]
    to_state: str
    kind: TransitionKind = TransitionKind.TRANSITION
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
