"""
Core domain models and rule evaluation.

The WorkflowManager lives in ``workflow_fsm.core.state_machine``; it is not
re-exported here because it depends on the storage and notification
packages, which themselves import from this package.
"""

from workflow_fsm.core.definition import WorkflowDefinition, load_definition
from workflow_fsm.core.errors import (
    InvalidTransitionError,
    NoPreviousStateError,
    RuleNotFoundError,
    StorageError,
    UnknownStateError,
    WorkflowError,
)
from workflow_fsm.core.models import (
    Event,
    State,
    StateTransition,
    Transition,
    TransitionKind,
    transition_event_name,
)
from workflow_fsm.core.rules import RuleEngine
from workflow_fsm.core.timers import TimerScheduler

__all__ = [
    "WorkflowDefinition",
    "load_definition",
    "WorkflowError",
    "RuleNotFoundError",
    "InvalidTransitionError",
    "UnknownStateError",
    "NoPreviousStateError",
    "StorageError",
    "Event",
    "State",
    "StateTransition",
    "Transition",
    "TransitionKind",
    "transition_event_name",
    "RuleEngine",
    "TimerScheduler",
]
