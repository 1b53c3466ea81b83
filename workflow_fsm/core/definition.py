"""
Static workflow definitions.

A definition is loaded once at construction:

    {
        "states": [{"name": "initial"}, ...],
        "transitions": [{"from": "initial", "to": "in_progress", "condition": "ready"}],
        "events": [{"name": "taskStarted", "callback": "myapp.hooks:on_start"}],
        "translations": {"es": {"transition_rejected": "transicion rechazada"}}
    }
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from workflow_fsm.core.models import Event, Transition


class StateDefinition(BaseModel):
    """A state entry in a workflow definition."""

    name: str = Field(..., min_length=1)


class WorkflowDefinition(BaseModel):
    """Complete workflow definition."""

    states: list[StateDefinition] = Field(default_factory=list)
    transitions: list[Transition] = Field(default_factory=list)
    events: list[Event] = Field(default_factory=list)
    translations: dict[str, dict[str, str]] = Field(default_factory=dict)

    @field_validator("states")
    @classmethod
    def validate_unique_state_names(cls, v: list[StateDefinition]) -> list[StateDefinition]:
        """Ensure all state names are unique."""
        names = [state.name for state in v]
        if len(names) != len(set(names)):
            duplicates = [x for x in names if names.count(x) > 1]
            raise ValueError(f"Duplicate state names found: {set(duplicates)}")
        return v

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkflowDefinition":
        return cls.model_validate(data)


def load_definition(path: str | Path) -> WorkflowDefinition:
    """
    Load a workflow definition from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the definition is malformed
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return WorkflowDefinition.from_dict(data)
