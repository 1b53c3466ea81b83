"""
Workflow monitor.

Side-channel observer that logs state changes, triggered events and
errors, and keeps an in-memory history for inspection.
"""

import logging
from typing import Optional

from workflow_fsm.core.models import StateTransition, TransitionKind

logger = logging.getLogger(__name__)


class WorkflowMonitor:
    """Records what happened to a workflow."""

    def __init__(self, max_history: Optional[int] = 1000):
        self.max_history = max_history
        self._history: list[StateTransition] = []
        self._events: list[str] = []
        self._errors: list[Exception] = []

    @property
    def history(self) -> list[StateTransition]:
        """Get state change history."""
        return self._history.copy()

    @property
    def events(self) -> list[str]:
        """Names of triggered events, oldest first."""
        return self._events.copy()

    @property
    def errors(self) -> list[Exception]:
        return self._errors.copy()

    def log_state_change(
        self,
        from_state: Optional[str],
        to_state: str,
        kind: TransitionKind = TransitionKind.TRANSITION,
    ) -> StateTransition:
        record = StateTransition(from_state=from_state, to_state=to_state, kind=kind)
        self._append(self._history, record)
        logger.info(f"[WorkflowMonitor] State changed from {from_state} to {to_state} ({kind.value})")
        return record

    def log_event_trigger(self, event_name: str) -> None:
        self._append(self._events, event_name)
        logger.info(f"[WorkflowMonitor] Event triggered: {event_name}")

    def log_error(self, error: Exception) -> None:
        self._append(self._errors, error)
        logger.error(f"[WorkflowError] {error}")

    def _append(self, records: list, item) -> None:
        records.append(item)
        if self.max_history is not None and len(records) > self.max_history:
            del records[0]
