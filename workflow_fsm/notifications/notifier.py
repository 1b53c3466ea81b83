"""
Notification fan-out.

The transition engine performs no I/O of its own: it reports state
changes, events and errors here, and the notifier dispatches them to
listeners, the monitor and the optional webhook.
"""

from typing import Optional

from workflow_fsm.core.errors import WorkflowError
from workflow_fsm.core.models import TransitionKind
from workflow_fsm.notifications.events import EventManager, Listener
from workflow_fsm.notifications.monitor import WorkflowMonitor
from workflow_fsm.notifications.webhook import WebhookSink


class Notifier:
    """Dispatches workflow notifications to every registered sink."""

    def __init__(
        self,
        events: Optional[EventManager] = None,
        monitor: Optional[WorkflowMonitor] = None,
        webhook: Optional[WebhookSink] = None,
    ):
        self.events = events or EventManager()
        self.monitor = monitor or WorkflowMonitor()
        self.webhook = webhook

    def on(self, event_name: str, listener: Listener) -> None:
        self.events.on(event_name, listener)

    async def state_changed(
        self,
        from_state: Optional[str],
        to_state: str,
        kind: TransitionKind = TransitionKind.TRANSITION,
    ) -> None:
        """Record a state change and deliver ``{from, to, kind}`` to the webhook."""
        self.monitor.log_state_change(from_state, to_state, kind)
        if self.webhook is not None:
            await self.webhook.send({"from": from_state, "to": to_state, "kind": kind.value})

    async def trigger(self, event_name: str) -> None:
        """
        Run listeners for ``event_name``, then record and deliver it.

        Listener exceptions propagate to the caller.
        """
        self.events.trigger(event_name)
        self.monitor.log_event_trigger(event_name)
        if self.webhook is not None:
            await self.webhook.send({"event": event_name})

    def report_error(self, error: Exception) -> WorkflowError:
        """Report a failure as a WorkflowError and return it."""
        if not isinstance(error, WorkflowError):
            wrapped = WorkflowError(str(error))
            wrapped.__cause__ = error
            error = wrapped
        self.monitor.log_error(error)
        return error

    async def aclose(self) -> None:
        if self.webhook is not None:
            await self.webhook.aclose()
