"""Notification fan-out: listeners, monitoring and webhooks."""

from workflow_fsm.notifications.events import EventManager
from workflow_fsm.notifications.monitor import WorkflowMonitor
from workflow_fsm.notifications.notifier import Notifier
from workflow_fsm.notifications.webhook import WebhookSink

__all__ = ["EventManager", "WorkflowMonitor", "Notifier", "WebhookSink"]
