"""
Unit tests for listeners, monitoring and webhook delivery.
"""

import json

import httpx
import pytest

from workflow_fsm.core.errors import InvalidTransitionError, WorkflowError
from workflow_fsm.core.models import TransitionKind
from workflow_fsm.notifications import EventManager, Notifier, WebhookSink, WorkflowMonitor


def recording_client(status_code: int = 200):
    """httpx client whose transport records posted JSON bodies."""
    received = []

    def handler(request: httpx.Request) -> httpx.Response:
        received.append(json.loads(request.content))
        return httpx.Response(status_code)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), received


class TestEventManager:
    def test_listeners_run_in_order(self):
        events = EventManager()
        calls = []
        events.on("taskStarted", lambda: calls.append(1))
        events.on("taskStarted", lambda: calls.append(2))

        assert events.trigger("taskStarted") == 2
        assert calls == [1, 2]

    def test_unknown_event_is_noop(self):
        assert EventManager().trigger("nothing") == 0

    def test_off(self):
        events = EventManager()
        listener = lambda: None  # noqa: E731
        events.on("taskStarted", listener)

        assert events.off("taskStarted", listener) is True
        assert events.off("taskStarted", listener) is False
        assert events.listeners("taskStarted") == []

    def test_listener_exception_propagates(self):
        events = EventManager()
        calls = []

        def explode():
            raise RuntimeError("listener failed")

        events.on("taskStarted", explode)
        events.on("taskStarted", lambda: calls.append("after"))

        with pytest.raises(RuntimeError):
            events.trigger("taskStarted")
        assert calls == []


class TestWorkflowMonitor:
    def test_log_state_change(self, caplog):
        monitor = WorkflowMonitor()

        with caplog.at_level("INFO"):
            record = monitor.log_state_change("initial", "in_progress")

        assert record.from_state == "initial"
        assert monitor.history == [record]
        assert "State changed from initial to in_progress" in caplog.text

    def test_log_event_and_error(self):
        monitor = WorkflowMonitor()
        error = WorkflowError("boom")

        monitor.log_event_trigger("taskStarted")
        monitor.log_error(error)

        assert monitor.events == ["taskStarted"]
        assert monitor.errors == [error]

    def test_history_is_bounded(self):
        monitor = WorkflowMonitor(max_history=2)

        for target in ["a", "b", "c"]:
            monitor.log_state_change(None, target)

        assert [r.to_state for r in monitor.history] == ["b", "c"]


class TestWebhookSink:
    @pytest.mark.asyncio
    async def test_posts_json(self):
        client, received = recording_client()
        sink = WebhookSink("http://webhook.url", client=client)

        assert await sink.send({"from": "initial", "to": "in_progress"}) is True
        assert received == [{"from": "initial", "to": "in_progress"}]

        await sink.aclose()

    @pytest.mark.asyncio
    async def test_http_error_status_is_swallowed(self, caplog):
        client, received = recording_client(status_code=500)
        sink = WebhookSink("http://webhook.url", client=client)

        assert await sink.send({"event": "taskStarted"}) is False
        assert "Error sending webhook" in caplog.text

        await sink.aclose()

    @pytest.mark.asyncio
    async def test_malformed_url_is_swallowed(self, caplog):
        sink = WebhookSink("http://[::1/hook")

        assert await sink.send({"event": "taskStarted"}) is False
        assert "Unexpected error sending webhook" in caplog.text

        await sink.aclose()

    @pytest.mark.asyncio
    async def test_non_http_client_error_is_swallowed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise ValueError("broken transport")

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        sink = WebhookSink("http://webhook.url", client=client)

        assert await sink.send({"event": "taskStarted"}) is False

        await sink.aclose()

    @pytest.mark.asyncio
    async def test_connection_error_is_swallowed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        sink = WebhookSink("http://webhook.url", client=client)

        assert await sink.send({"event": "taskStarted"}) is False

        await sink.aclose()


class TestNotifier:
    @pytest.mark.asyncio
    async def test_state_changed_records_and_posts(self):
        client, received = recording_client()
        notifier = Notifier(webhook=WebhookSink("http://webhook.url", client=client))

        await notifier.state_changed("initial", "in_progress")

        assert notifier.monitor.history[0].kind == TransitionKind.TRANSITION
        assert received == [{"from": "initial", "to": "in_progress", "kind": "transition"}]

        await notifier.aclose()

    @pytest.mark.asyncio
    async def test_trigger_runs_listeners_and_posts(self):
        client, received = recording_client()
        notifier = Notifier(webhook=WebhookSink("http://webhook.url", client=client))
        calls = []
        notifier.on("taskStarted", lambda: calls.append("started"))

        await notifier.trigger("taskStarted")

        assert calls == ["started"]
        assert notifier.monitor.events == ["taskStarted"]
        assert received == [{"event": "taskStarted"}]

        await notifier.aclose()

    @pytest.mark.asyncio
    async def test_webhook_failure_does_not_raise(self):
        client, _ = recording_client(status_code=503)
        notifier = Notifier(webhook=WebhookSink("http://webhook.url", client=client))

        await notifier.state_changed("initial", "in_progress")

        assert len(notifier.monitor.history) == 1
        await notifier.aclose()

    @pytest.mark.asyncio
    async def test_timed_kind_is_delivered(self):
        client, received = recording_client()
        notifier = Notifier(webhook=WebhookSink("http://webhook.url", client=client))

        await notifier.state_changed("initial", "in_progress", TransitionKind.TIMED)

        assert received == [{"from": "initial", "to": "in_progress", "kind": "timed"}]
        await notifier.aclose()

    @pytest.mark.asyncio
    async def test_without_webhook(self):
        notifier = Notifier()

        await notifier.state_changed(None, "initial", TransitionKind.RESTORE)
        await notifier.trigger("taskStarted")
        await notifier.aclose()

        assert notifier.monitor.history[0].kind == TransitionKind.RESTORE

    def test_report_workflow_error_as_is(self):
        notifier = Notifier()
        error = InvalidTransitionError("completed", "initial")

        assert notifier.report_error(error) is error
        assert notifier.monitor.errors == [error]

    def test_report_wraps_other_errors(self):
        notifier = Notifier()
        cause = RuntimeError("listener failed")

        reported = notifier.report_error(cause)

        assert isinstance(reported, WorkflowError)
        assert reported.__cause__ is cause
        assert "listener failed" in str(reported)
