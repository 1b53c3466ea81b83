"""
Workflow state machine.

The WorkflowManager owns the workflow graph and the current-state pointer.
Transitions follow a fixed order of side effects:

    guard check -> deactivate old / activate new -> persist -> notify

Any failure, guard rejections included, is reported to the notifier and
then unwound through rollback() before the error reaches the caller.
With no previous state to return to (a failed first transition) the
state is left as it was.

All mutations (direct transitions, timer firings, rollback, bootstrap)
are serialized on one asyncio.Lock held across persistence, so a second
transition is never accepted while the first one's write is in flight.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Optional

from workflow_fsm.config import Settings, get_settings, resolve_log_level
from workflow_fsm.core.definition import WorkflowDefinition
from workflow_fsm.core.errors import (
    InvalidTransitionError,
    NoPreviousStateError,
    StorageError,
    UnknownStateError,
    WorkflowError,
)
from workflow_fsm.core.models import (
    Event,
    State,
    Transition,
    TransitionKind,
    transition_event_name,
)
from workflow_fsm.core.plugins import Plugin, PluginManager
from workflow_fsm.core.rules import Rule, RuleEngine
from workflow_fsm.core.timers import TimerScheduler
from workflow_fsm.core.visualization import generate_graph
from workflow_fsm.notifications import Notifier, WebhookSink
from workflow_fsm.notifications.events import Listener
from workflow_fsm.storage import MemoryStore, WorkflowPersistence, create_store

logger = logging.getLogger(__name__)

# "from" label of rollback notifications
ROLLBACK_LABEL = "rollback"


class TransitionOutcome(str, Enum):
    """Result of a successful transition request."""

    APPLIED = "applied"      # State changed, persisted and notified
    SCHEDULED = "scheduled"  # Delayed transition armed


class WorkflowManager:
    """
    Finite state machine driving a workflow.

    Collaborators (rule engine, persistence, notifier, timers, plugins) are
    injected so the engine itself performs no I/O.
    """

    def __init__(
        self,
        definition: WorkflowDefinition | dict[str, Any] | None = None,
        *,
        persistence: Optional[WorkflowPersistence] = None,
        notifier: Optional[Notifier] = None,
        rules: Optional[RuleEngine] = None,
        timers: Optional[TimerScheduler] = None,
        plugins: Optional[PluginManager] = None,
        version: str = "1.0.0",
    ):
        self.rules = rules or RuleEngine()
        self.persistence = persistence or WorkflowPersistence(MemoryStore())
        self.notifier = notifier or Notifier()
        self.timers = timers or TimerScheduler()
        self.plugins = plugins or PluginManager()

        self._states: dict[str, State] = {}
        self._transitions: list[Transition] = []
        self._events: list[Event] = []
        self._current_state: Optional[State] = None
        self._previous_state: Optional[State] = None
        self._version = version
        self._lock = asyncio.Lock()

        if definition is not None:
            self.initialize_workflow(definition)

    @classmethod
    async def from_settings(
        cls,
        definition: WorkflowDefinition | dict[str, Any] | None = None,
        settings: Optional[Settings] = None,
    ) -> "WorkflowManager":
        """Build a manager with the storage backend and webhook from settings."""
        settings = settings or get_settings()

        store = await create_store(settings)
        webhook = (
            WebhookSink(settings.webhook_url, timeout=settings.webhook_timeout)
            if settings.webhook_url
            else None
        )

        return cls(
            definition,
            persistence=WorkflowPersistence(store, retry=settings.persistence),
            notifier=Notifier(webhook=webhook),
            version=settings.version,
        )

    # ==================== Graph Construction ====================

    def initialize_workflow(self, definition: WorkflowDefinition | dict[str, Any]) -> None:
        """Add the states, transitions and events of a static definition."""
        if isinstance(definition, dict):
            definition = WorkflowDefinition.from_dict(definition)

        for state in definition.states:
            self.add_state(State(name=state.name))
        for transition in definition.transitions:
            self.add_transition(transition)
        for event in definition.events:
            self.add_event(event)

    def add_state(self, state: State | str) -> State:
        """
        Add a state. The first state added becomes the current state.

        Raises:
            WorkflowError: If a state with the same name exists
        """
        if isinstance(state, str):
            state = State(name=state)
        if state.name in self._states:
            raise WorkflowError(f"Duplicate state: {state.name}")

        self._states[state.name] = state
        if self._current_state is None:
            self._current_state = state
        state.is_active = state is self._current_state
        return state

    def add_transition(self, transition: Transition) -> None:
        self._transitions.append(transition)

    def add_event(self, event: Event) -> None:
        self._events.append(event)

    def add_rule(self, name: str, rule: Rule) -> None:
        self.rules.add_rule(name, rule)

    def evaluate_rule(self, name: str) -> bool:
        return self.rules.evaluate_rule(name)

    def on(self, event_name: str, listener: Listener) -> None:
        """Register an ad-hoc listener for an event name."""
        self.notifier.on(event_name, listener)

    # ==================== Inspection ====================

    @property
    def states(self) -> list[State]:
        return list(self._states.values())

    @property
    def transitions(self) -> list[Transition]:
        return self._transitions.copy()

    @property
    def events(self) -> list[Event]:
        return self._events.copy()

    @property
    def current_state(self) -> Optional[State]:
        return self._current_state

    @property
    def previous_state(self) -> Optional[State]:
        return self._previous_state

    @property
    def is_transitioning(self) -> bool:
        """True while a transition, rollback or timer firing holds the lock."""
        return self._lock.locked()

    @property
    def pending_transitions(self) -> list[str]:
        """Targets of armed delayed transitions."""
        return self.timers.pending

    def get_current_state(self) -> Optional[State]:
        return self._current_state

    def get_state(self, name: str) -> Optional[State]:
        return self._states.get(name)

    def active_states(self) -> list[str]:
        return [state.name for state in self._states.values() if state.is_active]

    def available_transitions(self) -> list[Transition]:
        """Edges leaving the current state (guards not evaluated)."""
        if self._current_state is None:
            return []
        return [t for t in self._transitions if t.from_state == self._current_state.name]

    def generate_graph(self) -> str:
        return generate_graph(self.states, self._transitions)

    # ==================== Transitions ====================

    async def transition_to(self, target: str, delay: float = 0) -> TransitionOutcome:
        """
        Move to ``target`` along a guarded edge.

        With ``delay > 0`` (seconds) the transition is armed on a timer
        and the call returns SCHEDULED immediately.

        Raises:
            InvalidTransitionError: No edge to ``target`` or its guard failed
            RuleNotFoundError: The edge's guard rule is not registered
            UnknownStateError: The edge points at a state not in the graph
            StorageError: The new state could not be persisted
        """
        if delay < 0:
            raise ValueError("delay must be >= 0")

        async with self._lock:
            try:
                self._find_transition(target)

                if delay > 0:
                    self.timers.schedule(target, delay, self._fire_timer)
                    logger.info(f"Transition to {target} scheduled in {delay}s")
                    return TransitionOutcome.SCHEDULED

                await self._apply(target, TransitionKind.TRANSITION)
            except Exception as e:
                await self._handle_failure(e)
                raise

        return TransitionOutcome.APPLIED

    async def rollback(self) -> State:
        """
        Restore the state that was active before the last transition.

        Guards are not evaluated. The previous state is consumed, so a
        second rollback without an intervening transition fails.

        Raises:
            NoPreviousStateError: If there is nothing to roll back to
        """
        async with self._lock:
            return await self._rollback()

    def clear_timer(self, target: str) -> bool:
        """Cancel a pending delayed transition. No-op if none is pending."""
        return self.timers.cancel(target)

    def _find_transition(self, target: str) -> Transition:
        current = self._current_state
        if current is None:
            raise InvalidTransitionError(target, message="workflow has no states")

        transition = next(
            (t for t in self._transitions if t.matches(current.name, target)),
            None,
        )
        if transition is None:
            raise InvalidTransitionError(target, current.name, "no matching transition")
        if not transition.can_transition(self.rules):
            raise InvalidTransitionError(target, current.name, "guard condition failed")
        return transition

    async def _apply(self, target: str, kind: TransitionKind) -> None:
        old_state = self._current_state
        new_state = self._states.get(target)

        # Deactivate and activate without yielding to the loop, so no
        # observer sees zero or two active states
        if old_state is not None:
            old_state.deactivate()
        self._previous_state = old_state
        if new_state is None:
            raise UnknownStateError(target)
        new_state.activate()
        self._current_state = new_state

        await self.persistence.save(new_state.name)

        old_name = old_state.name if old_state else None
        logger.info(f"Workflow moved from {old_name} to {target} ({kind.value})")
        await self.notifier.state_changed(old_name, target, kind)
        await self.trigger_event(transition_event_name(target))

    async def _fire_timer(self, target: str) -> None:
        async with self._lock:
            try:
                await self._apply(target, TransitionKind.TIMED)
            except Exception as e:
                await self._handle_failure(e)
                raise

    async def _handle_failure(self, error: Exception) -> None:
        """
        Report ``error`` and roll back to the previous state.

        Guard and lookup failures roll back too. With no previous state
        (a rejected first transition) the state is left untouched and
        the original error propagates.
        """
        self.notifier.report_error(error)

        if self._previous_state is None:
            return

        restored = await self._rollback()
        logger.warning(f"Transition failed, rolled back to {restored.name}")

    async def _rollback(self) -> State:
        previous = self._previous_state
        if previous is None:
            raise NoPreviousStateError()

        if self._current_state is not None:
            self._current_state.deactivate()
        previous.activate()
        self._current_state = previous
        self._previous_state = None

        try:
            await self.persistence.save(previous.name)
        except StorageError as e:
            self.notifier.report_error(e)

        await self.notifier.state_changed(ROLLBACK_LABEL, previous.name, TransitionKind.ROLLBACK)
        return previous

    # ==================== Events ====================

    async def trigger_event(self, event_name: str) -> None:
        """
        Fire named events and listeners for ``event_name``.

        Callback and listener exceptions propagate to the caller.
        """
        for event in self._events:
            if event.name == event_name:
                event.trigger()
        await self.notifier.trigger(event_name)

    # ==================== Persistence ====================

    async def load_state(self) -> Optional[str]:
        """
        Restore the persisted current state, bypassing guards.

        Returns the restored state name, or None if nothing usable was stored.
        """
        async with self._lock:
            name = await self.persistence.load()
            if name is None:
                return None

            state = self._states.get(name)
            if state is None:
                logger.warning(f"Persisted state {name} is not part of the workflow, ignoring")
                return None

            old_state = self._current_state
            if old_state is not None:
                old_state.deactivate()
            state.activate()
            self._current_state = state
            self._previous_state = None

            self.notifier.monitor.log_state_change(
                old_state.name if old_state else None,
                name,
                TransitionKind.RESTORE,
            )
            return name

    async def bootstrap(self) -> Optional[str]:
        """
        Load version and state from storage.

        If no state was stored, the initial state is persisted instead.
        """
        await self.load_version()
        restored = await self.load_state()

        if restored is None and self._current_state is not None:
            async with self._lock:
                await self.persistence.save(self._current_state.name)
        return restored

    def get_version(self) -> str:
        return self._version

    def set_version(self, version: str) -> None:
        self._version = version

    async def save_version(self, version: str) -> None:
        self.set_version(version)
        await self.persistence.save_version(version)

    async def load_version(self) -> Optional[str]:
        """Load the persisted version, adopting it if present."""
        version = await self.persistence.load_version()
        if version is not None:
            self.set_version(version)
        return version

    # ==================== Extensions ====================

    def register_plugin(self, plugin: Plugin) -> None:
        self.plugins.register(plugin)

    def initialize_plugins(self) -> None:
        self.plugins.initialize_plugins(self)

    def log(self, message: str, level: str = "info") -> None:
        """Write to the workflow log at ``info``, ``warn`` or ``error``."""
        logging.getLogger("workflow_fsm").log(resolve_log_level(level), message)

    async def shutdown(self) -> None:
        """Cancel pending timers and release collaborators."""
        self.timers.cancel_all()
        await self.timers.drain()
        await self.notifier.aclose()
        await self.persistence.close()
