"""
Event listener registry.

Listeners run synchronously in registration order. A listener that raises
propagates to whoever triggered the event.
"""

from typing import Any, Callable

Listener = Callable[[], Any]


class EventManager:
    """Maps event names to ordered listener lists."""

    def __init__(self):
        self._listeners: dict[str, list[Listener]] = {}

    def on(self, event_name: str, listener: Listener) -> None:
        """Register a listener for an event."""
        self._listeners.setdefault(event_name, []).append(listener)

    def off(self, event_name: str, listener: Listener) -> bool:
        """Remove a listener. Returns False if it was not registered."""
        listeners = self._listeners.get(event_name, [])
        if listener not in listeners:
            return False
        listeners.remove(listener)
        return True

    def listeners(self, event_name: str) -> list[Listener]:
        return list(self._listeners.get(event_name, []))

    def trigger(self, event_name: str) -> int:
        """Invoke every listener for ``event_name``. Returns how many ran."""
        listeners = self.listeners(event_name)
        for listener in listeners:
            listener()
        return len(listeners)
