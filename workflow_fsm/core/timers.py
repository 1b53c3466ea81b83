"""
Timer subsystem for delayed transitions.

At most one timer is pending per target state name. Scheduling a target
that already has a pending timer cancels the old one first
(last-write-wins), so a target is never entered twice by stacked timers.

A timer leaves the pending set the moment it expires, before its fire
callback starts. From that point ``cancel`` no longer sees it: once firing
has begun it always runs to completion.
"""

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

# Invoked with the target state name when a timer expires
FireCallback = Callable[[str], Awaitable[None]]


class TimerScheduler:
    """One-shot asyncio timers keyed by target state name."""

    def __init__(self):
        self._pending: dict[str, asyncio.Task] = {}
        self._firing: set[asyncio.Task] = set()

    @property
    def pending(self) -> list[str]:
        """Target names with an armed, not-yet-fired timer."""
        return list(self._pending)

    def is_pending(self, target: str) -> bool:
        return target in self._pending

    def schedule(self, target: str, delay: float, fire: FireCallback) -> None:
        """
        Arm a one-shot timer that calls ``fire(target)`` after ``delay`` seconds.

        Must be called from within a running event loop.
        """
        if self.cancel(target):
            logger.info(f"Replaced pending delayed transition to {target}")

        task = asyncio.get_running_loop().create_task(
            self._run(target, delay, fire),
            name=f"fsm-timer:{target}",
        )
        self._pending[target] = task
        logger.debug(f"Scheduled transition to {target} in {delay}s")

    def cancel(self, target: str) -> bool:
        """
        Cancel the pending timer for ``target``.

        Returns True if a timer was cancelled. Cancelling a name with no
        pending timer is a no-op.
        """
        task = self._pending.pop(target, None)
        if task is None:
            return False

        task.cancel()
        logger.debug(f"Cancelled delayed transition to {target}")
        return True

    def cancel_all(self) -> None:
        """Cancel every pending timer. Timers already firing are unaffected."""
        for target in list(self._pending):
            self.cancel(target)

    async def drain(self) -> None:
        """Wait for timers that have started firing to finish."""
        if self._firing:
            await asyncio.gather(*self._firing, return_exceptions=True)

    async def _run(self, target: str, delay: float, fire: FireCallback) -> None:
        await asyncio.sleep(delay)

        # Cutover point: no await between expiry and leaving the pending set
        if self._pending.get(target) is not asyncio.current_task():
            return
        del self._pending[target]

        fire_task = asyncio.get_running_loop().create_task(
            fire(target),
            name=f"fsm-timer-fire:{target}",
        )
        self._firing.add(fire_task)
        fire_task.add_done_callback(self._on_fired)

    def _on_fired(self, task: asyncio.Task) -> None:
        self._firing.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Delayed transition failed: {error}")
