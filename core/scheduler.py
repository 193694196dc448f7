"""
One-shot continuation scheduling.

A suspended formatting run asks the scheduler to invoke it again after a
short delay. The scheduler only fires triggers; it never waits on them.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

ContinuationHandler = Callable[[], Awaitable[object]]


class AsyncioScheduler:
    """
    Schedules task continuations on an asyncio event loop.

    Handlers are registered per task id. ``schedule_once`` arms a timer that
    starts the handler as a new task when it fires; ``cancel_all`` disarms
    every pending timer of a task.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._handlers: dict[str, ContinuationHandler] = {}
        self._timers: dict[str, list[asyncio.TimerHandle]] = {}
        self._running: set[asyncio.Task] = set()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def register_handler(self, task_id: str, handler: ContinuationHandler) -> None:
        """Register the coroutine function to run when a task's trigger fires."""
        self._handlers[task_id] = handler

    def schedule_once(self, task_id: str, delay: float) -> None:
        """
        Arm a single trigger for the task.

        Args:
            task_id: Task identity; a handler must be registered for it.
            delay: Seconds to wait before running the handler.
        """
        if task_id not in self._handlers:
            raise KeyError(f"No continuation handler registered for task '{task_id}'")

        loop = self._get_loop()
        timer = loop.call_later(delay, self._fire, task_id)
        self._timers.setdefault(task_id, []).append(timer)
        logger.info(f"Scheduled continuation for {task_id} in {delay} seconds")

    def cancel_all(self, task_id: str) -> int:
        """
        Cancel every pending trigger of the task.

        Returns:
            Number of triggers cancelled.
        """
        timers = self._timers.pop(task_id, [])
        cancelled = 0
        for timer in timers:
            if not timer.cancelled():
                timer.cancel()
                cancelled += 1
        if cancelled:
            logger.info(f"Deleted {cancelled} existing trigger(s) for {task_id}")
        return cancelled

    def pending(self, task_id: str) -> int:
        """Number of armed, not yet fired triggers for the task."""
        return sum(1 for timer in self._timers.get(task_id, []) if not timer.cancelled())

    def _fire(self, task_id: str) -> None:
        timers = self._timers.get(task_id, [])
        # A fired timer reports cancelled() == False forever; drop the ones whose time has passed.
        now = self._get_loop().time()
        self._timers[task_id] = [t for t in timers if t.when() > now and not t.cancelled()]

        handler = self._handlers[task_id]
        task = self._get_loop().create_task(handler())
        self._running.add(task)
        task.add_done_callback(self._on_done)
        logger.info(f"Continuation for {task_id} started")

    def _on_done(self, task: asyncio.Task) -> None:
        self._running.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Scheduled continuation failed: {error}", exc_info=error)
