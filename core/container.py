"""
Dependency Injection Container for the markdown formatter.

Provides a centralized container for the collaborators the execution
controller consumes (checkpoint persistence, continuation scheduling and
user notification), enabling testability through fake injection.
"""

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class CheckpointStoreProtocol(Protocol):
    """Protocol for checkpoint persistence implementations."""

    def get_checkpoint(self, task_id: str) -> int | None:
        """Get the next unprocessed block index, or None when no run is in progress."""
        ...

    def set_checkpoint(self, task_id: str, next_block: int) -> None:
        """Persist the next unprocessed block index."""
        ...

    def clear_checkpoint(self, task_id: str) -> bool:
        """Remove the checkpoint of a task."""
        ...


@runtime_checkable
class SchedulerProtocol(Protocol):
    """Protocol for continuation schedulers."""

    def schedule_once(self, task_id: str, delay: float) -> None:
        """Arm one future invocation of the task."""
        ...

    def cancel_all(self, task_id: str) -> int:
        """Cancel all pending invocations of the task."""
        ...


@runtime_checkable
class NotifierProtocol(Protocol):
    """Protocol for user notification channels."""

    def notify_user(self, message: str) -> None:
        """Show a message in the initiating context."""
        ...

    async def notify_async(self, identity: str, subject: str, body: str) -> None:
        """Send a message that does not need an interactive context."""
        ...


@dataclass
class Container:
    """
    Dependency injection container.

    Holds references to the checkpoint store, scheduler and notifier.
    If not provided, defaults to the standard implementations.
    """

    checkpoint_store: CheckpointStoreProtocol | None = None
    scheduler: SchedulerProtocol | None = None
    notifier: NotifierProtocol | None = None

    def __post_init__(self) -> None:
        """Initialize with defaults if not provided."""
        if self.checkpoint_store is None:
            from core.managers import CheckpointManager

            self.checkpoint_store = CheckpointManager()

        if self.scheduler is None:
            from core.scheduler import AsyncioScheduler

            self.scheduler = AsyncioScheduler()

        if self.notifier is None:
            from core.notifications import LoggingNotifier

            self.notifier = LoggingNotifier()


# Global container instance
_container: Container | None = None


def get_container() -> Container:
    """
    Get the global container instance.

    Creates a new container with default implementations if none exists.

    Returns:
        The global Container instance.
    """
    global _container
    if _container is None:
        _container = Container()
        logger.debug("Initialized default dependency container")
    return _container


def set_container(container: Container) -> None:
    """
    Set the global container instance.

    Use this for testing to inject fake implementations.

    Args:
        container: The container to use as the global instance.
    """
    global _container
    _container = container
    logger.debug("Set custom dependency container")


def reset_container() -> None:
    """
    Reset the global container.

    Use this between tests to ensure a clean state.
    """
    global _container
    _container = None
    logger.debug("Reset dependency container")
