"""
Formatting Execution Controller

Runs the markdown formatter over a document block by block under a wall-clock
budget. A run that exhausts its budget persists the index of the next block,
schedules one continuation of itself and returns; the continuation resumes
from the checkpoint. A finished run clears the checkpoint and notifies the
user exactly once: by email when it finished in a continuation, in the
initiating context otherwise.

Example:
    >>> adapter = LiveDocumentAdapter(LiveDocument.from_text("# Title"))
    >>> result = await format_document(adapter, "markdown-format:demo")
    >>> result.state
    <RunState.COMPLETED: 'completed'>
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.config import FormatterConfig, get_config
from core.container import CheckpointStoreProtocol, NotifierProtocol, SchedulerProtocol, get_container
from core.notifications import SELF_IDENTITY
from gdocs.markdown_planner import MarkdownPlanner

logger = logging.getLogger(__name__)

TASK_ID_PREFIX = "markdown-format"
COMPLETION_MESSAGE = "Markdown formatting has been applied successfully!"


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUSPENDED = "suspended"
    COMPLETED = "completed"


@dataclass
class RunResult:
    """Outcome of one controller invocation.

    Attributes:
        state: SUSPENDED or COMPLETED.
        start_block: Block the invocation started from.
        next_block: First block not processed by this invocation.
        total_blocks: Number of blocks in the document.
        continuation: True when the invocation resumed a suspended run.
        operations: Number of edit operations applied.
    """

    state: RunState
    start_block: int
    next_block: int
    total_blocks: int
    continuation: bool
    operations: int = 0


def task_id_for(document_id: str) -> str:
    """Task identity under which a document's checkpoint and triggers live."""
    return f"{TASK_ID_PREFIX}:{document_id}"


def progress_message(processed: int, total: int) -> str:
    return (
        "Formatting is in progress... This may take some time for large documents. "
        f"The script will continue in the background. (Processed {processed}/{total})"
    )


class FormattingController:
    """
    Resumable, time-bounded driver for one document.

    Attributes:
        adapter: Document adapter (live or Google Docs)
        task_id: Identity used for checkpoint and continuation triggers
        state: Current RunState
    """

    def __init__(
        self,
        adapter: Any,
        task_id: str,
        planner: MarkdownPlanner | None = None,
        checkpoint_store: CheckpointStoreProtocol | None = None,
        scheduler: SchedulerProtocol | None = None,
        notifier: NotifierProtocol | None = None,
        time_budget: float | None = None,
        resume_delay: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        user_email: str | None = None,
        config: FormatterConfig | None = None,
    ):
        config = config or get_config()
        container = get_container()

        self.adapter = adapter
        self.task_id = task_id
        self.planner = planner or MarkdownPlanner.from_config(config, mode=adapter.mode)
        self.checkpoint_store = checkpoint_store or container.checkpoint_store
        self.scheduler = scheduler or container.scheduler
        self.notifier = notifier or container.notifier
        self.time_budget = time_budget if time_budget is not None else config.time_budget_seconds
        self.resume_delay = resume_delay if resume_delay is not None else config.resume_delay_seconds
        self.clock = clock
        self.user_email = user_email if user_email is not None else config.user_email
        self.state = RunState.IDLE

    async def run(self) -> RunResult:
        """
        Process blocks from the checkpoint until done or out of time.

        Returns:
            RunResult describing where the invocation stopped

        Raises:
            Whatever the adapter raises; the checkpoint is left as it was.
        """
        checkpoint = self.checkpoint_store.get_checkpoint(self.task_id)
        continuation = checkpoint is not None
        start_block = checkpoint or 0

        self.scheduler.cancel_all(self.task_id)
        self.state = RunState.RUNNING
        started = self.clock()
        logger.info(
            f"[run] Task={self.task_id}, starting at block {start_block} "
            f"({'continuation' if continuation else 'fresh run'})"
        )

        try:
            await self.adapter.load()
            blocks = self.adapter.list_blocks()
            total = len(blocks)
            applied = 0

            for i in range(start_block, total):
                block = blocks[i]
                text = self.adapter.get_text(block)
                if text.strip():
                    start, _ = self.adapter.get_range(block)
                    ops = self.planner.plan(text, start, block_index=i, block_kind=self.adapter.get_kind(block))
                    if ops:
                        await self.adapter.apply_ops(block, ops)
                        applied += len(ops)

                if self.clock() - started > self.time_budget and i + 1 < total:
                    return self._suspend(start_block, i + 1, total, continuation, applied)

            return await self._complete(start_block, total, continuation, applied)
        except Exception:
            self.state = RunState.IDLE
            logger.error(f"[run] Task={self.task_id} failed; checkpoint left unchanged", exc_info=True)
            raise

    def _suspend(self, start_block: int, next_block: int, total: int, continuation: bool, applied: int) -> RunResult:
        self.checkpoint_store.set_checkpoint(self.task_id, next_block)
        self.scheduler.schedule_once(self.task_id, self.resume_delay)
        self.notifier.notify_user(progress_message(next_block, total))
        self.state = RunState.SUSPENDED
        logger.info(f"[run] Task={self.task_id} suspended at block {next_block}/{total}")
        return RunResult(RunState.SUSPENDED, start_block, next_block, total, continuation, applied)

    async def _complete(self, start_block: int, total: int, continuation: bool, applied: int) -> RunResult:
        self.checkpoint_store.clear_checkpoint(self.task_id)
        if continuation:
            name = self.adapter.document_name
            await self.notifier.notify_async(
                self.user_email or SELF_IDENTITY,
                f"Formatting Complete: {name}",
                f'The Markdown formatting script has successfully finished running on your document, "{name}".',
            )
        else:
            self.notifier.notify_user(COMPLETION_MESSAGE)
        self.state = RunState.COMPLETED
        logger.info(f"[run] Task={self.task_id} completed ({applied} operation(s) in this invocation)")
        return RunResult(RunState.COMPLETED, start_block, total, total, continuation, applied)


async def format_document(adapter: Any, task_id: str, **kwargs: Any) -> RunResult:
    """
    Run the formatter on a document through a FormattingController.

    When the scheduler accepts handlers, the continuation of the task is
    registered so a suspended run resumes on its own.
    """
    controller = FormattingController(adapter, task_id, **kwargs)
    register = getattr(controller.scheduler, "register_handler", None)
    if register is not None:
        register(task_id, controller.run)
    return await controller.run()
