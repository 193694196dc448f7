"""Checkpoint persistence for resumable formatting runs.

This module provides:
- Checkpoint: typed record of the next unprocessed block for one task
- CheckpointManager: JSON-file backed store keyed by task identity
"""

import json
import logging
import os
import threading
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

# ============================================================================
# Data Classes
# ============================================================================


@dataclass
class Checkpoint:
    """Progress marker of a suspended run.

    Attributes:
        task_id: Identity of the task (usually derived from the document ID).
        next_block: Index of the next block that has not been processed.
    """

    task_id: str
    next_block: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"next_block": self.next_block}

    @classmethod
    def from_dict(cls, task_id: str, data: dict[str, Any]) -> "Checkpoint":
        """Create from dictionary (loaded from JSON)."""
        return cls(task_id=task_id, next_block=int(data.get("next_block", 0)))


# ============================================================================
# Checkpoint Manager
# ============================================================================


class CheckpointManager:
    """Persists one checkpoint per task in a JSON file.

    At most one checkpoint exists per task. Every mutation is written
    through to disk so a later process activation sees it.
    Thread-safe for concurrent access.
    """

    def __init__(self, checkpoint_file: str | None = None) -> None:
        if checkpoint_file is None:
            from core.config import get_config

            checkpoint_file = get_config().get_checkpoint_path()
        self._checkpoint_file = checkpoint_file
        self._checkpoints: dict[str, Checkpoint] = {}
        self._lock = threading.RLock()
        self._load()

    def _load(self) -> None:
        """Load checkpoints from disk."""
        with self._lock:
            self._checkpoints = {}
            if os.path.exists(self._checkpoint_file):
                with open(self._checkpoint_file) as f:
                    data = json.load(f)
                for task_id, info in data.items():
                    self._checkpoints[task_id] = Checkpoint.from_dict(task_id, info)

    def _save(self) -> None:
        """Save checkpoints to disk."""
        with self._lock:
            checkpoint_dir = os.path.dirname(self._checkpoint_file)
            if checkpoint_dir and not os.path.exists(checkpoint_dir):
                os.makedirs(checkpoint_dir, exist_ok=True)

            data = {task_id: cp.to_dict() for task_id, cp in self._checkpoints.items()}
            with open(self._checkpoint_file, "w") as f:
                json.dump(data, f, indent=2)

    def get_checkpoint(self, task_id: str) -> int | None:
        """Get the next unprocessed block index for a task.

        Args:
            task_id: Task identity.

        Returns:
            The block index, or None if no run is in progress.
        """
        with self._lock:
            checkpoint = self._checkpoints.get(task_id)
            return checkpoint.next_block if checkpoint else None

    def set_checkpoint(self, task_id: str, next_block: int) -> None:
        """Record where a suspended run must resume.

        Args:
            task_id: Task identity.
            next_block: Index of the next unprocessed block.
        """
        if next_block < 0:
            raise ValueError(f"next_block must be non-negative, got {next_block}")
        with self._lock:
            self._checkpoints[task_id] = Checkpoint(task_id=task_id, next_block=next_block)
            self._save()
        logger.debug(f"Checkpoint for {task_id} set to block {next_block}")

    def clear_checkpoint(self, task_id: str) -> bool:
        """Remove the checkpoint of a completed run.

        Args:
            task_id: Task identity.

        Returns:
            True if a checkpoint was removed, False if none existed.
        """
        with self._lock:
            if task_id not in self._checkpoints:
                return False
            del self._checkpoints[task_id]
            self._save()
        logger.debug(f"Checkpoint for {task_id} cleared")
        return True
