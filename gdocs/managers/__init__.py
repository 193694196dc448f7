"""
Google Docs Operation Managers

This package provides manager classes for multi-call Google Docs operations.
"""

from .batch_operation_manager import BatchOperationManager, BatchResult

__all__ = [
    "BatchOperationManager",
    "BatchResult",
]
