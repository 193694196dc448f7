"""
Batch Operation Manager

Submits long lists of Google Docs batchUpdate requests in fixed-size chunks.
Chunks are sent strictly in order and each call is awaited before the next
one starts; the first failing chunk stops the submission. Chunks that were
already accepted stay applied.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from core.config import DEFAULT_BATCH_CHUNK_SIZE

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of a chunked submission."""

    request_count: int = 0
    chunks: int = 0
    replies: list[dict[str, Any]] = field(default_factory=list)


class BatchOperationManager:
    """
    High-level manager for chunked batchUpdate submission.

    Attributes:
        service: Google Docs API service instance
        chunk_size: Maximum number of requests per batchUpdate call
    """

    def __init__(self, service: Any, chunk_size: int = DEFAULT_BATCH_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
        self.service = service
        self.chunk_size = chunk_size

    @staticmethod
    def chunk(requests: list[dict[str, Any]], chunk_size: int) -> list[list[dict[str, Any]]]:
        """Split requests into consecutive chunks of at most chunk_size."""
        return [requests[i : i + chunk_size] for i in range(0, len(requests), chunk_size)]

    async def execute_in_chunks(self, document_id: str, requests: list[dict[str, Any]]) -> BatchResult:
        """
        Send requests to documents.batchUpdate, one chunk per call.

        Args:
            document_id: ID of the document to update
            requests: Requests in application order

        Returns:
            BatchResult with the number of requests and calls made
        """
        result = BatchResult()
        if not requests:
            logger.info(f"[execute_in_chunks] No requests for document {document_id}")
            return result

        chunks = self.chunk(requests, self.chunk_size)
        for number, chunk in enumerate(chunks, start=1):
            logger.debug(f"[execute_in_chunks] Doc={document_id}, chunk {number}/{len(chunks)} ({len(chunk)} requests)")
            response = await asyncio.to_thread(
                self.service.documents().batchUpdate(documentId=document_id, body={"requests": chunk}).execute
            )
            result.chunks += 1
            result.request_count += len(chunk)
            result.replies.extend((response or {}).get("replies", []))

        logger.info(
            f"[execute_in_chunks] Doc={document_id}: {result.request_count} request(s) in {result.chunks} call(s)"
        )
        return result
