"""
Google Docs Adapter

Reads a document snapshot through the Docs API and writes planned edit
operations back as chunked batchUpdate calls.

Block positions come from the snapshot taken by ``load()``. When blocks are
applied one at a time (controller runs), the adapter remembers how many
characters each applied block deleted and shifts the ranges of later blocks
accordingly, so no re-read is needed between blocks.
"""

import asyncio
import logging
from typing import Any

from core.config import get_config
from core.utils import handle_http_errors
from gdocs.docs_helpers import operations_to_requests
from gdocs.managers import BatchOperationManager, BatchResult
from gdocs.markdown_planner import BlockSnapshot, MarkdownPlanner
from gdocs.operations import BlockKind, EditOperation, IndexingMode, deleted_length

logger = logging.getLogger(__name__)

# Placeholder for non-text paragraph elements (inline images, chips, ...)
OBJECT_REPLACEMENT_CHAR = "\ufffc"


def parse_document_blocks(document: dict[str, Any]) -> list[BlockSnapshot]:
    """
    Extract the top-level paragraphs of a Docs API document resource.

    Non-text elements keep their index width as placeholder characters so
    block offsets stay exact. Tables and other non-paragraph structural
    elements are not formatted and are left out.
    """
    blocks: list[BlockSnapshot] = []
    for element in document.get("body", {}).get("content", []):
        paragraph = element.get("paragraph")
        if paragraph is None:
            continue

        parts = []
        for pe in paragraph.get("elements", []):
            text_run = pe.get("textRun")
            if text_run is not None:
                parts.append(text_run.get("content", ""))
            else:
                width = pe.get("endIndex", 0) - pe.get("startIndex", 0)
                parts.append(OBJECT_REPLACEMENT_CHAR * max(width, 0))
        text = "".join(parts)
        if text.endswith("\n"):
            text = text[:-1]

        named_style = paragraph.get("paragraphStyle", {}).get("namedStyleType", "")
        if "bullet" in paragraph:
            kind = BlockKind.LIST_ITEM
        elif named_style.startswith("HEADING_"):
            kind = BlockKind.HEADING
        else:
            kind = BlockKind.PARAGRAPH

        blocks.append(BlockSnapshot(index=len(blocks), text=text, start=element.get("startIndex", 1), kind=kind))
    return blocks


class GoogleDocsAdapter:
    """
    Controller-facing adapter over a remote Google Doc.

    Attributes:
        service: Google Docs API service instance
        document_id: ID of the document being formatted
        planner: Planner used by ``plan_ops`` (transactional indexing)
        batch_manager: Chunked batchUpdate submitter
    """

    mode = IndexingMode.TRANSACTIONAL

    def __init__(
        self,
        service: Any,
        document_id: str,
        planner: MarkdownPlanner | None = None,
        batch_manager: BatchOperationManager | None = None,
        chunk_size: int | None = None,
    ):
        config = get_config()
        self.service = service
        self.document_id = document_id
        self.planner = planner or MarkdownPlanner.from_config(config, mode=IndexingMode.TRANSACTIONAL)
        self.batch_manager = batch_manager or BatchOperationManager(service, chunk_size or config.batch_chunk_size)
        self.title = ""
        self._blocks: list[BlockSnapshot] = []
        self._applied_deltas: dict[int, int] = {}

    @property
    def document_name(self) -> str:
        return self.title or self.document_id

    @handle_http_errors("load_document", is_read_only=True)
    async def load(self) -> list[BlockSnapshot]:
        """Fetch the document and take a fresh block snapshot."""
        document = await asyncio.to_thread(self.service.documents().get(documentId=self.document_id).execute)
        self.title = document.get("title", "")
        self._blocks = parse_document_blocks(document)
        self._applied_deltas = {}
        logger.info(f"[load_document] Doc={self.document_id}: {len(self._blocks)} paragraph(s)")
        return self._blocks

    def list_blocks(self) -> list[int]:
        return [block.index for block in self._blocks]

    def get_text(self, block: int) -> str:
        return self._blocks[block].text

    def get_kind(self, block: int) -> BlockKind:
        return self._blocks[block].kind

    def get_range(self, block: int) -> tuple[int, int]:
        """Current [start, end) of a block, shifted by deletions in earlier applied blocks."""
        snapshot = self._blocks[block]
        shift = sum(delta for index, delta in self._applied_deltas.items() if index < block)
        return snapshot.start - shift, snapshot.end - shift - self._applied_deltas.get(block, 0)

    def plan_ops(self, blocks: list[int] | None = None) -> list[EditOperation]:
        """Plan the given blocks (all by default) against the loaded snapshot."""
        indices = self.list_blocks() if blocks is None else blocks
        return self.planner.plan_document([self._blocks[i] for i in indices])

    @handle_http_errors("submit_operations")
    async def submit(self, ops: list[EditOperation]) -> BatchResult:
        requests = operations_to_requests(ops)
        return await self.batch_manager.execute_in_chunks(document_id=self.document_id, requests=requests)

    async def apply_ops(self, block: int, ops: list[EditOperation]) -> BatchResult:
        result = await self.submit(ops)
        self._applied_deltas[block] = self._applied_deltas.get(block, 0) + deleted_length(ops)
        return result
