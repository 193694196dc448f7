"""
Live Document Model

A mutable in-memory rich-text document addressed the way Google Docs is:
index 0 is the implicit section break, the first block starts at index 1 and
every block owns its text plus one paragraph terminator. Ranges are computed
from the current block list on every call, so each edit is immediately
visible to the next one.

``LiveDocumentAdapter`` exposes the model to the execution controller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from gdocs.operations import (
    NORMAL_TEXT,
    BlockKind,
    ConvertToListItem,
    DeleteRange,
    EditOperation,
    IndexingMode,
    SetParagraphKind,
    SetStyle,
)

logger = logging.getLogger(__name__)


@dataclass
class LiveBlock:
    """
    One paragraph of the live document.

    Attributes:
        text: Paragraph text without its terminator.
        kind: Paragraph, heading or list item.
        heading_style: Named heading style (e.g. 'HEADING_2') for headings.
        styles: One attribute dict per character of ``text``.
    """

    text: str
    kind: BlockKind = BlockKind.PARAGRAPH
    heading_style: str | None = None
    styles: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.styles:
            self.styles = [{} for _ in self.text]
        if len(self.styles) != len(self.text):
            raise ValueError("styles must hold one entry per character")


class LiveDocument:
    """Ordered blocks in a gapless global index space."""

    def __init__(self, blocks: list[LiveBlock] | None = None, name: str = "Untitled document", first_index: int = 1):
        self.blocks = blocks if blocks is not None else []
        self.name = name
        self.first_index = first_index

    @classmethod
    def from_text(cls, text: str, name: str = "Untitled document") -> LiveDocument:
        """Build a document with one plain paragraph per line of ``text``."""
        return cls([LiveBlock(line) for line in text.split("\n")], name=name)

    def __len__(self) -> int:
        return len(self.blocks)

    def block_range(self, block_index: int) -> tuple[int, int]:
        """[start, end) of a block including its terminator."""
        if not 0 <= block_index < len(self.blocks):
            raise IndexError(f"Block index {block_index} out of range")
        start = self.first_index
        for block in self.blocks[:block_index]:
            start += len(block.text) + 1
        return start, start + len(self.blocks[block_index].text) + 1

    def text_range(self, block_index: int) -> tuple[int, int]:
        """[start, end) of a block's text, terminator excluded."""
        start, end = self.block_range(block_index)
        return start, end - 1

    @property
    def end_index(self) -> int:
        return self.first_index + sum(len(b.text) + 1 for b in self.blocks)

    def _locate(self, start: int, end: int) -> tuple[int, int, int]:
        """
        Find the block whose text holds [start, end).

        Returns:
            (block_index, local_start, local_end)

        Raises:
            ValueError: If the range is inverted or crosses a paragraph terminator
            IndexError: If the range lies outside the document
        """
        if end < start:
            raise ValueError(f"Invalid range [{start}, {end})")
        if start < self.first_index or end > self.end_index:
            raise IndexError(f"Range [{start}, {end}) outside document [{self.first_index}, {self.end_index})")

        block_start = self.first_index
        for i, block in enumerate(self.blocks):
            text_end = block_start + len(block.text)
            if start <= text_end:
                if end > text_end:
                    raise ValueError(f"Range [{start}, {end}) crosses the end of block {i}")
                return i, start - block_start, end - block_start
            block_start = text_end + 1
        raise IndexError(f"Range [{start}, {end}) outside document")

    def delete_range(self, start: int, end: int) -> None:
        if end <= start:
            raise ValueError(f"Cannot delete empty range [{start}, {end})")
        i, local_start, local_end = self._locate(start, end)
        block = self.blocks[i]
        block.text = block.text[:local_start] + block.text[local_end:]
        del block.styles[local_start:local_end]

    def set_style(self, start: int, end: int, attributes: dict[str, Any]) -> None:
        """Apply attributes over [start, end); a None value clears the attribute."""
        i, local_start, local_end = self._locate(start, end)
        for char_style in self.blocks[i].styles[local_start:local_end]:
            for name, value in attributes.items():
                if value is None:
                    char_style.pop(name, None)
                else:
                    char_style[name] = value

    def set_paragraph_kind(self, start: int, end: int, kind: str) -> None:
        i, _, _ = self._locate(start, end)
        block = self.blocks[i]
        if kind == NORMAL_TEXT:
            block.kind = BlockKind.PARAGRAPH
            block.heading_style = None
        else:
            block.kind = BlockKind.HEADING
            block.heading_style = kind

    def replace_with_list_item(self, block_index: int, content: str) -> LiveBlock:
        """
        Replace a block by a new list item at the same position.

        Character styles carry over when the block text already equals
        ``content``; otherwise the new item starts unstyled.
        """
        if not 0 <= block_index < len(self.blocks):
            raise IndexError(f"Block index {block_index} out of range")
        old = self.blocks[block_index]
        styles = [dict(s) for s in old.styles] if old.text == content else []
        item = LiveBlock(content, kind=BlockKind.LIST_ITEM, styles=styles)
        self.blocks[block_index] = item
        return item

    def apply(self, op: EditOperation) -> None:
        if isinstance(op, DeleteRange):
            self.delete_range(op.start, op.end_exclusive)
        elif isinstance(op, SetStyle):
            self.set_style(op.start, op.end_exclusive, op.attributes)
        elif isinstance(op, SetParagraphKind):
            self.set_paragraph_kind(op.start, op.end_exclusive, op.kind)
        elif isinstance(op, ConvertToListItem):
            self.replace_with_list_item(op.block_index, op.content)
        else:
            raise TypeError(f"Unknown edit operation: {type(op).__name__}")

    def plain_text(self) -> str:
        return "\n".join(block.text for block in self.blocks)

    def styled_runs(self, attribute: str, value: Any = True) -> list[str]:
        """Maximal runs of text, per block, whose ``attribute`` equals ``value``."""
        runs: list[str] = []
        for block in self.blocks:
            current = ""
            for ch, char_style in zip(block.text, block.styles):
                if char_style.get(attribute) == value:
                    current += ch
                elif current:
                    runs.append(current)
                    current = ""
            if current:
                runs.append(current)
        return runs


class LiveDocumentAdapter:
    """
    Controller-facing adapter over a LiveDocument.

    Blocks are addressed by position; every operation lands on the model as
    soon as it is applied.
    """

    mode = IndexingMode.IMMEDIATE

    def __init__(self, document: LiveDocument):
        self.document = document

    @property
    def document_name(self) -> str:
        return self.document.name

    async def load(self) -> None:
        """Nothing to fetch; the model is always current."""

    def list_blocks(self) -> list[int]:
        return list(range(len(self.document)))

    def get_text(self, block: int) -> str:
        return self.document.blocks[block].text

    def get_range(self, block: int) -> tuple[int, int]:
        return self.document.block_range(block)

    def get_kind(self, block: int) -> BlockKind:
        return self.document.blocks[block].kind

    async def apply_ops(self, block: int, ops: list[EditOperation]) -> None:
        for op in ops:
            self.document.apply(op)
        if ops:
            logger.debug(f"Applied {len(ops)} op(s) to live block {block}")
