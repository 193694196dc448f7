"""
Markdown Mutation Planner

Turns the matches of ``gdocs.markdown_patterns`` into an ordered list of
primitive edit operations (``gdocs.operations``) that format a block in
place: markers and delimiters are deleted, the remaining text is styled.

Operations are addressed sequentially: the indices of each operation are
valid against the document as left by every operation before it. This is
what both targets do (the live document mutates on every call, Google Docs
applies a batchUpdate request by request), so one plan serves both.

Per block the plan is:
    1. neutralize existing formatting over the whole line (not for list items)
    2. heading: set the paragraph style, then delete '#... '
       list:    delete the bullet marker, then convert the block to a list item
    3. inline spans, rightmost first: delete closing delimiter, delete
       opening delimiter, style the inner text if any is left

Example:
    >>> planner = MarkdownPlanner()
    >>> ops = planner.plan("**a**", base_offset=1)
    >>> [type(op).__name__ for op in ops]
    ['SetStyle', 'DeleteRange', 'DeleteRange', 'SetStyle']
"""

from __future__ import annotations

import bisect
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from core.config import CODE_BACKGROUND_COLOR, CODE_FONT_FAMILY, DEFAULT_FONT_FAMILY, FormatterConfig
from gdocs.markdown_patterns import SpanKind, match_line
from gdocs.operations import (
    BACKGROUND_COLOR,
    BOLD,
    FONT_FAMILY,
    HEADING_STYLE_MAP,
    ITALIC,
    STRIKETHROUGH,
    BlockKind,
    ConvertToListItem,
    DeleteRange,
    EditOperation,
    IndexingMode,
    SetParagraphKind,
    SetStyle,
    deleted_length,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockSnapshot:
    """Text and position of one block as read from a document.

    Attributes:
        index: Position of the block among the document's blocks.
        text: Block text without the paragraph terminator.
        start: Absolute index of the first character.
        kind: Current kind of the block.
    """

    index: int
    text: str
    start: int
    kind: BlockKind = BlockKind.PARAGRAPH

    @property
    def end(self) -> int:
        """Exclusive end, including the paragraph terminator."""
        return self.start + len(self.text) + 1


class _IndexTracker:
    """Maps original line positions to current document indices while deletions accumulate."""

    def __init__(self, base_offset: int) -> None:
        self._base = base_offset
        self._deleted: list[int] = []

    def current(self, position: int) -> int:
        return self._base + position - bisect.bisect_left(self._deleted, position)

    def delete(self, positions: Iterable[int]) -> list[DeleteRange]:
        """Delete original positions, one DeleteRange per contiguous run, rightmost run first."""
        runs: list[list[int]] = []
        for position in sorted(positions):
            if runs and runs[-1][-1] + 1 == position:
                runs[-1].append(position)
            else:
                runs.append([position])

        ops = []
        for run in reversed(runs):
            start = self.current(run[0])
            ops.append(DeleteRange(start, start + len(run)))
            for position in run:
                bisect.insort(self._deleted, position)
        return ops


class MarkdownPlanner:
    """
    Plans the edit operations that turn markdown-tagged blocks into formatted ones.

    Attributes:
        mode: IndexingMode used by ``plan_document``.
        default_font_family: Font restored by neutralization.
        code_font_family: Monospace font for code spans.
        code_background_color: Hex background for code spans.
    """

    def __init__(
        self,
        mode: IndexingMode = IndexingMode.IMMEDIATE,
        default_font_family: str = DEFAULT_FONT_FAMILY,
        code_font_family: str = CODE_FONT_FAMILY,
        code_background_color: str = CODE_BACKGROUND_COLOR,
    ) -> None:
        self.mode = mode
        self.default_font_family = default_font_family
        self.code_font_family = code_font_family
        self.code_background_color = code_background_color

    @classmethod
    def from_config(cls, config: FormatterConfig, mode: IndexingMode = IndexingMode.IMMEDIATE) -> MarkdownPlanner:
        return cls(
            mode=mode,
            default_font_family=config.default_font_family,
            code_font_family=config.code_font_family,
            code_background_color=config.code_background_color,
        )

    def neutral_style(self) -> dict[str, Any]:
        """Baseline every planned block is reset to before formatting is derived."""
        return {
            BOLD: False,
            ITALIC: False,
            STRIKETHROUGH: False,
            BACKGROUND_COLOR: None,
            FONT_FAMILY: self.default_font_family,
        }

    def style_for(self, kind: SpanKind) -> dict[str, Any]:
        if kind is SpanKind.BOLD:
            return {BOLD: True}
        if kind is SpanKind.ITALIC:
            return {ITALIC: True}
        if kind is SpanKind.STRIKE:
            return {STRIKETHROUGH: True}
        if kind is SpanKind.CODE:
            return {FONT_FAMILY: self.code_font_family, BACKGROUND_COLOR: self.code_background_color}
        raise ValueError(f"No inline style for span kind '{kind.value}'")

    def plan(
        self,
        line: str,
        base_offset: int,
        block_index: int = 0,
        block_kind: BlockKind = BlockKind.PARAGRAPH,
    ) -> list[EditOperation]:
        """
        Plan the operations that format one block.

        Args:
            line: Block text without its paragraph terminator.
            base_offset: Absolute document index of the first character.
            block_index: Position of the block, carried by list conversions.
            block_kind: Current kind of the block. List items skip
                neutralization and block marker detection.

        Returns:
            Ordered operations; empty when the line holds no markup.
        """
        is_list_item = block_kind is BlockKind.LIST_ITEM
        match = match_line(line, detect_block=not is_list_item)
        if not match.has_markup:
            return []

        ops: list[EditOperation] = []
        tracker = _IndexTracker(base_offset)

        if not is_list_item:
            ops.append(SetStyle(base_offset, base_offset + len(line), self.neutral_style()))

        block = match.block
        if block is not None and block.kind is SpanKind.HEADING:
            ops.append(SetParagraphKind(base_offset, base_offset + len(line), HEADING_STYLE_MAP[block.level]))
            ops.extend(tracker.delete(range(block.marker_length)))
        elif block is not None and block.kind is SpanKind.LIST:
            ops.extend(tracker.delete(range(block.marker_length)))
            content_start = tracker.current(block.marker_length)
            ops.append(ConvertToListItem(block_index, block.content, content_start, content_start + len(block.content)))

        for span in sorted(match.spans, key=lambda s: s.start, reverse=True):
            ops.extend(tracker.delete(span.close_delimiters))
            ops.extend(tracker.delete(span.open_delimiters))
            styled_start = tracker.current(span.inner_start)
            styled_end = tracker.current(span.inner_end)
            if styled_end > styled_start:
                ops.append(SetStyle(styled_start, styled_end, self.style_for(span.kind)))

        logger.debug(
            f"Planned {len(ops)} op(s) for block {block_index}: "
            f"block={block.kind.value if block else None}, spans={len(match.spans)}"
        )
        return ops

    def plan_block(self, block: BlockSnapshot, base_offset: int | None = None) -> list[EditOperation]:
        """Plan one snapshot block; blank blocks produce nothing."""
        if not block.text.strip():
            return []
        start = block.start if base_offset is None else base_offset
        return self.plan(block.text, start, block_index=block.index, block_kind=block.kind)

    def plan_document(self, blocks: Sequence[BlockSnapshot]) -> list[EditOperation]:
        """
        Plan every block of a document snapshot as one flat operation list.

        Args:
            blocks: Blocks in document order, positioned from one snapshot.

        Returns:
            Operations ready to be applied in order.
        """
        ops: list[EditOperation] = []
        if self.mode is IndexingMode.TRANSACTIONAL:
            for block in reversed(blocks):
                ops.extend(self.plan_block(block))
        else:
            shift = 0
            for block in blocks:
                block_ops = self.plan_block(block, base_offset=block.start - shift)
                shift += deleted_length(block_ops)
                ops.extend(block_ops)

        logger.info(f"Planned {len(ops)} operation(s) over {len(blocks)} block(s) in {self.mode.value} mode")
        return ops
