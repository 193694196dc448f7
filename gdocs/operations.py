"""
Primitive edit operations emitted by the mutation planner.

Operations are plain frozen dataclasses so both document adapters (the live
in-memory model and the Google Docs batch adapter) can consume the same plan.
Indices are absolute document indices; ``end_exclusive`` is never included.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

# Style attribute names (the live model and the wire format share them)
BOLD = "bold"
ITALIC = "italic"
STRIKETHROUGH = "strikethrough"
FONT_FAMILY = "fontFamily"
BACKGROUND_COLOR = "backgroundColor"

STYLE_ATTRIBUTES: tuple[str, ...] = (BOLD, ITALIC, STRIKETHROUGH, FONT_FAMILY, BACKGROUND_COLOR)

# Named paragraph styles for headings (level -> Google Docs namedStyleType)
HEADING_STYLE_MAP: dict[int, str] = {
    1: "HEADING_1",
    2: "HEADING_2",
    3: "HEADING_3",
    4: "HEADING_4",
}
NORMAL_TEXT = "NORMAL_TEXT"


class BlockKind(str, Enum):
    """Kind of a paragraph-level block."""

    PARAGRAPH = "paragraph"
    HEADING = "heading"
    LIST_ITEM = "list_item"


class IndexingMode(str, Enum):
    """
    How the indices of a multi-block plan are derived.

    IMMEDIATE: the target mutates as each op lands; blocks are planned
        top-down and every later block's offset is shifted by the text the
        earlier blocks deleted.
    TRANSACTIONAL: every block offset comes from one pre-edit snapshot;
        blocks are planned bottom-up so no emitted edit moves a block that
        is still waiting for its own ops.
    """

    IMMEDIATE = "immediate"
    TRANSACTIONAL = "transactional"


@dataclass(frozen=True)
class DeleteRange:
    start: int
    end_exclusive: int

    def to_dict(self) -> dict[str, Any]:
        return {"type": "delete_range", "start": self.start, "endExclusive": self.end_exclusive}

    @property
    def length(self) -> int:
        return self.end_exclusive - self.start


@dataclass(frozen=True)
class SetStyle:
    """
    Apply style attributes over a range.

    Only the attributes present in ``attributes`` are touched; a ``None``
    value clears that attribute. The attributes are stored read-only.
    """

    start: int
    end_exclusive: int
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def __hash__(self) -> int:
        return hash((self.start, self.end_exclusive, frozenset(self.attributes.items())))

    @property
    def field_mask(self) -> tuple[str, ...]:
        return tuple(self.attributes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "set_style",
            "start": self.start,
            "endExclusive": self.end_exclusive,
            "styleAttributes": dict(self.attributes),
            "fieldMask": ",".join(self.field_mask),
        }


@dataclass(frozen=True)
class SetParagraphKind:
    start: int
    end_exclusive: int
    kind: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "set_paragraph_kind",
            "start": self.start,
            "endExclusive": self.end_exclusive,
            "kind": self.kind,
        }


@dataclass(frozen=True)
class ConvertToListItem:
    """Replace the block at ``block_index`` by an unordered list item holding ``content``."""

    block_index: int
    content: str
    start: int
    end_exclusive: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "convert_to_list_item",
            "blockIndex": self.block_index,
            "content": self.content,
            "start": self.start,
            "endExclusive": self.end_exclusive,
        }


EditOperation = DeleteRange | SetStyle | SetParagraphKind | ConvertToListItem


def deleted_length(ops: list[EditOperation]) -> int:
    """Total number of characters removed by a list of operations."""
    return sum(op.length for op in ops if isinstance(op, DeleteRange))
