"""
Markdown Pattern Matcher

Recognizes the small markdown dialect the formatter supports in a single line
of text: one optional block-level marker (heading or unordered list item)
and any number of inline spans (code, strikethrough, bold, italic).

Everything else (tables, links, blockquotes, fences, nested lists) is not
recognized and stays literal text. Recognition never raises.

Inline recognition follows a fixed priority table. Each pass runs over the
*working text* of the line: the original text minus the delimiters consumed
by earlier passes. Positions are always reported against the original line,
so a planner can address the untouched text.

Example:
    >>> match = match_line("## Intro to **bold** ideas")
    >>> match.block.level, match.plain_text()
    (2, 'Intro to bold ideas')
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class SpanKind(str, Enum):
    HEADING = "heading"
    LIST = "list"
    CODE = "code"
    STRIKE = "strike"
    BOLD = "bold"
    ITALIC = "italic"


# Longest prefix first: '### x' must not be read as '#' followed by '## x'.
HEADING_PREFIXES: tuple[tuple[str, int], ...] = (
    ("####", 4),
    ("###", 3),
    ("##", 2),
    ("#", 1),
)

LIST_MARKER_RE = re.compile(r"^\s*([*\-+])\s+")

# Stand-in for code span content in the working text of later passes
_OPAQUE = "\x00"


@dataclass(frozen=True)
class InlinePattern:
    """One row of the inline priority table.

    Attributes:
        kind: Span kind produced by the pattern.
        regex: Pattern with an ``inner`` group; the delimiters are what lies
            around it.
        delimiter_length: Length of the opening (and closing) delimiter.
        opaque: When True, the inner text is hidden from later passes.
    """

    kind: SpanKind
    regex: re.Pattern
    delimiter_length: int
    opaque: bool = False


# Evaluated top to bottom. Bold precedes italic so '**' is never read as two '*'.
INLINE_PATTERNS: tuple[InlinePattern, ...] = (
    InlinePattern(SpanKind.CODE, re.compile(r"`(?P<inner>[^`\n]+?)`"), 1, opaque=True),
    InlinePattern(SpanKind.STRIKE, re.compile(r"~~(?P<inner>[^\n]*?)~~"), 2),
    InlinePattern(SpanKind.BOLD, re.compile(r"(?P<delim>\*\*|__)(?P<inner>[^\n]*?)(?P=delim)"), 2),
    InlinePattern(SpanKind.ITALIC, re.compile(r"\*(?P<inner>[^*\n]+?)\*"), 1),
    InlinePattern(SpanKind.ITALIC, re.compile(r"_(?P<inner>[^_\n]+?)_"), 1),
)


@dataclass(frozen=True)
class Span:
    """A recognized inline token.

    All positions are offsets into the original line.

    Attributes:
        kind: What the span formats.
        start: Position of the first opening delimiter character.
        end: Position after the last closing delimiter character.
        inner_start: First position after the opening delimiter.
        inner_end: Position of the first closing delimiter character.
        inner_text: Content between the delimiters, without delimiters
            consumed by earlier passes.
        open_delimiters: Positions of the opening delimiter characters.
        close_delimiters: Positions of the closing delimiter characters.
    """

    kind: SpanKind
    start: int
    end: int
    inner_start: int
    inner_end: int
    inner_text: str
    open_delimiters: tuple[int, ...]
    close_delimiters: tuple[int, ...]

    @property
    def delimiters(self) -> tuple[int, ...]:
        return self.open_delimiters + self.close_delimiters

    def shifted(self, offset: int) -> Span:
        """Return the span with every position moved by ``offset``."""
        return Span(
            kind=self.kind,
            start=self.start + offset,
            end=self.end + offset,
            inner_start=self.inner_start + offset,
            inner_end=self.inner_end + offset,
            inner_text=self.inner_text,
            open_delimiters=tuple(p + offset for p in self.open_delimiters),
            close_delimiters=tuple(p + offset for p in self.close_delimiters),
        )


@dataclass(frozen=True)
class BlockMatch:
    """A block-level marker at the start of a line.

    Attributes:
        kind: SpanKind.HEADING or SpanKind.LIST.
        marker_length: Number of leading characters to strip.
        content: The line with the marker stripped.
        level: Heading level (1-4); None for list items.
    """

    kind: SpanKind
    marker_length: int
    content: str
    level: int | None = None


@dataclass(frozen=True)
class LineMatch:
    """Everything recognized in one line.

    ``spans`` are positioned against ``line`` (the content offset of a block
    marker is already applied).
    """

    line: str
    block: BlockMatch | None
    spans: tuple[Span, ...]

    @property
    def content_offset(self) -> int:
        return self.block.marker_length if self.block else 0

    @property
    def has_markup(self) -> bool:
        return self.block is not None or bool(self.spans)

    def removed_positions(self) -> set[int]:
        """Positions of every character the formatter strips from the line."""
        removed = set(range(self.content_offset))
        for span in self.spans:
            removed.update(span.delimiters)
        return removed

    def plain_text(self) -> str:
        """The line as it reads once all markers and delimiters are gone."""
        removed = self.removed_positions()
        return "".join(ch for i, ch in enumerate(self.line) if i not in removed)

    def style_runs(self) -> list[tuple[str, frozenset[SpanKind]]]:
        """
        Split the plain text into maximal runs of identical inline formatting.

        Returns:
            List of (text, kinds) pairs covering ``plain_text()`` in order.
        """
        removed = self.removed_positions()
        runs: list[tuple[str, frozenset[SpanKind]]] = []
        for i, ch in enumerate(self.line):
            if i in removed:
                continue
            kinds = frozenset(s.kind for s in self.spans if s.inner_start <= i < s.inner_end)
            if runs and runs[-1][1] == kinds:
                runs[-1] = (runs[-1][0] + ch, kinds)
            else:
                runs.append((ch, kinds))
        return runs


def match_heading(line: str) -> BlockMatch | None:
    """
    Detect a heading marker ('#' to '####' followed by one space).

    Args:
        line: Line text without its paragraph terminator.

    Returns:
        BlockMatch for the longest matching prefix, or None.
    """
    for prefix, level in HEADING_PREFIXES:
        if line.startswith(prefix + " "):
            marker_length = len(prefix) + 1
            return BlockMatch(SpanKind.HEADING, marker_length, line[marker_length:], level)
    return None


def match_list_item(line: str) -> BlockMatch | None:
    """
    Detect an unordered list marker ('*', '-' or '+' followed by whitespace).

    A line whose trimmed text starts with '**' or '__' is bold text, not a
    bullet, and is never reported as a list item.
    """
    match = LIST_MARKER_RE.match(line)
    if not match:
        return None
    if line.strip().startswith(("**", "__")):
        return None
    marker_length = match.end()
    return BlockMatch(SpanKind.LIST, marker_length, line[marker_length:])


def classify_block(line: str) -> BlockMatch | None:
    """Heading detection first; list detection only when no heading matched."""
    return match_heading(line) or match_list_item(line)


def find_inline_spans(text: str) -> list[Span]:
    """
    Find inline spans in ``text`` using the priority table.

    Args:
        text: Text to scan (a whole line or a block's content).

    Returns:
        Spans ordered by start position, positioned against ``text``.
    """
    positions = list(range(len(text)))
    visible = text
    scan = text
    spans: list[Span] = []

    for pattern in INLINE_PATTERNS:
        matches = list(pattern.regex.finditer(scan))
        if not matches:
            continue

        consumed: set[int] = set()
        hidden: set[int] = set()
        width = pattern.delimiter_length
        for m in matches:
            inner_s, inner_e = m.start("inner"), m.end("inner")
            open_delims = tuple(positions[m.start() : inner_s])
            close_delims = tuple(positions[inner_e : m.end()])
            spans.append(
                Span(
                    kind=pattern.kind,
                    start=open_delims[0],
                    end=close_delims[-1] + 1,
                    inner_start=open_delims[-1] + 1,
                    inner_end=close_delims[0],
                    inner_text=visible[inner_s:inner_e],
                    open_delimiters=open_delims,
                    close_delimiters=close_delims,
                )
            )
            consumed.update(range(m.start(), m.start() + width))
            consumed.update(range(m.end() - width, m.end()))
            if pattern.opaque:
                hidden.update(range(inner_s, inner_e))

        keep = [i for i in range(len(scan)) if i not in consumed]
        positions = [positions[i] for i in keep]
        visible = "".join(visible[i] for i in keep)
        scan = "".join(_OPAQUE if i in hidden else scan[i] for i in keep)

    spans.sort(key=lambda s: s.start)
    return spans


def match_line(line: str, detect_block: bool = True) -> LineMatch:
    """
    Recognize block marker and inline spans of one line.

    Args:
        line: Line text without its paragraph terminator.
        detect_block: False for blocks that are already list items, whose
            marker was stripped by an earlier run.

    Returns:
        LineMatch with span positions relative to ``line``.
    """
    block = classify_block(line) if detect_block else None
    offset = block.marker_length if block else 0
    spans = tuple(span.shifted(offset) for span in find_inline_spans(line[offset:]))
    return LineMatch(line=line, block=block, spans=spans)
