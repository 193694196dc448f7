"""
Unit tests for MarkdownPlanner.

Operations are checked both structurally and by applying them to a
LiveDocument, which rejects any index that does not exist at the time the
operation lands.
"""

import pytest

from gdocs.live_document import LiveDocument
from gdocs.markdown_patterns import SpanKind
from gdocs.markdown_planner import BlockSnapshot, MarkdownPlanner
from gdocs.operations import (
    BACKGROUND_COLOR,
    BOLD,
    FONT_FAMILY,
    ITALIC,
    STRIKETHROUGH,
    BlockKind,
    ConvertToListItem,
    DeleteRange,
    IndexingMode,
    SetParagraphKind,
    SetStyle,
)


@pytest.fixture
def planner():
    return MarkdownPlanner()


def _apply(document: LiveDocument, ops) -> LiveDocument:
    for op in ops:
        document.apply(op)
    return document


class TestPlannerStyles:
    """Tests for style attribute sets."""

    def test_neutral_style(self, planner):
        assert planner.neutral_style() == {
            BOLD: False,
            ITALIC: False,
            STRIKETHROUGH: False,
            BACKGROUND_COLOR: None,
            FONT_FAMILY: "Arial",
        }

    def test_code_style(self, planner):
        assert planner.style_for(SpanKind.CODE) == {FONT_FAMILY: "Consolas", BACKGROUND_COLOR: "#f3f3f3"}

    def test_from_config(self, env_override):
        config = env_override(FORMATTER_CODE_FONT="Courier New", FORMATTER_DEFAULT_FONT="Roboto")
        planner = MarkdownPlanner.from_config(config, mode=IndexingMode.TRANSACTIONAL)
        assert planner.mode is IndexingMode.TRANSACTIONAL
        assert planner.style_for(SpanKind.CODE)[FONT_FAMILY] == "Courier New"
        assert planner.neutral_style()[FONT_FAMILY] == "Roboto"


class TestPlanLine:
    """Tests for single-block plans."""

    def test_plain_line_plans_nothing(self, planner):
        assert planner.plan("Nothing to see here.", base_offset=1) == []

    def test_bold(self, planner):
        ops = planner.plan("**a**", base_offset=1)
        assert ops == [
            SetStyle(1, 6, planner.neutral_style()),
            DeleteRange(4, 6),
            DeleteRange(1, 3),
            SetStyle(1, 2, {BOLD: True}),
        ]

    def test_index_safety_with_mixed_spans(self, planner):
        """Rightmost span first; every later index accounts for earlier deletions."""
        line = "**a** and *b* and `c`"
        ops = planner.plan(line, base_offset=1)
        assert ops == [
            SetStyle(1, 22, planner.neutral_style()),
            DeleteRange(21, 22),
            DeleteRange(19, 20),
            SetStyle(19, 20, {FONT_FAMILY: "Consolas", BACKGROUND_COLOR: "#f3f3f3"}),
            DeleteRange(13, 14),
            DeleteRange(11, 12),
            SetStyle(11, 12, {ITALIC: True}),
            DeleteRange(4, 6),
            DeleteRange(1, 3),
            SetStyle(1, 2, {BOLD: True}),
        ]

        document = _apply(LiveDocument.from_text(line), ops)
        assert document.plain_text() == "a and b and c"
        assert document.styled_runs(BOLD) == ["a"]
        assert document.styled_runs(ITALIC) == ["b"]
        assert document.styled_runs(FONT_FAMILY, "Consolas") == ["c"]

    def test_empty_bold_is_removed_without_style(self, planner):
        ops = planner.plan("****", base_offset=1)
        assert ops == [
            SetStyle(1, 5, planner.neutral_style()),
            DeleteRange(3, 5),
            DeleteRange(1, 3),
        ]
        assert _apply(LiveDocument.from_text("****"), ops).plain_text() == ""

    def test_heading(self, planner):
        ops = planner.plan("# Title **x**", base_offset=1)
        assert ops == [
            SetStyle(1, 14, planner.neutral_style()),
            SetParagraphKind(1, 14, "HEADING_1"),
            DeleteRange(1, 3),
            DeleteRange(10, 12),
            DeleteRange(7, 9),
            SetStyle(7, 8, {BOLD: True}),
        ]

        document = _apply(LiveDocument.from_text("# Title **x**"), ops)
        assert document.plain_text() == "Title x"
        assert document.blocks[0].kind is BlockKind.HEADING
        assert document.blocks[0].heading_style == "HEADING_1"
        assert document.styled_runs(BOLD) == ["x"]

    def test_nested_heading_prefix_stays_in_content(self, planner):
        line = "### ## still heading text"
        document = _apply(LiveDocument.from_text(line), planner.plan(line, base_offset=1))
        assert document.plain_text() == "## still heading text"
        assert document.blocks[0].heading_style == "HEADING_3"

    def test_list_item(self, planner):
        ops = planner.plan("- item **b**", base_offset=10, block_index=2)
        assert ops == [
            DeleteRange(10, 12),
            ConvertToListItem(2, "item **b**", 10, 20),
            DeleteRange(18, 20),
            DeleteRange(15, 17),
            SetStyle(15, 16, {BOLD: True}),
        ]

    def test_bold_line_is_not_planned_as_list(self, planner):
        ops = planner.plan("**bold**", base_offset=1)
        assert not any(isinstance(op, ConvertToListItem) for op in ops)

    def test_existing_list_item_skips_marker_and_neutralization(self, planner):
        ops = planner.plan("- **b**", base_offset=1, block_kind=BlockKind.LIST_ITEM)
        assert not any(isinstance(op, ConvertToListItem) for op in ops)
        assert ops[0] == DeleteRange(6, 8)

    def test_bold_italic_combination(self, planner):
        line = "***x***"
        document = _apply(LiveDocument.from_text(line), planner.plan(line, base_offset=1))
        assert document.plain_text() == "x"
        assert document.styled_runs(BOLD) == ["x"]
        assert document.styled_runs(ITALIC) == ["x"]

    def test_strikethrough_and_code_opacity(self, planner):
        line = "~~old~~ `**raw**`"
        document = _apply(LiveDocument.from_text(line), planner.plan(line, base_offset=1))
        assert document.plain_text() == "old **raw**"
        assert document.styled_runs(STRIKETHROUGH) == ["old"]
        assert document.styled_runs(FONT_FAMILY, "Consolas") == ["**raw**"]
        assert document.styled_runs(BOLD) == []


class TestPlanDocument:
    """Tests for multi-block plans in both indexing modes."""

    @pytest.fixture
    def blocks(self):
        return [
            BlockSnapshot(index=0, text="**a**", start=1),
            BlockSnapshot(index=1, text="**b**", start=7),
        ]

    def test_immediate_mode_shifts_later_blocks(self, blocks):
        planner = MarkdownPlanner(mode=IndexingMode.IMMEDIATE)
        ops = planner.plan_document(blocks)
        assert ops[:4] == [
            SetStyle(1, 6, planner.neutral_style()),
            DeleteRange(4, 6),
            DeleteRange(1, 3),
            SetStyle(1, 2, {BOLD: True}),
        ]
        assert ops[4:] == [
            SetStyle(3, 8, planner.neutral_style()),
            DeleteRange(6, 8),
            DeleteRange(3, 5),
            SetStyle(3, 4, {BOLD: True}),
        ]

    def test_transactional_mode_plans_bottom_up(self, blocks):
        planner = MarkdownPlanner(mode=IndexingMode.TRANSACTIONAL)
        ops = planner.plan_document(blocks)
        assert ops[0] == SetStyle(7, 12, planner.neutral_style())
        assert ops[4] == SetStyle(1, 6, planner.neutral_style())

    @pytest.mark.parametrize("mode", [IndexingMode.IMMEDIATE, IndexingMode.TRANSACTIONAL])
    def test_modes_agree_on_result(self, mode):
        text = "# Title\n\n- one *x*\nplain\n**b** and `c`"
        document = LiveDocument.from_text(text)
        snapshot = [
            BlockSnapshot(index=i, text=block.text, start=document.block_range(i)[0])
            for i, block in enumerate(document.blocks)
        ]
        _apply(document, MarkdownPlanner(mode=mode).plan_document(snapshot))

        assert document.plain_text() == "Title\n\none x\nplain\nb and c"
        assert document.blocks[2].kind is BlockKind.LIST_ITEM
        assert document.styled_runs(ITALIC) == ["x"]
        assert document.styled_runs(BOLD) == ["b"]

    def test_blank_blocks_are_skipped(self, planner):
        assert planner.plan_block(BlockSnapshot(index=0, text="   ", start=1)) == []
