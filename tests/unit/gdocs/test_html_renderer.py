"""Unit tests for markdown to HTML fragment rendering."""

import pytest

from core.errors import InvalidInputError
from gdocs.html_renderer import render_inline, render_markdown_html


class TestRenderInline:
    def test_tags(self):
        assert render_inline("**b** *i* ~~s~~ `c`") == (
            "<strong>b</strong> <em>i</em> <del>s</del> <code>c</code>"
        )

    def test_code_content_is_literal(self):
        assert render_inline("`**x**`") == "<code>**x**</code>"

    def test_nested(self):
        assert render_inline("***x***") == "<strong><em>x</em></strong>"

    def test_escaping(self):
        assert render_inline('a < b & "c"') == "a &lt; b &amp; &quot;c&quot;"


class TestRenderMarkdownHtml:
    """Tests for line-oriented rendering."""

    def test_heading_and_list(self):
        assert render_markdown_html("# Title\n* **one**") == (
            "<h1>Title</h1>\n<ul>\n<li><strong>one</strong></li>\n</ul>"
        )

    @pytest.mark.parametrize("level", [1, 2, 3, 4])
    def test_heading_levels(self, level):
        assert render_markdown_html("#" * level + " T") == f"<h{level}>T</h{level}>"

    def test_empty_heading_dropped(self):
        assert render_markdown_html("# \nx") == "<p>x</p>"

    def test_blank_line_closes_list(self):
        assert render_markdown_html("- a\n\n- b") == (
            "<ul>\n<li>a</li>\n</ul>\n<br>\n<ul>\n<li>b</li>\n</ul>"
        )

    def test_paragraph_after_list(self):
        assert render_markdown_html("- a\nb") == "<ul>\n<li>a</li>\n</ul>\n<p>b</p>"

    def test_crlf_input(self):
        assert render_markdown_html("a\r\nb") == "<p>a</p>\n<p>b</p>"

    def test_unsupported_markup_is_literal(self):
        assert render_markdown_html("> quote") == "<p>&gt; quote</p>"

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_blank_input_rejected(self, text):
        with pytest.raises(InvalidInputError):
            render_markdown_html(text)
