"""
Markdown to HTML fragment rendering.

Renders the same markdown dialect the document formatter understands as a
small HTML fragment, one element per line. Used for previews where no
document is involved.

Example:
    >>> render_markdown_html("# Title\\n* **one**")
    '<h1>Title</h1>\\n<ul>\\n<li><strong>one</strong></li>\\n</ul>'
"""

import html
import logging

from core.utils import require_text
from gdocs.markdown_patterns import SpanKind, classify_block, match_line

logger = logging.getLogger(__name__)

HEADING_TAGS = {1: "h1", 2: "h2", 3: "h3", 4: "h4"}

# Outermost first
INLINE_TAGS: tuple[tuple[SpanKind, str], ...] = (
    (SpanKind.CODE, "code"),
    (SpanKind.STRIKE, "del"),
    (SpanKind.BOLD, "strong"),
    (SpanKind.ITALIC, "em"),
)


def render_inline(text: str) -> str:
    """Render inline spans of ``text`` as escaped HTML."""
    parts = []
    for run, kinds in match_line(text, detect_block=False).style_runs():
        tags = [tag for kind, tag in INLINE_TAGS if kind in kinds]
        opening = "".join(f"<{tag}>" for tag in tags)
        closing = "".join(f"</{tag}>" for tag in reversed(tags))
        parts.append(f"{opening}{html.escape(run)}{closing}")
    return "".join(parts)


def render_markdown_html(text: str) -> str:
    """
    Render markdown text as an HTML fragment.

    Blank lines become ``<br>``, consecutive list items share one ``<ul>``,
    headings with no content are dropped and every other line is a ``<p>``.

    Raises:
        InvalidInputError: If text is empty or blank
    """
    require_text(text, "text")
    lines = text.replace("\r\n", "\n").split("\n")
    out: list[str] = []
    in_list = False

    for line in lines:
        if not line.strip():
            if in_list:
                out.append("</ul>")
                in_list = False
            out.append("<br>")
            continue

        block = classify_block(line)
        if block is not None and block.kind is SpanKind.LIST:
            if not in_list:
                out.append("<ul>")
                in_list = True
            out.append(f"<li>{render_inline(block.content.rstrip())}</li>")
            continue

        if in_list:
            out.append("</ul>")
            in_list = False

        if block is not None and block.kind is SpanKind.HEADING:
            content = block.content.strip()
            if content:
                tag = HEADING_TAGS[block.level]
                out.append(f"<{tag}>{render_inline(content)}</{tag}>")
            continue

        out.append(f"<p>{render_inline(line.rstrip())}</p>")

    if in_list:
        out.append("</ul>")

    logger.debug(f"Rendered {len(lines)} line(s) to HTML")
    return "\n".join(out)
