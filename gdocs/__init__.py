"""
Google Docs Markdown Formatting Package

Recognizes lightweight markdown in document paragraphs and turns it into
native formatting, either on a live in-memory document or on a Google Doc
through chunked batchUpdate calls.
"""

from gdocs.cleaner import check_edit_access, clean_document_in_place, get_drive_file_access
from gdocs.controller import FormattingController, RunResult, RunState, format_document, task_id_for
from gdocs.docs_adapter import GoogleDocsAdapter
from gdocs.html_renderer import render_markdown_html
from gdocs.live_document import LiveBlock, LiveDocument, LiveDocumentAdapter
from gdocs.markdown_patterns import match_line
from gdocs.markdown_planner import BlockSnapshot, MarkdownPlanner

__all__ = [
    "match_line",
    "MarkdownPlanner",
    "BlockSnapshot",
    "LiveBlock",
    "LiveDocument",
    "LiveDocumentAdapter",
    "GoogleDocsAdapter",
    "FormattingController",
    "RunResult",
    "RunState",
    "format_document",
    "task_id_for",
    "check_edit_access",
    "clean_document_in_place",
    "get_drive_file_access",
    "render_markdown_html",
]
