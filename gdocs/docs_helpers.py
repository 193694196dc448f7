"""
Google Docs Helper Functions

Builders that turn planned edit operations into Google Docs API
``batchUpdate`` request dictionaries.
"""

import logging
from typing import Any

from gdocs.operations import (
    BACKGROUND_COLOR,
    BOLD,
    FONT_FAMILY,
    ITALIC,
    STRIKETHROUGH,
    ConvertToListItem,
    DeleteRange,
    EditOperation,
    SetParagraphKind,
    SetStyle,
)

logger = logging.getLogger(__name__)

# Bullet list preset for unordered list items
BULLET_PRESET_UNORDERED = "BULLET_DISC_CIRCLE_SQUARE"


def _normalize_color(color: str | None, param_name: str) -> dict[str, float] | None:
    """
    Normalize a '#RRGGBB' color string to the Docs API rgbColor dict.

    Returns:
        {'red', 'green', 'blue'} floats in 0-1, or None when color is None

    Raises:
        ValueError: If the color is not a '#RRGGBB' hex string
    """
    if color is None:
        return None

    if not isinstance(color, str) or len(color) != 7 or not color.startswith("#"):
        raise ValueError(f"{param_name} must be a hex string like '#RRGGBB'")

    try:
        red = int(color[1:3], 16)
        green = int(color[3:5], 16)
        blue = int(color[5:7], 16)
    except ValueError as e:
        raise ValueError(f"{param_name} must be a hex string like '#RRGGBB'") from e

    return {"red": red / 255, "green": green / 255, "blue": blue / 255}


def build_text_style(attributes: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """
    Build a Docs API textStyle and its field mask from style attributes.

    An attribute whose value is None is left out of the style but kept in the
    field mask, which clears it in the document.

    Args:
        attributes: Mapping of operation style attribute names to values

    Returns:
        Tuple of (text_style_dict, list_of_field_names)
    """
    text_style: dict[str, Any] = {}
    fields: list[str] = []

    for name, value in attributes.items():
        if name in (BOLD, ITALIC, STRIKETHROUGH):
            if value is not None:
                text_style[name] = bool(value)
            fields.append(name)
        elif name == FONT_FAMILY:
            if value is not None:
                text_style["weightedFontFamily"] = {"fontFamily": value}
            fields.append("weightedFontFamily")
        elif name == BACKGROUND_COLOR:
            rgb = _normalize_color(value, "background_color")
            if rgb is not None:
                text_style["backgroundColor"] = {"color": {"rgbColor": rgb}}
            fields.append("backgroundColor")
        else:
            raise ValueError(f"Unsupported style attribute: {name}")

    return text_style, fields


def create_delete_range_request(start_index: int, end_index: int) -> dict[str, Any]:
    return {"deleteContentRange": {"range": {"startIndex": start_index, "endIndex": end_index}}}


def create_update_text_style_request(start_index: int, end_index: int, attributes: dict[str, Any]) -> dict[str, Any]:
    text_style, fields = build_text_style(attributes)
    return {
        "updateTextStyle": {
            "range": {"startIndex": start_index, "endIndex": end_index},
            "textStyle": text_style,
            "fields": ",".join(fields),
        }
    }


def create_paragraph_style_request(start_index: int, end_index: int, named_style: str) -> dict[str, Any]:
    return {
        "updateParagraphStyle": {
            "range": {"startIndex": start_index, "endIndex": end_index},
            "paragraphStyle": {"namedStyleType": named_style},
            "fields": "namedStyleType",
        }
    }


def create_bullet_list_request(start_index: int, end_index: int) -> dict[str, Any]:
    """
    Create a createParagraphBullets request for an unordered list item.

    An empty item still needs a one-character range so the paragraph
    terminator is covered.
    """
    return {
        "createParagraphBullets": {
            "range": {"startIndex": start_index, "endIndex": max(end_index, start_index + 1)},
            "bulletPreset": BULLET_PRESET_UNORDERED,
        }
    }


def operation_to_request(op: EditOperation) -> dict[str, Any]:
    """Convert one planned edit operation to its batchUpdate request."""
    if isinstance(op, DeleteRange):
        return create_delete_range_request(op.start, op.end_exclusive)
    if isinstance(op, SetStyle):
        return create_update_text_style_request(op.start, op.end_exclusive, op.attributes)
    if isinstance(op, SetParagraphKind):
        return create_paragraph_style_request(op.start, op.end_exclusive, op.kind)
    if isinstance(op, ConvertToListItem):
        return create_bullet_list_request(op.start, op.end_exclusive)
    raise TypeError(f"Unknown edit operation: {type(op).__name__}")


def operations_to_requests(ops: list[EditOperation]) -> list[dict[str, Any]]:
    requests = [operation_to_request(op) for op in ops]
    logger.debug(f"Built {len(requests)} batchUpdate request(s)")
    return requests
