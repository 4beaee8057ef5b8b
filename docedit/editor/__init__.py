"""Editable markup session and the formatting commands it exposes."""

from .commands import (
    Selection,
    addressable_blocks,
    insert_list,
    set_alignment,
    set_font_family,
    set_font_size,
    set_heading_level,
    toggle_bold,
    toggle_italic,
    toggle_underline,
    wrap_loose_text,
)
from .session import EditorSession

__all__ = [
    "Selection",
    "addressable_blocks",
    "insert_list",
    "set_alignment",
    "set_font_family",
    "set_font_size",
    "set_heading_level",
    "toggle_bold",
    "toggle_italic",
    "toggle_underline",
    "wrap_loose_text",
    "EditorSession",
]
