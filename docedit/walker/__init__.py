"""Markup tree walking: HTML helpers, run merging and block classification."""

from .markup import (
    BLOCK_TAGS,
    HTML_WHITESPACE,
    LIST_TAGS,
    block_kind,
    declared_style,
    is_layout_whitespace,
    parse_font_size,
    parse_markup,
    parse_style_attribute,
)
from .runs import RunBuilder
from .tree import TreeWalker, walk

__all__ = [
    "BLOCK_TAGS",
    "HTML_WHITESPACE",
    "LIST_TAGS",
    "block_kind",
    "declared_style",
    "is_layout_whitespace",
    "parse_font_size",
    "parse_markup",
    "parse_style_attribute",
    "RunBuilder",
    "TreeWalker",
    "walk",
]
