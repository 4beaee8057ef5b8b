"""Helpers for the HTML markup tree: parsing, node classes and style declarations.

The tree walker and the editor commands share these so that both agree on
which elements are blocks and which declarations affect a StyleState.
"""

from __future__ import annotations

import re
from typing import Dict, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from docedit.model import Alignment, BlockKind, StyleDelta, EMPTY_DELTA

# Block-level containers. `li` is classified from its enclosing list.
BLOCK_TAGS: Dict[str, Optional[BlockKind]] = {
    "p": BlockKind.PARAGRAPH,
    "div": BlockKind.PARAGRAPH,
    "h1": BlockKind.HEADING1,
    "h2": BlockKind.HEADING2,
    "li": None,
}
LIST_TAGS: Dict[str, BlockKind] = {
    "ul": BlockKind.BULLET_LIST_ITEM,
    "ol": BlockKind.NUMBERED_LIST_ITEM,
}
# Elements whose content is never document text
SKIP_TAGS = frozenset({"style", "script", "head", "title", "meta", "link", "template"})

BOLD_TAGS = frozenset({"b", "strong"})
ITALIC_TAGS = frozenset({"i", "em"})
UNDERLINE_TAGS = frozenset({"u"})
INLINE_TAGS = BOLD_TAGS | ITALIC_TAGS | UNDERLINE_TAGS | {"span", "font"}

# Whitespace the HTML layout uses between elements; never a line break
HTML_WHITESPACE = " \t\n\r\f"

_PT_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*pt\s*$", re.IGNORECASE)

_ALIGNMENT_VALUES = {
    "left": Alignment.LEFT,
    "start": Alignment.LEFT,
    "center": Alignment.CENTER,
    "right": Alignment.RIGHT,
    "end": Alignment.RIGHT,
    "justify": Alignment.JUSTIFY,
}


def parse_markup(markup: Union[str, bytes]) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser")


def is_text(node) -> bool:
    """True for document text; comments, doctypes and CDATA are not text."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def is_layout_whitespace(text: str) -> bool:
    return not text.strip(HTML_WHITESPACE)


def parse_style_attribute(value: Optional[str]) -> Dict[str, str]:
    """Split an inline `style` attribute into lower-cased property → value pairs."""
    decls: Dict[str, str] = {}
    if not value:
        return decls
    for part in value.split(";"):
        if ":" not in part:
            continue
        prop, _, val = part.partition(":")
        prop = prop.strip().lower()
        val = val.strip()
        if prop and val:
            decls[prop] = val
    return decls


def format_style_attribute(decls: Dict[str, str]) -> str:
    return "; ".join(f"{k}: {v}" for k, v in decls.items())


def parse_font_size(value: Optional[str]) -> Optional[int]:
    """Convert a point-size declaration ("12pt", "10.5pt") to half-points."""
    if not value:
        return None
    m = _PT_SIZE_RE.match(value)
    if not m:
        return None
    half_points = int(round(float(m.group(1)) * 2))
    return half_points if half_points > 0 else None


def parse_alignment(value: Optional[str]) -> Optional[Alignment]:
    if not value:
        return None
    return _ALIGNMENT_VALUES.get(value.strip().lower())


def _is_bold_weight(value: str) -> bool:
    v = value.strip().lower()
    if v in ("bold", "bolder"):
        return True
    return v.isdigit() and int(v) >= 600


def declares_bold(tag: Tag) -> bool:
    if tag.name in BOLD_TAGS:
        return True
    weight = parse_style_attribute(tag.get("style")).get("font-weight")
    return bool(weight) and _is_bold_weight(weight)


def declares_italic(tag: Tag) -> bool:
    if tag.name in ITALIC_TAGS:
        return True
    font_style = parse_style_attribute(tag.get("style")).get("font-style", "")
    return font_style.strip().lower() in ("italic", "oblique")


def declares_underline(tag: Tag) -> bool:
    if tag.name in UNDERLINE_TAGS:
        return True
    decls = parse_style_attribute(tag.get("style"))
    decoration = decls.get("text-decoration-line") or decls.get("text-decoration") or ""
    return "underline" in decoration.lower()


def declared_style(tag: Tag) -> StyleDelta:
    """Return the formatting attributes declared on `tag` itself.

    Tag shortcuts (b/strong, i/em, u) and the inline `style` attribute both
    count. Unrecognized properties and units are ignored.
    """
    decls = parse_style_attribute(tag.get("style"))
    if not decls and tag.name not in INLINE_TAGS:
        return EMPTY_DELTA
    return StyleDelta(
        bold=True if declares_bold(tag) else None,
        italic=True if declares_italic(tag) else None,
        underline=True if declares_underline(tag) else None,
        font_size_half_points=parse_font_size(decls.get("font-size")),
        alignment=parse_alignment(decls.get("text-align")),
    )


def block_kind(tag: Tag) -> Optional[BlockKind]:
    """Classify a block container, or return None for any other element."""
    if tag.name not in BLOCK_TAGS:
        return None
    kind = BLOCK_TAGS[tag.name]
    if kind is not None:
        return kind
    parent_list = tag.find_parent(list(LIST_TAGS))
    if parent_list is None:
        return BlockKind.BULLET_LIST_ITEM
    return LIST_TAGS[parent_list.name]


def has_nested_block(tag: Tag) -> bool:
    return tag.find(list(BLOCK_TAGS)) is not None
