"""Formatting commands that mutate the editable markup tree in place.

A Selection addresses a character range inside one block container. Blocks
are numbered in document order, counting only containers that hold no other
container, so every addressable block holds its own text.

Inline commands split text nodes at the range boundaries first, so they only
ever touch whole text nodes. Turning an attribute off cannot be done by
wrapping, since a declared False never overrides an inherited True. Instead
the declaring ancestors are split around the selected text and the
declaration is dropped from the isolated part.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Union

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from docedit.model import Alignment
from docedit.walker.markup import (
    BLOCK_TAGS,
    BOLD_TAGS,
    ITALIC_TAGS,
    LIST_TAGS,
    SKIP_TAGS,
    UNDERLINE_TAGS,
    declares_bold,
    declares_italic,
    declares_underline,
    format_style_attribute,
    has_nested_block,
    is_layout_whitespace,
    is_text,
    parse_style_attribute,
)


@dataclass(frozen=True)
class Selection:
    """Characters [start, end) of block number `block`; end None means block end."""

    block: int
    start: int = 0
    end: Optional[int] = None


@dataclass(frozen=True)
class _InlineAttribute:
    declares: Callable[[Tag], bool]
    tags: frozenset
    wrap_tag: str
    properties: Tuple[str, ...]


_ATTRIBUTES: Dict[str, _InlineAttribute] = {
    "bold": _InlineAttribute(declares_bold, BOLD_TAGS, "strong", ("font-weight",)),
    "italic": _InlineAttribute(declares_italic, ITALIC_TAGS, "em", ("font-style",)),
    "underline": _InlineAttribute(declares_underline, UNDERLINE_TAGS, "u", ("text-decoration", "text-decoration-line")),
}
_HEADING_TAGS = {0: "p", 1: "h1", 2: "h2"}
# Elements that hold blocks rather than text; loose text is wrapped inside them
_STRUCTURE_TAGS = frozenset(LIST_TAGS) | {"html", "body", "table", "thead", "tbody", "tfoot", "tr", "td", "th"}


def addressable_blocks(tree: Tag) -> List[Tag]:
    return [tag for tag in tree.find_all(list(BLOCK_TAGS)) if not has_nested_block(tag)]


def _text_nodes(block: Tag) -> List[NavigableString]:
    return [node for node in block.descendants if is_text(node)]


def block_text(block: Tag) -> str:
    return "".join(str(node) for node in _text_nodes(block))


def _is_inline(node) -> bool:
    if isinstance(node, NavigableString):
        return is_text(node) or isinstance(node, Comment)
    return (
        isinstance(node, Tag)
        and node.name not in BLOCK_TAGS
        and node.name not in SKIP_TAGS
        and node.name not in _STRUCTURE_TAGS
        and not has_nested_block(node)
    )


def _has_content(nodes: List) -> bool:
    for node in nodes:
        if is_text(node) and not is_layout_whitespace(str(node)):
            return True
        if isinstance(node, Tag) and (node.name == "br" or node.find("br") is not None):
            return True
        if isinstance(node, Tag) and any(not is_layout_whitespace(str(t)) for t in _text_nodes(node)):
            return True
    return False


def _is_layout(node) -> bool:
    return not is_text(node) or is_layout_whitespace(str(node))


def _wrap_group(tree: BeautifulSoup, group: List) -> None:
    if not _has_content(group):
        return
    # layout whitespace and comments at either end stay outside the paragraph
    while _is_layout(group[0]) and isinstance(group[0], NavigableString):
        group = group[1:]
    while _is_layout(group[-1]) and isinstance(group[-1], NavigableString):
        group = group[:-1]
    paragraph = tree.new_tag("p")
    group[0].insert_before(paragraph)
    for node in group:
        paragraph.append(node.extract())


def _wrap_children(tree: BeautifulSoup, parent: Tag) -> None:
    group: List = []
    for child in list(parent.children):
        if _is_inline(child):
            group.append(child)
            continue
        _wrap_group(tree, group)
        group = []
        if isinstance(child, Tag) and child.name not in BLOCK_TAGS and child.name not in SKIP_TAGS:
            _wrap_children(tree, child)
    _wrap_group(tree, group)


def wrap_loose_text(tree: BeautifulSoup) -> None:
    """Wrap text lying outside every block container in `p` elements.

    Such text exports as an implicit paragraph; once wrapped, it is an
    addressable block like any other. Text of a container that also holds
    nested containers (e.g. an `li` around a sub-list) is left alone, since a
    `p` there would change the exported block kind.
    """
    _wrap_children(tree, tree)


def _block(tree: Tag, index: int) -> Tag:
    blocks = addressable_blocks(tree)
    if not 0 <= index < len(blocks):
        raise ValueError(f"Block index {index} is out of range (document has {len(blocks)} blocks).")
    return blocks[index]


def _resolve(tree: Tag, selection: Selection) -> Tuple[Tag, int, int]:
    block = _block(tree, selection.block)
    length = sum(len(node) for node in _text_nodes(block))
    end = length if selection.end is None else selection.end
    if not 0 <= selection.start <= end <= length:
        raise ValueError(f"Selection [{selection.start}, {selection.end}) is outside block text of length {length}.")
    return block, selection.start, end


def _split_text(block: Tag, start: int, end: int) -> List[NavigableString]:
    """Split text nodes at `start`/`end` and return the nodes covering the range."""
    selected: List[NavigableString] = []
    offset = 0
    for node in _text_nodes(block):
        text = str(node)
        node_start, node_end = offset, offset + len(text)
        offset = node_end
        lo, hi = max(start, node_start), min(end, node_end)
        if lo >= hi:
            continue
        a, b = lo - node_start, hi - node_start
        if a == 0 and b == len(text):
            selected.append(node)
            continue
        middle = NavigableString(text[a:b])
        pieces = [NavigableString(text[:a]) if a else None, middle, NavigableString(text[b:]) if b < len(text) else None]
        node.replace_with(*[p for p in pieces if p is not None])
        selected.append(middle)
    return selected


def _shallow_copy(tree: BeautifulSoup, tag: Tag) -> Tag:
    attrs = {k: list(v) if isinstance(v, list) else v for k, v in tag.attrs.items()}
    return tree.new_tag(tag.name, attrs=attrs)


def _isolate(tree: BeautifulSoup, node, ancestor: Tag) -> None:
    """Split every element from `node` up to `ancestor` so `ancestor` holds only node's branch."""
    child = node
    while child is not ancestor:
        parent = child.parent
        before = list(child.previous_siblings)[::-1]
        after = list(child.next_siblings)
        if before:
            left = _shallow_copy(tree, parent)
            for sibling in before:
                left.append(sibling.extract())
            parent.insert_before(left)
        if after:
            right = _shallow_copy(tree, parent)
            for sibling in after:
                right.append(sibling.extract())
            parent.insert_after(right)
        child = parent


def _set_style(tag: Tag, decls: Dict[str, str]) -> None:
    if decls:
        tag["style"] = format_style_attribute(decls)
    elif "style" in tag.attrs:
        del tag["style"]


def _strip_declaration(tag: Tag, attr: _InlineAttribute) -> None:
    decls = parse_style_attribute(tag.get("style"))
    for prop in attr.properties:
        if prop not in decls:
            continue
        if prop.startswith("text-decoration"):
            rest = " ".join(t for t in decls[prop].split() if t.lower() != "underline")
            if rest:
                decls[prop] = rest
                continue
        del decls[prop]
    _set_style(tag, decls)
    if tag.name in attr.tags:
        if tag.attrs:
            tag.name = "span"
        else:
            tag.unwrap()
    elif tag.name == "span" and not tag.attrs:
        tag.unwrap()


def _push_down(tree: BeautifulSoup, block: Tag, attr: _InlineAttribute) -> None:
    """Move a block-level declaration onto a span wrapping the block's content."""
    decls = parse_style_attribute(block.get("style"))
    moved = {prop: decls[prop] for prop in attr.properties if prop in decls}
    wrapper = tree.new_tag("span", attrs={"style": format_style_attribute(moved)})
    for child in list(block.contents):
        wrapper.append(child.extract())
    block.append(wrapper)
    for prop in moved:
        del decls[prop]
    _set_style(block, decls)


def _declaring_ancestor(node, block: Tag, attr: _InlineAttribute) -> Optional[Tag]:
    for ancestor in node.parents:
        if ancestor is block:
            return None
        if attr.declares(ancestor):
            return ancestor
    return None


def _has_attribute(node, block: Tag, attr: _InlineAttribute) -> bool:
    return attr.declares(block) or _declaring_ancestor(node, block, attr) is not None


def _toggle(tree: BeautifulSoup, selection: Selection, name: str) -> None:
    attr = _ATTRIBUTES[name]
    block, start, end = _resolve(tree, selection)
    nodes = _split_text(block, start, end)
    if not nodes:
        return
    if not all(_has_attribute(node, block, attr) for node in nodes):
        for node in nodes:
            if not _has_attribute(node, block, attr):
                node.wrap(tree.new_tag(attr.wrap_tag))
        return
    if attr.declares(block):
        _push_down(tree, block, attr)
    for node in nodes:
        ancestor = _declaring_ancestor(node, block, attr)
        while ancestor is not None:
            _isolate(tree, node, ancestor)
            _strip_declaration(ancestor, attr)
            ancestor = _declaring_ancestor(node, block, attr)


def toggle_bold(tree: BeautifulSoup, selection: Selection) -> None:
    _toggle(tree, selection, "bold")


def toggle_italic(tree: BeautifulSoup, selection: Selection) -> None:
    _toggle(tree, selection, "italic")


def toggle_underline(tree: BeautifulSoup, selection: Selection) -> None:
    _toggle(tree, selection, "underline")


def _set_inline_property(tree: BeautifulSoup, selection: Selection, prop: str, value: str) -> None:
    block, start, end = _resolve(tree, selection)
    for node in _split_text(block, start, end):
        parent = node.parent
        if parent is not block and parent.name == "span" and len(parent.contents) == 1:
            decls = parse_style_attribute(parent.get("style"))
            decls[prop] = value
            _set_style(parent, decls)
        else:
            node.wrap(tree.new_tag("span", attrs={"style": f"{prop}: {value}"}))


def set_font_size(tree: BeautifulSoup, selection: Selection, size_pt: float) -> None:
    if isinstance(size_pt, bool) or not isinstance(size_pt, (int, float)) or size_pt <= 0:
        raise ValueError(f"Font size must be a positive number of points, got {size_pt!r}.")
    _set_inline_property(tree, selection, "font-size", f"{size_pt:g}pt")


def set_font_family(tree: BeautifulSoup, selection: Selection, family: str) -> None:
    if not family or not family.strip():
        raise ValueError("Font family must be a non-empty name.")
    _set_inline_property(tree, selection, "font-family", family.strip())


def set_alignment(tree: BeautifulSoup, block_index: int, alignment: Union[Alignment, str]) -> None:
    """Align a whole block; inner text-align declarations are removed."""
    try:
        value = Alignment(alignment)
    except ValueError:
        allowed = ", ".join(a.value for a in Alignment)
        raise ValueError(f"Unknown alignment '{alignment}'. Allowed values: {allowed}.")
    block = _block(tree, block_index)
    for inner in block.find_all(style=True):
        decls = parse_style_attribute(inner.get("style"))
        if decls.pop("text-align", None) is not None:
            _set_style(inner, decls)
    decls = parse_style_attribute(block.get("style"))
    decls.pop("text-align", None)
    if value is not Alignment.UNSET:
        decls["text-align"] = value.value
    _set_style(block, decls)


def _enclosing_list(block: Tag) -> Optional[Tag]:
    return block.find_parent(list(LIST_TAGS))


def _lift_out_of_list(tree: BeautifulSoup, item: Tag) -> None:
    lst = _enclosing_list(item)
    if lst is None:
        return
    _isolate(tree, item, lst)
    lst.unwrap()


def _sibling_tag(tag: Tag, forward: bool) -> Optional[Tag]:
    siblings = tag.next_siblings if forward else tag.previous_siblings
    for sibling in siblings:
        if is_text(sibling) and not sibling.strip():
            continue
        return sibling if isinstance(sibling, Tag) else None
    return None


def _join_adjacent_lists(lst: Tag) -> None:
    previous = _sibling_tag(lst, forward=False)
    if previous is not None and previous.name == lst.name:
        for child in list(lst.contents):
            previous.append(child.extract())
        lst.decompose()
        lst = previous
    following = _sibling_tag(lst, forward=True)
    if following is not None and following.name == lst.name:
        for child in list(following.contents):
            lst.append(child.extract())
        following.decompose()


def set_heading_level(tree: BeautifulSoup, block_index: int, level: int) -> None:
    """Turn a block into a paragraph (0) or a level 1/2 heading."""
    if level not in _HEADING_TAGS:
        raise ValueError(f"Heading level must be one of {sorted(_HEADING_TAGS)}, got {level!r}.")
    block = _block(tree, block_index)
    if block.name == "li":
        _lift_out_of_list(tree, block)
    block.name = _HEADING_TAGS[level]


def insert_list(tree: BeautifulSoup, block_index: int, ordered: bool = False) -> None:
    """Toggle list membership of a block, like a bullet/numbered list button.

    A block already in a list of the requested kind leaves it as a paragraph;
    one in the other kind of list switches kind; any other block becomes an
    item, joining an adjacent list of the same kind.
    """
    list_name = "ol" if ordered else "ul"
    block = _block(tree, block_index)
    lst = _enclosing_list(block) if block.name == "li" else None
    if lst is not None and lst.name == list_name:
        _lift_out_of_list(tree, block)
        block.name = "p"
        return
    if lst is not None:
        _isolate(tree, block, lst)
        lst.name = list_name
        _join_adjacent_lists(lst)
        return
    block.name = "li"
    new_list = tree.new_tag(list_name)
    block.wrap(new_list)
    _join_adjacent_lists(new_list)
