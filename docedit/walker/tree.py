"""Walk a markup tree into a DocumentModel.

The walk is depth-first and left-to-right. Styles are passed down as explicit
parameters: every element computes its children's StyleState from its own and
never consults a shared "current style". The input tree is only read.

Block policy:
- A container (p, div, h1, h2, li) starts from the default style, not from the
  styles around it, so inline formatting never leaks across blocks.
- Text outside any container opens an implicit paragraph. Layout whitespace
  (spaces, tabs, newlines) between elements is not content: it never opens
  an implicit paragraph and never makes a split-off segment worth emitting.
- `br` emits LINE_BREAK. Newlines in text nodes are kept as text.
- A container nested inside another closes the outer block first; outer
  content after it continues as a new block of the outer kind. Empty
  segments of a container that holds nested containers are not emitted, while
  a container without nested containers is always emitted, empty or not.
- Nested lists are flattened: each li becomes a level-zero item of its own
  list's kind.
- Unrecognized elements are transparent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from bs4 import BeautifulSoup, Tag

from docedit.config import EditorConfig
from docedit.logger import get_logger
from docedit.model import LINE_BREAK, Alignment, Block, BlockKind, DocumentModel, StyleState, default_style, merge

from .markup import INLINE_TAGS, SKIP_TAGS, block_kind, declared_style, is_layout_whitespace, is_text, parse_markup
from .runs import RunBuilder

LOGGER = get_logger(__name__)


@dataclass
class _Frame:
    kind: BlockKind
    alignment: Alignment = Alignment.UNSET
    nested: bool = False


class _BlockCollector:
    """Per-walk accumulator: finished blocks, the run builder and open containers."""

    def __init__(self) -> None:
        self.blocks: List[Block] = []
        self.builder = RunBuilder()
        self._frames: List[_Frame] = []
        self._implicit_open = False
        self.flattened_lists = False

    def text(self, text: str, style: StyleState) -> None:
        if not self._frames and not self._implicit_open:
            if is_layout_whitespace(text):
                return
            self._implicit_open = True
        self.builder.add(text, style)

    def enter(self, kind: BlockKind, alignment: Alignment) -> None:
        if self._frames:
            outer = self._frames[-1]
            outer.nested = True
            self._close(outer.kind, outer.alignment, keep_empty=False)
        elif self._implicit_open:
            self._close(BlockKind.PARAGRAPH, Alignment.UNSET, keep_empty=False)
            self._implicit_open = False
        self._frames.append(_Frame(kind, alignment))

    def leave(self) -> None:
        frame = self._frames.pop()
        self._close(frame.kind, frame.alignment, keep_empty=not frame.nested)

    def finish(self) -> List[Block]:
        if self._implicit_open:
            self._close(BlockKind.PARAGRAPH, Alignment.UNSET, keep_empty=False)
            self._implicit_open = False
        return self.blocks

    def _close(self, kind: BlockKind, alignment: Alignment, keep_empty: bool) -> None:
        runs = self.builder.finish()
        if not keep_empty and is_layout_whitespace("".join(r.text for r in runs)):
            return
        self.blocks.append(Block(kind=kind, runs=runs, alignment=alignment))


class TreeWalker:
    """Read-only walker from a markup tree to a DocumentModel."""

    def __init__(self, config: Optional[EditorConfig] = None) -> None:
        self._config = config or EditorConfig()
        self._default = default_style(self._config.default_font_size_half_points)

    def walk(self, tree: Union[str, bytes, Tag]) -> DocumentModel:
        """Build a DocumentModel from `tree`.

        Doxygen:
        - @param tree: A BeautifulSoup document, any Tag, or markup text.
        - @return: Blocks in document order; empty blocks are kept.
        """
        root = tree if isinstance(tree, Tag) else parse_markup(tree)
        collector = _BlockCollector()
        if isinstance(root, BeautifulSoup) or block_kind(root) is None:
            self._visit_children(root, self._default, None, collector)
        else:
            self._visit(root, self._default, None, collector)
        blocks = collector.finish()
        LOGGER.debug("Walked markup into %d blocks", len(blocks))
        return DocumentModel(blocks=blocks)

    def _visit_children(self, tag: Tag, style: StyleState, preset: Optional[int], collector: _BlockCollector) -> None:
        for child in tag.children:
            self._visit(child, style, preset, collector)

    def _visit(self, node, style: StyleState, preset: Optional[int], collector: _BlockCollector) -> None:
        if is_text(node):
            collector.text(str(node), style)
            return
        if not isinstance(node, Tag) or node.name in SKIP_TAGS:
            return
        if node.name == "br":
            collector.text(LINE_BREAK, style)
            return

        kind = block_kind(node)
        if kind is not None:
            self._visit_block(node, kind, collector)
            return

        local = declared_style(node)
        if local.is_empty() and node.name not in INLINE_TAGS:
            LOGGER.debug("Passing through unrecognized element <%s>", node.name)
        self._visit_children(node, merge(style, local).with_font_size(preset), preset, collector)

    def _visit_block(self, tag: Tag, kind: BlockKind, collector: _BlockCollector) -> None:
        if kind.is_list_item and tag.find_parent("li") is not None and not collector.flattened_lists:
            collector.flattened_lists = True
            LOGGER.warning("Nested list items are flattened to level zero")
        preset = self._config.heading_size_half_points(kind)
        block_style = merge(self._default, declared_style(tag)).with_font_size(preset)
        collector.enter(kind, block_style.alignment)
        self._visit_children(tag, block_style, preset, collector)
        collector.leave()


def walk(tree: Union[str, bytes, Tag], config: Optional[EditorConfig] = None) -> DocumentModel:
    return TreeWalker(config).walk(tree)
