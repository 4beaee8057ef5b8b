"""Intermediate document representation produced by the tree walker.

A DocumentModel is derived, never persisted: every export builds a fresh one
from the current markup snapshot and discards it once serialized.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List

from .style import Alignment, StyleState

# Hard line break inside a run (from `br`). Newlines in source text are
# ordinary whitespace and stay as they are.
LINE_BREAK = "\u2028"


class BlockKind(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING1 = "heading1"
    HEADING2 = "heading2"
    BULLET_LIST_ITEM = "bulletListItem"
    NUMBERED_LIST_ITEM = "numberedListItem"

    @property
    def is_heading(self) -> bool:
        return self in (BlockKind.HEADING1, BlockKind.HEADING2)

    @property
    def is_list_item(self) -> bool:
        return self in (BlockKind.BULLET_LIST_ITEM, BlockKind.NUMBERED_LIST_ITEM)


@dataclass
class Run:
    """Maximal span of text sharing one style snapshot."""

    text: str
    style: StyleState = field(default_factory=StyleState)

    def to_dict(self) -> dict:
        return {"text": self.text, "style": self.style.to_dict()}


@dataclass
class Block:
    """Paragraph, heading or list item. `kind` is fixed at creation.

    `alignment` is the container's own alignment. It still applies when the
    block has no runs.
    """

    kind: BlockKind
    runs: List[Run] = field(default_factory=list)
    alignment: Alignment = Alignment.UNSET

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "alignment": self.alignment.value,
            "runs": [r.to_dict() for r in self.runs],
        }


@dataclass
class DocumentModel:
    blocks: List[Block] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    @property
    def text(self) -> str:
        return "".join(b.text for b in self.blocks)

    def to_dict(self) -> dict:
        return {"blocks": [b.to_dict() for b in self.blocks]}
