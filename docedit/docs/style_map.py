from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from docedit.config import EditorConfig
from docedit.model import BlockKind

# Built-in list paragraph styles ("List Bullet 2" etc. included)
_LIST_STYLE_PREFIXES = (
    ("list bullet", BlockKind.BULLET_LIST_ITEM),
    ("list number", BlockKind.NUMBERED_LIST_ITEM),
)


def _normalize(name: Optional[str]) -> str:
    return " ".join((name or "").split()).lower()


class StyleMap:
    """Ordered table of (paragraph style name → BlockKind) pairs used on import.

    Names match case-insensitively. The first matching entry wins, so a
    configuration can shadow a later entry by listing its own earlier.
    """

    def __init__(self, entries: Iterable[Tuple[str, BlockKind]]) -> None:
        self._entries: List[Tuple[str, BlockKind]] = [(_normalize(name), kind) for name, kind in entries]

    @classmethod
    def from_config(cls, config: EditorConfig) -> "StyleMap":
        return cls(config.style_map)

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, style_name: Optional[str]) -> Optional[BlockKind]:
        key = _normalize(style_name)
        if not key:
            return None
        for name, kind in self._entries:
            if name == key:
                return kind
        return None


def list_kind_for_style(style_name: Optional[str]) -> Optional[BlockKind]:
    key = _normalize(style_name)
    for prefix, kind in _LIST_STYLE_PREFIXES:
        if key.startswith(prefix):
            return kind
    return None
