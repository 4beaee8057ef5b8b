"""Format-independent document model: styles, runs and blocks."""

from .style import (
    Alignment,
    StyleState,
    StyleDelta,
    EMPTY_DELTA,
    DEFAULT_FONT_SIZE_HALF_POINTS,
    default_style,
    merge,
)
from .document import LINE_BREAK, Block, BlockKind, DocumentModel, Run

__all__ = [
    "Alignment",
    "StyleState",
    "StyleDelta",
    "EMPTY_DELTA",
    "DEFAULT_FONT_SIZE_HALF_POINTS",
    "default_style",
    "merge",
    "LINE_BREAK",
    "Block",
    "BlockKind",
    "DocumentModel",
    "Run",
]
