"""Resolved text formatting and the cascade that produces it.

A StyleState is the full set of formatting attributes in effect at a point in
the markup tree. Children never mutate it: `merge` returns a new value built
from the parent's state and the child's locally declared StyleDelta.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"
    UNSET = "unset"


DEFAULT_FONT_SIZE_HALF_POINTS = 22


@dataclass(frozen=True)
class StyleState:
    """Immutable snapshot of active formatting attributes."""

    bold: bool = False
    italic: bool = False
    underline: bool = False
    font_size_half_points: int = DEFAULT_FONT_SIZE_HALF_POINTS
    alignment: Alignment = Alignment.UNSET

    @property
    def font_size_pt(self) -> float:
        return self.font_size_half_points / 2

    def with_font_size(self, half_points: Optional[int]) -> "StyleState":
        """Return a copy with the size forced to `half_points` (no-op for None)."""
        if half_points is None or half_points == self.font_size_half_points:
            return self
        return replace(self, font_size_half_points=half_points)

    def to_dict(self) -> dict:
        return {
            "bold": self.bold,
            "italic": self.italic,
            "underline": self.underline,
            "font_size_half_points": self.font_size_half_points,
            "alignment": self.alignment.value,
        }


@dataclass(frozen=True)
class StyleDelta:
    """Attributes declared locally on one node; None means not declared."""

    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    font_size_half_points: Optional[int] = None
    alignment: Optional[Alignment] = None

    def is_empty(self) -> bool:
        return self == EMPTY_DELTA


EMPTY_DELTA = StyleDelta()


def default_style(font_size_half_points: int = DEFAULT_FONT_SIZE_HALF_POINTS) -> StyleState:
    return StyleState(font_size_half_points=font_size_half_points)


def merge(parent: StyleState, local: StyleDelta) -> StyleState:
    """Compose a child's effective style from its parent and local declarations.

    Booleans: a local True wins, False or absent keeps the parent value. Size
    and alignment: a declared value replaces the parent's, absent keeps it.

    Doxygen:
    - @param parent: Effective style of the enclosing node.
    - @param local: Attributes declared on the node itself.
    - @return: New StyleState; `parent` is never modified.
    """
    if local.is_empty():
        return parent
    return StyleState(
        bold=parent.bold or local.bold is True,
        italic=parent.italic or local.italic is True,
        underline=parent.underline or local.underline is True,
        font_size_half_points=local.font_size_half_points
        if local.font_size_half_points is not None
        else parent.font_size_half_points,
        alignment=local.alignment if local.alignment is not None else parent.alignment,
    )


__all__ = [
    "Alignment",
    "StyleState",
    "StyleDelta",
    "EMPTY_DELTA",
    "DEFAULT_FONT_SIZE_HALF_POINTS",
    "default_style",
    "merge",
]
