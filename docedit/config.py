"""Editor configuration loaded from config/editor.json.

The file is optional: every key falls back to the built-in defaults below, so
a partial file only overrides what it names.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from docedit.logger import get_logger
from docedit.model.document import BlockKind

LOGGER = get_logger(__name__)

# Path to the JSON configuration file shipped next to the package
CONFIG_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "config", "editor.json")

_DEFAULT_CONFIG: Dict[str, Any] = {
    "default_font_family": "Calibri",
    "default_font_size_pt": 11,
    "heading_sizes_pt": {"1": 24, "2": 18},
    "style_map": [
        {"style": "Heading 1", "kind": "heading1"},
        {"style": "Heading 2", "kind": "heading2"},
    ],
    "output_prefix": "edited-",
    "default_output_name": "document.docx",
}

_HEADING_LEVELS = {
    BlockKind.HEADING1: 1,
    BlockKind.HEADING2: 2,
}


def _pt_to_half_points(value: float) -> int:
    return int(round(float(value) * 2))


@dataclass
class EditorConfig:
    default_font_family: str = "Calibri"
    default_font_size_pt: float = 11
    heading_sizes_pt: Dict[int, float] = field(default_factory=lambda: {1: 24, 2: 18})
    style_map: List[Tuple[str, BlockKind]] = field(
        default_factory=lambda: [("Heading 1", BlockKind.HEADING1), ("Heading 2", BlockKind.HEADING2)]
    )
    output_prefix: str = "edited-"
    default_output_name: str = "document.docx"

    @property
    def default_font_size_half_points(self) -> int:
        return _pt_to_half_points(self.default_font_size_pt)

    def heading_size_half_points(self, kind: BlockKind) -> Optional[int]:
        """Return the preset size for a heading kind, or None for other kinds."""
        level = _HEADING_LEVELS.get(kind)
        if level is None or level not in self.heading_sizes_pt:
            return None
        return _pt_to_half_points(self.heading_sizes_pt[level])


def _positive_number(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"Config value '{key}' must be a positive number, got {value!r}.")
    return float(value)


def config_from_dict(data: Dict[str, Any]) -> EditorConfig:
    """Build an EditorConfig from a parsed JSON mapping, validating every field.

    Doxygen:
    - @param data: Mapping with any subset of the keys of `_DEFAULT_CONFIG`.
    - @return: Validated configuration.
    - @throws ValueError: If a value has the wrong type or an unknown block kind.
    """
    if not isinstance(data, dict):
        raise ValueError("Editor config must be a JSON object.")
    merged = dict(_DEFAULT_CONFIG)
    merged.update(data)

    family = merged["default_font_family"]
    if not isinstance(family, str) or not family.strip():
        raise ValueError("Config value 'default_font_family' must be a non-empty string.")

    headings: Dict[int, float] = {}
    raw_headings = merged["heading_sizes_pt"]
    if not isinstance(raw_headings, dict):
        raise ValueError("Config value 'heading_sizes_pt' must be an object keyed by level.")
    for level, size in raw_headings.items():
        try:
            level_num = int(level)
        except (TypeError, ValueError):
            raise ValueError(f"Heading level must be an integer, got {level!r}.")
        headings[level_num] = _positive_number(size, f"heading_sizes_pt.{level}")

    style_map: List[Tuple[str, BlockKind]] = []
    raw_map = merged["style_map"]
    if not isinstance(raw_map, list):
        raise ValueError("Config value 'style_map' must be a list.")
    for entry in raw_map:
        if not isinstance(entry, dict) or not entry.get("style") or not entry.get("kind"):
            raise ValueError(f"Style map entries need 'style' and 'kind', got {entry!r}.")
        try:
            kind = BlockKind(entry["kind"])
        except ValueError:
            allowed = ", ".join(k.value for k in BlockKind)
            raise ValueError(f"Unknown block kind '{entry['kind']}'. Allowed values: {allowed}.")
        style_map.append((str(entry["style"]), kind))

    return EditorConfig(
        default_font_family=family.strip(),
        default_font_size_pt=_positive_number(merged["default_font_size_pt"], "default_font_size_pt"),
        heading_sizes_pt=headings,
        style_map=style_map,
        output_prefix=str(merged["output_prefix"]),
        default_output_name=str(merged["default_output_name"]) or "document.docx",
    )


def load_config(path: str = CONFIG_PATH) -> EditorConfig:
    """Load the editor configuration, using defaults when the file is absent.

    Doxygen:
    - @param path: Absolute path to the JSON configuration file.
    - @return: Validated configuration.
    - @throws ValueError: If the file exists but is not valid JSON or fails validation.
    """
    if not os.path.exists(path):
        LOGGER.debug("No editor config at %s; using defaults", path)
        return EditorConfig()
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Editor config {path} is not valid JSON: {e}") from e
    return config_from_dict(data)


__all__ = [
    "CONFIG_PATH",
    "EditorConfig",
    "config_from_dict",
    "load_config",
]
