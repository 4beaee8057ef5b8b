from __future__ import annotations

from typing import List, Optional, Tuple, Union

from docedit.config import EditorConfig
from docedit.docs.pipeline import DocumentTasks, export_document, import_document, markup_to_model, output_name
from docedit.logger import get_logger
from docedit.model import Alignment, BlockKind, DocumentModel
from docedit.walker import block_kind, parse_markup

from . import commands
from .commands import Selection

LOGGER = get_logger(__name__)


class EditorSession:
    """Owner of the live editable markup tree.

    Only this object mutates the tree. Import and export exchange immutable
    values with the pipeline (bytes in, markup string out; markup snapshot
    in, bytes out), so a failed operation leaves the tree untouched.
    """

    def __init__(self, config: Optional[EditorConfig] = None, markup: str = "") -> None:
        self._config = config or EditorConfig()
        self._tree = parse_markup(markup)
        commands.wrap_loose_text(self._tree)
        self.file_name: Optional[str] = None

    @property
    def markup(self) -> str:
        return str(self._tree)

    def blocks(self) -> List[Tuple[BlockKind, str]]:
        """Kind and text of every block addressable by a Selection, in order.

        Loose text is wrapped in paragraphs on load, so it is listed here. Text
        that shares a container with nested containers (the "outer" part of an
        `li` holding a sub-list) exports as its own block but is not listed.
        """
        return [
            (block_kind(tag), commands.block_text(tag))
            for tag in commands.addressable_blocks(self._tree)
        ]

    def model(self) -> DocumentModel:
        return markup_to_model(self.markup, self._config)

    def load(self, data: bytes, file_name: Optional[str] = None, tasks: Optional[DocumentTasks] = None) -> None:
        """Import DOCX bytes and replace the tree; on ImportDecodeError nothing changes."""
        if tasks is not None:
            markup = tasks.submit_import(data).result()
        else:
            markup = import_document(data, self._config)
        tree = parse_markup(markup)
        commands.wrap_loose_text(tree)
        self._tree = tree
        self.file_name = file_name
        LOGGER.info("Loaded %s", file_name or "untitled document")

    def save(self, tasks: Optional[DocumentTasks] = None) -> Tuple[str, bytes]:
        """Export the current tree; returns (download name, DOCX bytes)."""
        snapshot = self.markup
        if tasks is not None:
            data = tasks.submit_export(snapshot).result()
        else:
            data = export_document(snapshot, self._config)
        return output_name(self.file_name, self._config), data

    def toggle_bold(self, selection: Selection) -> None:
        commands.toggle_bold(self._tree, selection)

    def toggle_italic(self, selection: Selection) -> None:
        commands.toggle_italic(self._tree, selection)

    def toggle_underline(self, selection: Selection) -> None:
        commands.toggle_underline(self._tree, selection)

    def set_font_size(self, selection: Selection, size_pt: float) -> None:
        commands.set_font_size(self._tree, selection, size_pt)

    def set_font_family(self, selection: Selection, family: str) -> None:
        commands.set_font_family(self._tree, selection, family)

    def set_alignment(self, block: int, alignment: Union[Alignment, str]) -> None:
        commands.set_alignment(self._tree, block, alignment)

    def set_heading_level(self, block: int, level: int) -> None:
        commands.set_heading_level(self._tree, block, level)

    def insert_list(self, block: int, ordered: bool = False) -> None:
        commands.insert_list(self._tree, block, ordered)
