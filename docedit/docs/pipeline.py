"""Import/export pipeline: DOCX bytes ⇄ markup ⇄ DocumentModel.

Background work only ever sees immutable values: import receives bytes and
returns a markup string, export receives a markup string snapshot and returns
bytes. The live editable tree stays with the caller.
"""

from __future__ import annotations

import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Optional

from docedit.config import EditorConfig
from docedit.errors import ExportEncodeError, ImportDecodeError
from docedit.logger import get_logger
from docedit.model import DocumentModel
from docedit.walker import parse_markup, walk

from .docx_io import read_docx, write_docx

LOGGER = get_logger(__name__)


def _detect_type(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    if ext in (".docx",):
        return "docx"
    if ext in (".html", ".htm"):
        return "html"
    return "unknown"


def markup_to_model(markup: str, config: Optional[EditorConfig] = None) -> DocumentModel:
    """Walk a serialized markup snapshot into a fresh DocumentModel."""
    return walk(parse_markup(markup), config)


def import_document(data: bytes, config: Optional[EditorConfig] = None) -> str:
    """Decode DOCX bytes into editor markup.

    Doxygen:
    - @param data: DOCX file contents.
    - @param config: Editor configuration (style map, stylesheet defaults).
    - @return: Markup string for the editable tree.
    - @throws ImportDecodeError: If the bytes are empty or not a readable DOCX.
    """
    if not data:
        raise ImportDecodeError("No document data to import.")
    try:
        markup = read_docx(bytes(data), config)
    except ImportDecodeError:
        LOGGER.exception("Import failed")
        raise
    LOGGER.info("Imported %d bytes into %d characters of markup", len(data), len(markup))
    return markup


def export_document(markup: str, config: Optional[EditorConfig] = None) -> bytes:
    """Walk a markup snapshot and serialize the resulting model as DOCX bytes.

    Doxygen:
    - @param markup: Serialized snapshot of the editable tree.
    - @param config: Editor configuration (heading presets, default font).
    - @return: DOCX file contents.
    - @throws ExportEncodeError: If the document cannot be assembled.
    """
    model = markup_to_model(markup, config)
    try:
        data = write_docx(model, config)
    except ExportEncodeError:
        LOGGER.exception("Export failed")
        raise
    LOGGER.info("Exported %d blocks into %d bytes", len(model), len(data))
    return data


def output_name(file_name: Optional[str], config: Optional[EditorConfig] = None) -> str:
    """Name of the saved document: the original name with a prefix, or a default."""
    config = config or EditorConfig()
    base = os.path.basename(file_name) if file_name else ""
    if not base:
        return config.default_output_name
    return f"{config.output_prefix}{base}"


class DocumentTasks:
    """Single-worker background executor for import and export.

    One worker keeps operations in submission order; none of them can touch
    the editable tree because they only receive copies.
    """

    def __init__(self, config: Optional[EditorConfig] = None) -> None:
        self._config = config or EditorConfig()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="docedit")

    def submit_import(self, data: bytes) -> "Future[str]":
        return self._executor.submit(import_document, bytes(data), self._config)

    def submit_export(self, markup: str) -> "Future[bytes]":
        if not isinstance(markup, str):
            raise TypeError("Export takes a serialized markup snapshot (str), not a live tree.")
        return self._executor.submit(export_document, markup, self._config)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "DocumentTasks":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()


def process_file(
    file_path: str,
    out_path: str | None = None,
    html_path: str | None = None,
    config: Optional[EditorConfig] = None,
) -> Dict[str, str]:
    """File-level pipeline: DOCX → markup → DOCX, or HTML markup → DOCX.

    - DOCX input is imported, optionally written as HTML, then re-exported.
    - HTML input is exported directly.
    - The DOCX goes next to the input as `output_name(...)` unless `out_path` is given.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    doc_type = _detect_type(file_path)
    if doc_type == "docx":
        with open(file_path, "rb") as f:
            markup = import_document(f.read(), config)
    elif doc_type == "html":
        with open(file_path, "r", encoding="utf-8") as f:
            markup = f.read()
    else:
        raise ValueError(f"Unsupported file type: {file_path}")

    out: Dict[str, str] = {}
    if html_path:
        with open(html_path, "w", encoding="utf-8") as f:
            f.write(markup)
        out["html"] = html_path

    data = export_document(markup, config)
    if out_path is None:
        name = os.path.splitext(os.path.basename(file_path))[0] + ".docx"
        out_path = os.path.join(os.path.dirname(file_path), output_name(name, config))
    with open(out_path, "wb") as f:
        f.write(data)
    out["docx"] = out_path
    return out
