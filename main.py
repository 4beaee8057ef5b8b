"""
Entry point and compatibility facade for the DOCX → markup → DOCX pipeline.

This module exposes a stable API and a CLI.

Packages:
- docedit.model: StyleState, Run, Block, DocumentModel
- docedit.walker: markup helpers, RunBuilder and TreeWalker
- docedit.docs: DOCX import/export (`read_docx`, `write_docx`) and pipeline helpers
- docedit.editor: editable markup session and formatting commands
"""

from __future__ import annotations

import json
import sys

from docedit.config import CONFIG_PATH, load_config
from docedit.errors import DocEditError, ExportEncodeError, ImportDecodeError

# Document model
from docedit.model import (
    Alignment,
    Block,
    BlockKind,
    DocumentModel,
    Run,
    StyleState,
    merge,
)

# Markup walking
from docedit.walker import RunBuilder, TreeWalker, walk

# DOCX import/export
from docedit.docs import (
    DocumentTasks,
    export_document,
    import_document,
    markup_to_model,
    output_name,
    process_file,
    read_docx,
    write_docx,
)

# Editing
from docedit.editor import EditorSession, Selection

__all__ = [
    # config/errors
    "CONFIG_PATH",
    "load_config",
    "DocEditError",
    "ImportDecodeError",
    "ExportEncodeError",
    # model
    "Alignment",
    "Block",
    "BlockKind",
    "DocumentModel",
    "Run",
    "StyleState",
    "merge",
    # walker
    "RunBuilder",
    "TreeWalker",
    "walk",
    # documents
    "DocumentTasks",
    "export_document",
    "import_document",
    "markup_to_model",
    "output_name",
    "process_file",
    "read_docx",
    "write_docx",
    # editing
    "EditorSession",
    "Selection",
]


def _cli() -> None:
    """CLI for converting documents through the editor model.

    --file / -f: Path to input document (docx|html)
    --out / -o: Output DOCX path (default: edited-<name>.docx next to the input)
    --html: Also write the imported markup to this path
    --dump: Print the DocumentModel as JSON instead of writing a DOCX
    --config: Path to an editor.json configuration file
    """
    import argparse

    parser = argparse.ArgumentParser(description="Convert DOCX documents through the editable markup model.")
    parser.add_argument("--file", "-f", type=str, required=True, help="Path to input document (docx|html)")
    parser.add_argument("--out", "-o", type=str, help="Output DOCX path (default: edited-<name>.docx next to the input)")
    parser.add_argument("--html", type=str, help="Also write the imported markup to this path")
    parser.add_argument("--dump", action="store_true", help="Print the document model as JSON")
    parser.add_argument("--config", type=str, default=CONFIG_PATH, help="Path to editor.json (default: config/editor.json)")

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(str(e))
        raise SystemExit(2)

    try:
        if args.dump:
            if args.file.lower().endswith(".docx"):
                with open(args.file, "rb") as f:
                    markup = import_document(f.read(), config)
            else:
                with open(args.file, "r", encoding="utf-8") as f:
                    markup = f.read()
            json.dump(markup_to_model(markup, config).to_dict(), sys.stdout, ensure_ascii=False, indent=2)
            print()
            return
        result = process_file(args.file, out_path=args.out, html_path=args.html, config=config)
    except (DocEditError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        raise SystemExit(1)

    # Print produced paths
    for k, v in result.items():
        print(f"{k}: {v}")


if __name__ == "__main__":
    _cli()
