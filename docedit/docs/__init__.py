"""DOCX document layer.

Exposes:
- Importer: read_docx (DOCX bytes → editor markup) with the StyleMap table
- Serializer: write_docx (DocumentModel → DOCX bytes)
- Pipeline: import_document, export_document, output_name, DocumentTasks, process_file
"""

from .docx_io import read_docx, write_docx
from .style_map import StyleMap
from .pipeline import (
    DocumentTasks,
    export_document,
    import_document,
    markup_to_model,
    output_name,
    process_file,
)

__all__ = [
    "read_docx",
    "write_docx",
    "StyleMap",
    "DocumentTasks",
    "export_document",
    "import_document",
    "markup_to_model",
    "output_name",
    "process_file",
]
