"""Errors surfaced by import and export operations.

Both are terminal for the operation in progress but never for the process:
callers report the message and the user may retry.
"""

from __future__ import annotations


class DocEditError(Exception):
    """Base class for conversion failures."""


class ImportDecodeError(DocEditError):
    """The input bytes are not a readable DOCX document."""


class ExportEncodeError(DocEditError):
    """Assembling the output DOCX document failed."""


__all__ = [
    "DocEditError",
    "ImportDecodeError",
    "ExportEncodeError",
]
