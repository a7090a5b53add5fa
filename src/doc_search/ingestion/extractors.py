"""
Text extraction for uploaded originals.

Only .pdf and .docx are accepted; anything else raises
UnsupportedFormatError before a single byte is parsed.
"""

from __future__ import annotations

import io
import logging
from pathlib import PurePath

import docx
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from doc_search.core.errors import ExtractionError, UnsupportedFormatError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = frozenset({".pdf", ".docx"})


def file_extension(filename: str) -> str:
    """Lower-cased extension including the dot ('' when there is none)."""
    return PurePath(filename).suffix.lower()


def ensure_supported(filename: str) -> str:
    """Return the extension of *filename* or raise UnsupportedFormatError."""
    ext = file_extension(filename)
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(ext)
    return ext


class DefaultTextExtractor:
    """pypdf for PDFs, python-docx for Word documents."""

    def extract(self, file_bytes: bytes, extension: str) -> str:
        ext = extension.lower()
        if not ext.startswith("."):
            ext = f".{ext}"
        if ext == ".pdf":
            return self._extract_pdf(file_bytes)
        if ext == ".docx":
            return self._extract_docx(file_bytes)
        raise UnsupportedFormatError(ext)

    def _extract_pdf(self, file_bytes: bytes) -> str:
        try:
            reader = PdfReader(io.BytesIO(file_bytes))
            parts = [page.extract_text() or "" for page in reader.pages]
        except (PyPdfError, ValueError, OSError) as e:
            logger.warning(f"PDF extraction failed: {e}")
            raise ExtractionError(f"Could not read PDF: {e}") from e
        return "\n".join(part for part in parts if part.strip())

    def _extract_docx(self, file_bytes: bytes) -> str:
        try:
            document = docx.Document(io.BytesIO(file_bytes))
        # python-docx surfaces corrupt archives as zipfile/KeyError/ValueError
        except Exception as e:
            logger.warning(f"DOCX extraction failed: {e}")
            raise ExtractionError(f"Could not read DOCX: {e}") from e
        return "\n".join(p.text for p in document.paragraphs if p.text.strip())
