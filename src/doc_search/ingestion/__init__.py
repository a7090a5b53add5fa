"""
Ingestion module - turning typed text and uploads into stored documents.

- IngestionPipeline: embed + insert, shared by manual and file-derived documents
- DefaultTextExtractor: .pdf / .docx text extraction
- LocalBlobStore: filesystem storage for uploaded originals
"""

from doc_search.ingestion.pipeline import IngestionPipeline
from doc_search.ingestion.extractors import (
    DefaultTextExtractor,
    SUPPORTED_EXTENSIONS,
    ensure_supported,
    file_extension,
)
from doc_search.ingestion.blobs import LocalBlobStore

__all__ = [
    "IngestionPipeline",
    "DefaultTextExtractor",
    "SUPPORTED_EXTENSIONS",
    "ensure_supported",
    "file_extension",
    "LocalBlobStore",
]
