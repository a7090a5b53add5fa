"""
Core module - shared protocols, types and errors for the entire system.

This module provides the foundational contracts that enable:
- Dependency injection throughout the codebase
- Easy testing with mock implementations
- Clear separation of concerns

USAGE:
------
from doc_search.core import DocumentStore, EmbeddingProvider

class MyDocumentStore:
    '''Implements DocumentStore protocol.'''
    ...
"""

from doc_search.core.errors import (
    DocSearchError,
    ValidationError,
    UnsupportedFormatError,
    ExtractionError,
    ProviderError,
    StorageError,
    NotFoundError,
)
from doc_search.core.protocols import (
    # Protocols
    EmbeddingProvider,
    DocumentStore,
    TextExtractor,
    BlobStore,
    # Data classes
    DocumentResult,
)

__all__ = [
    # Errors
    "DocSearchError",
    "ValidationError",
    "UnsupportedFormatError",
    "ExtractionError",
    "ProviderError",
    "StorageError",
    "NotFoundError",
    # Protocols
    "EmbeddingProvider",
    "DocumentStore",
    "TextExtractor",
    "BlobStore",
    # Data classes
    "DocumentResult",
]
