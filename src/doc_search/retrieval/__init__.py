"""
Retrieval module - document persistence and search.

This module provides:
- Document: The document model
- cosine_similarity(): Degenerate-safe vector scoring
- DocumentStoreConfig: Configuration for stores
- PgDocumentStore: PostgreSQL production store
- InMemoryDocumentStore: Testing/development store
- get_document_store(): Factory function
- SearchEngine: Keyword and semantic search

ARCHITECTURE:
-------------
1. Protocol defines the contract (in core.protocols)
2. Multiple implementations (PgDocumentStore, InMemoryDocumentStore)
3. Factory function for instantiation
4. SearchEngine depends only on the protocols
"""

from doc_search.retrieval.document import Document, empty_embedding
from doc_search.retrieval.similarity import cosine_similarity, vector_norm
from doc_search.retrieval.store import (
    DocumentStoreConfig,
    PgDocumentStore,
    InMemoryDocumentStore,
    get_document_store,
)
from doc_search.retrieval.search import SearchEngine, DEFAULT_SEMANTIC_LIMIT

__all__ = [
    # Document
    "Document",
    "empty_embedding",
    # Vector math
    "cosine_similarity",
    "vector_norm",
    # Config
    "DocumentStoreConfig",
    # Implementations
    "PgDocumentStore",
    "InMemoryDocumentStore",
    # Factory
    "get_document_store",
    # Search
    "SearchEngine",
    "DEFAULT_SEMANTIC_LIMIT",
]
