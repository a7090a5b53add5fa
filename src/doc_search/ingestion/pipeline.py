"""
Ingestion pipeline: text → EmbeddingProvider → DocumentStore.insert.

Embedding failures are absorbed (the provider hands back an empty vector
and the document is stored anyway). Store failures propagate as
StorageError and nothing is persisted. Required-field validation happens
at the service boundary, before this pipeline is called.
"""

from __future__ import annotations

import logging

from doc_search.core.protocols import DocumentStore, EmbeddingProvider
from doc_search.observability.attributes import (
    INGEST_DOCUMENT_ID,
    INGEST_HAS_EMBEDDING,
    ingest_attributes,
)
from doc_search.observability.tracer import get_tracer
from doc_search.retrieval.document import Document

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """
    Creates documents. Invoked once per document.

    Dependencies are INJECTED, not created internally.
    """

    def __init__(self, embeddings: EmbeddingProvider, store: DocumentStore):
        self._embeddings = embeddings
        self._store = store

    def ingest_manual(self, title: str, content: str) -> Document:
        """Store a typed-in document."""
        return self._ingest(title=title, content=content, file_path=None, source="manual")

    def ingest_file(self, text: str, filename: str, file_path: str | None = None) -> Document:
        """Store text extracted from an upload, titled with the original filename."""
        return self._ingest(title=filename, content=text, file_path=file_path, source="file")

    def _ingest(self, title: str, content: str, file_path: str | None, source: str) -> Document:
        tracer = get_tracer()
        with tracer.start_span(
            "ingest.document",
            attributes=ingest_attributes(source=source, content_chars=len(content)),
        ) as span:
            embedding = self._embeddings.embed(content)
            if len(embedding) == 0:
                logger.warning(f"Storing {title!r} without embedding; it will score 0 in semantic search")

            try:
                stored = self._store.insert(
                    Document(
                        title=title,
                        content=content,
                        file_path=file_path,
                        embedding=embedding,
                    )
                )
            except Exception as e:
                span.fail(e)
                raise

            span.set_attributes({INGEST_DOCUMENT_ID: stored.id, INGEST_HAS_EMBEDDING: stored.has_embedding})
            logger.info(f"Ingested document {stored.id} ({source}, {len(content)} chars)")
            return stored
