"""
Document service - the interface the CLI and HTTP API talk to.

Wires the ingestion pipeline and search engine to one store and one
embedding provider, and validates caller input before anything is
embedded or written.

Errors:
- ValidationError / UnsupportedFormatError: bad input, nothing happened
- ExtractionError: the upload could not be parsed
- StorageError: persistence failed, nothing was created
- NotFoundError: unknown document id
Embedding failures never show up here; they degrade to empty vectors.
"""

from __future__ import annotations

import logging

from doc_search.config import ServiceConfig, get_config
from doc_search.core.errors import ValidationError
from doc_search.core.protocols import (
    BlobStore,
    DocumentResult,
    DocumentStore,
    EmbeddingProvider,
    TextExtractor,
)
from doc_search.embeddings import get_embedding_provider
from doc_search.ingestion import (
    DefaultTextExtractor,
    IngestionPipeline,
    LocalBlobStore,
    ensure_supported,
)
from doc_search.retrieval import (
    Document,
    DocumentStoreConfig,
    SearchEngine,
    get_document_store,
)

logger = logging.getLogger(__name__)


def _require(value: str | None, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return value


class DocumentService:
    """Facade over ingestion, search and document management."""

    def __init__(
        self,
        embeddings: EmbeddingProvider,
        store: DocumentStore,
        extractor: TextExtractor | None = None,
        blobs: BlobStore | None = None,
        semantic_limit: int = 5,
    ):
        self.store = store
        self.extractor = extractor or DefaultTextExtractor()
        self.blobs = blobs or LocalBlobStore()
        self.pipeline = IngestionPipeline(embeddings, store)
        self.search = SearchEngine(embeddings, store, semantic_limit=semantic_limit)

    # -- ingestion ------------------------------------------------------------

    def add_document(self, title: str, content: str) -> Document:
        """Add a typed-in document. Both fields are required."""
        _require(title, "title")
        _require(content, "content")
        return self.pipeline.ingest_manual(title, content)

    def add_from_file(self, text: str, filename: str, blob_uri: str | None = None) -> Document:
        """Add already-extracted text. Empty text is allowed (e.g. a scanned PDF)."""
        _require(filename, "filename")
        ensure_supported(filename)
        return self.pipeline.ingest_file(text or "", filename, blob_uri)

    def upload(self, file_bytes: bytes, filename: str) -> Document:
        """Extract, store the original, then ingest. Rejects non-PDF/DOCX first."""
        _require(filename, "filename")
        ext = ensure_supported(filename)

        text = self.extractor.extract(file_bytes, ext)
        blob_uri = self.blobs.store(file_bytes, filename)
        try:
            return self.add_from_file(text, filename, blob_uri)
        except Exception:
            # The document was not created; don't leave its original behind
            self.blobs.delete(blob_uri)
            raise

    # -- search ---------------------------------------------------------------

    def keyword_search(self, query: str) -> list[Document]:
        _require(query, "query")
        return self.search.keyword_search(query)

    def semantic_search(self, query: str) -> list[DocumentResult]:
        _require(query, "query")
        return self.search.semantic_search(query)

    # -- management -----------------------------------------------------------

    def list_all(self) -> list[Document]:
        return self.store.fetch_all()

    def get_document(self, doc_id: str) -> Document:
        return self.store.fetch_by_id(doc_id)

    def delete_document(self, doc_id: str) -> None:
        self.store.delete_by_id(doc_id)
        logger.info(f"Deleted document {doc_id}")

    def close(self) -> None:
        self.store.close()


def build_service(config: ServiceConfig | None = None) -> DocumentService:
    """Build a DocumentService from configuration (env by default)."""
    config = config or get_config()
    return DocumentService(
        embeddings=get_embedding_provider(config=config),
        store=get_document_store(
            use_postgres=config.use_postgres,
            config=DocumentStoreConfig.from_service_config(config),
        ),
        blobs=LocalBlobStore(config.upload_dir),
        semantic_limit=config.semantic_search_limit,
    )
