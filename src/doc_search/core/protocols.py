"""
Core protocols defining contracts for the entire system.

All infrastructure components implement these protocols,
enabling dependency injection and easy testing.

PATTERN:
- Protocol defines the contract
- Production implementation + in-memory/mock test double
- Factory functions for instantiation

The pipeline and the search engine only ever see these protocols, so
swapping Postgres for memory or OpenRouter for the mock provider needs no
changes outside the factories.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from doc_search.retrieval.document import Document


# ---------------------------------------------------------------------------
# EMBEDDING PROVIDER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Contract for embedding generation.

    embed() never raises: on any provider failure it returns an empty
    vector (size 0) and logs the failure.

    Implementations:
    - OpenAIEmbeddings (production, OpenAI-compatible endpoint)
    - MockEmbeddings (testing)
    """

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        ...

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        ...


# ---------------------------------------------------------------------------
# DOCUMENT STORE PROTOCOL
# ---------------------------------------------------------------------------


@dataclass
class DocumentResult:
    """A semantic search hit annotated with its cosine score."""
    id: str
    title: str
    content: str
    file_path: str | None = None
    score: float = 0.0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "file_path": self.file_path,
            "score": self.score,
        }


@runtime_checkable
class DocumentStore(Protocol):
    """
    Contract for document persistence.

    Implementations:
    - PgDocumentStore (production with PostgreSQL + pgvector)
    - InMemoryDocumentStore (testing/development)
    """

    def connect(self) -> None:
        """Establish connection to the store."""
        ...

    def close(self) -> None:
        """Close connection to the store."""
        ...

    def insert(self, doc: Document) -> Document:
        """Persist a new document; returns a copy with id and timestamps set."""
        ...

    def fetch_all(self) -> list[Document]:
        """Return every stored document."""
        ...

    def fetch_by_id(self, doc_id: str) -> Document:
        """Return one document or raise NotFoundError."""
        ...

    def delete_by_id(self, doc_id: str) -> None:
        """Delete one document or raise NotFoundError."""
        ...


# ---------------------------------------------------------------------------
# UPLOAD COLLABORATORS
# ---------------------------------------------------------------------------


@runtime_checkable
class TextExtractor(Protocol):
    """
    Contract for turning uploaded file bytes into plain text.

    Implementations:
    - DefaultTextExtractor (pypdf for .pdf, python-docx for .docx)
    """

    def extract(self, file_bytes: bytes, extension: str) -> str:
        """Extract text, raising UnsupportedFormatError for unknown extensions."""
        ...


@runtime_checkable
class BlobStore(Protocol):
    """
    Contract for storing uploaded originals.

    Implementations:
    - LocalBlobStore (filesystem uploads directory)
    """

    def store(self, file_bytes: bytes, filename: str) -> str:
        """Store the bytes and return a URI for them."""
        ...

    def delete(self, uri: str) -> None:
        """Remove a previously stored blob."""
        ...
