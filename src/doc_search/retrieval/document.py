"""
Document model for the retrieval system.

Single responsibility: Define the structure of documents
persisted in document stores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

import numpy as np


def empty_embedding() -> np.ndarray:
    """The embedding of a document whose provider call failed or was skipped."""
    return np.zeros(0, dtype=np.float32)


@dataclass
class Document:
    """
    A stored document with its embedding.

    id and the timestamps are assigned by the store on insert; a Document
    built by the ingestion pipeline leaves them unset. An empty embedding
    (size 0) means the provider failed; the document is still keyword
    searchable and scores 0 in semantic search.
    """
    title: str
    content: str
    file_path: str | None = None
    embedding: np.ndarray = field(default_factory=empty_embedding)
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def has_embedding(self) -> bool:
        return self.embedding is not None and len(self.embedding) > 0

    def to_dict(self, include_embedding: bool = False) -> dict:
        """Convert to dictionary for serialization."""
        data = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "file_path": self.file_path,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_embedding:
            data["embedding"] = [float(x) for x in self.embedding]
        return data
