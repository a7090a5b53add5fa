"""
Embeddings module - text embedding generation.

The pattern every infrastructure piece in this package follows:
1. Protocol (EmbeddingProvider) defines the interface
2. Production implementation (OpenAIEmbeddings)
3. Test double (MockEmbeddings) for fast testing
4. Factory function (get_embedding_provider)
"""

from doc_search.core.protocols import EmbeddingProvider
from doc_search.embeddings.openai_embeddings import (
    OpenAIEmbeddings,
    MockEmbeddings,
    get_embedding_provider,
)

__all__ = [
    "EmbeddingProvider",
    "OpenAIEmbeddings",
    "MockEmbeddings",
    "get_embedding_provider",
]
