"""
Embeddings Module - Single Responsibility: Generate text embeddings.

It has ONE job: convert text to vector embeddings.

FAILURE CONTRACT:
-----------------
embed() never raises. Network errors, auth errors, timeouts and malformed
bodies are logged and turned into an empty vector. A document ingested
during a provider outage is still stored and keyword-searchable; it just
scores 0 in semantic search until it is re-ingested.
"""

from __future__ import annotations

import hashlib
import logging

import numpy as np
import openai
from openai import OpenAI

from doc_search.config import ServiceConfig, get_config
from doc_search.core.errors import ProviderError
from doc_search.core.protocols import EmbeddingProvider
from doc_search.observability.attributes import (
    EMBEDDING_DIMENSIONS,
    EMBEDDING_FAILED,
    EMBEDDING_INPUT_CHARS,
    GEN_AI_REQUEST_MODEL,
    GEN_AI_SYSTEM,
)
from doc_search.observability.tracer import get_tracer
from doc_search.retrieval.document import empty_embedding

logger = logging.getLogger(__name__)


class OpenAIEmbeddings:
    """
    Embedding provider for any OpenAI-compatible /embeddings endpoint.

    Defaults to OpenRouter with openai/text-embedding-3-small (1536 dimensions).
    The SDK sends POST {model, input} with a bearer credential and we read
    the vector from data[0].embedding.
    """

    def __init__(
        self,
        model: str = "openai/text-embedding-3-small",
        api_key: str | None = None,
        base_url: str | None = "https://openrouter.ai/api/v1",
        timeout: float = 30.0,
        max_retries: int = 2,
        client: OpenAI | None = None,
    ):
        self.model = model
        if client is None:
            if not api_key:
                logger.warning("No embedding API key configured; embedding calls will fail")
            client = OpenAI(
                api_key=api_key or "",
                base_url=base_url,
                timeout=timeout,
                max_retries=max_retries,
            )
        self._client = client

    @classmethod
    def from_config(cls, config: ServiceConfig) -> "OpenAIEmbeddings":
        return cls(
            model=config.embedding_model,
            api_key=config.api_key,
            base_url=config.embedding_base_url,
            timeout=config.embedding_timeout_seconds,
            max_retries=config.embedding_max_retries,
        )

    @property
    def dimensions(self) -> int:
        """Return embedding dimensions for the model."""
        model_dims = {
            "text-embedding-3-small": 1536,
            "text-embedding-3-large": 3072,
            "text-embedding-ada-002": 1536,
        }
        return model_dims.get(self.model.rsplit("/", 1)[-1], 1536)

    def _request(self, inputs: str | list[str]) -> list[np.ndarray]:
        """Call the endpoint, raising ProviderError on any failure."""
        try:
            response = self._client.embeddings.create(
                input=inputs,
                model=self.model,
                encoding_format="float",
            )
        except openai.OpenAIError as e:
            raise ProviderError(f"{type(e).__name__}: {e}") from e

        data = getattr(response, "data", None)
        if not data:
            raise ProviderError("Malformed embedding response: no data")

        vectors = []
        for item in data:
            values = getattr(item, "embedding", None)
            if not values:
                raise ProviderError("Malformed embedding response: missing embedding")
            try:
                vectors.append(np.asarray(values, dtype=np.float32))
            except (TypeError, ValueError) as e:
                raise ProviderError(f"Malformed embedding response: {e}") from e
        return vectors

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text; empty vector on failure."""
        tracer = get_tracer()
        with tracer.start_span(
            "embedding.embed",
            attributes={
                GEN_AI_SYSTEM: "openai",
                GEN_AI_REQUEST_MODEL: self.model,
                EMBEDDING_INPUT_CHARS: len(text or ""),
            },
        ) as span:
            if not text or not text.strip():
                logger.debug("Skipping embedding for blank text")
                span.set_attribute(EMBEDDING_FAILED, True)
                return empty_embedding()

            try:
                vector = self._request(text)[0]
            except ProviderError as e:
                logger.warning(f"Embedding error: {e}")
                span.set_attribute(EMBEDDING_FAILED, True)
                span.fail(e)
                return empty_embedding()

            span.set_attributes({EMBEDDING_FAILED: False, EMBEDDING_DIMENSIONS: int(vector.shape[0])})
            return vector

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts; all empty on failure."""
        if not texts:
            return []

        try:
            vectors = self._request(list(texts))
        except ProviderError as e:
            logger.warning(f"Batch embedding error: {e}")
            return [empty_embedding() for _ in texts]

        if len(vectors) != len(texts):
            logger.warning(
                f"Batch embedding returned {len(vectors)} vectors for {len(texts)} inputs"
            )
            return [empty_embedding() for _ in texts]
        return vectors


class MockEmbeddings:
    """
    Mock embedding provider for testing without API calls.

    Generates deterministic pseudo-embeddings from text hashes.
    NOT for production use - only for testing/development.
    """

    def __init__(self, dimensions: int = 1536):
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> np.ndarray:
        """Generate deterministic pseudo-embedding from text hash."""
        h = hashlib.sha256(text.encode()).digest()
        # Repeat hash to fill dimensions; bytes centred on zero keep vectors finite
        repeated = (h * (self._dimensions // 32 + 1))[: self._dimensions]
        raw = np.frombuffer(repeated, dtype=np.uint8).astype(np.float32)
        return (raw - 127.5) / 127.5

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        return [self.embed(text) for text in texts]


def get_embedding_provider(
    use_mock: bool | None = None,
    config: ServiceConfig | None = None,
) -> EmbeddingProvider:
    """
    Factory function to get the appropriate embedding provider.

    Args:
        use_mock: If True, return MockEmbeddings (defaults to USE_MOCK_EMBEDDINGS)
        config: Service configuration (uses env if not provided)
    """
    config = config or get_config()
    if use_mock is None:
        use_mock = config.use_mock_embeddings
    if use_mock:
        return MockEmbeddings()
    return OpenAIEmbeddings.from_config(config)
