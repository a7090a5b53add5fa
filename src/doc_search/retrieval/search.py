"""
Search engine - keyword filter and brute-force semantic ranking.

Both modes read the full corpus from the injected DocumentStore on every
query, so a search started after an insert returns sees that document.

RANKING:
--------
semantic_search scores every document with cosine_similarity and uses
Python's stable sort on descending score. Equal scores keep the store's
fetch_all order (creation order for both bundled stores). There is no
minimum score: with fewer than K positive matches, zero-scored documents
fill the remaining slots. The limit can be lowered but never raised above
DEFAULT_SEMANTIC_LIMIT.
"""

from __future__ import annotations

import logging

from doc_search.core.protocols import DocumentResult, DocumentStore, EmbeddingProvider
from doc_search.observability.attributes import (
    SEARCH_CORPUS_SIZE,
    SEARCH_RESULT_COUNT,
    SEARCH_TOP_SCORE,
    search_attributes,
)
from doc_search.observability.tracer import get_tracer
from doc_search.retrieval.document import Document
from doc_search.retrieval.similarity import cosine_similarity

logger = logging.getLogger(__name__)

DEFAULT_SEMANTIC_LIMIT = 5


def _check_limit(limit: int) -> int:
    """Semantic search returns between 1 and DEFAULT_SEMANTIC_LIMIT results."""
    if limit < 1:
        raise ValueError(f"semantic search limit must be at least 1, got {limit}")
    return min(limit, DEFAULT_SEMANTIC_LIMIT)


class SearchEngine:
    """
    Keyword and semantic search over a DocumentStore.

    Dependencies are INJECTED, not created internally.
    """

    def __init__(
        self,
        embeddings: EmbeddingProvider,
        store: DocumentStore,
        semantic_limit: int = DEFAULT_SEMANTIC_LIMIT,
    ):
        self._embeddings = embeddings
        self._store = store
        self.semantic_limit = _check_limit(semantic_limit)

    def keyword_search(self, query: str) -> list[Document]:
        """Documents whose title or content contains *query*, ignoring case."""
        tracer = get_tracer()
        with tracer.start_span("search.keyword", attributes=search_attributes("keyword", query)) as span:
            needle = query.casefold()
            docs = self._store.fetch_all()
            matches = [
                doc
                for doc in docs
                if needle in (doc.title or "").casefold() or needle in (doc.content or "").casefold()
            ]
            span.set_attributes({SEARCH_CORPUS_SIZE: len(docs), SEARCH_RESULT_COUNT: len(matches)})
            return matches

    def semantic_search(self, query: str, limit: int | None = None) -> list[DocumentResult]:
        """
        Rank the whole corpus by cosine similarity to the embedded query.

        A failed query embedding is not an error: every document scores 0
        and the first *limit* documents come back in store order.
        """
        limit = self.semantic_limit if limit is None else _check_limit(limit)
        tracer = get_tracer()
        with tracer.start_span("search.semantic", attributes=search_attributes("semantic", query)) as span:
            query_vector = self._embeddings.embed(query)
            if len(query_vector) == 0:
                logger.warning("Query embedding failed; all documents score 0")

            docs = self._store.fetch_all()
            scored = [(doc, cosine_similarity(query_vector, doc.embedding)) for doc in docs]
            scored.sort(key=lambda x: x[1], reverse=True)

            results = [
                DocumentResult(
                    id=doc.id,
                    title=doc.title,
                    content=doc.content,
                    file_path=doc.file_path,
                    score=score,
                )
                for doc, score in scored[:limit]
            ]

            span.set_attributes(
                {
                    SEARCH_CORPUS_SIZE: len(docs),
                    SEARCH_RESULT_COUNT: len(results),
                    SEARCH_TOP_SCORE: results[0].score if results else None,
                }
            )
            return results
