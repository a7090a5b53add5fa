"""
Semantic Conventions for Span Attributes

Defines attribute keys following OpenTelemetry GenAI conventions
plus a custom docsearch namespace for ingestion and search.

Reference: https://opentelemetry.io/docs/specs/semconv/gen-ai/
"""

# ---------------------------------------------------------------------------
# GENAI NAMESPACE (OTel standard)
# ---------------------------------------------------------------------------

GEN_AI_SYSTEM = "gen_ai.system"  # "openai"
GEN_AI_REQUEST_MODEL = "gen_ai.request.model"  # "openai/text-embedding-3-small"


# ---------------------------------------------------------------------------
# EMBEDDING NAMESPACE (custom)
# ---------------------------------------------------------------------------

EMBEDDING_INPUT_CHARS = "docsearch.embedding.input_chars"
EMBEDDING_DIMENSIONS = "docsearch.embedding.dimensions"
EMBEDDING_FAILED = "docsearch.embedding.failed"  # bool, empty vector returned


# ---------------------------------------------------------------------------
# INGESTION NAMESPACE (custom)
# ---------------------------------------------------------------------------

INGEST_SOURCE = "docsearch.ingest.source"  # "manual", "file"
INGEST_DOCUMENT_ID = "docsearch.ingest.document_id"
INGEST_CONTENT_CHARS = "docsearch.ingest.content_chars"
INGEST_HAS_EMBEDDING = "docsearch.ingest.has_embedding"


# ---------------------------------------------------------------------------
# SEARCH NAMESPACE (custom)
# ---------------------------------------------------------------------------

SEARCH_MODE = "docsearch.search.mode"  # "keyword", "semantic"
SEARCH_QUERY = "docsearch.search.query"  # only when TRACING_CAPTURE_CONTENT=true
SEARCH_CORPUS_SIZE = "docsearch.search.corpus_size"
SEARCH_RESULT_COUNT = "docsearch.search.result_count"
SEARCH_TOP_SCORE = "docsearch.search.top_score"


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def ingest_attributes(
    source: str,
    content_chars: int,
    document_id: str | None = None,
    has_embedding: bool | None = None,
) -> dict:
    """Create attributes dict for an ingestion span."""
    attrs = {
        INGEST_SOURCE: source,
        INGEST_CONTENT_CHARS: content_chars,
    }
    if document_id is not None:
        attrs[INGEST_DOCUMENT_ID] = document_id
    if has_embedding is not None:
        attrs[INGEST_HAS_EMBEDDING] = has_embedding
    return attrs


def search_attributes(
    mode: str,
    query: str | None = None,
) -> dict:
    """Create attributes dict for a search span.

    The query text is attached only when content capture is enabled.
    """
    from doc_search.observability.config import get_config

    attrs = {SEARCH_MODE: mode}
    if query is not None and get_config().capture_content:
        attrs[SEARCH_QUERY] = query
    return attrs
