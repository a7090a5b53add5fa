"""
Observability Module - OpenTelemetry Integration

Provides tracing for ingestion, embedding calls and searches.

USAGE:
------
# At application startup:
from doc_search.observability import init_tracing

init_tracing()  # Installs an SDK provider if TRACING_ENABLED=true

# In code that needs tracing:
from doc_search.observability import get_tracer
from doc_search.observability.attributes import SEARCH_RESULT_COUNT, search_attributes

with get_tracer().start_span("search.keyword", attributes=search_attributes("keyword", q)) as span:
    matches = ...
    span.set_attributes({SEARCH_RESULT_COUNT: len(matches)})
"""

from __future__ import annotations

import logging

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from doc_search.observability.config import (
    TracingConfig,
    get_config,
    reset_config,
)
from doc_search.observability.tracer import (
    TracerProtocol,
    SpanProtocol,
    NoOpTracer,
    NoOpSpan,
    get_tracer,
    reset_tracer,
)
from doc_search.observability.attributes import (
    GEN_AI_SYSTEM,
    GEN_AI_REQUEST_MODEL,
    EMBEDDING_FAILED,
    INGEST_SOURCE,
    INGEST_DOCUMENT_ID,
    SEARCH_MODE,
    SEARCH_RESULT_COUNT,
    ingest_attributes,
    search_attributes,
)

logger = logging.getLogger(__name__)

_tracing_initialized = False


def init_tracing(config: TracingConfig | None = None) -> bool:
    """
    Initialize OpenTelemetry tracing.

    This should be called once at application startup.

    Args:
        config: Optional config (uses env vars if not provided)

    Returns:
        True if tracing was initialized, False if disabled or failed
    """
    global _tracing_initialized
    if _tracing_initialized:
        return True

    config = config or get_config()

    if not config.enabled:
        logger.debug("Tracing disabled")
        return False

    try:
        if config.collector_endpoint:
            exporter = OTLPSpanExporter(endpoint=config.collector_endpoint)
            logger.info(f"Exporting spans to: {config.collector_endpoint}")
        else:
            exporter = ConsoleSpanExporter()
            logger.info("Exporting spans to console")

        provider = TracerProvider(resource=Resource.create({SERVICE_NAME: config.service_name}))
        provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)
    except Exception as e:
        logger.error(f"Failed to initialize tracing: {e}")
        return False

    reset_tracer()
    _tracing_initialized = True
    return True


def shutdown_tracing() -> None:
    """Flush pending spans and reset the tracer."""
    global _tracing_initialized

    if not _tracing_initialized:
        return

    provider = trace.get_tracer_provider()
    if hasattr(provider, "shutdown"):
        try:
            provider.shutdown()
        except Exception as e:
            logger.warning(f"Error shutting down tracing: {e}")

    reset_tracer()
    reset_config()
    _tracing_initialized = False


__all__ = [
    # Initialization
    "init_tracing",
    "shutdown_tracing",
    # Config
    "TracingConfig",
    "get_config",
    "reset_config",
    # Tracer
    "TracerProtocol",
    "SpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "get_tracer",
    "reset_tracer",
    # Attributes
    "GEN_AI_SYSTEM",
    "GEN_AI_REQUEST_MODEL",
    "EMBEDDING_FAILED",
    "INGEST_SOURCE",
    "INGEST_DOCUMENT_ID",
    "SEARCH_MODE",
    "SEARCH_RESULT_COUNT",
    # Helpers
    "ingest_attributes",
    "search_attributes",
]
