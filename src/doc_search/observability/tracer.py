"""
Span wrappers for ingestion, embedding and search.

get_tracer() hands back an OTel-backed tracer once init_tracing() has
installed an SDK provider, and a NoOpTracer otherwise. Callers pass the
attribute dicts built by observability.attributes (ingest_attributes,
search_attributes) straight into start_span() or span.set_attributes().
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Protocol

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import StatusCode

Attributes = Mapping[str, Any]


# ---------------------------------------------------------------------------
# PROTOCOLS
# ---------------------------------------------------------------------------


class SpanProtocol(Protocol):
    """What ingestion, embedding and search code may do with a span."""

    def set_attribute(self, key: str, value: Any) -> None:
        ...

    def set_attributes(self, attributes: Attributes) -> None:
        """Set several attributes at once; None values are skipped."""
        ...

    def set_status(self, status: str, description: str | None = None) -> None:
        """Set span status ("ok" or "error")."""
        ...

    def record_exception(self, exception: Exception) -> None:
        ...

    def fail(self, exception: Exception) -> None:
        """Record *exception* and mark the span as errored."""
        ...


class TracerProtocol(Protocol):
    @contextmanager
    def start_span(self, name: str, attributes: Attributes | None = None) -> Iterator[SpanProtocol]:
        """Start a span named after the operation, e.g. "search.semantic"."""
        ...


def _present(attributes: Attributes | None) -> dict[str, Any]:
    # OTel rejects None attribute values
    return {k: v for k, v in (attributes or {}).items() if v is not None}


# ---------------------------------------------------------------------------
# NOOP IMPLEMENTATIONS (tracing disabled)
# ---------------------------------------------------------------------------


class NoOpSpan:
    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def set_attributes(self, attributes: Attributes) -> None:
        pass

    def set_status(self, status: str, description: str | None = None) -> None:
        pass

    def record_exception(self, exception: Exception) -> None:
        pass

    def fail(self, exception: Exception) -> None:
        pass


class NoOpTracer:
    @contextmanager
    def start_span(self, name: str, attributes: Attributes | None = None) -> Iterator[NoOpSpan]:
        yield NoOpSpan()


# ---------------------------------------------------------------------------
# OTEL-BACKED IMPLEMENTATIONS
# ---------------------------------------------------------------------------


class OTelSpan:
    def __init__(self, span: Any):
        self._span = span

    def set_attribute(self, key: str, value: Any) -> None:
        if value is not None:
            self._span.set_attribute(key, value)

    def set_attributes(self, attributes: Attributes) -> None:
        self._span.set_attributes(_present(attributes))

    def set_status(self, status: str, description: str | None = None) -> None:
        code = StatusCode.OK if status == "ok" else StatusCode.ERROR
        self._span.set_status(code, description)

    def record_exception(self, exception: Exception) -> None:
        self._span.record_exception(exception)

    def fail(self, exception: Exception) -> None:
        self._span.record_exception(exception)
        self._span.set_status(StatusCode.ERROR, str(exception))


class OTelTracer:
    def __init__(self, tracer: Any):
        self._tracer = tracer

    @contextmanager
    def start_span(self, name: str, attributes: Attributes | None = None) -> Iterator[OTelSpan]:
        with self._tracer.start_as_current_span(name, attributes=_present(attributes)) as span:
            yield OTelSpan(span)


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------


_tracer: TracerProtocol | None = None


def get_tracer(service_name: str = "doc-search") -> TracerProtocol:
    """
    Tracer shared by the pipeline, the embedding provider and the search engine.

    A disabled config caches a NoOpTracer. An enabled config without an SDK
    provider (init_tracing() not called yet) gets an uncached NoOpTracer so
    the next call can pick up the real one.
    """
    global _tracer
    if _tracer is not None:
        return _tracer

    from doc_search.observability.config import get_config

    if not get_config().enabled:
        _tracer = NoOpTracer()
        return _tracer

    if not isinstance(trace.get_tracer_provider(), TracerProvider):
        return NoOpTracer()

    _tracer = OTelTracer(trace.get_tracer(service_name))
    return _tracer


def reset_tracer() -> None:
    global _tracer
    _tracer = None
