"""FastAPI application exposing the document service as a REST API."""

from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from doc_search.core.errors import (
    DocSearchError,
    ExtractionError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from doc_search.observability import init_tracing, shutdown_tracing
from doc_search.service import DocumentService, build_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    load_dotenv()
    init_tracing()
    yield
    service = getattr(app.state, "service", None)
    if service is not None:
        service.close()
    shutdown_tracing()


app = FastAPI(
    title="AI Document Search API",
    version="0.1.0",
    description="Keyword and semantic search over typed and uploaded documents.",
    lifespan=lifespan,
)


_service_lock = threading.Lock()


def get_service(request: Request) -> DocumentService:
    """One service per process, built on first use.

    Sync dependencies run in the threadpool, so concurrent first requests
    must not each build their own store.
    """
    service = getattr(request.app.state, "service", None)
    if service is None:
        with _service_lock:
            service = getattr(request.app.state, "service", None)
            if service is None:
                service = build_service()
                request.app.state.service = service
    return service


# ── Request / Response schemas ────────────────────────────────────────
class AddDocumentRequest(BaseModel):
    """Typed-in document."""

    title: str | None = None
    content: str | None = None


# ── Error mapping ─────────────────────────────────────────────────────
_STATUS_BY_ERROR: list[tuple[type[DocSearchError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (ExtractionError, 422),
    (StorageError, 500),
]


@app.exception_handler(DocSearchError)
async def handle_doc_search_error(request: Request, exc: DocSearchError) -> JSONResponse:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            break
    else:
        status = 500
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=status, content={"error": "Something went wrong"})
    return JSONResponse(status_code=status, content={"error": str(exc)})


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/")
def root() -> str:
    return "AI Document Search Backend Running"


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.post("/api/documents/add")
def add_document(
    body: AddDocumentRequest,
    service: DocumentService = Depends(get_service),
) -> dict:
    doc = service.add_document(body.title, body.content)
    return {"message": "Document saved", "doc": doc.to_dict()}


@app.get("/api/documents/search")
def keyword_search(q: str = "", service: DocumentService = Depends(get_service)) -> list[dict]:
    return [doc.to_dict() for doc in service.keyword_search(q)]


@app.get("/api/documents/ai-search")
def semantic_search(q: str = "", service: DocumentService = Depends(get_service)) -> list[dict]:
    return [result.to_dict() for result in service.semantic_search(q)]


@app.post("/api/documents/upload")
def upload(
    file: UploadFile = File(...),
    service: DocumentService = Depends(get_service),
) -> dict:
    doc = service.upload(file.file.read(), file.filename or "")
    return {"message": "File uploaded and saved", "doc": doc.to_dict()}


@app.get("/api/documents/all")
def list_all(service: DocumentService = Depends(get_service)) -> list[dict]:
    return [doc.to_dict() for doc in service.list_all()]


@app.get("/api/documents/{doc_id}")
def get_document(doc_id: str, service: DocumentService = Depends(get_service)) -> dict:
    return service.get_document(doc_id).to_dict()


@app.delete("/api/documents/{doc_id}")
def delete_document(doc_id: str, service: DocumentService = Depends(get_service)) -> dict:
    service.delete_document(doc_id)
    return {"message": "Document deleted"}
