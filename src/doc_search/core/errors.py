"""
Error taxonomy for the document search service.

Validation and storage failures always reach the caller. Provider failures
never do: embedding providers catch ProviderError and degrade to an empty
vector so ingestion and search keep working.
"""


class DocSearchError(Exception):
    """Base class for every error raised by the service."""


class ValidationError(DocSearchError):
    """Missing or blank required input. Raised before any side effect."""


class UnsupportedFormatError(ValidationError):
    """Uploaded file extension is not one we can extract text from."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Only PDF and DOCX supported (got {extension or 'no extension'!r})")


class ExtractionError(DocSearchError):
    """File bytes could not be turned into text."""


class ProviderError(DocSearchError):
    """Embedding provider call failed. Internal only, never surfaced."""


class StorageError(DocSearchError):
    """Persistence layer unavailable or a read/write/delete failed."""


class NotFoundError(DocSearchError):
    """No document with the requested id."""

    def __init__(self, doc_id: str):
        self.doc_id = doc_id
        super().__init__(f"Document not found: {doc_id}")
