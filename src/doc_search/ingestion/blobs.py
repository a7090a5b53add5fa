"""Local filesystem storage for uploaded originals."""

from __future__ import annotations

import logging
import time
from pathlib import Path, PurePath
from urllib.parse import unquote, urlparse

from doc_search.core.errors import StorageError

logger = logging.getLogger(__name__)


class LocalBlobStore:
    """Writes uploads to ``<root>/<epoch-ms>-<original name>`` and returns a file:// URI."""

    def __init__(self, root: Path | str = "uploads"):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def store(self, file_bytes: bytes, filename: str) -> str:
        # Drop any directory components a client sent along with the name
        safe_name = PurePath(filename).name or "upload"
        target = self._root / f"{int(time.time() * 1000)}-{safe_name}"
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            target.write_bytes(file_bytes)
        except OSError as e:
            logger.error(f"Could not store upload {safe_name!r}: {e}")
            raise StorageError(f"Could not store upload: {e}") from e
        return target.resolve().as_uri()

    def delete(self, uri: str) -> None:
        path = Path(unquote(urlparse(uri).path))
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove blob {uri}: {e}")
