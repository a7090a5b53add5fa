"""
Document store implementations.

Pattern: Protocol → Production impl → Test double → Factory

This module contains:
1. DocumentStoreConfig - Configuration dataclass
2. PgDocumentStore - PostgreSQL with pgvector (production)
3. InMemoryDocumentStore - In-memory store (testing/development)
4. get_document_store() - Factory function

The stores only persist. Embedding happens in the ingestion pipeline and
ranking in the search engine, so both stores hold whatever vector they are
given, including an empty one.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone

import numpy as np
import psycopg
from pgvector.psycopg import register_vector
from psycopg import sql

from doc_search.config import ServiceConfig, get_config
from doc_search.core.errors import NotFoundError, StorageError
from doc_search.core.protocols import DocumentStore
from doc_search.retrieval.document import Document, empty_embedding

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# CONFIGURATION
# ---------------------------------------------------------------------------


@dataclass
class DocumentStoreConfig:
    """Configuration for the document store."""

    connection_string: str = "postgresql://localhost/doc_search"
    table_name: str = "documents"

    @classmethod
    def from_service_config(cls, config: ServiceConfig) -> "DocumentStoreConfig":
        return cls(
            connection_string=config.database_url,
            table_name=config.documents_table,
        )


# ---------------------------------------------------------------------------
# PGVECTOR STORE (Production)
# ---------------------------------------------------------------------------


_COLUMNS = "id, title, content, file_path, embedding, created_at, updated_at"


class PgDocumentStore:
    """
    PostgreSQL document store using pgvector.

    The connection runs in autocommit mode, so every insert/delete is
    committed before the call returns. The embedding column is an
    unconstrained ``vector`` (no fixed dimension and no ANN index);
    an empty embedding is stored as NULL because pgvector has no
    zero-length vector.
    """

    def __init__(self, config: DocumentStoreConfig):
        self.config = config
        self._conn = None
        self._connect_lock = threading.Lock()

    def _table(self) -> sql.Identifier:
        return sql.Identifier(self.config.table_name)

    def connect(self) -> None:
        """Establish database connection, replacing one the server dropped."""
        with self._connect_lock:
            if self._conn is not None and not self._conn.closed:
                return
            try:
                conn = psycopg.connect(self.config.connection_string, autocommit=True)
                conn.execute("CREATE EXTENSION IF NOT EXISTS vector")
                register_vector(conn)
            except psycopg.Error as e:
                logger.error(f"Could not connect to document database: {e}")
                raise StorageError(f"Database unavailable: {e}") from e
            self._conn = conn
            logger.debug(f"Connected to document table {self.config.table_name}")

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def _connection(self):
        if self._conn is None or self._conn.closed:
            self.connect()
        return self._conn

    def create_schema(self) -> None:
        """Create the documents table and its ordering index."""
        conn = self._connection()
        try:
            conn.execute(
                sql.SQL(
                    """
                    CREATE TABLE IF NOT EXISTS {table} (
                        id TEXT PRIMARY KEY,
                        title TEXT NOT NULL,
                        content TEXT NOT NULL,
                        file_path TEXT,
                        embedding vector,
                        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
                    )
                    """
                ).format(table=self._table())
            )
            conn.execute(
                sql.SQL(
                    "CREATE INDEX IF NOT EXISTS {index} ON {table} (created_at, id)"
                ).format(
                    index=sql.Identifier(f"{self.config.table_name}_created_idx"),
                    table=self._table(),
                )
            )
        except psycopg.Error as e:
            logger.error(f"Schema creation failed: {e}")
            raise StorageError(f"Schema creation failed: {e}") from e

    @staticmethod
    def _row_to_document(row) -> Document:
        embedding = row[4]
        if embedding is None:
            embedding = empty_embedding()
        else:
            embedding = np.asarray(embedding, dtype=np.float32)
        return Document(
            id=row[0],
            title=row[1],
            content=row[2],
            file_path=row[3],
            embedding=embedding,
            created_at=row[5],
            updated_at=row[6],
        )

    def insert(self, doc: Document) -> Document:
        """Insert a new document and return the persisted copy."""
        conn = self._connection()
        doc_id = _new_id()
        embedding = np.asarray(doc.embedding, dtype=np.float32) if doc.has_embedding else None

        try:
            row = conn.execute(
                sql.SQL(
                    """
                    INSERT INTO {table} (id, title, content, file_path, embedding)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING created_at, updated_at
                    """
                ).format(table=self._table()),
                (doc_id, doc.title, doc.content, doc.file_path, embedding),
            ).fetchone()
        except psycopg.Error as e:
            logger.error(f"Insert failed for document {doc.title!r}: {e}")
            raise StorageError(f"Insert failed: {e}") from e

        return replace(
            doc,
            id=doc_id,
            embedding=embedding if embedding is not None else empty_embedding(),
            created_at=row[0],
            updated_at=row[1],
        )

    def fetch_all(self) -> list[Document]:
        """Return every document, oldest first."""
        conn = self._connection()
        try:
            rows = conn.execute(
                sql.SQL("SELECT {cols} FROM {table} ORDER BY created_at, id").format(
                    cols=sql.SQL(_COLUMNS), table=self._table()
                )
            ).fetchall()
        except psycopg.Error as e:
            logger.error(f"Fetch failed: {e}")
            raise StorageError(f"Fetch failed: {e}") from e
        return [self._row_to_document(row) for row in rows]

    def fetch_by_id(self, doc_id: str) -> Document:
        """Return one document or raise NotFoundError."""
        conn = self._connection()
        try:
            row = conn.execute(
                sql.SQL("SELECT {cols} FROM {table} WHERE id = %s").format(
                    cols=sql.SQL(_COLUMNS), table=self._table()
                ),
                (doc_id,),
            ).fetchone()
        except psycopg.Error as e:
            logger.error(f"Fetch failed for {doc_id}: {e}")
            raise StorageError(f"Fetch failed: {e}") from e
        if row is None:
            raise NotFoundError(doc_id)
        return self._row_to_document(row)

    def delete_by_id(self, doc_id: str) -> None:
        """Delete one document or raise NotFoundError."""
        conn = self._connection()
        try:
            cur = conn.execute(
                sql.SQL("DELETE FROM {table} WHERE id = %s").format(table=self._table()),
                (doc_id,),
            )
        except psycopg.Error as e:
            logger.error(f"Delete failed for {doc_id}: {e}")
            raise StorageError(f"Delete failed: {e}") from e
        if cur.rowcount == 0:
            raise NotFoundError(doc_id)


# ---------------------------------------------------------------------------
# IN-MEMORY STORE (Testing/Development)
# ---------------------------------------------------------------------------


class InMemoryDocumentStore:
    """
    In-memory document store for development/testing.

    Implements the same interface as PgDocumentStore but doesn't require
    Postgres. A lock makes each write atomic and each read a consistent
    snapshot; callers get copies, never the stored records.
    """

    def __init__(self):
        self._documents: dict[str, Document] = {}
        self._lock = threading.Lock()

    def connect(self) -> None:
        """No-op for in-memory store."""
        pass

    def close(self) -> None:
        """No-op for in-memory store."""
        pass

    def create_schema(self) -> None:
        """No-op for in-memory store."""
        pass

    def __len__(self) -> int:
        return len(self._documents)

    @staticmethod
    def _copy(doc: Document) -> Document:
        return replace(doc, embedding=np.array(doc.embedding, dtype=np.float32, copy=True))

    def insert(self, doc: Document) -> Document:
        """Insert document into memory."""
        now = datetime.now(timezone.utc)
        stored = replace(
            self._copy(doc),
            id=_new_id(),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._documents[stored.id] = stored
        return self._copy(stored)

    def fetch_all(self) -> list[Document]:
        """Return every document in insertion order."""
        with self._lock:
            snapshot = list(self._documents.values())
        return [self._copy(doc) for doc in snapshot]

    def fetch_by_id(self, doc_id: str) -> Document:
        with self._lock:
            doc = self._documents.get(doc_id)
        if doc is None:
            raise NotFoundError(doc_id)
        return self._copy(doc)

    def delete_by_id(self, doc_id: str) -> None:
        with self._lock:
            if self._documents.pop(doc_id, None) is None:
                raise NotFoundError(doc_id)


# ---------------------------------------------------------------------------
# FACTORY FUNCTION
# ---------------------------------------------------------------------------


def get_document_store(
    use_postgres: bool | None = None,
    config: DocumentStoreConfig | None = None,
) -> DocumentStore:
    """
    Factory function to get the appropriate document store.

    Args:
        use_postgres: Use PostgreSQL store (defaults to USE_POSTGRES, off for dev)
        config: Store configuration (built from the service config if not provided)

    Returns:
        DocumentStore implementation
    """
    if use_postgres is None:
        use_postgres = get_config().use_postgres

    if use_postgres:
        config = config or DocumentStoreConfig.from_service_config(get_config())
        return PgDocumentStore(config)
    return InMemoryDocumentStore()
