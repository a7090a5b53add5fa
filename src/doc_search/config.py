"""
Service Configuration

Loads settings from environment variables (a .env file is loaded by the
CLI and API entry points before the first call to get_config()).
"""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass
class ServiceConfig:
    """Configuration for the document search service.

    Environment Variables:
        OPENROUTER_API_KEY: Bearer credential for the embedding endpoint
            (falls back to OPENAI_API_KEY)
        EMBEDDING_BASE_URL: OpenAI-compatible endpoint (default: OpenRouter)
        EMBEDDING_MODEL: Embedding model id (default: openai/text-embedding-3-small)
        EMBEDDING_TIMEOUT_SECONDS: Per-call timeout, expiry counts as failure (default: 30)
        EMBEDDING_MAX_RETRIES: Bounded SDK retries with backoff (default: 2)
        USE_MOCK_EMBEDDINGS: Use deterministic offline embeddings (default: false)
        USE_POSTGRES: Persist to PostgreSQL instead of memory (default: false)
        DATABASE_URL: PostgreSQL connection string
        DOCUMENTS_TABLE: Table holding documents (default: documents)
        UPLOAD_DIR: Directory for uploaded originals (default: uploads)
        SEMANTIC_SEARCH_LIMIT: Results returned by semantic search, 1 to 5 (default: 5)
    """

    api_key: str = ""
    embedding_base_url: str = "https://openrouter.ai/api/v1"
    embedding_model: str = "openai/text-embedding-3-small"
    embedding_timeout_seconds: float = 30.0
    embedding_max_retries: int = 2
    use_mock_embeddings: bool = False
    use_postgres: bool = False
    database_url: str = "postgresql://localhost/doc_search"
    documents_table: str = "documents"
    upload_dir: str = "uploads"
    semantic_search_limit: int = 5

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Load config from environment variables."""
        return cls(
            api_key=os.environ.get("OPENROUTER_API_KEY") or os.environ.get("OPENAI_API_KEY", ""),
            embedding_base_url=os.environ.get("EMBEDDING_BASE_URL", "https://openrouter.ai/api/v1"),
            embedding_model=os.environ.get("EMBEDDING_MODEL", "openai/text-embedding-3-small"),
            embedding_timeout_seconds=float(os.environ.get("EMBEDDING_TIMEOUT_SECONDS", "30")),
            embedding_max_retries=int(os.environ.get("EMBEDDING_MAX_RETRIES", "2")),
            use_mock_embeddings=_env_bool("USE_MOCK_EMBEDDINGS"),
            use_postgres=_env_bool("USE_POSTGRES"),
            database_url=os.environ.get("DATABASE_URL", "postgresql://localhost/doc_search"),
            documents_table=os.environ.get("DOCUMENTS_TABLE", "documents"),
            upload_dir=os.environ.get("UPLOAD_DIR", "uploads"),
            semantic_search_limit=int(os.environ.get("SEMANTIC_SEARCH_LIMIT", "5")),
        )


# Global config singleton
_config: ServiceConfig | None = None


def get_config() -> ServiceConfig:
    """Get the global service config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = ServiceConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None
