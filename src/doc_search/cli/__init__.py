"""
CLI module - unified command-line interface.

Provides entry points for:
- Adding and uploading documents
- Keyword and semantic search
- Listing and deleting documents
- Database setup and serving the HTTP API
"""

from doc_search.cli.commands import (
    main,
    run_add_cli,
    run_upload_cli,
    run_search_cli,
    run_ai_search_cli,
    run_list_cli,
    run_delete_cli,
    run_init_db_cli,
    run_serve_cli,
)

__all__ = [
    "main",
    "run_add_cli",
    "run_upload_cli",
    "run_search_cli",
    "run_ai_search_cli",
    "run_list_cli",
    "run_delete_cli",
    "run_init_db_cli",
    "run_serve_cli",
]
