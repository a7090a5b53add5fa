"""
CLI commands - entry points for document management and search.

Each command follows a consistent pattern:
1. Parse arguments
2. Build the service from environment config
3. Run the operation
4. Print JSON results
5. Return exit code

CLI commands are thin wrappers around DocumentService. They handle
argument parsing and output formatting; typed service errors become
exit code 1 with the message on stderr.

Note: the default store is in-memory and lives only as long as the
process. Set USE_POSTGRES=true for anything that should outlive a
single command.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from doc_search.core.errors import DocSearchError
from doc_search.observability import init_tracing, shutdown_tracing


def _load_env() -> None:
    """Load environment variables from .env file."""
    load_dotenv()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_service():
    from doc_search.service import build_service

    return build_service()


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _run(operation) -> int:
    """Run *operation* against a fresh service, mapping typed errors to exit 1."""
    service = _build_service()
    try:
        _print_json(operation(service))
        return 0
    except DocSearchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        service.close()


def run_add_cli() -> int:
    """CLI entry point for adding a typed document."""
    parser = argparse.ArgumentParser(description="Add a document")
    parser.add_argument("--title", required=True, help="Document title")
    parser.add_argument("--content", required=True, help="Document body")
    args = parser.parse_args()

    return _run(lambda s: s.add_document(args.title, args.content).to_dict())


def run_upload_cli() -> int:
    """CLI entry point for ingesting a PDF or DOCX file."""
    parser = argparse.ArgumentParser(description="Upload a PDF or DOCX file")
    parser.add_argument("path", type=Path, help="File to upload")
    args = parser.parse_args()

    try:
        file_bytes = args.path.read_bytes()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return _run(lambda s: s.upload(file_bytes, args.path.name).to_dict())


def run_search_cli() -> int:
    """CLI entry point for keyword search."""
    parser = argparse.ArgumentParser(description="Case-insensitive keyword search")
    parser.add_argument("query", help="Text to look for in titles and contents")
    args = parser.parse_args()

    return _run(lambda s: [doc.to_dict() for doc in s.keyword_search(args.query)])


def run_ai_search_cli() -> int:
    """CLI entry point for semantic search."""
    parser = argparse.ArgumentParser(description="Semantic search (top 5 by cosine similarity)")
    parser.add_argument("query", help="Natural language query")
    args = parser.parse_args()

    return _run(lambda s: [result.to_dict() for result in s.semantic_search(args.query)])


def run_list_cli() -> int:
    """CLI entry point for listing every document."""
    argparse.ArgumentParser(description="List all documents").parse_args()

    return _run(lambda s: [doc.to_dict() for doc in s.list_all()])


def run_delete_cli() -> int:
    """CLI entry point for deleting a document."""
    parser = argparse.ArgumentParser(description="Delete a document by id")
    parser.add_argument("id", help="Document id")
    args = parser.parse_args()

    def delete(service):
        service.delete_document(args.id)
        return {"message": "Document deleted", "id": args.id}

    return _run(delete)


def run_init_db_cli() -> int:
    """CLI entry point for creating the Postgres schema."""
    argparse.ArgumentParser(description="Create the documents table").parse_args()

    def init_db(service):
        service.store.connect()
        service.store.create_schema()
        return {"message": "Schema ready"}

    return _run(init_db)


def run_serve_cli() -> int:
    """CLI entry point for the HTTP API."""
    import uvicorn

    parser = argparse.ArgumentParser(description="Serve the HTTP API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=5000)
    args = parser.parse_args()

    uvicorn.run("doc_search.api.app:app", host=args.host, port=args.port)
    return 0


def main() -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        doc-search add --title T --content C
        doc-search upload report.pdf
        doc-search search "report"
        doc-search ai-search "pets"
        doc-search list
        doc-search delete <id>
        doc-search init-db
        doc-search serve --port 5000
    """
    _load_env()

    parser = argparse.ArgumentParser(
        description="AI document search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  add         Add a typed document
  upload      Ingest a PDF or DOCX file
  search      Keyword search (case-insensitive substring)
  ai-search   Semantic search, top 5 by cosine similarity
  list        List all documents
  delete      Delete a document by id
  init-db     Create the Postgres schema (USE_POSTGRES=true)
  serve       Run the HTTP API

Examples:
  doc-search add --title "Annual report" --content "Revenue grew"
  doc-search ai-search "how did revenue change"
        """,
    )

    parser.add_argument(
        "command",
        choices=["add", "upload", "search", "ai-search", "list", "delete", "init-db", "serve"],
        help="Operation to run",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    # Parse just the command first
    args, remaining = parser.parse_known_args()
    _configure_logging(args.verbose)
    init_tracing()

    commands = {
        "add": run_add_cli,
        "upload": run_upload_cli,
        "search": run_search_cli,
        "ai-search": run_ai_search_cli,
        "list": run_list_cli,
        "delete": run_delete_cli,
        "init-db": run_init_db_cli,
        "serve": run_serve_cli,
    }

    # Re-inject remaining args for the subcommand
    sys.argv = [sys.argv[0]] + remaining

    try:
        return commands[args.command]()
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    finally:
        # Flush batched spans before the process exits
        shutdown_tracing()


if __name__ == "__main__":
    sys.exit(main())
