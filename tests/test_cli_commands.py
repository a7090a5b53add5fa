"""
Unit Tests for CLI Commands

Tests the CLI entry points against an in-memory service.
Uses mocks to verify the CLI orchestration logic.

PATTERNS:
---------
1. Patch the service factory with an in-memory service
2. Test CLI argument parsing
3. Verify exit codes
4. Test error handling
"""

import json
from unittest.mock import patch

import pytest

from doc_search.embeddings import MockEmbeddings
from doc_search.retrieval.store import InMemoryDocumentStore
from doc_search.service import DocumentService


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def service(tmp_path):
    from doc_search.ingestion import LocalBlobStore

    return DocumentService(
        embeddings=MockEmbeddings(dimensions=8),
        store=InMemoryDocumentStore(),
        blobs=LocalBlobStore(tmp_path / "uploads"),
    )


@pytest.fixture
def cli_service(service):
    """Route every command to the same in-memory service."""
    from doc_search.cli import commands

    with patch.object(commands, "_build_service", return_value=service):
        yield service


# ---------------------------------------------------------------------------
# LOAD_ENV TESTS
# ---------------------------------------------------------------------------


class TestLoadEnv:
    def test_load_env_does_not_raise(self):
        """Should not raise when no .env file exists."""
        from doc_search.cli.commands import _load_env

        _load_env()


# ---------------------------------------------------------------------------
# MAIN CLI DISPATCH TESTS
# ---------------------------------------------------------------------------


class TestMainCliDispatch:
    """Test main CLI dispatches to correct handlers."""

    @pytest.mark.parametrize(
        "command,handler",
        [
            ("add", "run_add_cli"),
            ("upload", "run_upload_cli"),
            ("search", "run_search_cli"),
            ("ai-search", "run_ai_search_cli"),
            ("list", "run_list_cli"),
            ("delete", "run_delete_cli"),
            ("init-db", "run_init_db_cli"),
            ("serve", "run_serve_cli"),
        ],
    )
    def test_main_dispatches(self, command, handler):
        from doc_search.cli import commands

        with patch.object(commands, handler) as mock_handler:
            mock_handler.return_value = 0
            with patch("sys.argv", ["doc-search", command]):
                result = commands.main()

            mock_handler.assert_called_once()
            assert result == 0

    def test_main_forwards_remaining_args(self):
        from doc_search.cli import commands

        seen = {}

        def fake_search():
            import sys
            seen["argv"] = list(sys.argv)
            return 0

        with patch.object(commands, "run_search_cli", side_effect=fake_search):
            with patch("sys.argv", ["doc-search", "search", "report"]):
                commands.main()

        assert seen["argv"][1:] == ["report"]

    def test_main_initializes_and_flushes_tracing(self):
        from doc_search.cli import commands

        with patch.object(commands, "init_tracing") as mock_init:
            with patch.object(commands, "shutdown_tracing") as mock_shutdown:
                with patch.object(commands, "run_list_cli", return_value=0):
                    with patch("sys.argv", ["doc-search", "list"]):
                        commands.main()

        mock_init.assert_called_once_with()
        mock_shutdown.assert_called_once_with()

    def test_main_flushes_tracing_when_command_raises(self):
        from doc_search.cli import commands

        with patch.object(commands, "init_tracing"):
            with patch.object(commands, "shutdown_tracing") as mock_shutdown:
                with patch.object(commands, "run_list_cli", side_effect=RuntimeError("boom")):
                    with patch("sys.argv", ["doc-search", "list"]):
                        with pytest.raises(RuntimeError):
                            commands.main()

        mock_shutdown.assert_called_once_with()

    def test_main_handles_keyboard_interrupt(self):
        from doc_search.cli import commands

        with patch.object(commands, "run_list_cli") as mock_list:
            mock_list.side_effect = KeyboardInterrupt()
            with patch("sys.argv", ["doc-search", "list"]):
                result = commands.main()

            assert result == 130


# ---------------------------------------------------------------------------
# COMMAND TESTS
# ---------------------------------------------------------------------------


class TestCommands:
    def test_add_prints_document(self, cli_service, capsys):
        from doc_search.cli import commands

        with patch("sys.argv", ["doc-search", "--title", "Annual report", "--content", "Revenue grew"]):
            result = commands.run_add_cli()

        assert result == 0
        out = json.loads(capsys.readouterr().out)
        assert out["title"] == "Annual report"
        assert len(cli_service.list_all()) == 1

    def test_add_blank_title_exits_1(self, cli_service, capsys):
        from doc_search.cli import commands

        with patch("sys.argv", ["doc-search", "--title", " ", "--content", "x"]):
            result = commands.run_add_cli()

        assert result == 1
        assert "title is required" in capsys.readouterr().err

    def test_search(self, cli_service, capsys):
        from doc_search.cli import commands

        cli_service.add_document("Annual report", "x")
        cli_service.add_document("Other", "y")

        with patch("sys.argv", ["doc-search", "REPORT"]):
            assert commands.run_search_cli() == 0

        out = json.loads(capsys.readouterr().out)
        assert [d["title"] for d in out] == ["Annual report"]

    def test_ai_search(self, cli_service, capsys):
        from doc_search.cli import commands

        cli_service.add_document("Pets", "cats are great pets")

        with patch("sys.argv", ["doc-search", "cats are great pets"]):
            assert commands.run_ai_search_cli() == 0

        out = json.loads(capsys.readouterr().out)
        assert out[0]["title"] == "Pets"
        assert out[0]["score"] == pytest.approx(1.0)

    def test_delete_missing_exits_1(self, cli_service, capsys):
        from doc_search.cli import commands

        with patch("sys.argv", ["doc-search", "nope"]):
            assert commands.run_delete_cli() == 1

        assert "not found" in capsys.readouterr().err

    def test_upload_unsupported_exits_1(self, cli_service, tmp_path, capsys):
        from doc_search.cli import commands

        path = tmp_path / "notes.txt"
        path.write_text("hello")

        with patch("sys.argv", ["doc-search", str(path)]):
            assert commands.run_upload_cli() == 1

        assert "Only PDF and DOCX" in capsys.readouterr().err

    def test_upload_missing_file_exits_1(self, cli_service, tmp_path):
        from doc_search.cli import commands

        with patch("sys.argv", ["doc-search", str(tmp_path / "missing.pdf")]):
            assert commands.run_upload_cli() == 1
