# tests/unit/test_unit_main.py - v2
"""Tests for main.py: CLI entry point."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from leaseorganizer.batch.models import BatchRunResult
from leaseorganizer.cache.json_store import JsonCacheStore
from leaseorganizer.core.models import Classification, ExtractionResult
from leaseorganizer.grouping.grouper import group_documents
from leaseorganizer.logging.logger import ROOT_LOGGER_NAME
from leaseorganizer.main import _build_parser, main
from leaseorganizer.storage.grouping_store import GroupingStore


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run every CLI test from an empty directory with files under tmp_path."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GROUPING_FILE", str(tmp_path / "grouping.json"))
    monkeypatch.setenv("CACHE_FILE", str(tmp_path / "cache.json"))
    root = logging.getLogger(ROOT_LOGGER_NAME)
    saved, saved_level = list(root.handlers), root.level
    yield tmp_path
    root.handlers[:] = saved
    root.setLevel(saved_level)


# ---------------------------------------------------------------------------
# Parser tests
# ---------------------------------------------------------------------------

class TestBuildParser:
    def test_version_flag(self):
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0

    def test_organize(self):
        args = _build_parser().parse_args(["organize", "./docs", "--json"])
        assert args.command == "organize"
        assert args.folder == Path("./docs")
        assert args.json is True

    def test_query(self):
        args = _build_parser().parse_args(
            ["query", "get_amendments", "--lessor", "ABC", "--address", "1 main", "--include-content"]
        )
        assert args.operation == "get_amendments"
        assert args.lessor == "ABC"
        assert args.address == "1 main"
        assert args.include_content is True
        assert args.document_id is None

    def test_query_rejects_unknown_operation(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["query", "drop_tables"])

    def test_cache_actions(self):
        assert _build_parser().parse_args(["cache", "stats"]).action == "stats"
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["cache", "purge"])


# ---------------------------------------------------------------------------
# Command tests
# ---------------------------------------------------------------------------

class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_organize_missing_folder(self, tmp_path):
        assert main(["organize", str(tmp_path / "absent")]) == 1

    def test_organize_prints_tree(self, tmp_path, make_document, capsys):
        result = group_documents([
            make_document("lease-1", "lease"),
            make_document("amend-1", "amendment"),
            make_document("orphan", lessor=None),
        ])
        run = BatchRunResult(
            run_id="r", result=result, processed=3, from_cache=0, chunked=0,
            snapshot_saved=True, duration_seconds=0.1,
        )
        with patch("leaseorganizer.api.facade.organize_folder", AsyncMock(return_value=run)):
            code = main(["organize", str(tmp_path)])

        out = capsys.readouterr().out
        assert code == 0
        assert "[LESSOR] ABC Properties LLC" in out
        assert "Base Lease: lease-1" in out
        assert "Amendments: amend-1" in out
        assert "Ungrouped: orphan" in out

    def test_organize_json(self, tmp_path, make_document, capsys):
        run = BatchRunResult(
            run_id="r", result=group_documents([make_document("lease-1")]),
            processed=1, from_cache=0, chunked=0, snapshot_saved=True, duration_seconds=0.1,
        )
        with patch("leaseorganizer.api.facade.organize_folder", AsyncMock(return_value=run)):
            code = main(["organize", str(tmp_path), "--json"])

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["hierarchy"]["ABC Properties LLC"]["123 Main St"]["baseLease"] == "lease-1"

    def test_organize_unsaved_snapshot_fails(self, tmp_path):
        run = BatchRunResult(
            run_id="r", result=group_documents([]), processed=0, from_cache=0,
            chunked=0, snapshot_saved=False, duration_seconds=0.0,
        )
        with patch("leaseorganizer.api.facade.organize_folder", AsyncMock(return_value=run)):
            assert main(["organize", str(tmp_path)]) == 1

    def test_organize_fatal_error(self, tmp_path):
        failing = AsyncMock(side_effect=RuntimeError("no api key"))
        with patch("leaseorganizer.api.facade.organize_folder", failing):
            assert main(["organize", str(tmp_path)]) == 1

    def test_query_without_snapshot(self):
        assert main(["query", "list_lessors"]) == 1

    def test_query_prints_response(self, tmp_path, make_document, capsys):
        GroupingStore(tmp_path / "grouping.json").save(group_documents([make_document("lease-1")]))

        code = main(["query", "list_lessors"])

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["payload"] == ["ABC Properties LLC"]

    def test_query_error_exit_code(self, tmp_path, make_document, capsys):
        GroupingStore(tmp_path / "grouping.json").save(group_documents([make_document("lease-1")]))

        code = main(["query", "list_addresses"])

        data = json.loads(capsys.readouterr().out)
        assert code == 1
        assert data["success"] is False

    def test_cache_stats_and_clear(self, tmp_path, capsys):
        cache = JsonCacheStore(tmp_path / "cache.json")
        cache.set(
            "text",
            Classification(document_type="lease", confidence="high"),
            ExtractionResult(),
        )
        cache.save()

        assert main(["cache", "stats"]) == 0
        assert "Entries:    1" in capsys.readouterr().out

        assert main(["cache", "clear"]) == 0
        reloaded = JsonCacheStore(tmp_path / "cache.json")
        reloaded.load()
        assert len(reloaded) == 0
