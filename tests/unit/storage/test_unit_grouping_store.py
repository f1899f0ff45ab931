# tests/unit/storage/test_unit_grouping_store.py - v1
"""Tests for storage/grouping_store.py."""

from __future__ import annotations

import json
import logging

from leaseorganizer.grouping.grouper import group_documents
from leaseorganizer.storage.grouping_store import GroupingStore


class TestGroupingStore:
    def test_save_and_load(self, tmp_path, make_document):
        result = group_documents([
            make_document("lease", "lease"),
            make_document("orphan", address=None),
        ])
        store = GroupingStore(tmp_path / "grouping.json")

        assert store.save(result) is True
        assert store.exists()
        assert store.load() == result

    def test_persisted_layout(self, tmp_path, make_document):
        store = GroupingStore(tmp_path / "grouping.json")
        store.save(group_documents([make_document("orphan", lessor=None)]))

        data = json.loads((tmp_path / "grouping.json").read_text())
        assert set(data) == {"grouped", "ungrouped", "stats"}
        orphan = data["ungrouped"][0]
        assert orphan["extraction"]["lessor"] == "unknown"
        assert orphan["classification"]["documentType"] == "lease"
        assert orphan["content"] == "content of orphan"
        assert data["stats"]["ungroupedDocuments"] == 1

    def test_save_replaces_previous(self, tmp_path, make_document):
        store = GroupingStore(tmp_path / "grouping.json")
        store.save(group_documents([make_document("a"), make_document("b")]))
        store.save(group_documents([make_document("c")]))
        assert store.load().stats.total_documents == 1

    def test_missing_file(self, tmp_path):
        store = GroupingStore(tmp_path / "absent.json")
        assert not store.exists()
        assert store.load() is None

    def test_corrupt_file(self, tmp_path, caplog):
        path = tmp_path / "grouping.json"
        path.write_text("{broken")
        with caplog.at_level(logging.WARNING):
            assert GroupingStore(path).load() is None
        assert "Failed to load grouping result" in caplog.text

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "grouping.json"
        path.write_text(json.dumps({"grouped": "nope"}))
        assert GroupingStore(path).load() is None

    def test_save_failure_returns_false(self, tmp_path, make_document):
        blocker = tmp_path / "blocker"
        blocker.write_text("file")
        store = GroupingStore(blocker / "grouping.json")
        assert store.save(group_documents([make_document("a")])) is False
