# tests/unit/api/test_unit_query.py - v2
"""Tests for api/query.py: LeaseQuery lookups."""

from __future__ import annotations

import pytest

from leaseorganizer.api.query import LeaseQuery, NoGroupingDataError
from leaseorganizer.core.models import UNKNOWN
from leaseorganizer.grouping.grouper import group_documents
from leaseorganizer.storage.grouping_store import GroupingStore

ABC = "ABC Properties LLC"
MAIN = "123 Main St"


@pytest.fixture
def store(tmp_path, make_document) -> GroupingStore:
    docs = [
        make_document("lease-1", "lease", ABC, MAIN),
        make_document("amend-1", "amendment", ABC, "123 Main Street"),
        make_document("amend-2", "amendment", ABC, MAIN),
        make_document("rc-1", "rent_commencement", ABC, MAIN),
        make_document("dl-1", "delivery_letter", ABC, MAIN),
        make_document("xyz-lease", "lease", "XYZ Holdings", "9 Elm Avenue"),
        make_document("xyz-other", "other", "XYZ Holdings", "10 Oak Road"),
        make_document("orphan", "amendment", None, MAIN),
    ]
    s = GroupingStore(tmp_path / "grouping.json")
    s.save(group_documents(docs))
    return s


@pytest.fixture
def query(store) -> LeaseQuery:
    return LeaseQuery(store)


class TestConstruction:
    def test_missing_snapshot(self, tmp_path):
        with pytest.raises(NoGroupingDataError) as exc_info:
            LeaseQuery(tmp_path / "absent.json")
        assert exc_info.value.path == tmp_path / "absent.json"
        assert "organize" in str(exc_info.value)

    def test_accepts_path(self, store):
        assert LeaseQuery(store.path).get_lessors() == [ABC, "XYZ Holdings"]

    def test_reload_picks_up_new_snapshot(self, query, store, make_document):
        store.save(group_documents([make_document("only", lessor="New Owner")]))
        assert query.get_lessors() == [ABC, "XYZ Holdings"]
        query.reload()
        assert query.get_lessors() == ["New Owner"]

    def test_reload_after_delete(self, query, store):
        store.path.unlink()
        with pytest.raises(NoGroupingDataError):
            query.reload()


class TestListing:
    def test_all_leases(self, query):
        leases = query.get_all_leases()
        assert [(s.lessor, s.address) for s in leases] == [
            (ABC, MAIN),
            ("XYZ Holdings", "9 Elm Avenue"),
            ("XYZ Holdings", "10 Oak Road"),
        ]
        abc = leases[0]
        assert abc.base_lease == "lease-1"
        assert abc.amendment_count == 2
        assert abc.commencement_count == 1
        assert abc.delivery_count == 1
        assert abc.other_count == 0
        assert abc.total_documents == 5

    def test_addresses(self, query):
        assert query.get_addresses("XYZ Holdings") == ["9 Elm Avenue", "10 Oak Road"]

    def test_addresses_unknown_lessor(self, query):
        assert query.get_addresses("Nobody") == []


class TestLeaseFileLookups:
    def test_details(self, query):
        details = query.get_lease_details(ABC, MAIN)
        assert details.lease_file.base_lease == "lease-1"
        assert len(details.documents) == 5

    def test_details_missing(self, query):
        assert query.get_lease_details(ABC, "nowhere") is None

    def test_amendments_in_lease_file_order(self, query):
        assert [d.id for d in query.get_amendments(ABC, MAIN)] == ["amend-1", "amend-2"]

    def test_commencements_and_deliveries(self, query):
        assert [d.id for d in query.get_commencements(ABC, MAIN)] == ["rc-1"]
        assert [d.id for d in query.get_deliveries(ABC, MAIN)] == ["dl-1"]

    def test_lookups_on_missing_file_are_empty(self, query):
        assert query.get_amendments("Nobody", MAIN) == []
        assert query.get_base_lease("Nobody", MAIN) is None

    def test_base_lease(self, query):
        base = query.get_base_lease(ABC, MAIN)
        assert base.id == "lease-1"
        assert base.content == "content of lease-1"

    def test_no_base_lease(self, query):
        assert query.get_base_lease("XYZ Holdings", "10 Oak Road") is None

    def test_related_documents(self, query):
        related = query.get_related_documents(ABC, MAIN)
        assert related.base_lease.id == "lease-1"
        assert [d.id for d in related.amendments] == ["amend-1", "amend-2"]
        assert [d.id for d in related.commencements] == ["rc-1"]
        assert [d.id for d in related.deliveries] == ["dl-1"]
        assert related.others == []

    def test_related_documents_missing(self, query):
        assert query.get_related_documents("Nobody", MAIN) is None


class TestSearch:
    def test_search_by_lessor_case_insensitive(self, query):
        assert {s.lessor for s in query.search_by_lessor("xyz")} == {"XYZ Holdings"}

    def test_search_by_address_substring(self, query):
        assert [s.address for s in query.search_by_address("ELM")] == ["9 Elm Avenue"]

    def test_search_no_results(self, query):
        assert query.search_by_lessor("zzz") == []

    def test_find_grouped_document(self, query):
        loc = query.find_document_by_id("amend-1")
        assert (loc.lessor, loc.address) == (ABC, MAIN)
        assert loc.document.extraction.address == "123 Main Street"

    def test_find_ungrouped_document(self, query):
        loc = query.find_document_by_id("orphan")
        assert loc.lessor == UNKNOWN
        assert loc.address == UNKNOWN

    def test_find_missing_document(self, query):
        assert query.find_document_by_id("nope") is None


class TestAggregates:
    def test_ungrouped(self, query):
        assert [d.id for d in query.get_ungrouped_documents()] == ["orphan"]

    def test_stats(self, query):
        stats = query.get_stats()
        assert stats.total_documents == 8
        assert stats.grouped_documents == 7
        assert stats.ungrouped_documents == 1
        assert stats.lessors == 2
        assert stats.addresses == 3


class TestReadsDoNotLeak:
    def test_mutating_details_leaves_session_intact(self, query):
        details = query.get_lease_details(ABC, MAIN)
        details.lease_file.amendments.clear()
        details.documents[0].content = "changed"

        fresh = query.get_lease_details(ABC, MAIN)
        assert fresh.lease_file.amendments == ["amend-1", "amend-2"]
        assert fresh.documents[0].content == "content of lease-1"

    def test_mutating_related_documents(self, query):
        related = query.get_related_documents(ABC, MAIN)
        related.base_lease.extraction.lessor = "Someone Else"
        assert query.get_base_lease(ABC, MAIN).extraction.lessor == ABC

    def test_mutating_stats(self, query):
        query.get_stats().total_documents = 0
        assert query.get_stats().total_documents == 8

    def test_mutating_found_document(self, query):
        query.find_document_by_id("orphan").document.filename = "renamed.txt"
        assert query.get_ungrouped_documents()[0].filename == "orphan.txt"
