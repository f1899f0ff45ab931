# src/api/query.py - v2
"""Read-only query session over the persisted grouping snapshot.

Usage:
    from leaseorganizer.api.query import LeaseQuery
    query = LeaseQuery(GroupingStore(".document-grouping.json"))
    query.get_amendments("abc properties llc", "123 main street")

A session cannot exist without a snapshot: construction and ``reload``
raise NoGroupingDataError. Narrower lookups for an unknown lessor, address
or document return empty results or None instead.
Results are copies, so callers may mutate them freely.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from leaseorganizer.api.models import (
    DocumentLocation,
    LeaseDetails,
    LeaseSummary,
    QueryResponse,
    RelatedDocuments,
)
from leaseorganizer.core.models import (
    UNKNOWN,
    CamelModel,
    GroupingResult,
    GroupingStats,
    ProcessedDocument,
)
from leaseorganizer.storage.grouping_store import GroupingStore

logger = logging.getLogger(__name__)


class NoGroupingDataError(LookupError):
    """No grouping snapshot is available to query."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"No grouping data found at {path}. Run the organize command first."
        )


class LeaseQuery:
    """Lookups over one loaded GroupingResult."""

    def __init__(self, store: GroupingStore | str | Path) -> None:
        self._store = store if isinstance(store, GroupingStore) else GroupingStore(store)
        self._result = self._load()

    def _load(self) -> GroupingResult:
        loaded = self._store.load()
        if loaded is None:
            raise NoGroupingDataError(self._store.path)
        return loaded

    def reload(self) -> None:
        """Re-read the snapshot from disk."""
        self._result = self._load()

    # --- Listing ---

    def get_all_leases(self) -> list[LeaseSummary]:
        return [
            LeaseSummary(
                lessor=lessor,
                address=address,
                base_lease=group.lease_file.base_lease,
                amendment_count=len(group.lease_file.amendments),
                commencement_count=len(group.lease_file.commencements),
                delivery_count=len(group.lease_file.deliveries),
                other_count=len(group.lease_file.others),
                total_documents=len(group.documents),
            )
            for lessor, addresses in self._result.grouped.items()
            for address, group in addresses.items()
        ]

    def get_lessors(self) -> list[str]:
        return list(self._result.grouped)

    def get_addresses(self, lessor: str) -> list[str]:
        return list(self._result.grouped.get(lessor, {}))

    # --- Per lease file ---

    def get_lease_details(self, lessor: str, address: str) -> LeaseDetails | None:
        group = self._result.grouped.get(lessor, {}).get(address)
        if group is None:
            return None
        return LeaseDetails(
            lessor=lessor,
            address=address,
            lease_file=group.lease_file.model_copy(deep=True),
            documents=[doc.model_copy(deep=True) for doc in group.documents],
        )

    def _documents_in(self, lessor: str, address: str, ids: Callable) -> list[ProcessedDocument]:
        details = self.get_lease_details(lessor, address)
        if details is None:
            return []
        wanted = set(ids(details.lease_file))
        return [doc for doc in details.documents if doc.id in wanted]

    def get_amendments(self, lessor: str, address: str) -> list[ProcessedDocument]:
        return self._documents_in(lessor, address, lambda lf: lf.amendments)

    def get_commencements(self, lessor: str, address: str) -> list[ProcessedDocument]:
        return self._documents_in(lessor, address, lambda lf: lf.commencements)

    def get_deliveries(self, lessor: str, address: str) -> list[ProcessedDocument]:
        return self._documents_in(lessor, address, lambda lf: lf.deliveries)

    def get_base_lease(self, lessor: str, address: str) -> ProcessedDocument | None:
        details = self.get_lease_details(lessor, address)
        if details is None or not details.lease_file.base_lease:
            return None
        base_id = details.lease_file.base_lease
        return next((doc for doc in details.documents if doc.id == base_id), None)

    def get_related_documents(self, lessor: str, address: str) -> RelatedDocuments | None:
        """All documents of a lease file, in lease file order per category."""
        details = self.get_lease_details(lessor, address)
        if details is None:
            return None
        lease_file = details.lease_file
        by_id = {doc.id: doc for doc in details.documents}

        def resolve(ids: list[str]) -> list[ProcessedDocument]:
            return [by_id[i] for i in ids if i in by_id]

        return RelatedDocuments(
            base_lease=by_id.get(lease_file.base_lease) if lease_file.base_lease else None,
            amendments=resolve(lease_file.amendments),
            commencements=resolve(lease_file.commencements),
            deliveries=resolve(lease_file.deliveries),
            others=resolve(lease_file.others),
        )

    # --- Search ---

    def search_by_lessor(self, query: str) -> list[LeaseSummary]:
        """Lease files whose lessor contains the query, case-insensitively."""
        needle = query.lower()
        return [s for s in self.get_all_leases() if needle in s.lessor.lower()]

    def search_by_address(self, query: str) -> list[LeaseSummary]:
        """Lease files whose address contains the query, case-insensitively."""
        needle = query.lower()
        return [s for s in self.get_all_leases() if needle in s.address.lower()]

    def find_document_by_id(self, document_id: str) -> DocumentLocation | None:
        """Locate a document in the grouped buckets, then the ungrouped list."""
        for lessor, addresses in self._result.grouped.items():
            for address, group in addresses.items():
                if document_id not in group.lease_file.all_ids():
                    continue
                for doc in group.documents:
                    if doc.id == document_id:
                        return DocumentLocation(
                            document=doc.model_copy(deep=True), lessor=lessor, address=address
                        )

        for doc in self._result.ungrouped:
            if doc.id == document_id:
                return DocumentLocation(
                    document=doc.model_copy(deep=True), lessor=UNKNOWN, address=UNKNOWN
                )
        return None

    # --- Aggregates ---

    def get_ungrouped_documents(self) -> list[ProcessedDocument]:
        return [doc.model_copy(deep=True) for doc in self._result.ungrouped]

    def get_stats(self) -> GroupingStats:
        return self._result.stats.model_copy()


# === Named operations ===


def _needs(**kwargs: str | None) -> str | None:
    missing = [name for name, value in kwargs.items() if not value]
    if missing:
        return f"Missing required argument(s): {', '.join(missing)}"
    return None


def _dump(value: Any, include_content: bool) -> Any:
    """JSON-ready form of a query result, stripping document content on request."""
    if isinstance(value, list):
        return [_dump(v, include_content) for v in value]
    if isinstance(value, CamelModel):
        data = value.to_json_dict()
        if not include_content:
            _strip_content(data)
        return data
    return value


def _strip_content(data: Any) -> None:
    if isinstance(data, dict):
        if "classification" in data and "extraction" in data:
            data.pop("content", None)
        for v in data.values():
            _strip_content(v)
    elif isinstance(data, list):
        for v in data:
            _strip_content(v)


def run_query(
    query: LeaseQuery,
    operation: str,
    lessor: str | None = None,
    address: str | None = None,
    search: str | None = None,
    document_id: str | None = None,
    include_content: bool = False,
) -> QueryResponse:
    """Dispatch a named operation and wrap its outcome.

    Missing arguments and unknown operations are reported in the response,
    not raised.
    """
    lease_ops: dict[str, Callable[[str, str], Any]] = {
        "get_lease_details": query.get_lease_details,
        "get_base_lease": query.get_base_lease,
        "get_amendments": query.get_amendments,
        "get_commencements": query.get_commencements,
        "get_deliveries": query.get_deliveries,
        "get_related_documents": query.get_related_documents,
    }

    error: str | None = None
    payload: Any = None

    if operation == "list_all_leases":
        payload = query.get_all_leases()
    elif operation == "list_lessors":
        payload = query.get_lessors()
    elif operation == "list_addresses":
        error = _needs(lessor=lessor)
        if error is None:
            payload = query.get_addresses(lessor)  # type: ignore[arg-type]
    elif operation in lease_ops:
        error = _needs(lessor=lessor, address=address)
        if error is None:
            payload = lease_ops[operation](lessor, address)  # type: ignore[arg-type]
            if payload is None and operation in ("get_lease_details", "get_related_documents"):
                error = f"No lease found for lessor {lessor!r} at {address!r}"
    elif operation in ("search_by_lessor", "search_by_address"):
        error = _needs(search=search)
        if error is None:
            search_fn = query.search_by_lessor if operation == "search_by_lessor" else query.search_by_address
            payload = search_fn(search)  # type: ignore[arg-type]
    elif operation == "find_document":
        error = _needs(document_id=document_id)
        if error is None:
            payload = query.find_document_by_id(document_id)  # type: ignore[arg-type]
            if payload is None:
                error = f"Document not found: {document_id}"
    elif operation == "get_stats":
        payload = query.get_stats()
    elif operation == "get_ungrouped":
        payload = query.get_ungrouped_documents()
    else:
        error = f"Unknown operation: {operation}"

    if error is not None:
        logger.debug("Query %s failed: %s", operation, error)
        return QueryResponse(success=False, operation=operation, error=error)
    return QueryResponse(
        success=True, operation=operation, payload=_dump(payload, include_content)
    )
