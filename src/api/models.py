# src/api/models.py - v2
"""Public API models returned by the query session."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from leaseorganizer.core.models import CamelModel, LeaseFile, ProcessedDocument

QueryOperation = Literal[
    "list_all_leases",
    "list_lessors",
    "list_addresses",
    "get_lease_details",
    "get_base_lease",
    "get_amendments",
    "get_commencements",
    "get_deliveries",
    "get_related_documents",
    "search_by_lessor",
    "search_by_address",
    "find_document",
    "get_stats",
    "get_ungrouped",
]


class LeaseSummary(CamelModel):
    """One lease file with per-category counts."""

    lessor: str
    address: str
    base_lease: str | None
    amendment_count: int
    commencement_count: int
    delivery_count: int
    other_count: int
    total_documents: int


class LeaseDetails(CamelModel):
    """Lease file and the full documents filed under it."""

    lessor: str
    address: str
    lease_file: LeaseFile
    documents: list[ProcessedDocument]


class RelatedDocuments(CamelModel):
    """Documents of one lease file, resolved per category."""

    base_lease: ProcessedDocument | None = None
    amendments: list[ProcessedDocument] = Field(default_factory=list)
    commencements: list[ProcessedDocument] = Field(default_factory=list)
    deliveries: list[ProcessedDocument] = Field(default_factory=list)
    others: list[ProcessedDocument] = Field(default_factory=list)


class DocumentLocation(CamelModel):
    """Where a document was filed. Ungrouped documents report ``unknown``."""

    document: ProcessedDocument
    lessor: str
    address: str


class QueryResponse(CamelModel):
    """Outcome of a named query operation."""

    success: bool
    operation: str
    error: str | None = None
    payload: Any = None
