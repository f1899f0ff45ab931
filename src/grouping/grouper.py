# src/grouping/grouper.py - v1
"""Group processed documents into lessor -> address -> lease file.

Matching is greedy and order-dependent: a document's lessor is compared
against existing lessor keys in creation order and joins the first one
within the similarity threshold, otherwise its literal value becomes a new
key. The same match-or-create step then runs on addresses under that
lessor. Keys keep the first-seen spelling; later near-duplicates only
contribute their document id.
"""

from __future__ import annotations

import logging
from typing import Iterable

from leaseorganizer.core.models import (
    AddressGroup,
    GroupedOutput,
    GroupingResult,
    GroupingStats,
    LeaseFile,
    ProcessedDocument,
    SimplifiedOutput,
)
from leaseorganizer.core.similarity import DEFAULT_SIMILARITY_THRESHOLD, find_fuzzy_match

logger = logging.getLogger(__name__)


def group_documents(
    documents: Iterable[ProcessedDocument],
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> GroupingResult:
    """Build the lease file hierarchy for a batch.

    Documents with an unresolved lessor or address are left ungrouped;
    grouping on a single known key is not attempted.
    """
    documents = list(documents)
    grouped: GroupedOutput = {}
    ungrouped: list[ProcessedDocument] = []

    for doc in documents:
        lessor = doc.extraction.lessor
        address = doc.extraction.address
        if lessor is None or address is None:
            ungrouped.append(doc)
            continue

        lessor_key = find_fuzzy_match(lessor, grouped, similarity_threshold) or lessor
        addresses = grouped.setdefault(lessor_key, {})

        address_key = find_fuzzy_match(address, addresses, similarity_threshold) or address
        group = addresses.setdefault(address_key, AddressGroup())

        group.documents.append(doc)
        _file_document(group.lease_file, doc)

    result = GroupingResult(
        grouped=grouped,
        ungrouped=ungrouped,
        stats=compute_stats(grouped, ungrouped, total=len(documents)),
    )
    logger.info(
        "Grouped %d documents into %d lessors, %d addresses (%d ungrouped)",
        result.stats.total_documents, result.stats.lessors,
        result.stats.addresses, result.stats.ungrouped_documents,
    )
    return result


def _file_document(lease_file: LeaseFile, doc: ProcessedDocument) -> None:
    """Place a document id in the lease file according to its type."""
    doc_type = doc.classification.document_type
    if doc_type == "lease":
        # The first lease stays the base lease; later ones are kept as others
        if lease_file.base_lease is None:
            lease_file.base_lease = doc.id
        else:
            lease_file.others.append(doc.id)
    elif doc_type == "amendment":
        lease_file.amendments.append(doc.id)
    elif doc_type == "rent_commencement":
        lease_file.commencements.append(doc.id)
    elif doc_type == "delivery_letter":
        lease_file.deliveries.append(doc.id)
    else:
        lease_file.others.append(doc.id)


def compute_stats(
    grouped: GroupedOutput,
    ungrouped: list[ProcessedDocument],
    total: int | None = None,
) -> GroupingStats:
    """Recompute stats from hierarchy contents.

    ``total`` defaults to grouped + ungrouped; pass the input count to
    report it independently.
    """
    grouped_count = 0
    address_count = 0
    for addresses in grouped.values():
        address_count += len(addresses)
        for group in addresses.values():
            grouped_count += len(group.documents)

    return GroupingStats(
        total_documents=grouped_count + len(ungrouped) if total is None else total,
        grouped_documents=grouped_count,
        ungrouped_documents=len(ungrouped),
        lessors=len(grouped),
        addresses=address_count,
    )


def get_simplified_output(result: GroupingResult) -> SimplifiedOutput:
    """Hierarchy of lease files and ungrouped ids, without document content."""
    hierarchy = {
        lessor: {address: group.lease_file for address, group in addresses.items()}
        for lessor, addresses in result.grouped.items()
    }
    return SimplifiedOutput(
        hierarchy=hierarchy,
        ungrouped=[doc.id for doc in result.ungrouped],
        stats=result.stats,
    )
