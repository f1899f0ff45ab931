# src/extraction/result_merger.py - v1
"""Fold per-chunk extraction results into a single result."""

from __future__ import annotations

from typing import Iterable

from leaseorganizer.core.models import ExtractionResult

_SCALAR_FIELDS = ("lessor", "address", "tenant")


def merge_extraction_results(results: Iterable[ExtractionResult]) -> ExtractionResult:
    """Merge results in order, keeping the first resolved value of each field.

    ``base_reference`` takes the first truthy value seen. Once lessor,
    address and tenant are all resolved the remaining results are not
    consulted, even if the reference is still missing. An empty input
    yields an all-unresolved result.
    """
    merged = ExtractionResult.unresolved()

    for result in results:
        for name in _SCALAR_FIELDS:
            if getattr(merged, name) is None and getattr(result, name) is not None:
                setattr(merged, name, getattr(result, name))
        if not merged.base_reference and result.base_reference:
            merged.base_reference = result.base_reference

        if merged.is_complete:
            break

    return merged
