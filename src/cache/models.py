# src/cache/models.py - v2
"""Cache domain models: CachedResult, CacheEnvelope, CacheStats."""

from __future__ import annotations

from pydantic import Field

from leaseorganizer.core.models import CamelModel, Classification, ExtractionResult

# Bump when the entry layout changes; older files are discarded on load.
CACHE_VERSION = 1


class CachedResult(CamelModel):
    """Classification and extraction previously computed for some content."""

    classification: Classification
    extraction: ExtractionResult
    timestamp: int  # epoch milliseconds


class CacheEnvelope(CamelModel):
    """On-disk form of the cache file."""

    version: int = CACHE_VERSION
    entries: dict[str, CachedResult] = Field(default_factory=dict)


class CacheStats(CamelModel):
    entries: int
    file: str
