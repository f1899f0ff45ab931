# src/cache/cache_factory.py - v3
"""Factory for the document result cache."""

from __future__ import annotations

from leaseorganizer.cache.json_store import JsonCacheStore
from leaseorganizer.config.settings import Settings


def create_cache_store(
    settings: Settings | None = None,
    capability_id: str | None = None,
) -> JsonCacheStore | None:
    """Instantiate and load the configured cache.

    Args:
        settings: Application settings. Defaults apply when None.
        capability_id: Identifier of the classify/extract capability. Only
            folded into keys when CACHE_INCLUDE_CAPABILITY_ID is set.

    Returns:
        A loaded JsonCacheStore, or None when caching is disabled.
    """
    settings = settings or Settings()
    if not settings.cache_enabled:
        return None

    scoped_id = capability_id if settings.cache_include_capability_id else None
    store = JsonCacheStore(cache_file=settings.cache_file, capability_id=scoped_id)
    store.load()
    return store
