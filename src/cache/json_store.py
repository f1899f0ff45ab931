# src/cache/json_store.py - v2
"""JSON file-backed document result cache.

The whole cache is one versioned envelope ``{version, entries}`` held in
memory during a run and flushed once at the end. Entries are keyed by a
content fingerprint (see cache/fingerprint.py).

Failure policy: I/O and parse errors never reach the caller. A failed load
starts from an empty cache, a failed save skips the write. A version
mismatch discards every entry without attempting migration.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path

from pydantic import ValidationError

from leaseorganizer.cache.fingerprint import cache_key
from leaseorganizer.cache.models import (
    CACHE_VERSION,
    CachedResult,
    CacheEnvelope,
    CacheStats,
)
from leaseorganizer.core.models import Classification, ExtractionResult

logger = logging.getLogger(__name__)


class JsonCacheStore:
    """In-memory, dirty-flagged cache persisted as a single JSON file."""

    def __init__(self, cache_file: str | Path, capability_id: str | None = None) -> None:
        self._file = Path(cache_file).expanduser()
        self._capability_id = capability_id
        self._envelope = CacheEnvelope()
        self._dirty = False

    @property
    def cache_file(self) -> Path:
        return self._file

    @property
    def is_dirty(self) -> bool:
        """True when entries changed since the last load or save."""
        return self._dirty

    def load(self) -> None:
        """Replace in-memory entries with the file contents."""
        self._envelope = self._read_envelope()
        self._dirty = False

    def _read_envelope(self) -> CacheEnvelope:
        if not self._file.exists():
            return CacheEnvelope()
        try:
            data = json.loads(self._file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Failed to load cache %s, starting fresh: %s", self._file, e)
            return CacheEnvelope()

        if not isinstance(data, dict) or data.get("version") != CACHE_VERSION:
            found = data.get("version") if isinstance(data, dict) else None
            logger.info(
                "Cache version mismatch (found %r, expected %d), starting fresh",
                found, CACHE_VERSION,
            )
            return CacheEnvelope()

        try:
            envelope = CacheEnvelope.model_validate(data)
        except ValidationError as e:
            logger.warning("Malformed cache %s, starting fresh: %s", self._file, e)
            return CacheEnvelope()

        logger.debug("Loaded %d cache entries from %s", len(envelope.entries), self._file)
        return envelope

    def save(self) -> None:
        """Write the cache to disk if anything changed since the last save."""
        if not self._dirty:
            return
        try:
            self._file.parent.mkdir(parents=True, exist_ok=True)
            self._file.write_text(
                json.dumps(self._envelope.to_json_dict(), indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            logger.warning("Failed to save cache %s: %s", self._file, e)
            return
        self._dirty = False
        logger.debug("Saved %d cache entries to %s", len(self._envelope.entries), self._file)

    def get(self, content: str) -> CachedResult | None:
        """Cached result for this exact content, or None."""
        return self._envelope.entries.get(self._key(content))

    def set(
        self,
        content: str,
        classification: Classification,
        extraction: ExtractionResult,
    ) -> None:
        """Store a result for this content and mark the cache dirty."""
        self._envelope.entries[self._key(content)] = CachedResult(
            classification=classification,
            extraction=extraction,
            timestamp=int(time.time() * 1000),
        )
        self._dirty = True

    def stats(self) -> CacheStats:
        return CacheStats(entries=len(self._envelope.entries), file=str(self._file))

    def clear(self) -> None:
        """Drop all entries; the empty cache is written on the next save."""
        self._envelope = CacheEnvelope()
        self._dirty = True

    def _key(self, content: str) -> str:
        return cache_key(content, self._capability_id)

    def __len__(self) -> int:
        return len(self._envelope.entries)

    def __contains__(self, content: object) -> bool:
        return isinstance(content, str) and self._key(content) in self._envelope.entries
