# src/cache/fingerprint.py - v3
"""Content fingerprints used as cache keys.

Keys depend on the raw document text only, never on filename or id, so
identical content filed under different names shares one cache slot.
"""

from __future__ import annotations

import hashlib


def hash_content(content: str) -> str:
    """SHA-256 hex digest of the UTF-8 encoded text."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def cache_key(content: str, capability_id: str | None = None) -> str:
    """Cache key for a document, optionally scoped to a capability version.

    Without a capability id the key is the plain content hash, which keeps
    existing cache files valid.
    """
    if not capability_id:
        return hash_content(content)
    digest = hashlib.sha256()
    digest.update(capability_id.encode("utf-8"))
    digest.update(b"\x00")
    digest.update(content.encode("utf-8"))
    return digest.hexdigest()
