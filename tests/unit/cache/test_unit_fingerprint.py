# tests/unit/cache/test_unit_fingerprint.py - v1
"""Tests for cache/fingerprint.py."""

from __future__ import annotations

import hashlib

from leaseorganizer.cache.fingerprint import cache_key, hash_content


class TestHashContent:
    def test_sha256_hex(self):
        assert hash_content("abc") == hashlib.sha256(b"abc").hexdigest()

    def test_utf8_encoding(self):
        assert hash_content("café") == hashlib.sha256("café".encode("utf-8")).hexdigest()


class TestCacheKey:
    def test_plain_key_is_content_hash(self):
        assert cache_key("lease text") == hash_content("lease text")
        assert cache_key("lease text", "") == hash_content("lease text")

    def test_capability_scopes_key(self):
        plain = cache_key("lease text")
        v1 = cache_key("lease text", "doc-classifier/1.0.0@model-a")
        v2 = cache_key("lease text", "doc-classifier/1.0.0@model-b")
        assert len({plain, v1, v2}) == 3

    def test_deterministic(self):
        assert cache_key("x", "cap") == cache_key("x", "cap")
