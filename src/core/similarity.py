# src/core/similarity.py - v3
"""Approximate string similarity for grouping keys.

Uses the Sørensen-Dice coefficient over character bigrams, with all
whitespace removed first. Scores are in [0, 1]; identical strings score 1.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable

DEFAULT_SIMILARITY_THRESHOLD = 0.8

_WHITESPACE = re.compile(r"\s+")


def _bigrams(text: str) -> Counter[str]:
    return Counter(text[i:i + 2] for i in range(len(text) - 1))


def compare_two_strings(first: str, second: str) -> float:
    """Dice coefficient of the bigram multisets of two strings.

    Comparison is case-sensitive; callers lower-case when needed.
    """
    first = _WHITESPACE.sub("", first)
    second = _WHITESPACE.sub("", second)

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    first_bigrams = _bigrams(first)
    intersection = 0
    for i in range(len(second) - 1):
        bigram = second[i:i + 2]
        if first_bigrams[bigram] > 0:
            first_bigrams[bigram] -= 1
            intersection += 1

    return (2.0 * intersection) / (len(first) + len(second) - 2)


def find_fuzzy_match(
    needle: str,
    candidates: Iterable[str],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> str | None:
    """Return the first candidate whose lower-cased similarity reaches threshold.

    Candidates are tried in iteration order, so the earliest key wins even
    when a later one would score higher.
    """
    lowered = needle.lower()
    for candidate in candidates:
        if compare_two_strings(lowered, candidate.lower()) >= threshold:
            return candidate
    return None
