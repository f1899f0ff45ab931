# src/chunking/splitter.py - v1
"""Boundary-aware splitting of oversized documents into overlapping chunks.

Each chunk is at most ``max_chunk_size`` characters. Before closing a chunk
that does not reach the end of the text, the tail of the window is scanned
for the best break point: paragraph break, then sentence end, then newline,
else the raw cut. The next chunk starts ``overlap_size`` characters before
the previous end, but always strictly after the previous start.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import NamedTuple, Sequence

logger = logging.getLogger(__name__)

# Break markers in priority order; the cut lands right after the marker.
_BREAK_MARKERS = ("\n\n", ". ", "\n")
_MAX_SCAN_LENGTH = 200


class ChunkSpan(NamedTuple):
    """Half-open character range [start, end) of one chunk."""

    start: int
    end: int


def needs_chunking(content: str, size_threshold: int) -> bool:
    """True iff the content is longer than the threshold."""
    return len(content) > size_threshold


def _find_break(content: str, start: int, end: int) -> int:
    """Best cut position in (start, end], scanning only the window tail."""
    scan_length = min(_MAX_SCAN_LENGTH, (end - start) // 5)
    scan_start = max(end - scan_length, start)
    region = content[scan_start:end]
    for marker in _BREAK_MARKERS:
        idx = region.rfind(marker)
        if idx != -1:
            return scan_start + idx + len(marker)
    return end


def compute_chunk_spans(
    content: str,
    max_chunk_size: int,
    overlap_size: int = 0,
) -> list[ChunkSpan]:
    """Character spans of the chunks ``split_into_chunks`` would return.

    Raises:
        ValueError: If max_chunk_size is not positive or overlap is negative.
    """
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be > 0")
    if overlap_size < 0:
        raise ValueError("overlap_size must be >= 0")

    length = len(content)
    if length <= max_chunk_size:
        return [ChunkSpan(0, length)]

    spans: list[ChunkSpan] = []
    position = 0
    while position < length:
        end = min(position + max_chunk_size, length)
        if end < length:
            end = _find_break(content, position, end)

        spans.append(ChunkSpan(position, end))
        if end >= length:
            break

        next_position = end - overlap_size
        position = next_position if next_position > position else end

    return spans


def split_into_chunks(
    content: str,
    max_chunk_size: int,
    overlap_size: int = 0,
) -> list[str]:
    """Split content into ordered, possibly overlapping chunks.

    Content no longer than max_chunk_size comes back as a single chunk
    equal to the input.
    """
    spans = compute_chunk_spans(content, max_chunk_size, overlap_size)
    return [content[span.start:span.end] for span in spans]


def reassemble(chunks: Sequence[str], spans: Sequence[ChunkSpan]) -> str:
    """Rebuild the original text, dropping each chunk's overlap with the next."""
    if len(chunks) != len(spans):
        raise ValueError("chunks and spans must have the same length")
    parts: list[str] = []
    for i, (chunk, span) in enumerate(zip(chunks, spans)):
        if i + 1 < len(spans):
            parts.append(chunk[: spans[i + 1].start - span.start])
        else:
            parts.append(chunk)
    return "".join(parts)


@dataclass
class SpanValidation:
    """Result of span validation."""

    valid: bool = True
    errors: list[str] = field(default_factory=list)


def validate_spans(
    content: str,
    spans: Sequence[ChunkSpan],
    max_chunk_size: int | None = None,
) -> SpanValidation:
    """Check that spans cover the content without gaps and make progress."""
    result = SpanValidation()

    def fail(msg: str) -> None:
        result.valid = False
        result.errors.append(msg)

    if not spans:
        fail("Empty span list")
        return result

    if spans[0].start != 0:
        fail(f"First span starts at {spans[0].start}, expected 0")
    if spans[-1].end != len(content):
        fail(f"Last span ends at {spans[-1].end}, expected {len(content)}")

    for i, span in enumerate(spans):
        if span.end < span.start:
            fail(f"Span {i} is inverted: {span}")
        if max_chunk_size is not None and span.end - span.start > max_chunk_size:
            fail(f"Span {i} exceeds max size: {span.end - span.start}")
        if i > 0:
            prev = spans[i - 1]
            if span.start <= prev.start:
                fail(f"Span {i} does not advance past span {i - 1}")
            if span.start > prev.end:
                fail(f"Gap between span {i - 1} and span {i}")

    return result
