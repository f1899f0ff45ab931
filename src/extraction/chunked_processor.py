# src/extraction/chunked_processor.py - v2
"""Classify and extract one document, chunking it when it is oversized.

Small documents: classification and extraction run concurrently on the
full text. Oversized documents: the text is split, classification runs on
the first chunk only (the document type shows in the opening), and
extraction walks the chunks in order, merging after each one and stopping
once lessor, address and tenant are all resolved or the chunk limit is
reached. The classification call and the extraction loop run concurrently.

Capability errors propagate to the caller; nothing here retries. When one
side fails the other is cancelled before the error is re-raised, so no
capability call outlives the document.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from leaseorganizer.chunking.splitter import needs_chunking, split_into_chunks
from leaseorganizer.core.models import (
    ChunkConfig,
    ChunkingInfo,
    Classification,
    ExtractionResult,
)
from leaseorganizer.extraction.result_merger import merge_extraction_results

if TYPE_CHECKING:
    from leaseorganizer.pipeline.agents.base_agent import BaseClassifier, BaseKeyExtractor

logger = logging.getLogger(__name__)


class ChunkedProcessingResult(BaseModel):
    """Per-document capability output plus chunking diagnostics."""

    classification: Classification
    extraction: ExtractionResult
    chunking_info: ChunkingInfo


async def process_document_chunked(
    content: str,
    classifier: BaseClassifier,
    extractor: BaseKeyExtractor,
    config: ChunkConfig | None = None,
) -> ChunkedProcessingResult:
    """Run the external capability over a document of any size.

    Args:
        content: Full document text.
        classifier: Classification capability.
        extractor: Key extraction capability.
        config: Chunk limits. Defaults apply when None.

    Returns:
        ChunkedProcessingResult with classification, merged extraction,
        and chunking diagnostics.
    """
    config = config or ChunkConfig()
    original_size = len(content)

    if not needs_chunking(content, config.size_threshold):
        classification, extraction = await _run_together(
            classifier.classify(content),
            extractor.extract(content),
        )
        return ChunkedProcessingResult(
            classification=classification,
            extraction=extraction,
            chunking_info=ChunkingInfo(
                was_chunked=False,
                total_chunks=1,
                chunks_processed=1,
                original_size=original_size,
            ),
        )

    chunks = split_into_chunks(content, config.max_chunk_size, config.overlap_size)
    logger.info(
        "Large document detected (%.1fKB), split into %d chunks",
        original_size / 1024, len(chunks),
    )

    classification, (extraction, chunks_processed) = await _run_together(
        classifier.classify(chunks[0]),
        _extract_from_chunks(chunks, extractor, config.max_extraction_chunks),
    )
    logger.debug("Classification from chunk 1: %s", classification.document_type)

    return ChunkedProcessingResult(
        classification=classification,
        extraction=extraction,
        chunking_info=ChunkingInfo(
            was_chunked=True,
            total_chunks=len(chunks),
            chunks_processed=chunks_processed,
            original_size=original_size,
        ),
    )


async def _extract_from_chunks(
    chunks: list[str],
    extractor: BaseKeyExtractor,
    max_chunks: int,
) -> tuple[ExtractionResult, int]:
    """Extract chunk by chunk until all required fields resolve."""
    results: list[ExtractionResult] = []
    limit = min(len(chunks), max_chunks)

    for i in range(limit):
        logger.debug("Extracting from chunk %d/%d", i + 1, limit)
        results.append(await extractor.extract(chunks[i]))
        if merge_extraction_results(results).is_complete:
            logger.debug("All key fields found after %d chunks", i + 1)
            break

    return merge_extraction_results(results), len(results)


async def _run_together(*coros: Awaitable[Any]) -> list[Any]:
    """Await coroutines concurrently, cancelling the rest if one fails."""
    tasks = [asyncio.ensure_future(c) for c in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
