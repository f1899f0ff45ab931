# src/pipeline/document_processor.py - v1
"""Per-document entry point: cache lookup, capability calls, cache write-back."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel

from leaseorganizer.core.models import ChunkConfig, ChunkingInfo, ProcessedDocument
from leaseorganizer.extraction.chunked_processor import process_document_chunked
from leaseorganizer.logging.context import set_step

if TYPE_CHECKING:
    from leaseorganizer.cache.json_store import JsonCacheStore
    from leaseorganizer.pipeline.agents.base_agent import BaseClassifier, BaseKeyExtractor

logger = logging.getLogger(__name__)


class ProcessDocumentResult(BaseModel):
    """Processed document plus how it was obtained."""

    document: ProcessedDocument
    from_cache: bool
    chunking_info: ChunkingInfo | None = None


async def process_document(
    document_id: str,
    filename: str,
    content: str,
    classifier: BaseClassifier,
    extractor: BaseKeyExtractor,
    cache: JsonCacheStore | None = None,
    chunk_config: ChunkConfig | None = None,
) -> ProcessDocumentResult:
    """Classify and extract one document, reusing cached results.

    The cache is consulted by content, so a renamed copy of an already
    processed document costs no capability call. Fresh results are written
    back to the cache (in memory; the caller decides when to save).

    Raises:
        Exception: Whatever the classifier or extractor raised.
    """
    if cache is not None:
        set_step("cache")
        cached = cache.get(content)
        if cached is not None:
            logger.info("Cache hit for %s", filename)
            return ProcessDocumentResult(
                document=ProcessedDocument(
                    id=document_id,
                    filename=filename,
                    classification=cached.classification,
                    extraction=cached.extraction,
                    content=content,
                ),
                from_cache=True,
            )

    set_step("classify_extract")
    result = await process_document_chunked(content, classifier, extractor, chunk_config)

    if cache is not None:
        cache.set(content, result.classification, result.extraction)

    return ProcessDocumentResult(
        document=ProcessedDocument(
            id=document_id,
            filename=filename,
            classification=result.classification,
            extraction=result.extraction,
            content=content,
        ),
        from_cache=False,
        chunking_info=result.chunking_info,
    )
