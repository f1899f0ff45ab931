# src/pipeline/orchestrator.py - v2
"""Batch orchestrator: process documents one by one, then group and persist.

Documents are processed strictly sequentially because the external
capability is rate limited; a fixed cooldown separates documents except
after a cache hit or after the last one. A document whose processing fails
is logged and skipped. The cache is flushed once at the end of the run and
the grouping snapshot is written exactly once, after the whole batch.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Awaitable, Callable, Sequence

from leaseorganizer.batch.models import BatchRunResult, DocumentFailure, SourceDocument
from leaseorganizer.config.settings import Settings
from leaseorganizer.core.models import ChunkConfig, ProcessedDocument
from leaseorganizer.grouping.grouper import group_documents
from leaseorganizer.logging.context import set_document_context, set_run_context, set_step
from leaseorganizer.pipeline.document_processor import process_document

if TYPE_CHECKING:
    from leaseorganizer.cache.json_store import JsonCacheStore
    from leaseorganizer.pipeline.agents.base_agent import BaseClassifier, BaseKeyExtractor
    from leaseorganizer.storage.grouping_store import GroupingStore

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


def generate_run_id() -> str:
    """Timestamped run id, e.g. 20260207_1615_b3c8d."""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M")
    return f"{stamp}_{uuid.uuid4().hex[:5]}"


class BatchOrchestrator:
    """Run one organize batch end to end."""

    def __init__(
        self,
        classifier: BaseClassifier,
        extractor: BaseKeyExtractor,
        cache: JsonCacheStore | None = None,
        store: GroupingStore | None = None,
        settings: Settings | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._classifier = classifier
        self._extractor = extractor
        self._cache = cache
        self._store = store
        self._settings = settings or Settings()
        self._chunk_config = ChunkConfig.from_settings(self._settings)
        self._sleep = sleep

    async def run(self, documents: Sequence[SourceDocument]) -> BatchRunResult:
        """Process, group and persist a batch.

        Returns:
            BatchRunResult with the grouping and per-run counters.
        """
        run_id = generate_run_id()
        set_run_context(run_id)
        start = time.monotonic()
        total = len(documents)
        logger.info("Run %s: processing %d documents", run_id, total)

        processed: list[ProcessedDocument] = []
        failures: list[DocumentFailure] = []
        from_cache = 0
        chunked = 0

        try:
            for index, source in enumerate(documents):
                set_document_context(source.id)
                logger.info("Processing document %d/%d: %s", index + 1, total, source.filename)
                try:
                    outcome = await process_document(
                        source.id,
                        source.filename,
                        source.content,
                        self._classifier,
                        self._extractor,
                        cache=self._cache,
                        chunk_config=self._chunk_config,
                    )
                except Exception as exc:
                    logger.error("Failed to process %s: %s", source.filename, exc, exc_info=True)
                    failures.append(
                        DocumentFailure(id=source.id, filename=source.filename, error=str(exc))
                    )
                    hit_cache = False
                else:
                    doc = outcome.document
                    processed.append(doc)
                    hit_cache = outcome.from_cache
                    from_cache += int(hit_cache)
                    if outcome.chunking_info is not None and outcome.chunking_info.was_chunked:
                        chunked += 1
                    logger.info(
                        "Type: %s (%s), lessor: %s, address: %s",
                        doc.classification.document_type,
                        doc.classification.confidence,
                        doc.extraction.lessor or "unknown",
                        doc.extraction.address or "unknown",
                    )

                if index + 1 < total and not hit_cache and self._settings.rate_limit_delay_s > 0:
                    logger.info("Waiting %.0fs before next document", self._settings.rate_limit_delay_s)
                    await self._sleep(self._settings.rate_limit_delay_s)
        finally:
            set_document_context(None)
            if self._cache is not None:
                self._cache.save()

        set_step("group")
        result = group_documents(processed, self._settings.similarity_threshold)
        snapshot_saved = self._store.save(result) if self._store is not None else False
        set_step(None)

        if failures:
            logger.warning("%d of %d documents failed and were skipped", len(failures), total)

        return BatchRunResult(
            run_id=run_id,
            result=result,
            processed=len(processed),
            from_cache=from_cache,
            chunked=chunked,
            failures=failures,
            snapshot_saved=snapshot_saved,
            duration_seconds=round(time.monotonic() - start, 3),
        )
