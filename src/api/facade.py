# src/api/facade.py - v3
"""Public API facade: organize a folder, open a query session.

Usage:
    from leaseorganizer.api.facade import organize_folder, open_query
    run = await organize_folder("./documents")
    query = open_query()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from leaseorganizer.api.query import LeaseQuery
from leaseorganizer.batch.models import BatchRunResult
from leaseorganizer.batch.scanner import scan_folder
from leaseorganizer.cache.cache_factory import create_cache_store
from leaseorganizer.config.settings import Settings
from leaseorganizer.pipeline.orchestrator import BatchOrchestrator
from leaseorganizer.storage.grouping_store import GroupingStore

if TYPE_CHECKING:
    from leaseorganizer.pipeline.agents.base_agent import BaseClassifier, BaseKeyExtractor

logger = logging.getLogger(__name__)


def create_agents(settings: Settings) -> tuple[BaseClassifier, BaseKeyExtractor]:
    """LLM-backed classifier and extractor sharing one client."""
    from leaseorganizer.llm.client_factory import create_llm_client
    from leaseorganizer.pipeline.agents.classifier import LLMClassifier
    from leaseorganizer.pipeline.agents.key_extractor import LLMKeyExtractor

    client = create_llm_client(settings)
    return (
        LLMClassifier(client, settings.llm_max_tokens, settings.llm_temperature),
        LLMKeyExtractor(client, settings.llm_max_tokens, settings.llm_temperature),
    )


async def organize_folder(
    folder: str | Path,
    settings: Settings | None = None,
    classifier: BaseClassifier | None = None,
    extractor: BaseKeyExtractor | None = None,
) -> BatchRunResult:
    """Read, classify, extract, group and persist every document in a folder.

    Args:
        folder: Directory holding .json/.txt/.md/.text documents.
        settings: Global settings. Loaded from .env if None.
        classifier: Classification capability. LLM-backed if None.
        extractor: Extraction capability. LLM-backed if None.

    Returns:
        BatchRunResult; its grouping has also been written to GROUPING_FILE.
    """
    settings = settings or Settings()
    if classifier is None or extractor is None:
        default_classifier, default_extractor = create_agents(settings)
        classifier = classifier or default_classifier
        extractor = extractor or default_extractor

    scan = scan_folder(folder, settings.scan_extensions_list)
    logger.info("Found %d documents in %s", scan.count, folder)
    for err in scan.errors:
        logger.warning("Could not read %s: %s", err.filename, err.error)

    cache = create_cache_store(
        settings, capability_id=f"{classifier.capability_id}+{extractor.capability_id}"
    )
    orchestrator = BatchOrchestrator(
        classifier,
        extractor,
        cache=cache,
        store=GroupingStore(settings.grouping_file),
        settings=settings,
    )
    return await orchestrator.run(scan.documents)


def open_query(settings: Settings | None = None) -> LeaseQuery:
    """Query session over the last saved grouping.

    Raises:
        NoGroupingDataError: If no organize run has produced a snapshot.
    """
    settings = settings or Settings()
    return LeaseQuery(GroupingStore(settings.grouping_file))
