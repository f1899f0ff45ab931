# tests/conftest.py - v2
"""Shared test fixtures for all unit and integration tests.

Provides rule-based fake classify/extract capabilities, processed document
builders and isolated settings. No external dependencies; no LLM calls.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from leaseorganizer.config.settings import Settings
from leaseorganizer.core.models import (
    Classification,
    ExtractionResult,
    ProcessedDocument,
)
from leaseorganizer.logging.context import clear_context
from leaseorganizer.pipeline.agents.base_agent import BaseClassifier, BaseKeyExtractor


# === FAKE CAPABILITIES ===


class FakeClassifier(BaseClassifier):
    """Returns the label of the first marker found in the text."""

    def __init__(
        self,
        rules: dict[str, str] | None = None,
        default: str = "other",
        error: Exception | None = None,
    ) -> None:
        self.rules = rules or {}
        self.default = default
        self.error = error
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "fake-classifier"

    async def classify(self, text: str) -> Classification:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        label = next((v for k, v in self.rules.items() if k in text), self.default)
        return Classification(document_type=label, confidence="high", reasoning="fake")


class FakeExtractor(BaseKeyExtractor):
    """Returns the extraction of the first marker found in the text."""

    def __init__(
        self,
        rules: dict[str, ExtractionResult] | None = None,
        error_marker: str | None = None,
    ) -> None:
        self.rules = rules or {}
        self.error_marker = error_marker
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "fake-extractor"

    async def extract(self, text: str) -> ExtractionResult:
        self.calls.append(text)
        if self.error_marker and self.error_marker in text:
            raise RuntimeError("capability unavailable")
        return next(
            (v.model_copy() for k, v in self.rules.items() if k in text),
            ExtractionResult.unresolved(),
        )


# === FIXTURES: Capabilities ===


@pytest.fixture
def make_classifier() -> Callable[..., FakeClassifier]:
    return FakeClassifier


@pytest.fixture
def make_extractor() -> Callable[..., FakeExtractor]:
    return FakeExtractor


@pytest.fixture
def lease_rules() -> tuple[dict[str, str], dict[str, ExtractionResult]]:
    """Classifier and extractor rules for the ABC Properties lease file."""
    labels = {
        "LEASE AGREEMENT": "lease",
        "FIRST AMENDMENT": "amendment",
        "RENT COMMENCEMENT": "rent_commencement",
        "DELIVERY LETTER": "delivery_letter",
    }
    keys = {
        "ABC-1": ExtractionResult(
            lessor="ABC Properties LLC", address="123 Main St", tenant="Acme Corp"
        ),
        "ABC-2": ExtractionResult(
            lessor="ABC Properties LLC.",
            address="123 Main Street",
            tenant="Acme Corp",
            base_reference="Lease dated 2020-01-01",
        ),
        "XYZ-1": ExtractionResult(
            lessor="XYZ Holdings", address="9 Elm Avenue", tenant="Beta Inc"
        ),
    }
    return labels, keys


# === FIXTURES: Sample data ===


@pytest.fixture
def make_document() -> Callable[..., ProcessedDocument]:
    """Builder for ProcessedDocument with sensible defaults."""

    def _make(
        doc_id: str,
        document_type: str = "lease",
        lessor: str | None = "ABC Properties LLC",
        address: str | None = "123 Main St",
        tenant: str | None = "Acme Corp",
        content: str | None = None,
    ) -> ProcessedDocument:
        return ProcessedDocument(
            id=doc_id,
            filename=f"{doc_id}.txt",
            classification=Classification(document_type=document_type, confidence="high"),
            extraction=ExtractionResult(lessor=lessor, address=address, tenant=tenant),
            content=content if content is not None else f"content of {doc_id}",
        )

    return _make


# === FIXTURES: Settings and paths ===


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from any .env, writing under tmp_path, no cooldown."""
    return Settings(
        _env_file=None,
        cache_file=tmp_path / "cache.json",
        grouping_file=tmp_path / "grouping.json",
        rate_limit_delay_s=0,
    )


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()
