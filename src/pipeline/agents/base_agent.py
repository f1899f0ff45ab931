# src/pipeline/agents/base_agent.py - v2
"""Interfaces for the external classify and extract capabilities.

The core pipeline depends only on these two interfaces. LLM-backed
implementations live next to this module; tests substitute fakes.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from leaseorganizer.core.models import Classification, ExtractionResult


class AgentResponseError(Exception):
    """The capability returned output that could not be parsed."""


class BaseClassifier(ABC):
    """Text -> document type label with confidence and reasoning."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Classifier identifier."""

    @property
    def capability_id(self) -> str:
        """Identifies the classifier version for cache scoping."""
        return self.name

    @abstractmethod
    async def classify(self, text: str) -> Classification:
        """Classify a document (or its first chunk)."""


class BaseKeyExtractor(ABC):
    """Text -> lessor, address, tenant and optional base lease reference."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Extractor identifier."""

    @property
    def capability_id(self) -> str:
        """Identifies the extractor version for cache scoping."""
        return self.name

    @abstractmethod
    async def extract(self, text: str) -> ExtractionResult:
        """Extract grouping keys. Addresses come back already normalized."""


def parse_json_response(content: str) -> dict[str, Any]:
    """Parse a JSON object from an LLM reply, tolerating code fences.

    Raises:
        AgentResponseError: If no JSON object can be decoded.
    """
    text = content.strip()
    if text.startswith("```"):
        lines = [ln for ln in text.split("\n") if not ln.strip().startswith("```")]
        text = "\n".join(lines).strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise AgentResponseError(f"Invalid JSON in response: {e}") from e
    if not isinstance(data, dict):
        raise AgentResponseError(f"Expected a JSON object, got {type(data).__name__}")
    return data
