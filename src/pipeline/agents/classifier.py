# src/pipeline/agents/classifier.py - v1
"""LLM-backed lease document classifier."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, ValidationError

from leaseorganizer.core.models import Classification, Confidence, DocumentType
from leaseorganizer.llm.models import Message
from leaseorganizer.pipeline.agents.base_agent import (
    AgentResponseError,
    BaseClassifier,
    parse_json_response,
)

if TYPE_CHECKING:
    from leaseorganizer.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a document classification agent for lease documents.

Classify each document into one of these categories:
- lease: A base/original lease agreement
- amendment: An amendment or modification to an existing lease
- rent_commencement: A rent commencement letter or notice
- delivery_letter: A delivery letter or notice
- other: Any other document type

Amendments are changes to a living base lease document and usually
reference the original lease they modify.

When classifying, look for document titles and headers, legal language
patterns, references to other documents, and effective dates."""


class ClassificationOutput(BaseModel):
    """Schema the model is asked to fill."""

    documentType: DocumentType = Field(description="Document category")
    confidence: Confidence = Field(description="Confidence in the category")
    reasoning: str = Field(description="One or two sentences justifying the label")


class LLMClassifier(BaseClassifier):
    """Classify documents with a single structured LLM call."""

    def __init__(
        self,
        client: BaseLLMClient,
        max_tokens: int = 1024,
        temperature: float = 0.0,
    ) -> None:
        self._client = client
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    def name(self) -> str:
        return "doc-classifier"

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def capability_id(self) -> str:
        return f"{self.name}/{self.version}@{self._client.model_name}"

    async def classify(self, text: str) -> Classification:
        response = await self._client.complete(
            messages=[Message(role="user", content=f"Classify this document:\n\n{text}")],
            system=SYSTEM_PROMPT,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            response_format=ClassificationOutput,
        )
        if response.truncated:
            logger.warning("Classification reply hit max_tokens (%d)", self._max_tokens)
        logger.debug("Classification used %d tokens", response.total_tokens)
        data = parse_json_response(response.content)
        try:
            return Classification.model_validate(data)
        except ValidationError as e:
            raise AgentResponseError(f"Unexpected classification payload: {e}") from e
