# src/pipeline/agents/key_extractor.py - v1
"""LLM-backed extraction of lessor, address, tenant and base lease reference."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, ValidationError

from leaseorganizer.core.models import UNKNOWN, ExtractionResult
from leaseorganizer.llm.models import Message
from leaseorganizer.pipeline.agents.base_agent import (
    AgentResponseError,
    BaseKeyExtractor,
    parse_json_response,
)

if TYPE_CHECKING:
    from leaseorganizer.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = f"""\
You are a key extraction agent for lease documents.

Extract the following hierarchy keys from each document:
1. Lessor (primary key): the landlord or property owner
2. Property address (secondary key): normalize formats and fix typos
3. Tenant: the lessee or renter

For amendments and related documents, extract any reference to the base
lease (date, ID, or identifying info) as baseReference.

Address normalization rules:
- Convert to lowercase
- Remove extra spaces
- Standardize abbreviations (St. -> street, Ave. -> avenue, etc.)
- Format: "123 main street, city, state zip"

Use "{UNKNOWN}" for any field that is not stated in the text."""


class ExtractionOutput(BaseModel):
    """Schema the model is asked to fill."""

    lessor: str = Field(description=f"Landlord or owner, or '{UNKNOWN}'")
    address: str = Field(description=f"Normalized property address, or '{UNKNOWN}'")
    tenant: str = Field(description=f"Lessee, or '{UNKNOWN}'")
    baseReference: str | None = Field(
        default=None, description="Reference to the base lease, if any"
    )


class LLMKeyExtractor(BaseKeyExtractor):
    """Extract grouping keys with a single structured LLM call."""

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
        return "key-extractor"

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def capability_id(self) -> str:
        return f"{self.name}/{self.version}@{self._client.model_name}"

    async def extract(self, text: str) -> ExtractionResult:
        response = await self._client.complete(
            messages=[Message(role="user", content=f"Extract the keys from this document:\n\n{text}")],
            system=SYSTEM_PROMPT,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            response_format=ExtractionOutput,
        )
        if response.truncated:
            logger.warning("Extraction reply hit max_tokens (%d)", self._max_tokens)
        logger.debug("Extraction used %d tokens", response.total_tokens)
        data = parse_json_response(response.content)
        try:
            return ExtractionResult.model_validate(data)
        except ValidationError as e:
            raise AgentResponseError(f"Unexpected extraction payload: {e}") from e
