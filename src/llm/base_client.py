# src/llm/base_client.py - v2
"""Abstract LLM client interface used by the classify/extract agents."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from leaseorganizer.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        """Text completion, optionally constrained to a JSON schema."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (e.g. anthropic)."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Model identifier; part of the capability id used for cache scoping."""
