# src/llm/adapters/anthropic_adapter.py - v3
"""Anthropic Claude adapter implementing BaseLLMClient.

Uses the official anthropic SDK. Structured outputs are obtained by forcing
a single tool whose input schema is the requested pydantic model.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from pydantic import BaseModel

from leaseorganizer.llm.base_client import BaseLLMClient
from leaseorganizer.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)

_STRUCTURED_TOOL = "structured_output"


class AnthropicAdapter(BaseLLMClient):
    """Adapter for Anthropic Claude models."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self.__client = None

    @property
    def _client(self):
        """Lazy-init Anthropic client (only on first API call)."""
        if self.__client is None:
            import anthropic

            # None lets the SDK read ANTHROPIC_API_KEY itself
            self.__client = anthropic.AsyncAnthropic(api_key=self._api_key)
        return self.__client

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def model_name(self) -> str:
        return self._model

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        """Text completion via the Anthropic Messages API."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }
        if system:
            kwargs["system"] = system

        if response_format is not None:
            kwargs["tools"] = [
                {
                    "name": _STRUCTURED_TOOL,
                    "description": "Return structured data matching the schema",
                    "input_schema": response_format.model_json_schema(),
                }
            ]
            kwargs["tool_choice"] = {"type": "tool", "name": _STRUCTURED_TOOL}

        start = time.monotonic()
        response = await self._client.messages.create(**kwargs)
        latency_ms = int((time.monotonic() - start) * 1000)

        logger.debug(
            "anthropic %s: %d in / %d out tokens, %d ms",
            response.model, response.usage.input_tokens,
            response.usage.output_tokens, latency_ms,
        )

        return LLMResponse(
            content=self._extract_content(response, response_format is not None),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=response.model,
            provider="anthropic",
            latency_ms=latency_ms,
            stop_reason=getattr(response, "stop_reason", None),
            raw_response=response,
        )

    @staticmethod
    def _extract_content(response: Any, structured: bool) -> str:
        """Extract text (or tool input as JSON) from response content blocks."""
        for block in response.content:
            if structured and getattr(block, "type", None) == "tool_use":
                return json.dumps(block.input)
            if getattr(block, "type", None) == "text":
                return block.text
        return ""
