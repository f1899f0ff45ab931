# src/llm/models.py - v2
"""Request and response types exchanged with the LLM adapter."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Message(BaseModel):
    """One conversation turn. The system prompt travels separately."""

    role: Literal["user", "assistant"]
    content: str


class LLMResponse(BaseModel):
    """Provider-neutral completion result.

    ``content`` is the JSON text of the forced tool call when a response
    format was requested, otherwise the first text block.
    """

    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: int = 0
    stop_reason: str | None = None
    raw_response: Any = Field(default=None, repr=False)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def truncated(self) -> bool:
        """The model stopped because it hit max_tokens."""
        return self.stop_reason == "max_tokens"
