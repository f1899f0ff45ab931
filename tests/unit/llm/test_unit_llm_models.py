# tests/unit/llm/test_unit_llm_models.py - v2
"""Tests for llm/models.py."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from leaseorganizer.llm.models import LLMResponse, Message


class TestMessage:
    def test_system_role_rejected(self):
        with pytest.raises(ValidationError):
            Message(role="system", content="x")


class TestLLMResponse:
    def test_total_tokens(self):
        r = LLMResponse(content="{}", model="m", provider="anthropic", input_tokens=10, output_tokens=4)
        assert r.total_tokens == 14

    def test_truncated(self):
        r = LLMResponse(content="{", model="m", provider="anthropic", stop_reason="max_tokens")
        assert r.truncated
        assert not LLMResponse(content="{}", model="m", provider="anthropic").truncated

    def test_raw_response_hidden_from_repr(self):
        r = LLMResponse(content="", model="m", provider="p", raw_response=object())
        assert "raw_response" not in repr(r)
