"""Tests for the Anthropic fallback client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from anthropic import APIConnectionError, APIStatusError, APITimeoutError, RateLimitError

from soap_scribe.llm.anthropic_llm import AnthropicLLM
from soap_scribe.llm.base import (
    LLMConnectionError,
    LLMError,
    LLMOverloadError,
    LLMTimeoutError,
    Message,
    MessageRole,
    parse_json_response,
)

REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _status_error(cls, status):
    return cls("failed", response=httpx.Response(status, request=REQUEST), body=None)


def _reply(text):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text)],
        model="claude-test",
        usage=SimpleNamespace(input_tokens=12, output_tokens=8),
        stop_reason="end_turn",
    )


@pytest.fixture
def messages():
    return [
        Message(role=MessageRole.SYSTEM, content="You are a physical therapist."),
        Message(role=MessageRole.USER, content="Knee pain on stairs."),
    ]


@pytest.fixture
def claude():
    """Anthropic client with the SDK call mocked."""
    llm = AnthropicLLM(api_key="test-key", model="claude-test")
    llm._client = MagicMock()
    llm._client.messages.create = AsyncMock(return_value=_reply('"subjective": {"content": "Knee pain"}}'))
    return llm


class TestAnthropicComplete:
    """Tests for AnthropicLLM.complete."""

    @pytest.mark.asyncio
    async def test_system_prompt_passed_separately(self, claude, messages):
        """Test the system message becomes the system parameter."""
        await claude.complete(messages)

        kwargs = claude._client.messages.create.call_args.kwargs
        assert kwargs["system"] == "You are a physical therapist."
        assert kwargs["messages"][0] == {"role": "user", "content": "Knee pain on stairs."}

    @pytest.mark.asyncio
    async def test_json_prefill_restored(self, claude, messages):
        """Test the reply is prefilled with a brace and parses as an object."""
        response = await claude.complete(messages)

        sent = claude._client.messages.create.call_args.kwargs["messages"]
        assert sent[-1] == {"role": "assistant", "content": "{"}
        assert parse_json_response(response.content) == {"subjective": {"content": "Knee pain"}}
        assert response.input_tokens == 12
        assert response.output_tokens == 8
        assert response.model == "claude-test"

    @pytest.mark.asyncio
    async def test_without_json_mode(self, messages):
        """Test plain text completions are returned untouched."""
        llm = AnthropicLLM(api_key="test-key", json_mode=False)
        llm._client = MagicMock()
        llm._client.messages.create = AsyncMock(return_value=_reply("Plain answer"))

        response = await llm.complete(messages)

        assert response.content == "Plain answer"
        assert llm._client.messages.create.call_args.kwargs["messages"][-1]["role"] == "user"


class TestAnthropicErrors:
    """Tests for SDK error translation."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error, expected",
        [
            (APITimeoutError(request=REQUEST), LLMTimeoutError),
            (APIConnectionError(request=REQUEST), LLMConnectionError),
            (_status_error(RateLimitError, 429), LLMOverloadError),
            (_status_error(APIStatusError, 529), LLMOverloadError),
        ],
    )
    async def test_errors_translated(self, claude, messages, error, expected):
        """Test SDK errors become the router's retry and fallback types."""
        claude._client.messages.create.side_effect = error

        with pytest.raises(expected):
            await claude.complete(messages)

    @pytest.mark.asyncio
    async def test_other_status_is_plain_error(self, claude, messages):
        """Test a 400 is a non-transient LLMError."""
        claude._client.messages.create.side_effect = _status_error(APIStatusError, 400)

        with pytest.raises(LLMError, match="status 400") as exc_info:
            await claude.complete(messages)

        assert not isinstance(exc_info.value, (LLMTimeoutError, LLMOverloadError))

    @pytest.mark.asyncio
    async def test_health_check_failure(self, claude):
        """Test health check reports False instead of raising."""
        claude._client.messages.create.side_effect = APIConnectionError(request=REQUEST)

        assert await claude.health_check() is False
