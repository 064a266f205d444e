"""Anthropic Claude fallback for note generation."""

import logging
from typing import Any, Optional

from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncAnthropic,
    RateLimitError,
)

from soap_scribe.llm.base import (
    BaseLLM,
    LLMConnectionError,
    LLMError,
    LLMOverloadError,
    LLMResponse,
    LLMTimeoutError,
    Message,
    MessageRole,
)

logger = logging.getLogger(__name__)

# Claude has no response_format; starting its turn with "{" keeps the
# reply a bare JSON object like the primary's JSON mode.
JSON_PREFILL = "{"


class AnthropicLLM(BaseLLM):
    """Claude via the Messages API."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        timeout: int = 120,
        json_mode: bool = True,
    ):
        """Initialize Anthropic client.

        Args:
            api_key: Anthropic API key
            model: Model name
            timeout: Request timeout in seconds
            json_mode: Prefill the reply so Claude answers with a JSON object
        """
        self._model = model
        self._timeout = timeout
        self._json_mode = json_mode
        self._client = AsyncAnthropic(api_key=api_key, timeout=timeout)

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def provider(self) -> str:
        return "anthropic"

    def _split_system(self, messages: list[Message]) -> tuple[str, list[dict[str, str]]]:
        """System prompts go in their own parameter; several are joined."""
        system = [m.content for m in messages if m.role == MessageRole.SYSTEM]
        turns = [
            {"role": m.role.value, "content": m.content}
            for m in messages
            if m.role != MessageRole.SYSTEM
        ]
        if self._json_mode:
            turns.append({"role": MessageRole.ASSISTANT.value, "content": JSON_PREFILL})
        return "\n\n".join(system), turns

    def _translate_error(self, error: Exception) -> LLMError:
        if isinstance(error, APITimeoutError):
            return LLMTimeoutError(f"Anthropic request timed out after {self._timeout}s")
        if isinstance(error, APIConnectionError):
            return LLMConnectionError("Failed to connect to Anthropic API")
        if isinstance(error, RateLimitError):
            return LLMOverloadError("Anthropic API rate limited")
        if isinstance(error, APIStatusError) and error.status_code == 529:
            return LLMOverloadError("Anthropic API overloaded")
        if isinstance(error, APIStatusError):
            return LLMError(f"Anthropic request failed with status {error.status_code}")
        return LLMError(f"Anthropic request failed: {error}")

    async def complete(
        self,
        messages: list[Message],
        *,
        temperature: float = 0.3,
        max_tokens: int = 2000,
        stop: Optional[list[str]] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a completion, re-attaching the JSON prefill to the text."""
        system, turns = self._split_system(messages)

        try:
            response = await self._client.messages.create(
                model=self._model,
                system=system,
                messages=turns,
                temperature=temperature,
                max_tokens=max_tokens,
                stop_sequences=stop or [],
                **kwargs,
            )
        except (APITimeoutError, APIConnectionError, APIStatusError) as e:
            logger.error(f"Anthropic call failed: {e}")
            raise self._translate_error(e) from e

        text = "".join(block.text for block in response.content if block.type == "text")
        if self._json_mode:
            text = JSON_PREFILL + text

        return LLMResponse(
            content=text,
            model=response.model,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
            finish_reason=response.stop_reason,
            raw_response=response,
        )

    async def health_check(self) -> bool:
        """Check the API answers a one-word prompt."""
        try:
            response = await self._client.messages.create(
                model=self._model,
                messages=[{"role": "user", "content": "Hi"}],
                max_tokens=10,
            )
            return len(response.content) > 0
        except Exception as e:
            logger.debug(f"Anthropic health check failed: {e}")
            return False
