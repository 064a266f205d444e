"""LLM implementation for OpenAI and OpenAI-compatible endpoints."""

import logging
from typing import Any, Optional

import httpx
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
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
)

logger = logging.getLogger(__name__)


class OpenAILLM(BaseLLM):
    """Chat completions via the OpenAI API or a compatible server (vLLM, Ollama, etc.)."""

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout: int = 60,
        api_key: str = "not-needed",
        json_mode: bool = True,
    ):
        """Initialize client.

        Args:
            base_url: OpenAI-compatible API endpoint (e.g., https://api.openai.com/v1)
            model: Model name
            timeout: Request timeout in seconds
            api_key: API key (local servers often ignore it)
            json_mode: Request a JSON object response format
        """
        self._base_url = base_url
        self._model = model
        self._timeout = timeout
        self._json_mode = json_mode

        self._client = AsyncOpenAI(
            base_url=base_url,
            api_key=api_key,
            timeout=httpx.Timeout(timeout, connect=10.0),
        )

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def provider(self) -> str:
        return "openai"

    async def complete(
        self,
        messages: list[Message],
        *,
        temperature: float = 0.3,
        max_tokens: int = 2000,
        stop: Optional[list[str]] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate completion using the chat completions API."""
        if self._json_mode:
            kwargs.setdefault("response_format", {"type": "json_object"})

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[m.to_dict() for m in messages],
                temperature=temperature,
                max_tokens=max_tokens,
                stop=stop,
                **kwargs,
            )

            choice = response.choices[0]
            return LLMResponse(
                content=choice.message.content or "",
                model=response.model,
                usage={
                    "prompt_tokens": response.usage.prompt_tokens if response.usage else 0,
                    "completion_tokens": response.usage.completion_tokens if response.usage else 0,
                },
                finish_reason=choice.finish_reason,
                raw_response=response,
            )

        except APITimeoutError as e:
            logger.error(f"OpenAI timeout: {e}")
            raise LLMTimeoutError(f"LLM request timed out after {self._timeout}s") from e
        except APIConnectionError as e:
            logger.error(f"OpenAI connection error: {e}")
            raise LLMConnectionError(f"Failed to connect to LLM at {self._base_url}") from e
        except RateLimitError as e:
            logger.warning(f"OpenAI rate limited: {e}")
            raise LLMOverloadError("LLM endpoint is rate limited") from e
        except APIStatusError as e:
            logger.error(f"OpenAI API error {e.status_code}: {e}")
            raise LLMError(f"LLM request failed with status {e.status_code}") from e

    async def health_check(self) -> bool:
        """Check if the endpoint is reachable."""
        try:
            await self._client.models.list()
            return True
        except Exception as e:
            logger.debug(f"OpenAI health check failed: {e}")
            return False
