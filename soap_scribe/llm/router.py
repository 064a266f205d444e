"""Provider chain for note generation: primary endpoint, then fallback."""

import logging
from typing import Any, Optional

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from soap_scribe.llm.base import (
    BaseLLM,
    LLMError,
    LLMOverloadError,
    LLMResponse,
    LLMTimeoutError,
    Message,
)
from soap_scribe.observability import get_observability_logger

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (LLMTimeoutError, LLMOverloadError)


class LLMRouter:
    """Sends each request down the provider chain until one answers.

    Every request starts at the primary. Timeouts and overloads are retried
    on the same provider with exponential backoff; any other ``LLMError``
    moves straight to the next provider. The last provider's error is
    re-raised when the whole chain fails.
    """

    def __init__(
        self,
        primary: BaseLLM,
        fallback: Optional[BaseLLM] = None,
        max_retries: int = 3,
    ):
        """Initialize LLM router.

        Args:
            primary: OpenAI-compatible endpoint tried first
            fallback: Provider used when the primary fails (typically Anthropic)
            max_retries: Attempts per provider for transient errors
        """
        self.primary = primary
        self.fallback = fallback
        self.max_retries = max_retries

    @property
    def providers(self) -> list[BaseLLM]:
        """Configured providers in the order they are tried."""
        return [llm for llm in (self.primary, self.fallback) if llm is not None]

    async def complete(
        self,
        messages: list[Message],
        *,
        temperature: float = 0.3,
        max_tokens: int = 2000,
        stop: Optional[list[str]] = None,
        request_id: Optional[str] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Complete with the first provider that answers.

        Raises:
            LLMError: The last provider's error when every provider failed
        """
        obs = get_observability_logger()
        request_id = request_id or obs.generate_request_id()
        chain = self.providers

        for position, llm in enumerate(chain):
            try:
                response = await self._call(
                    llm, messages, request_id,
                    is_fallback=position > 0,
                    temperature=temperature,
                    max_tokens=max_tokens,
                    stop=stop,
                    **kwargs,
                )
            except LLMError as e:
                following = chain[position + 1] if position + 1 < len(chain) else None
                if following is None:
                    logger.error(f"{llm.provider} failed with no provider left: {e}")
                    raise
                logger.warning(f"{llm.provider} failed: {e}. Trying {following.provider}")
                obs.log_llm_fallback(
                    from_provider=llm.provider,
                    to_provider=following.provider,
                    reason=str(e),
                    request_id=request_id,
                )
                continue

            if position > 0:
                logger.info(f"{llm.provider} answered after fallback")
            return response

        raise LLMError("No LLM provider configured")

    async def _call(
        self,
        llm: BaseLLM,
        messages: list[Message],
        request_id: str,
        *,
        is_fallback: bool,
        temperature: float,
        max_tokens: int,
        **kwargs: Any,
    ) -> LLMResponse:
        """One provider call, retried on transient errors and logged as one event."""
        attempt = retry(
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            stop=stop_after_attempt(max(1, self.max_retries)),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        )(llm.complete)

        with get_observability_logger().llm_call(
            provider=llm.provider,
            model=llm.model_name,
            messages=[m.to_dict() for m in messages],
            temperature=temperature,
            max_tokens=max_tokens,
            request_id=request_id,
        ) as event:
            event.is_fallback = is_fallback
            response = await attempt(messages, temperature=temperature, max_tokens=max_tokens, **kwargs)
            event.response_content = response.content
            if response.usage:
                event.input_tokens = response.input_tokens
                event.output_tokens = response.output_tokens
                event.total_tokens = response.input_tokens + response.output_tokens
            return response

    async def health_check(self) -> dict[str, bool]:
        """Reachability of each configured provider, keyed primary/fallback."""
        result = {"primary": await self.primary.health_check()}
        if self.fallback:
            result["fallback"] = await self.fallback.health_check()
        return result


def create_router_from_settings() -> LLMRouter:
    """Create LLM router from application settings."""
    from soap_scribe.config import get_settings
    from soap_scribe.llm.anthropic_llm import AnthropicLLM
    from soap_scribe.llm.openai_llm import OpenAILLM

    settings = get_settings()

    primary = OpenAILLM(
        base_url=settings.llm_base_url,
        model=settings.llm_model,
        timeout=settings.llm_timeout,
        api_key=settings.primary_api_key,
    )

    fallback = None
    if settings.has_anthropic_key:
        fallback = AnthropicLLM(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
        )

    return LLMRouter(
        primary=primary,
        fallback=fallback,
        max_retries=settings.max_retries,
    )
