"""LLM abstraction layer with primary-first routing and fallback."""

from soap_scribe.llm.base import (
    BaseLLM,
    LLMConnectionError,
    LLMError,
    LLMOverloadError,
    LLMResponse,
    LLMTimeoutError,
    LLMValidationError,
    Message,
    MessageRole,
    parse_json_response,
)
from soap_scribe.llm.openai_llm import OpenAILLM
from soap_scribe.llm.anthropic_llm import AnthropicLLM
from soap_scribe.llm.router import LLMRouter, create_router_from_settings

__all__ = [
    "AnthropicLLM",
    "BaseLLM",
    "LLMConnectionError",
    "LLMError",
    "LLMOverloadError",
    "LLMResponse",
    "LLMRouter",
    "LLMTimeoutError",
    "LLMValidationError",
    "Message",
    "MessageRole",
    "OpenAILLM",
    "create_router_from_settings",
    "parse_json_response",
]
