"""Structured observability events for LLM and note generation telemetry."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Types of observability events."""

    LLM_CALL_START = "llm_call_start"
    LLM_CALL_SUCCESS = "llm_call_success"
    LLM_CALL_ERROR = "llm_call_error"
    LLM_FALLBACK = "llm_fallback"
    GENERATION_START = "generation_start"
    GENERATION_SUCCESS = "generation_success"
    GENERATION_DEGRADED = "generation_degraded"
    GENERATION_ERROR = "generation_error"
    TRANSCRIPTION = "transcription"


class ObservabilityEvent(BaseModel):
    """Base class for all observability events."""

    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: Optional[str] = None
    request_id: Optional[str] = None
    duration_ms: Optional[float] = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class LLMCallEvent(ObservabilityEvent):
    """Event for LLM API calls."""

    provider: str
    model: str
    messages: list[dict[str, str]] = Field(default_factory=list)
    temperature: float = 0.3
    max_tokens: int = 2000

    # Response fields (populated on success)
    response_content: Optional[str] = None
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    # Error fields (populated on error)
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    # Routing info
    is_fallback: bool = False
    fallback_reason: Optional[str] = None


class NoteGenerationEvent(ObservabilityEvent):
    """Event for one transcript-to-note generation."""

    template_key: str
    profession: Optional[str] = None
    transcript_chars: int = 0
    transcript_words: int = 0

    # Outcome
    success: bool = False
    json_parsed: bool = False
    sections_from_llm: list[str] = Field(
        default_factory=list, description="Top-level sections the LLM actually returned"
    )
    validation_errors: list[str] = Field(default_factory=list)
    overall_confidence: Optional[float] = Field(None, ge=0.0, le=1.0)

    # Error fields
    error_type: Optional[str] = None
    error_message: Optional[str] = None


class TranscriptionEvent(ObservabilityEvent):
    """Event for audio transcription calls."""

    event_type: EventType = EventType.TRANSCRIPTION
    model: str
    audio_bytes: int = 0
    content_type: Optional[str] = None
    transcript_chars: int = 0
    success: bool = True
    error_message: Optional[str] = None
