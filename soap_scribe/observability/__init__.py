"""Observability module for LLM and note generation telemetry."""

from soap_scribe.observability.events import (
    EventType,
    LLMCallEvent,
    NoteGenerationEvent,
    ObservabilityEvent,
    TranscriptionEvent,
)
from soap_scribe.observability.logger import ObservabilityLogger, get_observability_logger

__all__ = [
    "EventType",
    "LLMCallEvent",
    "NoteGenerationEvent",
    "ObservabilityEvent",
    "ObservabilityLogger",
    "TranscriptionEvent",
    "get_observability_logger",
]
