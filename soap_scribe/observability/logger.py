"""Observability logger for structured telemetry."""

import json
import logging
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Optional

from soap_scribe.observability.events import (
    EventType,
    LLMCallEvent,
    NoteGenerationEvent,
    ObservabilityEvent,
    TranscriptionEvent,
)

logger = logging.getLogger(__name__)


class ObservabilityLogger:
    """Central logger for LLM and note generation events.

    Writes structured events to JSON Lines files for later analysis.
    Transcript and message content is truncated unless full logging is
    explicitly enabled, since it may contain PHI.
    """

    _instance: Optional["ObservabilityLogger"] = None

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        enabled: bool = True,
        log_full_content: bool = False,
        max_content_length: int = 500,
    ):
        """Initialize observability logger.

        Args:
            log_dir: Directory for log files (default: data/logs)
            enabled: Whether logging is enabled
            log_full_content: Whether to log full message content
            max_content_length: Max length for truncated content
        """
        self.enabled = enabled
        self.log_full_content = log_full_content
        self.max_content_length = max_content_length

        if log_dir is None:
            log_dir = Path("data/logs")
        self.log_dir = log_dir
        if self.enabled:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self._log_files: dict[str, Path] = {
            "llm": self.log_dir / "llm_calls.jsonl",
            "generation": self.log_dir / "note_generations.jsonl",
            "transcription": self.log_dir / "transcriptions.jsonl",
        }

    @classmethod
    def get_instance(cls) -> "ObservabilityLogger":
        """Get or create singleton instance configured from settings."""
        if cls._instance is None:
            from soap_scribe.config import get_settings

            settings = get_settings()
            cls._instance = cls(
                log_dir=settings.observability_log_dir,
                enabled=settings.observability_enabled,
            )
        return cls._instance

    @classmethod
    def set_instance(cls, instance: Optional["ObservabilityLogger"]) -> None:
        """Replace the singleton (None resets it)."""
        cls._instance = instance

    @property
    def log_types(self) -> list[str]:
        """Names accepted by get_recent_events and get_stats."""
        return list(self._log_files)

    def generate_request_id(self) -> str:
        """Generate a unique request ID."""
        return str(uuid.uuid4())[:8]

    def _write_event(self, event: ObservabilityEvent, log_type: str) -> None:
        """Write event to appropriate log file."""
        if not self.enabled:
            return

        try:
            log_file = self._log_files.get(log_type)
            if log_file:
                with open(log_file, "a") as f:
                    f.write(event.model_dump_json() + "\n")
        except OSError as e:
            logger.warning(f"Failed to write observability event: {e}")

    def _truncate(self, content: str) -> str:
        """Truncate content if needed."""
        if self.log_full_content:
            return content
        if len(content) <= self.max_content_length:
            return content
        return content[: self.max_content_length] + "..."

    # LLM Call Logging

    @contextmanager
    def llm_call(
        self,
        provider: str,
        model: str,
        messages: list[dict[str, str]],
        temperature: float = 0.3,
        max_tokens: int = 2000,
        request_id: Optional[str] = None,
    ):
        """Context manager for logging LLM calls.

        Usage:
            with obs.llm_call(provider, model, messages) as event:
                response = await llm.complete(...)
                event.response_content = response.content
        """
        start_time = time.time()
        request_id = request_id or self.generate_request_id()

        logged_messages = [
            {"role": m["role"], "content": self._truncate(m.get("content", ""))}
            for m in messages
        ]

        event = LLMCallEvent(
            event_type=EventType.LLM_CALL_START,
            provider=provider,
            model=model,
            messages=logged_messages,
            temperature=temperature,
            max_tokens=max_tokens,
            request_id=request_id,
        )

        try:
            yield event
            event.event_type = EventType.LLM_CALL_SUCCESS
            if event.response_content:
                event.response_content = self._truncate(event.response_content)

        except Exception as e:
            event.event_type = EventType.LLM_CALL_ERROR
            event.error_type = type(e).__name__
            event.error_message = str(e)[:200]
            raise

        finally:
            event.duration_ms = (time.time() - start_time) * 1000
            self._write_event(event, "llm")

    def log_llm_fallback(
        self,
        from_provider: str,
        to_provider: str,
        reason: str,
        request_id: Optional[str] = None,
    ) -> None:
        """Log LLM fallback event."""
        event = LLMCallEvent(
            event_type=EventType.LLM_FALLBACK,
            provider=to_provider,
            model="",
            is_fallback=True,
            fallback_reason=reason,
            request_id=request_id,
            metadata={"from_provider": from_provider},
        )
        self._write_event(event, "llm")

    # Note Generation Logging

    @contextmanager
    def note_generation(
        self,
        template_key: str,
        transcript: str,
        profession: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        """Context manager for logging one note generation.

        The generator marks the outcome on the yielded event; a generation
        that fell back to defaults is recorded as degraded, not as an error.
        """
        start_time = time.time()
        request_id = request_id or self.generate_request_id()

        event = NoteGenerationEvent(
            event_type=EventType.GENERATION_START,
            template_key=template_key,
            profession=profession,
            transcript_chars=len(transcript),
            transcript_words=len(transcript.split()),
            request_id=request_id,
        )

        try:
            yield event
            event.event_type = (
                EventType.GENERATION_SUCCESS if event.success else EventType.GENERATION_DEGRADED
            )

        except Exception as e:
            event.event_type = EventType.GENERATION_ERROR
            event.error_type = type(e).__name__
            event.error_message = str(e)[:200]
            raise

        finally:
            event.duration_ms = (time.time() - start_time) * 1000
            self._write_event(event, "generation")

    def log_transcription(
        self,
        model: str,
        audio_bytes: int,
        content_type: Optional[str] = None,
        transcript_chars: int = 0,
        success: bool = True,
        error_message: Optional[str] = None,
        duration_ms: Optional[float] = None,
        request_id: Optional[str] = None,
    ) -> None:
        """Log an audio transcription call."""
        event = TranscriptionEvent(
            model=model,
            audio_bytes=audio_bytes,
            content_type=content_type,
            transcript_chars=transcript_chars,
            success=success,
            error_message=error_message[:200] if error_message else None,
            duration_ms=duration_ms,
            request_id=request_id,
        )
        self._write_event(event, "transcription")

    # Utility methods

    def get_recent_events(
        self,
        log_type: str,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        """Read recent events from a log file."""
        log_file = self._log_files.get(log_type)
        if not log_file or not log_file.exists():
            return []

        events = []
        with open(log_file) as f:
            for line in f:
                try:
                    events.append(json.loads(line))
                except json.JSONDecodeError:
                    continue

        return events[-limit:]

    def get_stats(self, log_type: str) -> dict[str, Any]:
        """Get basic statistics for a log type."""
        events = self.get_recent_events(log_type, limit=1000)
        if not events:
            return {"total": 0}

        total = len(events)
        errors = sum(
            1 for e in events
            if "error" in e.get("event_type", "") or "degraded" in e.get("event_type", "")
        )
        avg_duration = sum(e.get("duration_ms") or 0 for e in events) / total

        return {
            "total": total,
            "errors": errors,
            "error_rate": errors / total if total > 0 else 0,
            "avg_duration_ms": avg_duration,
        }


def get_observability_logger() -> ObservabilityLogger:
    """Get the global observability logger instance."""
    return ObservabilityLogger.get_instance()
