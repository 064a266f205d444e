"""Tests for observability logger."""

import json

import pytest

from soap_scribe.observability import (
    EventType,
    LLMCallEvent,
    NoteGenerationEvent,
    ObservabilityLogger,
    TranscriptionEvent,
    get_observability_logger,
)


@pytest.fixture
def temp_log_dir(tmp_path):
    """Create temporary log directory."""
    log_dir = tmp_path / "events"
    log_dir.mkdir()
    return log_dir


@pytest.fixture
def logger(temp_log_dir):
    """Create observability logger with temp directory."""
    return ObservabilityLogger(log_dir=temp_log_dir, enabled=True)


def read_events(path):
    return [json.loads(line) for line in path.read_text().strip().split("\n")]


class TestObservabilityLogger:
    """Tests for ObservabilityLogger."""

    def test_init_creates_log_directory(self, tmp_path):
        """Test that init creates log directory if needed."""
        log_dir = tmp_path / "new_logs"
        ObservabilityLogger(log_dir=log_dir)

        assert log_dir.exists()

    def test_disabled_logger_writes_nothing(self, temp_log_dir):
        """Test that disabled logger doesn't write."""
        logger = ObservabilityLogger(log_dir=temp_log_dir, enabled=False)

        with logger.llm_call(
            provider="test",
            model="test-model",
            messages=[{"role": "user", "content": "test"}],
        ) as event:
            event.response_content = "response"

        assert not (temp_log_dir / "llm_calls.jsonl").exists()

    def test_llm_call_success(self, logger, temp_log_dir):
        """Test logging successful LLM call."""
        with logger.llm_call(
            provider="anthropic",
            model="claude-3",
            messages=[{"role": "user", "content": "Hello"}],
            temperature=0.3,
            max_tokens=2000,
        ) as event:
            event.response_content = '{"plan": {}}'
            event.input_tokens = 10
            event.output_tokens = 5
            event.total_tokens = 15

        events = read_events(temp_log_dir / "llm_calls.jsonl")
        assert len(events) == 1
        assert events[0]["event_type"] == "llm_call_success"
        assert events[0]["provider"] == "anthropic"
        assert events[0]["input_tokens"] == 10
        assert events[0]["duration_ms"] is not None

    def test_llm_call_error(self, logger, temp_log_dir):
        """Test logging failed LLM call."""
        with pytest.raises(ValueError):
            with logger.llm_call(
                provider="anthropic",
                model="claude-3",
                messages=[{"role": "user", "content": "Hello"}],
            ):
                raise ValueError("Test error")

        events = read_events(temp_log_dir / "llm_calls.jsonl")
        assert len(events) == 1
        assert events[0]["event_type"] == "llm_call_error"
        assert events[0]["error_type"] == "ValueError"
        assert "Test error" in events[0]["error_message"]

    def test_note_generation_success(self, logger, temp_log_dir):
        """Test logging a generation whose JSON parsed."""
        with logger.note_generation(
            template_key="knee",
            transcript="Right knee pain on stairs",
            profession="physical_therapy",
        ) as event:
            event.success = True
            event.json_parsed = True
            event.sections_from_llm = ["subjective", "objective"]
            event.overall_confidence = 0.8

        events = read_events(temp_log_dir / "note_generations.jsonl")
        assert len(events) == 1
        assert events[0]["event_type"] == "generation_success"
        assert events[0]["template_key"] == "knee"
        assert events[0]["transcript_words"] == 5
        assert events[0]["transcript_chars"] == len("Right knee pain on stairs")
        assert events[0]["sections_from_llm"] == ["subjective", "objective"]

    def test_note_generation_degraded(self, logger, temp_log_dir):
        """Test a generation that fell back to defaults is logged as degraded."""
        with logger.note_generation(template_key="neck", transcript="x") as event:
            event.error_message = "AI returned invalid JSON"

        events = read_events(temp_log_dir / "note_generations.jsonl")
        assert events[0]["event_type"] == "generation_degraded"
        assert events[0]["success"] is False

    def test_note_generation_error(self, logger, temp_log_dir):
        """Test an exception inside the block is logged and re-raised."""
        with pytest.raises(RuntimeError):
            with logger.note_generation(template_key="hip", transcript="x"):
                raise RuntimeError("boom")

        events = read_events(temp_log_dir / "note_generations.jsonl")
        assert events[0]["event_type"] == "generation_error"
        assert events[0]["error_type"] == "RuntimeError"

    def test_transcription_logging(self, logger, temp_log_dir):
        """Test logging an audio transcription."""
        logger.log_transcription(
            model="whisper-1",
            audio_bytes=2048,
            content_type="audio/webm",
            transcript_chars=120,
            duration_ms=350.0,
            request_id="req-9",
        )

        events = read_events(temp_log_dir / "transcriptions.jsonl")
        assert events[0]["event_type"] == "transcription"
        assert events[0]["audio_bytes"] == 2048
        assert events[0]["success"] is True
        assert events[0]["request_id"] == "req-9"

    def test_content_truncation(self, logger, temp_log_dir):
        """Test that long content is truncated."""
        long_content = "x" * 1000

        with logger.llm_call(
            provider="test",
            model="test",
            messages=[{"role": "user", "content": long_content}],
        ) as event:
            event.response_content = long_content

        events = read_events(temp_log_dir / "llm_calls.jsonl")
        assert len(events[0]["messages"][0]["content"]) == 503
        assert events[0]["response_content"].endswith("...")

    def test_full_content_logging(self, temp_log_dir):
        """Test logging full content when enabled."""
        logger = ObservabilityLogger(log_dir=temp_log_dir, log_full_content=True)
        long_content = "x" * 1000

        with logger.llm_call(
            provider="test",
            model="test",
            messages=[{"role": "user", "content": long_content}],
        ) as event:
            event.response_content = long_content

        events = read_events(temp_log_dir / "llm_calls.jsonl")
        assert len(events[0]["messages"][0]["content"]) == 1000
        assert events[0]["response_content"] == long_content

    def test_get_recent_events(self, logger):
        """Test retrieving recent events."""
        for i in range(5):
            with logger.llm_call(provider=f"provider-{i}", model="test", messages=[]):
                pass

        events = logger.get_recent_events("llm", limit=3)
        assert len(events) == 3
        assert events[-1]["provider"] == "provider-4"

    def test_get_recent_events_missing_log(self, logger):
        """Test an unknown or empty log type returns nothing."""
        assert logger.get_recent_events("generation") == []
        assert logger.get_recent_events("unknown") == []

    def test_get_stats(self, logger):
        """Test getting statistics."""
        for _ in range(3):
            with logger.llm_call(provider="test", model="test", messages=[]):
                pass

        with pytest.raises(ValueError):
            with logger.llm_call(provider="test", model="test", messages=[]):
                raise ValueError("test")

        stats = logger.get_stats("llm")
        assert stats["total"] == 4
        assert stats["errors"] == 1
        assert stats["error_rate"] == 0.25

    def test_llm_fallback_logging(self, logger, temp_log_dir):
        """Test logging LLM fallback events."""
        logger.log_llm_fallback(
            from_provider="openai",
            to_provider="anthropic",
            reason="Connection timeout",
            request_id="req-123",
        )

        events = read_events(temp_log_dir / "llm_calls.jsonl")
        assert len(events) == 1
        assert events[0]["event_type"] == "llm_fallback"
        assert events[0]["is_fallback"] is True
        assert events[0]["fallback_reason"] == "Connection timeout"
        assert events[0]["metadata"]["from_provider"] == "openai"


class TestGetObservabilityLogger:
    """Tests for singleton getter."""

    def test_returns_installed_instance(self, tmp_path):
        """Test that get_observability_logger returns the installed instance."""
        instance = ObservabilityLogger(log_dir=tmp_path, enabled=False)
        ObservabilityLogger.set_instance(instance)

        assert get_observability_logger() is instance
        assert get_observability_logger() is get_observability_logger()

    def test_request_ids_are_unique(self):
        """Test generated request IDs are short and distinct."""
        obs = get_observability_logger()
        first, second = obs.generate_request_id(), obs.generate_request_id()

        assert len(first) == 8
        assert first != second


class TestEventModels:
    """Tests for event Pydantic models."""

    def test_llm_call_event_serialization(self):
        """Test LLMCallEvent serialization."""
        event = LLMCallEvent(
            event_type=EventType.LLM_CALL_SUCCESS,
            provider="anthropic",
            model="claude-3",
            messages=[{"role": "user", "content": "test"}],
            input_tokens=10,
            output_tokens=5,
        )

        data = event.model_dump()
        assert data["provider"] == "anthropic"
        assert data["input_tokens"] == 10
        assert "timestamp" in data

    def test_generation_event_confidence_bounds(self):
        """Test overall_confidence is constrained to [0, 1]."""
        with pytest.raises(ValueError):
            NoteGenerationEvent(
                event_type=EventType.GENERATION_SUCCESS,
                template_key="knee",
                overall_confidence=1.5,
            )

    def test_transcription_event_default_type(self):
        """Test TranscriptionEvent defaults its event type."""
        event = TranscriptionEvent(model="whisper-1")

        data = json.loads(event.model_dump_json())
        assert data["event_type"] == "transcription"
