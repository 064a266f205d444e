"""Pytest configuration and fixtures."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from soap_scribe.llm import LLMResponse, LLMRouter, Message, MessageRole
from soap_scribe.observability import ObservabilityLogger


@pytest.fixture(autouse=True)
def obs_logger(tmp_path):
    """Route observability events to a throwaway directory for every test."""
    instance = ObservabilityLogger(log_dir=tmp_path / "logs", enabled=True)
    ObservabilityLogger.set_instance(instance)
    yield instance
    ObservabilityLogger.set_instance(None)


@pytest.fixture
def mock_llm_response():
    """Create a mock LLM response."""
    return LLMResponse(
        content='{"test": "response"}',
        model="test-model",
        usage={"input_tokens": 100, "output_tokens": 50},
    )


@pytest.fixture
def mock_llm():
    """Create a mock LLM."""
    llm = MagicMock()
    llm.complete = AsyncMock()
    llm.health_check = AsyncMock(return_value=True)
    llm.model_name = "mock-model"
    llm.provider = "mock"
    return llm


@pytest.fixture
def mock_llm_router(mock_llm):
    """Create a mock LLM router."""
    router = MagicMock(spec=LLMRouter)
    router.complete = mock_llm.complete
    router.health_check = AsyncMock(return_value={"primary": True})
    return router


@pytest.fixture
def knee_transcript():
    """A short knee evaluation transcript."""
    return (
        "Patient is a 54 year old presenting with right knee pain for three weeks after a fall. "
        "Pain is 6 out of 10 going up stairs. Knee flexion measured 110 degrees on the right. "
        "McMurray test was positive on the right. Quad strength 4 out of 5. "
        "Plan is therapeutic exercise and manual therapy twice a week for six weeks."
    )


@pytest.fixture
def sample_messages():
    """Create sample messages for LLM calls."""
    return [
        Message(role=MessageRole.SYSTEM, content="You are a documentation assistant."),
        Message(role=MessageRole.USER, content="Write the note."),
    ]
