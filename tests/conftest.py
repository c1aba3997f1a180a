"""Shared test fixtures and configuration."""
import os
import xml.etree.ElementTree as ET
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("OPENAI_API_KEY", "test-key")

from receptionist.main import app
from receptionist.core.config import Settings
from receptionist.core.dependencies import get_session_manager
from receptionist.services.agent.agent import AgentService
from receptionist.services.agent.prompt import SYSTEM_PROMPT
from receptionist.services.call_session.in_memory import InMemorySessionStore
from receptionist.services.call_session.manager import CallSessionManager
from receptionist.services.speech.twiml import TwiMLBuilder


def make_completion(content):
    """Build a chat-completion response object the way the SDK shapes it."""
    return Mock(choices=[Mock(message=Mock(content=content))])


def parse_twiml(body) -> ET.Element:
    """Parse a TwiML document into its <Response> element."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    return ET.fromstring(body)


class FakeClock:
    """Manually advanced clock for idle-expiry tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def test_settings():
    """Override settings for testing."""
    return Settings(
        openai_api_key="test-key",
        voice="alice",
        language="en-US",
        history_limit=12,
    )


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def session_store(fake_clock):
    """Fresh in-memory session store."""
    return InMemorySessionStore(
        system_prompt=SYSTEM_PROMPT,
        history_limit=12,
        clock=fake_clock,
    )


@pytest.fixture
def mock_openai():
    """Mock OpenAI API client."""
    mock_client = Mock()
    mock_client.chat.completions.create = AsyncMock(
        return_value=make_completion("Sure, what day works for you?")
    )
    return mock_client


@pytest.fixture
def agent_service(test_settings, mock_openai):
    return AgentService(test_settings, client=mock_openai)


@pytest.fixture
def twiml_builder(test_settings):
    return TwiMLBuilder(voice=test_settings.voice, language=test_settings.language)


@pytest.fixture
def session_manager(session_store, agent_service, twiml_builder, test_settings):
    return CallSessionManager(session_store, agent_service, twiml_builder, test_settings)


@pytest.fixture
def test_client(session_manager):
    """Create FastAPI test client with overrides."""
    app.dependency_overrides[get_session_manager] = lambda: session_manager

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()
