"""Unit tests for the chat-completion agent service."""
from unittest.mock import AsyncMock

import httpx
import openai
import pytest

from receptionist.services.agent.agent import AgentError, AgentService
from tests.conftest import make_completion

HISTORY = [
    {"role": "system", "content": "sys"},
    {"role": "user", "content": "I'd like to book an appointment"},
]


class TestAgentService:
    """Test reply generation and failure mapping."""

    @pytest.mark.asyncio
    async def test_generate_reply_returns_trimmed_text(self, agent_service, mock_openai):
        mock_openai.chat.completions.create.return_value = make_completion(
            "  Sure, what day works for you?\n"
        )

        reply = await agent_service.generate_reply(HISTORY)

        assert reply == "Sure, what day works for you?"

    @pytest.mark.asyncio
    async def test_generate_reply_sends_history_and_sampling(
        self, agent_service, mock_openai
    ):
        """The full history goes out with the fixed sampling parameters."""
        await agent_service.generate_reply(HISTORY)

        mock_openai.chat.completions.create.assert_awaited_once_with(
            model="gpt-4o-mini",
            messages=HISTORY,
            max_tokens=120,
            temperature=0.6,
        )

    @pytest.mark.asyncio
    async def test_empty_content_raises(self, agent_service, mock_openai):
        mock_openai.chat.completions.create.return_value = make_completion("   ")

        with pytest.raises(AgentError):
            await agent_service.generate_reply(HISTORY)

    @pytest.mark.asyncio
    async def test_none_content_raises(self, agent_service, mock_openai):
        mock_openai.chat.completions.create.return_value = make_completion(None)

        with pytest.raises(AgentError):
            await agent_service.generate_reply(HISTORY)

    @pytest.mark.asyncio
    async def test_no_choices_raises(self, agent_service, mock_openai):
        mock_openai.chat.completions.create.return_value.choices = []

        with pytest.raises(AgentError):
            await agent_service.generate_reply(HISTORY)

    @pytest.mark.asyncio
    async def test_api_error_is_wrapped(self, agent_service, mock_openai):
        """SDK errors surface as AgentError with the cause chained."""
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_openai.chat.completions.create = AsyncMock(
            side_effect=openai.APIConnectionError(request=request)
        )

        with pytest.raises(AgentError) as exc_info:
            await agent_service.generate_reply(HISTORY)

        assert isinstance(exc_info.value.__cause__, openai.APIConnectionError)

    def test_builds_client_from_settings(self, test_settings):
        """Without an injected client the service builds an AsyncOpenAI."""
        service = AgentService(test_settings)

        assert isinstance(service.client, openai.AsyncOpenAI)
        assert service.client.api_key == "test-key"
