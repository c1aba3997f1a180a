"""LLM agent service."""
import logging
from typing import Dict, List, Optional

import openai
from openai import AsyncOpenAI

from receptionist.core.config import Settings

logger = logging.getLogger(__name__)


class AgentError(Exception):
    """The chat-completion service failed or returned nothing usable."""


class AgentService:
    """Service for generating receptionist replies with a chat model."""

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        self.settings = settings
        if client is None:
            client_kwargs = {"api_key": settings.openai_api_key}
            if settings.request_timeout_seconds is not None:
                client_kwargs["timeout"] = settings.request_timeout_seconds
            client = AsyncOpenAI(**client_kwargs)
        self.client = client

    async def generate_reply(self, messages: List[Dict[str, str]]) -> str:
        """
        Send the conversation history to the model and return its reply.

        Args:
            messages: Ordered chat history, system message first

        Returns:
            The trimmed reply text

        Raises:
            AgentError: On any API failure or an empty/malformed completion
        """
        logger.debug(
            f"[AGENT] Requesting completion - Model: {self.settings.openai_model}, "
            f"Messages: {len(messages)}"
        )
        try:
            response = await self.client.chat.completions.create(
                model=self.settings.openai_model,
                messages=messages,
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
            )
        except openai.OpenAIError as e:
            raise AgentError(f"Chat completion failed: {type(e).__name__}: {e}") from e

        if not response.choices:
            raise AgentError("Chat completion returned no choices")

        content = response.choices[0].message.content
        reply = (content or "").strip()
        if not reply:
            raise AgentError("Chat completion returned empty content")

        logger.debug(f"[AGENT] Reply received (length: {len(reply)})")
        return reply
