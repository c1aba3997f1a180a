"""FastAPI dependencies."""
from functools import lru_cache

from fastapi import Depends

from receptionist.core.config import settings
from receptionist.services.agent.agent import AgentService
from receptionist.services.agent.prompt import SYSTEM_PROMPT
from receptionist.services.call_session.base import SessionStore
from receptionist.services.call_session.in_memory import InMemorySessionStore
from receptionist.services.call_session.manager import CallSessionManager
from receptionist.services.speech.twiml import TwiMLBuilder


@lru_cache
def get_session_store() -> SessionStore:
    """Get the process-wide session store."""
    return InMemorySessionStore(
        system_prompt=SYSTEM_PROMPT,
        history_limit=settings.history_limit,
    )


@lru_cache
def get_agent_service() -> AgentService:
    """Get the shared agent service."""
    return AgentService(settings)


def get_twiml_builder() -> TwiMLBuilder:
    """Get a TwiML builder for the configured voice."""
    return TwiMLBuilder(
        voice=settings.voice,
        language=settings.language,
        base_url=settings.base_url,
    )


def get_session_manager(
    store: SessionStore = Depends(get_session_store),
    agent_service: AgentService = Depends(get_agent_service),
    twiml: TwiMLBuilder = Depends(get_twiml_builder),
) -> CallSessionManager:
    """Get call session manager."""
    return CallSessionManager(store, agent_service, twiml, settings)
