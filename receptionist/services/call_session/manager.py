"""Call session manager."""
import logging
from typing import Optional

from receptionist.core.config import Settings
from receptionist.services.agent.agent import AgentError, AgentService
from receptionist.services.agent.prompt import (
    FALLBACK_REPLY,
    GREETING,
    REPROMPT,
    format_user_message,
)
from receptionist.services.call_session.base import SessionStore
from receptionist.services.call_session.models import Message
from receptionist.services.speech.twiml import TwiMLBuilder

logger = logging.getLogger(__name__)


class CallSessionManager:
    """Manages call sessions and relays each caller turn to the agent."""

    def __init__(
        self,
        store: SessionStore,
        agent_service: AgentService,
        twiml: TwiMLBuilder,
        settings: Settings,
    ):
        self.store = store
        self.agent_service = agent_service
        self.twiml = twiml
        self.settings = settings

    def start_call(self, call_sid: Optional[str] = None) -> str:
        """Greet the caller and open the first listen step."""
        logger.debug(f"[SESSION MANAGER] Greeting caller - CallSid: {call_sid}")
        return self.twiml.gather(GREETING)

    async def process_user_speech(
        self,
        call_sid: Optional[str],
        speech_result: Optional[str] = None,
        caller_number: Optional[str] = None,
    ) -> str:
        """
        Process one transcribed utterance and generate the spoken reply.

        Args:
            call_sid: Twilio call SID (missing calls are reprompted)
            speech_result: Transcribed speech from Twilio (if any)
            caller_number: The caller's phone number (if any)

        Returns:
            TwiML XML response
        """
        speech = (speech_result or "").strip()
        if not speech:
            logger.info(f"[SESSION MANAGER] Empty speech, reprompting - CallSid: {call_sid}")
            return self.twiml.reprompt(REPROMPT)

        if not call_sid:
            logger.warning("[SESSION MANAGER] Speech received without a CallSid, reprompting")
            return self.twiml.reprompt(REPROMPT)

        logger.info(f"[SESSION MANAGER] Caller said: '{speech}' - CallSid: {call_sid}")

        if self.settings.annotate_caller_number:
            content = format_user_message(speech, caller_number)
        else:
            content = speech

        async with self.store.lock(call_sid):
            session = await self.store.append(
                call_sid, Message(role="user", content=content)
            )

            try:
                reply = await self.agent_service.generate_reply(
                    session.to_chat_messages()
                )
            except AgentError as e:
                logger.error(
                    f"[SESSION MANAGER] Agent failed, using fallback reply - "
                    f"CallSid: {call_sid}, Error: {e}",
                    exc_info=True,
                )
                reply = FALLBACK_REPLY
                if self.settings.persist_fallback_reply:
                    await self.store.append(
                        call_sid, Message(role="assistant", content=reply)
                    )
            else:
                await self.store.append(
                    call_sid, Message(role="assistant", content=reply)
                )

        logger.info(f"[SESSION MANAGER] Replying: '{reply}' - CallSid: {call_sid}")
        return self.twiml.gather(reply)

    async def end_session(self, call_sid: Optional[str]) -> bool:
        """
        Drop the session for a finished call. Unknown calls are a no-op.

        Waits for any turn still in flight for the call, so a late reply
        cannot recreate the session after it is removed.
        """
        if not call_sid:
            return False
        async with self.store.lock(call_sid):
            return await self.store.delete(call_sid)
