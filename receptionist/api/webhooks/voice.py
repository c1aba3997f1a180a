"""Twilio voice webhook endpoints."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import Response

from receptionist.core.dependencies import get_session_manager
from receptionist.services.agent.prompt import FALLBACK_REPLY
from receptionist.services.call_session.manager import CallSessionManager

router = APIRouter()
logger = logging.getLogger(__name__)

TWIML_MEDIA_TYPE = "text/xml"


def _client_host(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@router.post("/voice")
async def handle_incoming_call(
    request: Request,
    CallSid: Optional[str] = Form(None),
    session_manager: CallSessionManager = Depends(get_session_manager),
):
    """
    Greet the caller and start listening.

    Twilio calls this when the call connects, and again whenever a listen
    step finishes with no speech.
    """
    logger.info(
        f"[START CALL] Received voice webhook - CallSid: {CallSid}, "
        f"Client: {_client_host(request)}"
    )
    twiml = session_manager.start_call(CallSid)
    return Response(content=twiml, media_type=TWIML_MEDIA_TYPE)


@router.post("/handle-speech")
async def handle_speech(
    request: Request,
    CallSid: Optional[str] = Form(None),
    SpeechResult: Optional[str] = Form(None),
    From: Optional[str] = Form(None),
    session_manager: CallSessionManager = Depends(get_session_manager),
):
    """
    Handle gathered speech from Twilio.

    Always answers with TwiML, even when processing fails, so the call
    stays alive.
    """
    logger.info(
        f"[SPEECH] Received speech input - CallSid: {CallSid}, "
        f"SpeechResult length: {len(SpeechResult) if SpeechResult else 0}, "
        f"Client: {_client_host(request)}"
    )

    try:
        twiml = await session_manager.process_user_speech(
            CallSid, SpeechResult, caller_number=From
        )
    except Exception as e:
        logger.error(
            f"[SPEECH] Error processing speech input - CallSid: {CallSid}, "
            f"Error: {type(e).__name__}: {str(e)}",
            exc_info=True,
        )
        twiml = session_manager.twiml.gather(FALLBACK_REPLY)

    return Response(content=twiml, media_type=TWIML_MEDIA_TYPE)


@router.post("/call-complete")
async def handle_call_complete(
    request: Request,
    CallSid: Optional[str] = Form(None),
    session_manager: CallSessionManager = Depends(get_session_manager),
):
    """
    Forget a finished call.

    Point the Twilio status callback here to release session memory.
    """
    removed = await session_manager.end_session(CallSid)
    logger.info(
        f"[CALL COMPLETE] Call finished - CallSid: {CallSid}, "
        f"Session removed: {removed}, Client: {_client_host(request)}"
    )
    return Response(status_code=200)
