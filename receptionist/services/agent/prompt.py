"""Receptionist prompt and fixed phrases."""
from typing import Optional


SYSTEM_PROMPT = (
    "You are a warm, professional phone receptionist for the business. "
    "Keep replies short (1–2 sentences). "
    "If the caller asks to book or leave a message, politely collect their name, "
    "phone number, and reason for calling. "
    "Never give legal/medical advice. If unsure, offer a callback from the team."
)

GREETING = "Hello, thanks for calling. How can I help you today?"

REPROMPT = "Sorry, I didn't catch that. Could you repeat that?"

FALLBACK_REPLY = "I'm sorry, I'm having trouble answering right now."


def format_user_message(speech: str, caller_number: Optional[str] = None) -> str:
    """Build the user message content, optionally tagged with the caller number."""
    if caller_number:
        return f"Caller {caller_number} says: {speech}"
    return speech
