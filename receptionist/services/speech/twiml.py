"""TwiML generation for the voice webhooks."""
from typing import Optional

from twilio.twiml.voice_response import VoiceResponse

START_PATH = "/voice"
SPEECH_PATH = "/handle-speech"


class TwiMLBuilder:
    """Builds the voice markup Twilio executes for each webhook response."""

    def __init__(
        self,
        voice: str = "alice",
        language: str = "en-US",
        base_url: Optional[str] = None,
    ):
        self.voice = voice
        self.language = language
        self.base_url = base_url.rstrip("/") if base_url else ""

    def url(self, path: str) -> str:
        """Absolute URL when a base URL is configured, else the bare path."""
        return f"{self.base_url}{path}"

    def gather(self, text: str) -> str:
        """
        Speak ``text`` inside a speech Gather posting to the speech handler.

        If the Gather ends without a result, Twilio falls through to the
        Redirect and the call restarts at the greeting.
        """
        response = VoiceResponse()
        gather = response.gather(
            input="speech",
            speech_timeout="auto",
            action=self.url(SPEECH_PATH),
            method="POST",
            language=self.language,
        )
        gather.say(text, voice=self.voice)
        response.redirect(self.url(START_PATH))
        return str(response)

    def reprompt(self, text: str) -> str:
        """Speak ``text`` and send the caller back to the greeting."""
        response = VoiceResponse()
        response.say(text, voice=self.voice)
        response.redirect(self.url(START_PATH))
        return str(response)
