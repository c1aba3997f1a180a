"""Call session models."""
import time
from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class Message(BaseModel):
    """A single chat message. Frozen once created."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class CallSession(BaseModel):
    """Conversation history for one phone call."""

    call_sid: str
    messages: List[Message] = []
    last_activity: float = Field(default_factory=time.monotonic)

    def add_message(self, message: Message, limit: int) -> None:
        """
        Append a message and enforce the history cap.

        On overflow the first message (the system instruction) is kept
        together with the most recent ``limit - 1`` messages.
        """
        self.messages.append(message)
        if len(self.messages) > limit:
            self.messages = [self.messages[0]] + self.messages[-(limit - 1):]

    def to_chat_messages(self) -> List[Dict[str, str]]:
        """History in the shape the chat-completion API expects."""
        return [message.model_dump() for message in self.messages]
