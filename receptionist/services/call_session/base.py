"""Session store interface."""
from abc import ABC, abstractmethod
from typing import AsyncContextManager, Optional

from receptionist.services.call_session.models import CallSession, Message


class SessionStore(ABC):
    """Abstract base class for call session stores."""

    @abstractmethod
    async def get(self, call_sid: str) -> Optional[CallSession]:
        """Get an existing session, or None."""
        pass

    @abstractmethod
    async def get_or_create(self, call_sid: str) -> CallSession:
        """Get a session, creating it with the system instruction if absent."""
        pass

    @abstractmethod
    async def append(self, call_sid: str, message: Message) -> CallSession:
        """Append a message to a session, enforcing the history cap."""
        pass

    @abstractmethod
    async def delete(self, call_sid: str) -> bool:
        """Remove a session. Returns False if it did not exist."""
        pass

    @abstractmethod
    def lock(self, call_sid: str) -> AsyncContextManager[None]:
        """Lock serializing conversation turns for one call."""
        pass

    @abstractmethod
    async def purge_idle(self, max_idle_seconds: float) -> int:
        """Delete sessions idle longer than ``max_idle_seconds``."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of live sessions."""
        pass
