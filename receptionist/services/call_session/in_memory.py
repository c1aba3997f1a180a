"""In-memory session store."""
import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Dict, Optional

from receptionist.services.call_session.base import SessionStore
from receptionist.services.call_session.models import CallSession, Message

logger = logging.getLogger(__name__)


class _CallLock:
    """A call's lock plus the number of tasks holding or waiting on it."""

    def __init__(self):
        self.lock = asyncio.Lock()
        self.users = 0


class InMemorySessionStore(SessionStore):
    """
    Process-local session store.

    Sessions are lost when the process restarts. Each call gets its own
    asyncio lock so turns for the same CallSid never interleave. A lock
    entry lives only while some task holds or waits on it.
    """

    def __init__(
        self,
        system_prompt: str,
        history_limit: int = 12,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.system_prompt = system_prompt
        self.history_limit = history_limit
        self.clock = clock
        self._sessions: Dict[str, CallSession] = {}
        self._locks: Dict[str, _CallLock] = {}

    async def get(self, call_sid: str) -> Optional[CallSession]:
        return self._sessions.get(call_sid)

    async def get_or_create(self, call_sid: str) -> CallSession:
        session = self._sessions.get(call_sid)
        if session is None:
            session = CallSession(
                call_sid=call_sid,
                messages=[Message(role="system", content=self.system_prompt)],
                last_activity=self.clock(),
            )
            self._sessions[call_sid] = session
            logger.info(f"[SESSION STORE] Created session - CallSid: {call_sid}")
        return session

    async def append(self, call_sid: str, message: Message) -> CallSession:
        session = await self.get_or_create(call_sid)
        session.add_message(message, self.history_limit)
        session.last_activity = self.clock()
        return session

    async def delete(self, call_sid: str) -> bool:
        if call_sid in self._sessions:
            del self._sessions[call_sid]
            logger.info(f"[SESSION STORE] Deleted session - CallSid: {call_sid}")
            return True
        return False

    @asynccontextmanager
    async def lock(self, call_sid: str) -> AsyncIterator[None]:
        entry = self._locks.get(call_sid)
        if entry is None:
            entry = self._locks[call_sid] = _CallLock()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[call_sid]

    async def purge_idle(self, max_idle_seconds: float) -> int:
        cutoff = self.clock() - max_idle_seconds
        expired = [
            call_sid
            for call_sid, session in self._sessions.items()
            if session.last_activity < cutoff and call_sid not in self._locks
        ]
        for call_sid in expired:
            await self.delete(call_sid)
        if expired:
            logger.info(f"[SESSION STORE] Purged {len(expired)} idle session(s)")
        return len(expired)

    async def count(self) -> int:
        return len(self._sessions)

    def is_locked(self, call_sid: str) -> bool:
        """True while a turn or cleanup for the call holds or awaits its lock."""
        return call_sid in self._locks
