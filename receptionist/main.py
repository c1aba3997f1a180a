"""Main FastAPI application."""
import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from receptionist.core.config import settings
from receptionist.core.dependencies import get_session_store
from receptionist.core.logging import setup_logging
from receptionist.api import health
from receptionist.api.webhooks import voice
from receptionist.services.call_session.base import SessionStore

logger = logging.getLogger(__name__)


async def sweep_idle_sessions(
    store: SessionStore, max_idle_seconds: float, interval_seconds: float
) -> None:
    """Periodically drop sessions whose calls never reported completion."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await store.purge_idle(max_idle_seconds)
        except Exception as e:
            logger.error(
                f"[SWEEP] Idle session sweep failed - Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    sweeper = None
    if settings.session_idle_timeout_seconds is not None:
        logger.info(
            f"[STARTUP] Idle session sweep enabled - "
            f"Timeout: {settings.session_idle_timeout_seconds}s, "
            f"Interval: {settings.session_sweep_interval_seconds}s"
        )
        sweeper = asyncio.create_task(
            sweep_idle_sessions(
                get_session_store(),
                settings.session_idle_timeout_seconds,
                settings.session_sweep_interval_seconds,
            )
        )
    yield
    # Shutdown
    if sweeper is not None:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass


app = FastAPI(
    title="AI Receptionist",
    description="Twilio voice receptionist backed by an OpenAI chat model",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(voice.router, tags=["webhooks"])
