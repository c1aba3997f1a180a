"""Health check endpoints."""
import logging
from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_class=PlainTextResponse)
async def root():
    """Liveness string for uptime checks."""
    return "AI receptionist running"


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint."""
    logger.debug(
        f"[HEALTH] Health check requested - Client: {request.client.host if request.client else 'unknown'}"
    )
    return {"status": "healthy"}
