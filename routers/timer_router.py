# routers/timer_router.py
from fastapi import APIRouter, Query
from sse_starlette.sse import EventSourceResponse

from app.cooking.timer import countdown_events
from core.config import get_settings

router = APIRouter(prefix="/api/timer", tags=["timer"])


@router.get("/stream")
async def stream_timer(minutes: int = Query(..., ge=1, le=24 * 60)):
    """Server-sent countdown: one `tick` event per second, then `finished`."""
    interval = get_settings().TIMER_TICK_SECONDS
    return EventSourceResponse(countdown_events(minutes, interval))
