# moviedeck/api/routers/notifications.py
import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Request
from sse_starlette.sse import EventSourceResponse

from moviedeck.api.dependencies import get_context
from moviedeck.api.schemas import NotificationOut
from moviedeck.context import AppContext

router = APIRouter(tags=["notifications"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[NotificationOut], name="notifications.recent")
def recent(limit: int = Query(10, ge=0, le=200), ctx: AppContext = Depends(get_context)):
    return [n.to_dict() for n in ctx.notifier.recent(limit)]


@router.get("/stream", name="notifications.stream")
async def stream(request: Request, ctx: AppContext = Depends(get_context)):
    """
    SSE endpoint: push every toast to the browser as it is raised.
    """
    queue = ctx.notifier.subscribe()
    logger.info("Client connected to notification stream")

    async def event_generator():
        try:
            while True:
                if await request.is_disconnected():
                    break
                try:
                    payload = await asyncio.wait_for(queue.get(), timeout=15)
                except asyncio.TimeoutError:
                    continue
                yield {"event": "notification", "data": payload}
        except asyncio.CancelledError:
            logger.info("Client disconnected from notification stream")
            raise
        finally:
            ctx.notifier.unsubscribe(queue)

    return EventSourceResponse(
        event_generator(),
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no"
        }
    )
