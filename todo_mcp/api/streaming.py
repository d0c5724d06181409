"""
Server-Sent Events helpers for the Todo MCP server
"""
import asyncio
import json
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, Optional

from ..mcp.session import Session, SessionManager
from ..utils.logging import get_logger

logger = get_logger("streaming")

KEEPALIVE_FRAME = ": keepalive\n\n"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def sse_event(data: Any, event: Optional[str] = None) -> str:
    """Format one SSE frame. Dicts are sent as compact JSON."""
    if not isinstance(data, str):
        data = json.dumps(data, separators=(",", ":"))
    frame = f"event: {event}\n" if event else ""
    for line in data.splitlines() or [""]:
        frame += f"data: {line}\n"
    return frame + "\n"


async def session_event_stream(
    session: Session,
    sessions: SessionManager,
    keepalive_interval: float,
    is_disconnected: Callable[[], Awaitable[bool]],
    first_event: Optional[str] = None,
) -> AsyncGenerator[str, None]:
    """
    Relay a session's outbound messages as SSE frames.

    A keep-alive comment is written whenever no message arrives within
    keepalive_interval. The stream ends when the consumer disconnects or the
    session is closed, and the session is always purged on the way out.
    While the stream runs the session is marked attached, which exempts it
    from idle purging.
    """
    logger.info("SSE connection established for session %s", session.id)
    session.attached = True
    # A pending get survives keep-alive timeouts so no message is dropped
    getter: Optional["asyncio.Task[Optional[Dict[str, Any]]]"] = None
    try:
        if first_event is not None:
            yield first_event

        while True:
            if await is_disconnected():
                break
            if getter is None:
                getter = asyncio.ensure_future(session.outbound.get())
            done, _ = await asyncio.wait({getter}, timeout=keepalive_interval)
            if not done:
                yield KEEPALIVE_FRAME
                continue

            message = getter.result()
            getter = None
            if message is None:
                break
            yield sse_event(message, event="message")
    finally:
        if getter is not None:
            getter.cancel()
        session.attached = False
        logger.info("SSE connection closed for session %s", session.id)
        if sessions.get(session.id) is session:
            sessions.close(session.id)
