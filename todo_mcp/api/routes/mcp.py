"""
MCP transport routes for the Todo MCP server

Two bindings share the same session manager and dispatcher:

- Call/response: POST /mcp answers each JSON-RPC message directly, correlated
  by the Mcp-Session-Id header; GET /mcp attaches to the session's outbound
  stream; DELETE /mcp ends the session.
- Streaming: GET /sse opens a long-lived event stream that first announces
  the message endpoint; POST /messages?session_id=... dispatches and relays
  the response over that stream.
"""
import json
from typing import Any, Optional

from fastapi import APIRouter, Header, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse, StreamingResponse
from mcp.types import INTERNAL_ERROR

from ...mcp.session import SessionManager
from ...models.envelope import error_response, recover_id
from ...utils.errors import ProtocolError
from ...utils.logging import get_logger, log_error
from ..streaming import SSE_HEADERS, session_event_stream, sse_event

router = APIRouter()
logger = get_logger("transport")

SESSION_HEADER = "Mcp-Session-Id"


def _sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


async def _read_payload(request: Request) -> Any:
    """Decode the JSON body, raising a parse error the caller can report."""
    body = await request.body()
    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError):
        raise ProtocolError.parse_error()


def _method_of(payload: Any) -> Optional[str]:
    if isinstance(payload, dict) and isinstance(payload.get("method"), str):
        return payload["method"]
    return None


# ============ Call/response binding ============

@router.post("/mcp")
async def post_message(
    request: Request,
    mcp_session_id: Optional[str] = Header(None),
):
    """
    Handle one JSON-RPC message and answer it in the HTTP response.

    Notifications are acknowledged with 202 and no body. The session id is
    echoed on every response, including sessions created implicitly for an
    unknown or missing id.
    """
    payload: Any = None
    try:
        payload = await _read_payload(request)
        method = _method_of(payload)
        logger.info("MCP request: %s (session: %s)", method, mcp_session_id or "new")

        session, _ = _sessions(request).resolve(mcp_session_id, method)
        headers = {SESSION_HEADER: session.id}

        response = session.handle(payload)
        if response is None:
            return Response(status_code=status.HTTP_202_ACCEPTED, headers=headers)
        return JSONResponse(response, headers=headers)

    except ProtocolError as e:
        return JSONResponse(
            error_response(None, e.code, e.message),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except Exception as e:
        log_error(e, "POST /mcp", mcp_session_id)
        return JSONResponse(
            error_response(recover_id(payload), INTERNAL_ERROR, str(e) or "Internal server error"),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


@router.get("/mcp")
async def attach_stream(
    request: Request,
    mcp_session_id: Optional[str] = Header(None),
):
    """Attach to a session's outbound stream, resuming it if it is gone."""
    sessions = _sessions(request)
    session, _ = sessions.resolve(mcp_session_id)
    settings = request.app.state.settings

    return StreamingResponse(
        session_event_stream(
            session,
            sessions,
            keepalive_interval=settings.keepalive_interval,
            is_disconnected=request.is_disconnected,
        ),
        media_type="text/event-stream",
        headers={**SSE_HEADERS, SESSION_HEADER: session.id},
    )


@router.delete("/mcp", status_code=status.HTTP_204_NO_CONTENT)
async def terminate_session(
    request: Request,
    mcp_session_id: Optional[str] = Header(None),
):
    """Explicitly end a session."""
    if not mcp_session_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{SESSION_HEADER} header is required",
        )

    if not _sessions(request).close(mcp_session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {mcp_session_id} not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============ Streaming binding ============

@router.get("/sse")
async def open_event_stream(request: Request):
    """
    Open a long-lived event stream for a new session.

    The first event names the endpoint to post messages to; responses to
    those messages arrive on this stream as "message" events.
    """
    sessions = _sessions(request)
    session = sessions.create()
    settings = request.app.state.settings
    endpoint = f"{request.url_for('post_stream_message').path}?session_id={session.id}"

    return StreamingResponse(
        session_event_stream(
            session,
            sessions,
            keepalive_interval=settings.keepalive_interval,
            is_disconnected=request.is_disconnected,
            first_event=sse_event(endpoint, event="endpoint"),
        ),
        media_type="text/event-stream",
        headers={**SSE_HEADERS, SESSION_HEADER: session.id},
    )


@router.post("/messages", name="post_stream_message", status_code=status.HTTP_202_ACCEPTED)
async def post_stream_message(
    request: Request,
    session_id: Optional[str] = Query(None),
):
    """
    Dispatch a message whose response is delivered over the event stream.

    When no stream is attached to the session, as for a session recovered
    from an unknown id, the response is returned in the body instead.
    """
    payload: Any = None
    try:
        payload = await _read_payload(request)
        session, _ = _sessions(request).resolve(session_id, _method_of(payload))
        headers = {SESSION_HEADER: session.id}

        response = session.handle(payload)
        if response is not None and not session.attached:
            logger.info("No stream attached to session %s; answering inline", session.id)
            return JSONResponse(response, headers=headers)

        if response is not None:
            session.send(response)
        return Response(
            content="Accepted",
            status_code=status.HTTP_202_ACCEPTED,
            headers=headers,
        )

    except ProtocolError as e:
        return JSONResponse(
            error_response(None, e.code, e.message),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except Exception as e:
        log_error(e, "POST /messages", session_id)
        return JSONResponse(
            error_response(recover_id(payload), INTERNAL_ERROR, str(e) or "Internal server error"),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
