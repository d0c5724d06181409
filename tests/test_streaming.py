import asyncio
import json

from todo_mcp.api.streaming import KEEPALIVE_FRAME, session_event_stream, sse_event


async def never_disconnected():
    return False


def test_sse_event_format():
    assert sse_event({"a": 1}, event="message") == 'event: message\ndata: {"a":1}\n\n'
    assert sse_event("/messages?session_id=x", event="endpoint") == (
        "event: endpoint\ndata: /messages?session_id=x\n\n"
    )
    assert sse_event("line one\nline two") == "data: line one\ndata: line two\n\n"


def test_stream_relays_messages_until_closed(sessions):
    session = sessions.create()

    async def consume():
        frames = []
        stream = session_event_stream(
            session, sessions, keepalive_interval=5, is_disconnected=never_disconnected,
            first_event=sse_event("/messages?session_id=" + session.id, event="endpoint"),
        )
        session.send({"jsonrpc": "2.0", "id": 1, "result": {}})
        sessions.close(session.id)
        async for frame in stream:
            frames.append(frame)
        return frames

    frames = asyncio.run(consume())

    assert frames[0].startswith("event: endpoint\n")
    assert frames[1].startswith("event: message\n")
    assert json.loads(frames[1].split("data: ", 1)[1]) == {"jsonrpc": "2.0", "id": 1, "result": {}}
    assert len(frames) == 2


def test_stream_emits_keepalive_and_purges_on_disconnect(sessions):
    session = sessions.create()

    async def consume():
        stream = session_event_stream(
            session, sessions, keepalive_interval=0.01, is_disconnected=never_disconnected,
        )
        first = await stream.__anext__()
        await stream.aclose()
        return first

    assert asyncio.run(consume()) == KEEPALIVE_FRAME
    assert session.id not in sessions


def test_stream_stops_when_consumer_disconnects(sessions):
    session = sessions.create()

    async def disconnected():
        return True

    async def consume():
        return [frame async for frame in session_event_stream(
            session, sessions, keepalive_interval=5, is_disconnected=disconnected,
        )]

    assert asyncio.run(consume()) == []
    assert session.id not in sessions


def test_stream_leaves_replacement_session_alone(sessions):
    session = sessions.create("shared-id")
    sessions.close("shared-id")
    replacement = sessions.create("shared-id")

    async def consume():
        return [frame async for frame in session_event_stream(
            session, sessions, keepalive_interval=5, is_disconnected=never_disconnected,
        )]

    assert asyncio.run(consume()) == []
    assert sessions.get("shared-id") is replacement


def test_quiet_stream_survives_idle_purge(sessions, settings):
    settings.session_idle_timeout = 0.05
    session = sessions.create()

    async def consume():
        stream = session_event_stream(
            session, sessions, keepalive_interval=0.01, is_disconnected=never_disconnected,
        )
        frames = [await stream.__anext__()]
        assert session.attached is True
        await asyncio.sleep(0.1)
        sessions.resolve(None, "initialize")
        frames.append(await stream.__anext__())
        still_open = session.id in sessions and not session.is_closed
        await stream.aclose()
        return frames, still_open

    frames, still_open = asyncio.run(consume())

    assert frames == [KEEPALIVE_FRAME, KEEPALIVE_FRAME]
    assert still_open
    assert session.attached is False
    assert session.id not in sessions


def test_message_arriving_at_keepalive_is_delivered(sessions):
    session = sessions.create()

    async def consume():
        stream = session_event_stream(
            session, sessions, keepalive_interval=0.01, is_disconnected=never_disconnected,
        )
        frames = [await stream.__anext__(), await stream.__anext__()]
        session.send({"jsonrpc": "2.0", "id": 3, "result": {}})
        sessions.close(session.id)
        frames.extend([frame async for frame in stream])
        return frames

    frames = asyncio.run(consume())
    messages = [f for f in frames if f != KEEPALIVE_FRAME]

    assert messages == [sse_event({"jsonrpc": "2.0", "id": 3, "result": {}}, event="message")]
