import json
import threading
import time

from fastapi.testclient import TestClient

from .conftest import notification, rpc

SESSION_HEADER = "Mcp-Session-Id"


def initialize(client):
    response = client.post("/mcp", json=rpc("initialize", {
        "protocolVersion": "2024-11-05",
        "capabilities": {},
        "clientInfo": {"name": "pytest", "version": "1.0"},
    }))
    assert response.status_code == 200
    return response.headers[SESSION_HEADER]


def test_server_info_and_health(client):
    info = client.get("/")
    assert info.status_code == 200
    assert info.json() == {"name": "mcp-todo-server", "version": "1.0.0", "status": "running"}

    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "ok"


def test_initialize_assigns_session(client, app):
    session_id = initialize(client)

    assert session_id in app.state.sessions


def test_initialized_notification_is_accepted_without_body(client):
    session_id = initialize(client)
    response = client.post(
        "/mcp",
        json=notification("notifications/initialized"),
        headers={SESSION_HEADER: session_id},
    )

    assert response.status_code == 202
    assert response.content == b""
    assert response.headers[SESSION_HEADER] == session_id


def test_calls_on_one_session_share_dispatcher(client, app):
    session_id = initialize(client)
    headers = {SESSION_HEADER: session_id}

    created = client.post("/mcp", json=rpc("tools/call", {
        "name": "create_record", "arguments": {"title": "Buy milk"},
    }, 2), headers=headers)
    listed = client.post("/mcp", json=rpc("tools/call", {
        "name": "list_records", "arguments": {},
    }, 3), headers=headers)

    assert created.headers[SESSION_HEADER] == session_id
    assert listed.json()["id"] == 3
    records = json.loads(listed.json()["result"]["content"][0]["text"])
    assert [r["title"] for r in records] == ["Buy milk"]
    assert app.state.sessions.get(session_id).dispatcher.request_count == 3


def test_unknown_session_id_is_recovered(client, app):
    response = client.post("/mcp", json=rpc("ping"), headers={SESSION_HEADER: "stale-session"})

    assert response.status_code == 200
    assert response.json()["result"] == {}
    assert response.headers[SESSION_HEADER] == "stale-session"
    assert "stale-session" in app.state.sessions


def test_missing_session_id_is_recovered(client):
    response = client.post("/mcp", json=rpc("tools/list"))

    assert response.status_code == 200
    assert response.headers[SESSION_HEADER]
    assert len(response.json()["result"]["tools"]) == 5


def test_unknown_method(client):
    response = client.post("/mcp", json=rpc("unknown_op", request_id=42))

    assert response.status_code == 200
    assert response.json()["error"]["code"] == -32601
    assert response.json()["id"] == 42


def test_malformed_json(client):
    response = client.post(
        "/mcp",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}


def test_business_failure_keeps_store_unchanged(client, store):
    response = client.post("/mcp", json=rpc("tools/call", {
        "name": "create_record", "arguments": {"title": ""},
    }))

    result = response.json()["result"]
    assert result["isError"] is True
    assert store.count() == 0


def test_terminate_session(client, app):
    session_id = initialize(client)

    response = client.delete("/mcp", headers={SESSION_HEADER: session_id})
    assert response.status_code == 204
    assert session_id not in app.state.sessions

    again = client.delete("/mcp", headers={SESSION_HEADER: session_id})
    assert again.status_code == 404


def test_terminate_requires_header(client):
    assert client.delete("/mcp").status_code == 400


def test_stream_message_is_relayed_to_session(client, app):
    session = app.state.sessions.create()
    session.attached = True

    response = client.post(f"/messages?session_id={session.id}", json=rpc("ping", request_id=5))

    assert response.status_code == 202
    assert session.outbound.get_nowait() == {"jsonrpc": "2.0", "id": 5, "result": {}}


def test_stream_notification_sends_nothing(client, app):
    session = app.state.sessions.create()

    response = client.post(
        f"/messages?session_id={session.id}",
        json=notification("notifications/initialized"),
    )

    assert response.status_code == 202
    assert session.outbound.empty()


def test_stream_message_without_stream_is_answered_inline(client, app):
    response = client.post("/messages?session_id=stale-stream", json=rpc("ping", request_id=77))

    assert response.status_code == 200
    assert response.json() == {"jsonrpc": "2.0", "id": 77, "result": {}}
    assert response.headers[SESSION_HEADER] == "stale-stream"
    assert app.state.sessions.get("stale-stream").outbound.empty()


def wait_for_attached_session(sessions, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        for session_id in sessions.ids():
            session = sessions.get(session_id)
            if session is not None and session.attached:
                return session
        time.sleep(0.01)
    raise AssertionError("no stream attached")


def end_streams(sessions):
    """Release any stream still open so a failed conversation cannot hang the test."""
    for session_id in sessions.ids():
        sessions.close(session_id)


def sse_frames(body):
    """Split an event-stream body into (event, data) pairs, skipping comments."""
    frames = []
    for block in body.split("\n\n"):
        if not block or block.startswith(":"):
            continue
        event, data = None, []
        for line in block.split("\n"):
            if line.startswith("event: "):
                event = line[len("event: "):]
            elif line.startswith("data: "):
                data.append(line[len("data: "):])
        frames.append((event, "\n".join(data)))
    return frames


def test_event_stream_over_http(app):
    sessions = app.state.sessions
    outcome = {}

    # The test client returns a stream only once it ends, so the other side
    # of the conversation runs on a second thread
    def converse():
        try:
            session = wait_for_attached_session(sessions)
            outcome["session_id"] = session.id
            outcome["post"] = client.post(
                f"/messages?session_id={session.id}", json=rpc("ping", request_id=9),
            )
            outcome["delete"] = client.delete("/mcp", headers={SESSION_HEADER: session.id})
        finally:
            end_streams(sessions)

    with TestClient(app) as client:
        worker = threading.Thread(target=converse)
        worker.start()
        response = client.get("/sse")
        worker.join()

    session_id = outcome["session_id"]
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers[SESSION_HEADER] == session_id

    frames = sse_frames(response.text)
    assert frames[0] == ("endpoint", f"/messages?session_id={session_id}")
    assert [event for event, _ in frames[1:]] == ["message"]
    assert json.loads(frames[1][1]) == {"jsonrpc": "2.0", "id": 9, "result": {}}

    assert outcome["post"].status_code == 202
    assert outcome["post"].text == "Accepted"
    assert outcome["delete"].status_code == 204
    assert session_id not in sessions


def test_session_stream_over_http(app):
    sessions = app.state.sessions
    outcome = {}

    def converse():
        try:
            session = wait_for_attached_session(sessions)
            outcome["post"] = client.post(
                f"/messages?session_id={session.id}", json=rpc("tools/list", request_id=4),
            )
            outcome["delete"] = client.delete("/mcp", headers={SESSION_HEADER: session.id})
        finally:
            end_streams(sessions)

    with TestClient(app) as client:
        session_id = initialize(client)
        worker = threading.Thread(target=converse)
        worker.start()
        response = client.get("/mcp", headers={SESSION_HEADER: session_id})
        worker.join()

    assert response.status_code == 200
    assert response.headers[SESSION_HEADER] == session_id
    frames = sse_frames(response.text)
    assert [event for event, _ in frames] == ["message"]
    message = json.loads(frames[0][1])
    assert message["id"] == 4
    assert len(message["result"]["tools"]) == 5
    assert outcome["post"].status_code == 202
    assert session_id not in sessions


def test_rest_tools(client):
    listed = client.get("/api/tools")
    assert [t["name"] for t in listed.json()["tools"]][0] == "list_records"

    created = client.post("/api/tools/create_record", json={"title": "From REST"})
    assert created.status_code == 200
    body = created.json()
    assert json.loads(body["content"][0]["text"])["title"] == "From REST"
    assert body["content"][1]["resource"]["uri"] == "ui://todo/app"

    rendered = client.post("/api/tools/render_ui")
    assert rendered.status_code == 200
    assert "From REST" in rendered.json()["content"][1]["resource"]["text"]


def test_rest_tool_errors(client):
    invalid = client.post("/api/tools/create_record", json={"title": "   "})
    assert invalid.status_code == 400
    assert invalid.json() == {"error": "Title is required"}

    missing = client.post("/api/tools/delete_record", json={"id": "nope"})
    assert missing.status_code == 400
    assert "not found" in missing.json()["error"]

    unknown = client.post("/api/tools/nothing", json={})
    assert unknown.status_code == 404
