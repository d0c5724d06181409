from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from todo_mcp.config import Settings
from todo_mcp.main import create_app
from todo_mcp.mcp.dispatcher import Dispatcher
from todo_mcp.mcp.registry import build_registry
from todo_mcp.mcp.server import create_session_manager
from todo_mcp.services.record_store import RecordStore


@pytest.fixture
def settings():
    return Settings(keepalive_interval=0.01, session_idle_timeout=0, log_level="WARNING")


@pytest.fixture
def store():
    return RecordStore()


@pytest.fixture
def registry(store):
    return build_registry(store)


@pytest.fixture
def dispatcher(registry, settings):
    return Dispatcher(registry, settings)


@pytest.fixture
def sessions(store, settings):
    return create_session_manager(store, settings)


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    return TestClient(app)


def rpc(method, params=None, request_id=1):
    """Build a JSON-RPC request envelope."""
    message = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    return message


def notification(method, params=None):
    message = {"jsonrpc": "2.0", "method": method}
    if params is not None:
        message["params"] = params
    return message


def parse_timestamp(value):
    """Parse a wire timestamp, which carries a Z suffix."""
    assert value.endswith("Z")
    return datetime.fromisoformat(value[:-1] + "+00:00")
