"""
MCP server setup for the Todo MCP server
Wires the record store into per-session dispatchers
"""
from typing import Callable, Optional

from ..config import Settings, settings as default_settings
from ..services.record_store import RecordStore
from .dispatcher import Dispatcher
from .registry import build_registry
from .session import SessionManager


def dispatcher_factory(store: RecordStore, settings: Optional[Settings] = None) -> Callable[[], Dispatcher]:
    """Return a factory producing one dispatcher and registry pair per call."""
    settings = settings or default_settings

    def create_dispatcher() -> Dispatcher:
        return Dispatcher(build_registry(store), settings)

    return create_dispatcher


def create_session_manager(store: RecordStore, settings: Optional[Settings] = None) -> SessionManager:
    """Session manager whose sessions all share the given store."""
    settings = settings or default_settings
    return SessionManager(dispatcher_factory(store, settings), settings)


__all__ = ["dispatcher_factory", "create_session_manager"]
