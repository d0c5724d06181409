"""
MCP (Model Context Protocol) module for the Todo MCP server
Exposes todo operations as MCP tools over JSON-RPC
"""
from .dispatcher import Dispatcher
from .registry import Operation, OperationRegistry, UIMode, build_registry
from .server import create_session_manager, dispatcher_factory
from .session import Session, SessionManager, SessionState
from .ui import build_ui_resource, render_todo_ui

__all__ = [
    "Dispatcher",
    "Operation",
    "OperationRegistry",
    "UIMode",
    "build_registry",
    "create_session_manager",
    "dispatcher_factory",
    "Session",
    "SessionManager",
    "SessionState",
    "build_ui_resource",
    "render_todo_ui",
]
