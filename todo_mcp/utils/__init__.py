"""
Shared utilities for the Todo MCP server
"""
from .errors import (
    TodoMCPError,
    OperationError,
    ValidationError,
    NotFoundError,
    UnknownOperationError,
    ProtocolError,
    TransportError,
)
from .logging import configure_logging, get_logger, log_error

__all__ = [
    "TodoMCPError",
    "OperationError",
    "ValidationError",
    "NotFoundError",
    "UnknownOperationError",
    "ProtocolError",
    "TransportError",
    "configure_logging",
    "get_logger",
    "log_error",
]
