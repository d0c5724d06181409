"""
Error types for the Todo MCP server

Operation errors are business failures: they are reported inside a successful
JSON-RPC result. Protocol errors become top-level JSON-RPC error objects.
"""
from typing import Any, Dict, Optional, Union

from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
)

RequestId = Union[str, int]


class TodoMCPError(Exception):
    """Base exception for the server"""
    pass


class OperationError(TodoMCPError):
    """Raised by an operation handler; surfaced as a business failure"""
    kind = "operation_error"
    code = INTERNAL_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.kind, "code": self.code, "message": self.message}


class ValidationError(OperationError):
    """Raised when a required argument is missing, empty or mistyped"""
    kind = "validation_error"


class NotFoundError(OperationError):
    """Raised when an operation targets a record that does not exist"""
    kind = "not_found"

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Todo with ID {record_id} not found")


class UnknownOperationError(OperationError):
    """Raised when no operation is registered under the requested name"""
    kind = "unknown_operation"
    code = METHOD_NOT_FOUND

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ProtocolError(TodoMCPError):
    """Malformed envelope, unknown method or bad lifecycle parameters"""

    def __init__(self, code: int, message: str, request_id: Optional[RequestId] = None):
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(message)

    @classmethod
    def parse_error(cls, message: str = "Parse error") -> "ProtocolError":
        return cls(PARSE_ERROR, message)

    @classmethod
    def invalid_request(cls, message: str, request_id: Optional[RequestId] = None) -> "ProtocolError":
        return cls(INVALID_REQUEST, message, request_id)

    @classmethod
    def method_not_found(cls, method: str, request_id: Optional[RequestId] = None) -> "ProtocolError":
        return cls(METHOD_NOT_FOUND, f"Method not found: {method}", request_id)

    @classmethod
    def invalid_params(cls, message: str, request_id: Optional[RequestId] = None) -> "ProtocolError":
        return cls(INVALID_PARAMS, message, request_id)


class TransportError(TodoMCPError):
    """
    A call arrived with an unknown or absent session identifier.

    Never surfaced to the caller: the session manager recovers by creating
    a new session.
    """

    def __init__(self, session_id: Optional[str], method: Optional[str] = None):
        self.session_id = session_id
        self.method = method
        super().__init__(f"Unknown session {session_id!r} for method {method!r}")
