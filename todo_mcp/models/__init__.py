"""
Models module for the Todo MCP server
Contains the record entity and the JSON-RPC envelope
"""
from .record import Record, RecordBase, RecordCreate, RecordUpdate
from .envelope import Envelope, error_response, success_response

__all__ = [
    "Record",
    "RecordBase",
    "RecordCreate",
    "RecordUpdate",
    "Envelope",
    "error_response",
    "success_response",
]
