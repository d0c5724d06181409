"""
Services module for the Todo MCP server
Contains the record store shared by all sessions
"""
from .record_store import RecordStore

__all__ = [
    "RecordStore",
]
