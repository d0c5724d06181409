"""
MCP Tools module for the Todo MCP server
Contains every operation definition for todo records
"""
from .list_records import OPERATION as LIST_RECORDS, list_records
from .create_record import OPERATION as CREATE_RECORD, create_record
from .update_record import OPERATION as UPDATE_RECORD, update_record
from .delete_record import OPERATION as DELETE_RECORD, delete_record
from .render_ui import OPERATION as RENDER_UI, render_ui

# Registration order is the order reported by tools/list
OPERATIONS = (
    LIST_RECORDS,
    CREATE_RECORD,
    UPDATE_RECORD,
    DELETE_RECORD,
    RENDER_UI,
)

__all__ = [
    "OPERATIONS",
    "list_records",
    "create_record",
    "update_record",
    "delete_record",
    "render_ui",
]
