"""
List Records MCP Tool
Lists todo records, newest first, optionally filtered by completion
"""
from typing import Optional
from pydantic import BaseModel, Field

from ..registry import Operation
from ...services.record_store import RecordStore


class ListRecordsArgs(BaseModel):
    completed: Optional[bool] = Field(None, description="Filter by completion status")


def list_records(store: RecordStore, args: ListRecordsArgs) -> list:
    """List all todos, most recently created first."""
    records = store.get_all()
    if args.completed is not None:
        records = [r for r in records if r.completed == args.completed]
    return [r.to_public() for r in records]


OPERATION = Operation(
    name="list_records",
    description="List all todos. Use this when the user asks to see their tasks.",
    arguments=ListRecordsArgs,
    handler=list_records,
)
