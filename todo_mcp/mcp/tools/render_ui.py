"""
Render UI MCP Tool
Returns the interactive todo view for the current records
"""
from pydantic import BaseModel

from ..registry import Operation, UIMode
from ...services.record_store import RecordStore


class RenderUIArgs(BaseModel):
    pass


def render_ui(store: RecordStore, args: RenderUIArgs) -> dict:
    """Summarise the records shown by the attached UI snapshot."""
    records = store.get_all()
    completed = sum(1 for r in records if r.completed)
    return {
        "total": len(records),
        "active": len(records) - completed,
        "completed": completed,
    }


OPERATION = Operation(
    name="render_ui",
    description=(
        "Display the interactive Todo application UI. Call this when the user "
        "wants to see their todos or manage tasks visually."
    ),
    arguments=RenderUIArgs,
    handler=render_ui,
    ui=UIMode.ALWAYS,
)
