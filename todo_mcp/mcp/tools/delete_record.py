"""
Delete Record MCP Tool
Permanently deletes a todo record
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from ..registry import Operation, UIMode
from ...services.record_store import RecordStore
from ...utils.errors import NotFoundError, ValidationError


class DeleteRecordArgs(BaseModel):
    # Required in the schema only; the handler reports a missing value
    model_config = ConfigDict(json_schema_extra={"required": ["id"]})

    id: Optional[str] = Field(None, description="The ID of the todo to delete")


def delete_record(store: RecordStore, args: DeleteRecordArgs) -> dict:
    """Permanently delete a todo item."""
    if not args.id:
        raise ValidationError("Todo ID is required")

    if not store.delete(args.id):
        raise NotFoundError(args.id)
    return {"success": True, "id": args.id}


OPERATION = Operation(
    name="delete_record",
    description="Delete a todo item. Use this when the user wants to remove a task.",
    arguments=DeleteRecordArgs,
    handler=delete_record,
    ui=UIMode.ON_MUTATION,
)
