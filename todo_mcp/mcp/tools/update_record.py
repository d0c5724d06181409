"""
Update Record MCP Tool
Updates the supplied fields of an existing todo record
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from ..registry import Operation, UIMode
from ...models.record import RecordUpdate
from ...services.record_store import RecordStore
from ...utils.errors import NotFoundError, ValidationError


class UpdateRecordArgs(BaseModel):
    # Required in the schema only; the handler reports a missing value
    model_config = ConfigDict(json_schema_extra={"required": ["id"]})

    id: Optional[str] = Field(None, description="The ID of the todo to update")
    title: Optional[str] = Field(None, description="New title for the todo")
    description: Optional[str] = Field(None, description="New description for the todo")
    completed: Optional[bool] = Field(None, description="Mark todo as completed or not")


def update_record(store: RecordStore, args: UpdateRecordArgs) -> dict:
    """Update a todo item. Only supplied fields change."""
    if not args.id:
        raise ValidationError("Todo ID is required")

    update_data = {}

    if args.title is not None:
        title = args.title.strip()
        if not title:
            raise ValidationError("Title cannot be empty")
        update_data["title"] = title

    if args.description is not None:
        update_data["description"] = args.description.strip()

    if args.completed is not None:
        update_data["completed"] = args.completed

    record = store.update(args.id, RecordUpdate(**update_data))
    if record is None:
        raise NotFoundError(args.id)
    return record.to_public()


OPERATION = Operation(
    name="update_record",
    description="Update a todo item. Use this when the user wants to modify, complete, or edit a task.",
    arguments=UpdateRecordArgs,
    handler=update_record,
    ui=UIMode.ON_MUTATION,
)
