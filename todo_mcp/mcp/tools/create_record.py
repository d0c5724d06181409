"""
Create Record MCP Tool
Creates a new todo record
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from ..registry import Operation, UIMode
from ...models.record import RecordCreate
from ...services.record_store import RecordStore
from ...utils.errors import ValidationError


class CreateRecordArgs(BaseModel):
    # Required in the schema only; the handler reports a missing value
    model_config = ConfigDict(json_schema_extra={"required": ["title"]})

    title: Optional[str] = Field(None, description="The title of the todo item")
    description: Optional[str] = Field(None, description="Optional description for the todo")


def create_record(store: RecordStore, args: CreateRecordArgs) -> dict:
    """Create a new todo item."""
    title = (args.title or "").strip()
    if not title:
        raise ValidationError("Title is required")

    record = store.create(RecordCreate(
        title=title,
        description=(args.description or "").strip(),
    ))
    return record.to_public()


OPERATION = Operation(
    name="create_record",
    description="Create a new todo item. Use this when the user wants to add a new task.",
    arguments=CreateRecordArgs,
    handler=create_record,
    ui=UIMode.ON_MUTATION,
)
