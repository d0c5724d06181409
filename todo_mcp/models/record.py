"""
Record model for the Todo MCP server
Defines the todo item entity kept in the record store
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_record_id() -> str:
    return str(uuid4())


# Smallest step of the wire format; successive timestamps differ by at least this
TIMESTAMP_RESOLUTION = timedelta(milliseconds=1)


def to_timestamp(value: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix"""
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RecordBase(SQLModel):
    """Base model for a todo record with common fields"""
    title: str = Field(min_length=1)
    description: str = Field(default="")
    completed: bool = Field(default=False)


class Record(RecordBase):
    """A stored todo record"""
    id: str = Field(default_factory=new_record_id)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_public(self) -> Dict[str, Any]:
        """Wire representation (camelCase timestamps, ISO-8601 UTC strings)"""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "createdAt": to_timestamp(self.created_at),
            "updatedAt": to_timestamp(self.updated_at),
        }


class RecordCreate(RecordBase):
    """Schema for creating a new record"""
    pass


class RecordUpdate(SQLModel):
    """Schema for a partial record update"""
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
