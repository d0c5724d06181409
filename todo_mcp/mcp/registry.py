"""
Operation registry for the Todo MCP server
Maps operation names to their argument models and handlers
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Type

from mcp.types import Tool
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..services.record_store import RecordStore
from ..utils.errors import UnknownOperationError, ValidationError
from ..utils.logging import get_logger

logger = get_logger("registry")


class UIMode(str, Enum):
    """When a UI snapshot is attached to an operation's result"""
    NONE = "none"
    ON_MUTATION = "on_mutation"
    ALWAYS = "always"


Handler = Callable[[RecordStore, Any], Any]


@dataclass(frozen=True)
class Operation:
    """A named operation exposed through the protocol"""
    name: str
    description: str
    arguments: Type[BaseModel]
    handler: Handler
    ui: UIMode = UIMode.NONE

    def input_schema(self) -> Dict[str, Any]:
        return _clean_schema(self.arguments.model_json_schema())

    def to_tool(self) -> Tool:
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema())


def _clean_schema(schema: Any) -> Any:
    """Drop pydantic's generated titles and collapse Optional[X] to X."""
    if isinstance(schema, list):
        return [_clean_schema(item) for item in schema]
    if not isinstance(schema, dict):
        return schema

    cleaned = {}
    for key, value in schema.items():
        if key == "title" and isinstance(value, str):
            continue
        if key == "default" and value is None:
            continue
        cleaned[key] = _clean_schema(value)

    variants = cleaned.pop("anyOf", None)
    if variants is not None:
        non_null = [v for v in variants if v.get("type") != "null"]
        if len(non_null) == 1:
            cleaned.update(non_null[0])
        else:
            cleaned["anyOf"] = non_null
    return cleaned


def format_validation_error(error: PydanticValidationError) -> str:
    """Render a pydantic validation error as one readable sentence."""
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "arguments"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "Invalid arguments: " + "; ".join(parts)


class OperationRegistry:
    """
    Fixed table of operations bound to one record store.

    Built once per session; the table itself never changes after construction.
    """

    def __init__(self, store: RecordStore, operations: Iterable[Operation]):
        self.store = store
        self._operations: Dict[str, Operation] = {}
        for operation in operations:
            if operation.name in self._operations:
                raise ValueError(f"Duplicate operation: {operation.name}")
            self._operations[operation.name] = operation

    def list(self) -> List[Tool]:
        """Describe every registered operation."""
        return [operation.to_tool() for operation in self._operations.values()]

    def names(self) -> List[str]:
        return list(self._operations)

    def get(self, name: str) -> Optional[Operation]:
        return self._operations.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def invoke(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Any:
        """
        Validate arguments and run an operation.

        Args:
            name: Registered operation name
            arguments: Raw argument object from the caller

        Returns:
            The operation's JSON-serialisable payload

        Raises:
            UnknownOperationError: If no operation has that name
            ValidationError: If the arguments are missing, empty or mistyped
            NotFoundError: If the operation targets a missing record
        """
        operation = self._operations.get(name)
        if operation is None:
            raise UnknownOperationError(name)

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise ValidationError("Invalid arguments: expected an object")

        try:
            args = operation.arguments.model_validate(arguments)
        except PydanticValidationError as e:
            raise ValidationError(format_validation_error(e))

        logger.debug("Executing operation %s", name)
        return operation.handler(self.store, args)


def build_registry(store: RecordStore) -> OperationRegistry:
    """Build the registry of todo operations for one session."""
    # Imported here so tool modules can import this one
    from .tools import OPERATIONS

    return OperationRegistry(store, OPERATIONS)
