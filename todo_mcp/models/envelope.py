"""
JSON-RPC envelope models for the Todo MCP server
"""
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

RequestId = Union[StrictStr, StrictInt]


class Envelope(BaseModel):
    """An inbound request or notification"""
    model_config = ConfigDict(extra="ignore")

    jsonrpc: Literal["2.0"]
    id: Optional[RequestId] = None
    method: StrictStr = Field(min_length=1)
    params: Optional[Dict[str, Any]] = None

    @property
    def is_notification(self) -> bool:
        """A notification has no id member at all."""
        return "id" not in self.model_fields_set


def recover_id(payload: Any) -> Optional[Union[str, int]]:
    """Best-effort id of a payload that failed envelope validation."""
    if isinstance(payload, dict):
        request_id = payload.get("id")
        if isinstance(request_id, (str, int)) and not isinstance(request_id, bool):
            return request_id
    return None


def success_response(request_id: Optional[Union[str, int]], result: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def error_response(request_id: Optional[Union[str, int]], code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}
