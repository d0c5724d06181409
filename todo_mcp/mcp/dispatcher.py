"""
Protocol dispatcher for the Todo MCP server

Turns one inbound JSON-RPC payload into at most one response envelope.
Lifecycle methods are answered here; everything else is routed to the
operation registry.
"""
import json
from typing import Any, Callable, Dict, List, Optional

from mcp.types import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    CallToolResult,
    Implementation,
    InitializeResult,
    ListResourcesResult,
    ListToolsResult,
    ReadResourceResult,
    Resource,
    ResourcesCapability,
    ServerCapabilities,
    TextContent,
    ToolsCapability,
)
from pydantic import ValidationError as PydanticValidationError

from ..config import Settings, settings as default_settings
from ..models.envelope import Envelope, error_response, recover_id, success_response
from ..utils.errors import OperationError, ProtocolError
from ..utils.logging import get_logger, log_error
from .registry import OperationRegistry, UIMode
from .ui import UI_MIME_TYPE, build_ui_resource

logger = get_logger("dispatcher")

UI_RESOURCE_NAME = "Todo UI"


def _dump(model) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


class Dispatcher:
    """
    Per-session protocol adapter.

    Owns no record data: every operation reads and writes the store bound to
    its registry, which is shared across sessions.
    """

    def __init__(self, registry: OperationRegistry, settings: Optional[Settings] = None):
        self.registry = registry
        self.settings = settings or default_settings
        self.initialized = False
        self.protocol_version: Optional[str] = None
        self.request_count = 0
        self._lifecycle: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
            "resources/list": self._list_resources,
            "resources/read": self._read_resource,
        }

    def handle(self, payload: Any) -> Optional[Dict[str, Any]]:
        """
        Dispatch one inbound payload.

        Args:
            payload: Decoded JSON body of a single message

        Returns:
            The response envelope, or None for notifications
        """
        try:
            return self._handle(payload)
        except Exception as e:
            log_error(e, "Dispatcher.handle")
            return error_response(recover_id(payload), INTERNAL_ERROR, str(e) or "Internal error")

    def _handle(self, payload: Any) -> Optional[Dict[str, Any]]:
        if not isinstance(payload, dict):
            return error_response(None, INVALID_REQUEST, "Invalid Request")

        try:
            envelope = Envelope.model_validate(payload)
        except PydanticValidationError:
            error = ProtocolError.invalid_request("Invalid Request", recover_id(payload))
            return error_response(error.request_id, error.code, error.message)

        self.request_count += 1
        logger.debug(
            "Inbound %s %s",
            envelope.method,
            "(notification)" if envelope.is_notification else f"(id: {envelope.id})",
        )

        if envelope.is_notification:
            self._notify(envelope)
            return None

        params = envelope.params or {}
        try:
            result = self._route(envelope.method, params)
        except ProtocolError as e:
            return error_response(envelope.id, e.code, e.message)
        return success_response(envelope.id, result)

    def _notify(self, envelope: Envelope) -> None:
        """Notifications are acknowledged silently, known or not."""
        if envelope.method == "notifications/initialized":
            self.initialized = True
            logger.info("Client initialized notification received")
        else:
            logger.debug("Ignoring notification %s", envelope.method)

    def _route(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        handler = self._lifecycle.get(method)
        if handler is not None:
            return handler(params)
        if method in self.registry:
            return self.execute(method, params)
        logger.info("Unknown method: %s", method)
        raise ProtocolError.method_not_found(method)

    # Lifecycle

    def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        requested = params.get("protocolVersion")
        if requested in self.settings.supported_protocol_versions:
            self.protocol_version = requested
        else:
            self.protocol_version = self.settings.protocol_version

        client = params.get("clientInfo") or {}
        logger.info(
            "Initialize from %s (requested protocol %s, answering %s)",
            client.get("name", "unknown client") if isinstance(client, dict) else "unknown client",
            requested,
            self.protocol_version,
        )
        return _dump(InitializeResult(
            protocolVersion=self.protocol_version,
            capabilities=ServerCapabilities(
                tools=ToolsCapability(listChanged=False),
                resources=ResourcesCapability(subscribe=False, listChanged=False),
            ),
            serverInfo=Implementation(
                name=self.settings.server_name,
                version=self.settings.server_version,
            ),
        ))

    def _ping(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    def _list_tools(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self.list_tools()

    def _call_tool(self, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise ProtocolError.invalid_params("tools/call requires a tool name")
        return self.execute(name, params.get("arguments"))

    def _list_resources(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return _dump(ListResourcesResult(resources=[
            Resource(
                uri=self.settings.ui_resource_uri,
                name=UI_RESOURCE_NAME,
                mimeType=UI_MIME_TYPE,
            ),
        ]))

    def _read_resource(self, params: Dict[str, Any]) -> Dict[str, Any]:
        uri = params.get("uri")
        if uri != self.settings.ui_resource_uri:
            raise ProtocolError.invalid_params(f"Unknown resource: {uri}")
        resource = build_ui_resource(self.registry.store.get_all(), self.settings.ui_resource_uri)
        return _dump(ReadResourceResult(contents=[resource.resource]))

    # Operations

    def list_tools(self) -> Dict[str, Any]:
        tools = self.registry.list()
        logger.debug("Returning tools: %s", [t.name for t in tools])
        return _dump(ListToolsResult(tools=tools))

    def execute(self, name: str, arguments: Any) -> Dict[str, Any]:
        """
        Run an operation and package its outcome as tool-call content.

        Business failures are returned as an error-marked result, never
        raised, so the envelope itself stays a success.
        """
        try:
            payload = self.registry.invoke(name, arguments)
        except OperationError as e:
            logger.warning("Operation %s failed: %s", name, e.message)
            return _dump(CallToolResult(
                content=[TextContent(type="text", text=json.dumps(e.to_payload(), indent=2))],
                isError=True,
            ))
        return self.package(name, payload)

    def package(self, name: str, payload: Any) -> Dict[str, Any]:
        """Wrap a successful payload, followed by a fresh UI snapshot when due."""
        content: List[Any] = [TextContent(type="text", text=json.dumps(payload, indent=2))]
        if self._wants_ui(name):
            # Read the store only now, after the mutation has been committed
            records = self.registry.store.get_all()
            content.append(build_ui_resource(records, self.settings.ui_resource_uri))
        return _dump(CallToolResult(content=content, isError=False))

    def _wants_ui(self, name: str) -> bool:
        operation = self.registry.get(name)
        if operation is None or operation.ui == UIMode.NONE:
            return False
        if operation.ui == UIMode.ALWAYS:
            return True
        return self.settings.ui_enabled
