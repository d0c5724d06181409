"""
REST tool routes for the Todo MCP server
Plain HTTP access to the operations for UI clients that do not speak JSON-RPC
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Request, status
from fastapi.responses import JSONResponse

from ...mcp.dispatcher import Dispatcher
from ...utils.errors import OperationError, UnknownOperationError
from ...utils.logging import get_logger

router = APIRouter(prefix="/api/tools")
logger = get_logger("tools")


def _dispatcher(request: Request) -> Dispatcher:
    return request.app.state.tools


@router.get("")
async def list_tools(request: Request):
    """List every available tool with its argument schema."""
    return _dispatcher(request).list_tools()


@router.post("/{name}")
async def call_tool(
    name: str,
    request: Request,
    arguments: Optional[Dict[str, Any]] = Body(None),
):
    """
    Call a tool by name with the JSON body as its arguments.

    Returns:
        The tool-call result (text part, plus a UI resource for mutations)

    Errors are returned as {"error": message}: 404 for an unknown tool,
    400 for validation and not-found failures.
    """
    dispatcher = _dispatcher(request)
    logger.info("Executing tool: %s", name)

    try:
        payload = dispatcher.registry.invoke(name, arguments or {})
    except UnknownOperationError as e:
        return JSONResponse({"error": e.message}, status_code=status.HTTP_404_NOT_FOUND)
    except OperationError as e:
        logger.warning("Tool %s failed: %s", name, e.message)
        return JSONResponse({"error": e.message}, status_code=status.HTTP_400_BAD_REQUEST)

    return dispatcher.package(name, payload)
