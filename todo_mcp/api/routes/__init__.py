"""
API routes for the Todo MCP server
"""
from .health import router as health_router
from .mcp import router as mcp_router
from .tools import router as tools_router

__all__ = [
    "health_router",
    "mcp_router",
    "tools_router",
]
