"""
FastAPI application for the Todo MCP server
"""
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health_router, mcp_router, tools_router
from .config import Settings, settings as default_settings
from .mcp.server import create_session_manager, dispatcher_factory
from .services.record_store import RecordStore
from .utils.logging import configure_logging, get_logger

logger = get_logger("main")


def create_app(settings: Optional[Settings] = None, store: Optional[RecordStore] = None) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        settings: Server settings; the environment-derived defaults if omitted
        store: Record store shared by every session; a new empty one if omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or default_settings
    store = store if store is not None else RecordStore()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.server_name, version=settings.server_version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Mcp-Session-Id"],
    )

    app.state.settings = settings
    app.state.store = store
    app.state.sessions = create_session_manager(store, settings)
    # Sessionless dispatcher behind the REST tool routes
    app.state.tools = dispatcher_factory(store, settings)()

    app.include_router(health_router)
    app.include_router(mcp_router)
    app.include_router(tools_router)

    logger.info(
        "%s %s ready; tools: %s",
        settings.server_name,
        settings.server_version,
        ", ".join(app.state.tools.registry.names()),
    )
    return app
