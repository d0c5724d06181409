"""
Health routes for the Todo MCP server
"""
from fastapi import APIRouter, Request

from ...models.record import to_timestamp, utcnow

router = APIRouter()


@router.get("/")
async def server_info(request: Request):
    settings = request.app.state.settings
    return {
        "name": settings.server_name,
        "version": settings.server_version,
        "status": "running",
    }


@router.get("/health")
async def health(request: Request):
    return {
        "status": "ok",
        "timestamp": to_timestamp(utcnow()),
        "sessions": len(request.app.state.sessions),
        "records": request.app.state.store.count(),
    }
