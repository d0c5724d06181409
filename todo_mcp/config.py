"""
Configuration for the Todo MCP server
Values are read from the environment (TODO_MCP_*) or a local .env file
"""
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server settings"""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TODO_MCP_",
        extra="ignore",
    )

    # Identity reported by initialize
    server_name: str = "mcp-todo-server"
    server_version: str = "1.0.0"

    # Protocol negotiation
    protocol_version: str = "2024-11-05"
    supported_protocol_versions: List[str] = ["2024-11-05", "2025-03-26", "2025-06-18"]

    # HTTP binding
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: List[str] = ["*"]

    # Streaming binding
    keepalive_interval: float = 30.0

    # Sessions with no traffic for this many seconds are purged (0 disables)
    session_idle_timeout: float = 3600.0

    # Interactive UI
    ui_enabled: bool = True
    ui_resource_uri: str = "ui://todo/app"

    log_level: str = "INFO"


settings = Settings()
