"""
Logging helpers for the Todo MCP server
All output goes to stderr so the stdio binding keeps stdout for protocol traffic
"""
import logging
import sys
from typing import Optional

ROOT_LOGGER = "todo_mcp"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stderr handler to the package logger."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under the package logger."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def log_error(error: BaseException, context: str, session_id: Optional[str] = None) -> None:
    """
    Log an exception together with where it happened.

    Args:
        error: The exception being reported
        context: Short description of the failing call site
        session_id: Session the failure belongs to, if any
    """
    logger = get_logger("errors")
    suffix = f" (session={session_id})" if session_id else ""
    logger.error(
        "%s failed%s: %s: %s",
        context,
        suffix,
        type(error).__name__,
        error,
        exc_info=(type(error), error, error.__traceback__),
    )
