"""
Stdio binding for the Todo MCP server
Newline-delimited JSON-RPC on stdin/stdout for desktop MCP clients
"""
import json
import sys
from typing import Optional, TextIO

from mcp.types import PARSE_ERROR

from .config import Settings, settings as default_settings
from .mcp.server import create_session_manager
from .models.envelope import error_response
from .services.record_store import RecordStore
from .utils.logging import configure_logging, get_logger

logger = get_logger("stdio")


def run_stdio(
    store: Optional[RecordStore] = None,
    settings: Optional[Settings] = None,
    stdin: TextIO = None,
    stdout: TextIO = None,
) -> int:
    """
    Serve one session over a pair of text streams until stdin closes.

    Logging goes to stderr so stdout carries protocol messages only.

    Returns:
        Number of messages handled
    """
    settings = settings or default_settings
    store = store if store is not None else RecordStore()
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    sessions = create_session_manager(store, settings)
    session = sessions.create()
    logger.info("MCP Todo Server running on stdio (session %s)", session.id)

    handled = 0
    try:
        for line in stdin:
            line = line.strip()
            if not line:
                continue

            try:
                payload = json.loads(line)
            except ValueError:
                response = error_response(None, PARSE_ERROR, "Parse error")
            else:
                response = session.handle(payload)
            handled += 1

            if response is not None:
                stdout.write(json.dumps(response) + "\n")
                stdout.flush()
    finally:
        sessions.close(session.id)
    return handled


def main() -> None:
    configure_logging(default_settings.log_level)
    run_stdio()


if __name__ == "__main__":
    main()
