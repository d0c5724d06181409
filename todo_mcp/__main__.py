"""
Command line entry point for the Todo MCP server

    python -m todo_mcp serve [--host HOST] [--port PORT] [--log-level LEVEL]
    python -m todo_mcp stdio
"""
import argparse
from typing import List, Optional

from .config import settings
from .utils.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="todo-mcp", description="Todo MCP server")
    subcommands = parser.add_subparsers(dest="command")

    serve = subcommands.add_parser("serve", help="Serve the HTTP and SSE bindings")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)
    serve.add_argument("--log-level", default=settings.log_level)

    stdio = subcommands.add_parser("stdio", help="Serve one session on stdin/stdout")
    stdio.add_argument("--log-level", default=settings.log_level)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    command = args.command or "serve"
    log_level = getattr(args, "log_level", settings.log_level)
    configure_logging(log_level)

    if command == "stdio":
        from .stdio import run_stdio

        run_stdio(settings=settings)
        return

    import uvicorn
    from .main import create_app

    app = create_app(settings)
    uvicorn.run(
        app,
        host=getattr(args, "host", settings.host),
        port=getattr(args, "port", settings.port),
        log_level=log_level.lower(),
    )


if __name__ == "__main__":
    main()
