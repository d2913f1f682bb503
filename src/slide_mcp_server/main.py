"""Entry point for the Slide MCP server."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from pydantic import ValidationError

from slide_mcp.errors import MCPError
from slide_mcp.protocol import JSONRPCServer, serve_stdio
from slide_mcp.server import MCPServer
from slide_mcp.tools import ToolFailure
from slide_mcp_server import __version__
from slide_mcp_server.access import AccessPolicy
from slide_mcp_server.backend import BackendClient
from slide_mcp_server.config import Settings, ToolsMode, configure_logging
from slide_mcp_server.fastmcp_adapter import build_fastmcp_app
from slide_mcp_server.tools import build_registry

SERVER_NAME = "slide-mcp-server"
TRANSPORTS = ("stdio", "http", "sse", "streamable-http", "fastmcp-stdio")

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the server."""
    parser = argparse.ArgumentParser(description="Slide MCP server")
    parser.add_argument(
        "--version", action="version", version=f"{SERVER_NAME} {__version__}"
    )
    parser.add_argument(
        "--catalog", action="store_true", help="Print the tool catalog and exit"
    )
    parser.add_argument("--api-key", help="Slide API key (overrides SLIDE_API_KEY)")
    parser.add_argument("--base-url", help="Slide API base URL")
    parser.add_argument(
        "--tools",
        choices=[mode.value for mode in ToolsMode],
        help="Tools mode (overrides SLIDE_TOOLS)",
    )
    parser.add_argument(
        "--disabled-tools", help="Comma-separated list of tool names to disable"
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--log-level", help="Log level (default INFO)")
    parser.add_argument("--tool", help="Run a single tool and print its result")
    parser.add_argument("--args", help="JSON object of arguments for --tool")
    parser.add_argument("--transport", choices=TRANSPORTS, default="stdio")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--path", default="/mcp")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Read settings from the environment and apply command-line overrides."""
    return Settings().with_overrides(
        api_key=args.api_key,
        base_url=args.base_url,
        tools=args.tools,
        disabled_tools=args.disabled_tools,
        log_file=args.log_file,
        log_level=args.log_level,
    )


def _error_output(error_type: str, message: str, details: Any = None) -> str:
    return json.dumps(
        {"error": {"type": error_type, "message": message, "details": details}},
        indent=2,
    )


async def run_single_tool(
    server: MCPServer, backend: BackendClient, name: str, raw_arguments: str | None
) -> int:
    """Execute one tool, print its result as JSON and return the exit status."""
    async with backend:
        try:
            arguments = json.loads(raw_arguments) if raw_arguments else {}
        except json.JSONDecodeError as exc:
            print(_error_output("InvalidArguments", f"Invalid --args JSON: {exc}"))
            return 1
        if not isinstance(arguments, dict):
            print(_error_output("InvalidArguments", "--args must be a JSON object"))
            return 1

        try:
            outcome = await server.run_tool(name, arguments=arguments)
        except MCPError as error:
            print(json.dumps(error.to_dict(), indent=2))
            return 1
        if isinstance(outcome, ToolFailure):
            print(
                _error_output(
                    "ToolExecutionError", outcome.message, outcome.error_data()
                )
            )
            return 1
        print(outcome.to_text())
        return 0


async def serve(server: MCPServer, backend: BackendClient) -> None:
    """Run the line-delimited JSON-RPC loop on stdin/stdout."""
    async with backend:
        protocol = JSONRPCServer(server, name=SERVER_NAME, version=__version__)
        await serve_stdio(protocol)


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, build the tool registry and run the chosen mode."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args)
    except ValidationError as error:
        print(f"Error: invalid configuration: {error}", file=sys.stderr)
        return 2
    configure_logging(settings.log_level, settings.log_file)

    registry = build_registry(settings.vnc_viewer_url)
    policy = AccessPolicy(settings.tools, settings.disabled_tool_names())

    if args.catalog:
        print(json.dumps(MCPServer(registry, policy=policy).to_catalog(), indent=2))
        return 0

    if not settings.api_key:
        logger.error("SLIDE_API_KEY environment variable not set")
        return 1

    backend = BackendClient(settings.api_key, base_url=settings.base_url)
    server = MCPServer(registry, backend, policy)
    logger.info(
        "Starting %s %s (%s mode, %d tools)",
        SERVER_NAME,
        __version__,
        settings.tools.value,
        len(server.available_tools()),
    )

    if args.tool:
        return asyncio.run(run_single_tool(server, backend, args.tool, args.args))

    if args.transport == "stdio":
        asyncio.run(serve(server, backend))
        return 0

    # the app closes the backend from its lifespan
    app, _ = build_fastmcp_app(server)
    if args.transport == "fastmcp-stdio":
        app.run(transport="stdio")
    else:
        app.run(
            transport=args.transport,
            host=args.host,
            port=args.port,
            path=args.path,
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
