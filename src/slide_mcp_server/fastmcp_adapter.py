"""Adapters for exposing Slide MCP tools via FastMCP."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult

from slide_mcp.errors import MCPError
from slide_mcp.server import MCPServer
from slide_mcp.tools import ToolDefinition, ToolFailure


class ToolDefinitionAdapter(Tool):
    """Expose a :class:`ToolDefinition` as a FastMCP tool."""

    def __init__(self, definition: ToolDefinition, server: MCPServer) -> None:
        """Create a FastMCP tool wrapper dispatching through ``server``."""
        super().__init__(
            name=definition.name,
            description=definition.description,
            parameters=definition.input_schema(),
            output_schema=None,
            tags={definition.access.value},
        )
        self._definition = definition
        self._server = server

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        """Validate arguments and delegate to the shared dispatcher."""
        try:
            outcome = await self._server.run_tool(
                self._definition.name, arguments=arguments
            )
        except MCPError as error:
            raise ToolError(error.message) from error
        if isinstance(outcome, ToolFailure):
            raise ToolError(outcome.message)
        payload = outcome.payload
        structured = dict(payload) if isinstance(payload, Mapping) else None
        return ToolResult(content=outcome.to_text(), structured_content=structured)


def to_fastmcp_tools(server: MCPServer) -> list[Tool]:
    """Wrap every tool the server exposes as a FastMCP tool."""
    return [
        ToolDefinitionAdapter(server.registry[name], server)
        for name in server.available_tools()
    ]


def _backend_lifespan(server: MCPServer) -> Any:
    """Close the backend's HTTP pool when the FastMCP app shuts down.

    The pool is opened lazily inside FastMCP's event loop, so it must also be
    released there.
    """

    @asynccontextmanager
    async def lifespan(_app: FastMCP) -> AsyncIterator[dict[str, Any]]:
        try:
            yield {}
        finally:
            close = getattr(server.backend, "aclose", None)
            if close is not None:
                await close()

    return lifespan


def build_fastmcp_app(server: MCPServer) -> tuple[FastMCP, list[ToolDefinition]]:
    """Create a FastMCP server instance with all Slide tools registered."""
    app = FastMCP(
        name="slide-mcp-server",
        instructions="Slide backup and disaster recovery API exposed over the "
        "Model Context Protocol.",
        lifespan=_backend_lifespan(server),
    )
    definitions = [server.registry[name] for name in server.available_tools()]
    for tool in to_fastmcp_tools(server):
        app.add_tool(tool)
    return app, definitions
