"""slide_mcp package initialization."""

from slide_mcp.errors import MCPError, raise_mcp_error
from slide_mcp.protocol import JSONRPCServer
from slide_mcp.server import MCPServer, ToolResult
from slide_mcp.tools import (
    ToolAccess,
    ToolDefinition,
    ToolFailure,
    ToolParameters,
    ToolRegistry,
)

__all__ = [
    "JSONRPCServer",
    "MCPError",
    "MCPServer",
    "ToolAccess",
    "ToolDefinition",
    "ToolFailure",
    "ToolParameters",
    "ToolRegistry",
    "ToolResult",
    "raise_mcp_error",
]
