"""Model Context Protocol server for the Slide backup API."""

from slide_mcp.errors import MCPError
from slide_mcp_server.backend import BackendClient, BackendFailure, BackendSuccess
from slide_mcp_server.config import Settings
from slide_mcp_server.tools import build_registry

__version__ = "0.1.0"

__all__ = [
    "BackendClient",
    "BackendFailure",
    "BackendSuccess",
    "MCPError",
    "Settings",
    "__version__",
    "build_registry",
]
