"""Tool registration helpers for the Slide MCP server."""

from __future__ import annotations

from slide_mcp.tools import ToolDefinition, ToolRegistry
from slide_mcp_server.config import DEFAULT_VNC_VIEWER_URL
from slide_mcp_server.tools.accounts import (
    account_tools,
    alert_tools,
    client_tools,
    user_tools,
)
from slide_mcp_server.tools.agents import agent_tools
from slide_mcp_server.tools.backups import backup_tools
from slide_mcp_server.tools.devices import device_tools
from slide_mcp_server.tools.networks import network_tools
from slide_mcp_server.tools.restores import file_restore_tools, image_export_tools
from slide_mcp_server.tools.virtual_machines import virtual_machine_tools


def build_tools(vnc_viewer_url: str = DEFAULT_VNC_VIEWER_URL) -> list[ToolDefinition]:
    """Instantiate every tool definition in catalog order."""
    return [
        *device_tools(),
        *agent_tools(),
        *backup_tools(),
        *file_restore_tools(),
        *image_export_tools(),
        *virtual_machine_tools(vnc_viewer_url),
        *network_tools(),
        *user_tools(),
        *alert_tools(),
        *account_tools(),
        *client_tools(),
    ]


def build_registry(vnc_viewer_url: str = DEFAULT_VNC_VIEWER_URL) -> ToolRegistry:
    """Build the immutable registry of all Slide tools."""
    return ToolRegistry(build_tools(vnc_viewer_url))
