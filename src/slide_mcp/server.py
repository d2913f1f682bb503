"""Tool dispatcher shared by every transport.

The dispatcher owns the tool registry, the backend handle passed to tool
handlers and the access policy that hides tools from the catalog. It knows
nothing about JSON-RPC framing, which lives in :mod:`slide_mcp.protocol`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from slide_mcp.errors import METHOD_NOT_FOUND, raise_mcp_error
from slide_mcp.tools import ToolDefinition, ToolFailure, ToolRegistry


@dataclass
class ToolResult:
    """Result returned by tool execution.

    Attributes:
        name: Name of the tool that produced the result.
        payload: Structured payload returned by the tool.

    """

    name: str
    payload: Any

    def to_text(self) -> str:
        """Serialize the payload as indented JSON."""
        return json.dumps(self.payload, indent=2)

    def to_content(self) -> dict[str, Any]:
        """Wrap the payload in an MCP ``tools/call`` result body."""
        return {
            "content": [{"type": "text", "text": self.to_text()}],
            "isError": False,
        }


class ToolPolicy(Protocol):
    """Decides whether a registered tool may be listed and called."""

    def denial_reason(self, tool: ToolDefinition) -> str | None:
        """Return why the tool is unavailable, or None if it is allowed."""


class MCPServer:
    """Registry-backed dispatcher for MCP tools."""

    def __init__(
        self,
        registry: ToolRegistry,
        backend: Any = None,
        policy: ToolPolicy | None = None,
    ) -> None:
        """Create the dispatcher.

        Args:
            registry: Tools known to the server.
            backend: Object handed to every tool handler, usually a
                :class:`slide_mcp_server.backend.BackendClient`.
            policy: Optional access policy hiding some tools.

        """
        self._registry = registry
        self._backend = backend
        self._policy = policy
        self._allowed = [
            tool
            for tool in registry.values()
            if policy is None or policy.denial_reason(tool) is None
        ]
        self._catalog = [tool.metadata() for tool in self._allowed]

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def backend(self) -> Any:
        return self._backend

    def available_tools(self) -> list[str]:
        """List the names of tools that may be called.

        Returns:
            Sorted list of tool names.

        """
        return sorted(tool.name for tool in self._allowed)

    def catalog(self) -> list[dict[str, Any]]:
        """Return the tool descriptors advertised to hosts.

        The list is computed once, so repeated calls return equal values.
        """
        return self._catalog

    def to_catalog(self) -> dict[str, dict[str, Any]]:
        """Produce a catalog keyed by tool name.

        Returns:
            Mapping of tool names to their metadata.

        """
        return {entry["name"]: entry for entry in self._catalog}

    def get_tool(self, name: str) -> ToolDefinition:
        """Look up a callable tool.

        Raises:
            MCPError: If the tool is unknown or disabled by the policy.

        """
        tool = self._registry.get(name)
        if tool is None:
            raise_mcp_error(
                "UnknownTool", f"Unknown tool: {name}", code=METHOD_NOT_FOUND
            )
        if self._policy is not None:
            reason = self._policy.denial_reason(tool)
            if reason is not None:
                raise_mcp_error("ToolDisabled", reason, code=METHOD_NOT_FOUND)
        return tool

    async def run_tool(
        self, name: str, *, arguments: Mapping[str, Any] | None = None
    ) -> ToolResult | ToolFailure:
        """Execute a registered tool.

        Args:
            name: Name of the registered tool to execute.
            arguments: Optional arguments for the tool.

        Raises:
            MCPError: If the tool is unknown, disabled, or the arguments fail
                validation. The backend is not contacted in those cases.

        Returns:
            ToolResult with the reshaped payload, or the ToolFailure reported
            by the handler.

        """
        tool = self.get_tool(name)
        params = tool.validate(arguments or {})
        outcome = await tool.handler(params, self._backend)
        if isinstance(outcome, ToolFailure):
            return outcome
        return ToolResult(name=name, payload=outcome)
