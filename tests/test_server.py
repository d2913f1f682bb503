"""Tests for the MCP tool dispatcher."""

from __future__ import annotations

import json

import pytest

from slide_mcp.errors import INVALID_PARAMS, METHOD_NOT_FOUND, MCPError
from slide_mcp.server import MCPServer, ToolResult
from slide_mcp.tools import (
    ToolAccess,
    ToolDefinition,
    ToolFailure,
    ToolParameters,
    ToolRegistry,
)
from slide_mcp_server.access import AccessPolicy
from slide_mcp_server.config import ToolsMode


class NoParams(ToolParameters):
    """No-op parameter schema."""


def _tool(
    name: str, access: ToolAccess = ToolAccess.READ, fail: bool = False
) -> ToolDefinition:
    async def handler(_: NoParams, backend: object) -> object:
        if fail:
            return ToolFailure("boom")
        return {"status": "ok", "backend": backend}

    return ToolDefinition(
        name=name,
        description=f"{name} tool",
        parameters_model=NoParams,
        handler=handler,
        access=access,
    )


class TestMCPServer:
    """Behavioral coverage for MCPServer."""

    def test_lists_and_catalogs_tools(self) -> None:
        """Registered tools appear in the catalog."""
        # Arrange
        server = MCPServer(ToolRegistry([_tool("beta"), _tool("alpha")]))

        # Act
        catalog = server.to_catalog()

        # Assert
        assert server.available_tools() == ["alpha", "beta"]
        assert [entry["name"] for entry in server.catalog()] == ["beta", "alpha"]
        assert catalog["alpha"]["description"] == "alpha tool"

    def test_catalog_is_computed_once(self) -> None:
        """Repeated catalog calls return the same value."""
        server = MCPServer(ToolRegistry([_tool("alpha")]))

        assert server.catalog() is server.catalog()

    @pytest.mark.anyio()
    async def test_runs_registered_tool(self) -> None:
        """Executing a registered tool returns its payload."""
        # Arrange
        server = MCPServer(ToolRegistry([_tool("alpha")]), backend="backend")

        # Act
        result = await server.run_tool("alpha")

        # Assert
        assert isinstance(result, ToolResult)
        assert result.payload == {"status": "ok", "backend": "backend"}
        content = result.to_content()
        assert content["isError"] is False
        assert json.loads(content["content"][0]["text"])["status"] == "ok"

    @pytest.mark.anyio()
    async def test_returns_handler_failures(self) -> None:
        """Failures reported by the handler are passed through."""
        server = MCPServer(ToolRegistry([_tool("alpha", fail=True)]))

        result = await server.run_tool("alpha")

        assert result == ToolFailure("boom")

    @pytest.mark.anyio()
    async def test_running_unknown_tool_errors(self) -> None:
        """Unknown tool invocations raise a method-not-found error."""
        server = MCPServer(ToolRegistry([]))

        with pytest.raises(MCPError) as excinfo:
            await server.run_tool("missing")

        assert excinfo.value.code == METHOD_NOT_FOUND
        assert excinfo.value.message == "Unknown tool: missing"

    @pytest.mark.anyio()
    async def test_rejects_invalid_parameters(self) -> None:
        """Invalid parameters are surfaced as validation errors."""
        server = MCPServer(ToolRegistry([_tool("alpha")]))

        with pytest.raises(MCPError) as excinfo:
            await server.run_tool("alpha", arguments={"unexpected": "value"})

        assert excinfo.value.code == INVALID_PARAMS

    @pytest.mark.anyio()
    async def test_policy_hides_and_refuses_tools(self) -> None:
        """Tools outside the tools mode are neither listed nor callable."""
        # Arrange
        registry = ToolRegistry(
            [_tool("reader"), _tool("writer", access=ToolAccess.WRITE)]
        )
        server = MCPServer(registry, policy=AccessPolicy(ToolsMode.REPORTING))

        # Act / Assert
        assert server.available_tools() == ["reader"]
        with pytest.raises(MCPError) as excinfo:
            await server.run_tool("writer")
        assert excinfo.value.code == METHOD_NOT_FOUND
        assert "reporting" in excinfo.value.message

    @pytest.mark.parametrize(
        ("mode", "expected"),
        [
            (ToolsMode.REPORTING, ["reader"]),
            (ToolsMode.RESTORES, ["reader", "restorer"]),
            (ToolsMode.FULL_SAFE, ["reader", "restorer", "writer"]),
            (ToolsMode.FULL, ["danger", "reader", "restorer", "writer"]),
        ],
    )
    def test_modes_widen_in_order(self, mode: ToolsMode, expected: list[str]) -> None:
        """Each tools mode adds one access class to the previous one."""
        registry = ToolRegistry(
            [
                _tool("reader"),
                _tool("restorer", access=ToolAccess.RESTORE),
                _tool("writer", access=ToolAccess.WRITE),
                _tool("danger", access=ToolAccess.DANGEROUS),
            ]
        )

        server = MCPServer(registry, policy=AccessPolicy(mode))

        assert server.available_tools() == expected
