"""Tests for tool definitions and the registry."""

from __future__ import annotations

from typing import Literal

import pytest
from pydantic import Field

from slide_mcp.errors import INVALID_PARAMS, MCPError
from slide_mcp.tools import ToolDefinition, ToolParameters, ToolRegistry


class EchoParams(ToolParameters):
    """Parameters for the echo test tool."""

    text: str = Field(description="Text to echo")
    repeat: int | None = Field(default=None, description="How many times")
    loud: bool | None = None
    mode: Literal["plain", "fancy"] | None = None
    tags: list[str] | None = None


async def _echo(params: EchoParams, _: object) -> dict[str, object]:
    return {"text": params.text * (params.repeat or 1)}


def _echo_tool(name: str = "echo") -> ToolDefinition:
    return ToolDefinition(
        name=name,
        description="Echo text back.",
        parameters_model=EchoParams,
        handler=_echo,
    )


class TestToolDefinition:
    """Behavioral coverage for ToolDefinition."""

    def test_accepts_minimal_arguments(self) -> None:
        """Only the required field is needed."""
        assert _echo_tool().accepts({"text": "hi"})

    @pytest.mark.parametrize(
        "arguments",
        [
            {},
            {"text": 5},
            {"text": "hi", "repeat": "2"},
            {"text": "hi", "loud": 1},
            {"text": "hi", "mode": "bold"},
            {"text": "hi", "tags": ["a", 2]},
            {"text": "hi", "unexpected": True},
        ],
    )
    def test_rejects_invalid_arguments(self, arguments: dict[str, object]) -> None:
        """Missing, mistyped and unknown arguments fail the guard."""
        assert not _echo_tool().accepts(arguments)

    def test_validate_reports_every_violation(self) -> None:
        """All violations are attached to the raised error."""
        # Arrange
        tool = _echo_tool()

        # Act
        with pytest.raises(MCPError) as excinfo:
            tool.validate({"repeat": "2"})

        # Assert
        error = excinfo.value
        assert error.code == INVALID_PARAMS
        assert error.message == "Invalid arguments for tool echo"
        fields = {violation["field"] for violation in error.details}
        assert fields == {"text", "repeat"}

    def test_input_schema_is_plain_json_schema(self) -> None:
        """Titles are removed and optional fields keep their base type."""
        # Act
        schema = _echo_tool().input_schema()

        # Assert
        assert schema["type"] == "object"
        assert schema["required"] == ["text"]
        assert "title" not in schema
        properties = schema["properties"]
        assert properties["text"] == {"type": "string", "description": "Text to echo"}
        assert properties["repeat"]["type"] == "integer"
        assert properties["mode"]["enum"] == ["plain", "fancy"]
        assert properties["tags"] == {"type": "array", "items": {"type": "string"}}
        assert "anyOf" not in properties["loud"]

    def test_metadata_uses_input_schema_key(self) -> None:
        """Catalog entries carry name, description and inputSchema."""
        metadata = _echo_tool().metadata()

        assert set(metadata) == {"name", "description", "inputSchema"}


class TestToolRegistry:
    """Behavioral coverage for ToolRegistry."""

    def test_keeps_registration_order(self) -> None:
        """Iteration follows the order tools were given in."""
        registry = ToolRegistry([_echo_tool("b"), _echo_tool("a")])

        assert list(registry) == ["b", "a"]
        assert len(registry) == 2
        assert registry["a"].name == "a"

    def test_prevents_duplicate_tool_names(self) -> None:
        """Duplicate tool registrations raise a ValueError."""
        with pytest.raises(ValueError):
            ToolRegistry([_echo_tool(), _echo_tool()])

    def test_is_read_only(self) -> None:
        """The registry cannot be mutated after construction."""
        registry = ToolRegistry([_echo_tool()])

        with pytest.raises(TypeError):
            registry["other"] = _echo_tool("other")  # type: ignore[index]
